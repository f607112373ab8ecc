from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.common import CamelModel


def split_skills(value):
    if value is None:
        return []
    if isinstance(value, str):
        return [s.strip() for s in value.split(",") if s.strip()]
    return value


class RegistrationBase(CamelModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)
    phone: str = Field(min_length=1)


class ApplicantRegistration(RegistrationBase):
    role: Literal["applicant"]
    location: Optional[str] = None
    skills: list[str] = []
    experience: int = 0

    @field_validator("skills", mode="before")
    @classmethod
    def parse_skills(cls, value):
        return split_skills(value)

    @field_validator("experience", mode="before")
    @classmethod
    def parse_experience(cls, value):
        return value if value not in (None, "") else 0


class ProviderRegistration(RegistrationBase):
    role: Literal["provider"]
    company_name: Optional[str] = None
    company_email: Optional[str] = None
    company_phone: Optional[str] = None
    company_type: Optional[str] = None
    company_size: Optional[str] = None
    company_website: Optional[str] = None
    company_location: Optional[str] = None
    company_description: Optional[str] = None
    tax_id: Optional[str] = None
    business_license: Optional[str] = None


RegistrationRequest = Annotated[
    Union[ApplicantRegistration, ProviderRegistration],
    Field(discriminator="role"),
]


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(CamelModel):
    id: str
    role: str
    name: str
    email: str
    phone: Optional[str] = None
    is_active: bool
    bio: Optional[str] = None
    location: Optional[str] = None
    skills: list[str] = []
    experience: int = 0
    company_name: Optional[str] = None
    has_resume: bool
    resume_filename: Optional[str] = None
    has_profile_image: bool
    last_login: Optional[datetime] = None
    created_at: datetime


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserResponse


class UserEnvelope(BaseModel):
    message: str
    user: UserResponse


class ProfileUpdate(CamelModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    skills: Optional[list[str]] = None
    experience: Optional[int] = None

    @field_validator("skills", mode="before")
    @classmethod
    def parse_skills(cls, value):
        if value is None:
            return None
        return split_skills(value)
