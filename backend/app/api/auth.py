from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Principal, create_access_token, get_current_principal
from app.config import get_settings
from app.database import get_db
from app.errors import InvalidArgument, NotFound
from app.schemas import AuthResponse, LoginRequest, ProfileUpdate, UserEnvelope, UserResponse
from app.services import users
from app.services.attachments import (
    IMAGE_CONTENT_TYPES,
    PDF_CONTENT_TYPES,
    attachment_response,
    read_optional_upload,
    read_upload,
)

settings = get_settings()
router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    role: str = Form(...),
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    phone: str = Form(...),
    location: Optional[str] = Form(None),
    skills: Optional[str] = Form(None),
    experience: Optional[str] = Form(None),
    company_name: Optional[str] = Form(None, alias="companyName"),
    company_email: Optional[str] = Form(None, alias="companyEmail"),
    company_phone: Optional[str] = Form(None, alias="companyPhone"),
    company_type: Optional[str] = Form(None, alias="companyType"),
    company_size: Optional[str] = Form(None, alias="companySize"),
    company_website: Optional[str] = Form(None, alias="companyWebsite"),
    company_location: Optional[str] = Form(None, alias="companyLocation"),
    company_description: Optional[str] = Form(None, alias="companyDescription"),
    tax_id: Optional[str] = Form(None, alias="taxId"),
    business_license: Optional[str] = Form(None, alias="businessLicense"),
    resume: Optional[UploadFile] = File(None),
    company_docs: Optional[list[UploadFile]] = File(None, alias="companyDocs"),
    db: AsyncSession = Depends(get_db),
):
    fields = {
        "role": role,
        "name": name,
        "email": email,
        "password": password,
        "phone": phone,
    }
    if role == "applicant":
        fields.update(location=location, skills=skills, experience=experience)
    elif role == "provider":
        fields.update(
            company_name=company_name,
            company_email=company_email,
            company_phone=company_phone,
            company_type=company_type,
            company_size=company_size,
            company_website=company_website,
            company_location=company_location,
            company_description=company_description,
            tax_id=tax_id,
            business_license=business_license,
        )
    payload = users.parse_registration(fields)

    resume_file = None
    docs = []
    if payload.role == "applicant":
        resume_file = await read_optional_upload(resume, PDF_CONTENT_TYPES)
    else:
        uploads = [f for f in company_docs or [] if f.filename]
        if len(uploads) > settings.max_company_docs:
            raise InvalidArgument(f"At most {settings.max_company_docs} documents allowed")
        docs = [await read_upload(f, PDF_CONTENT_TYPES) for f in uploads]

    user = await users.register(db, payload, resume=resume_file, company_docs=docs)
    return AuthResponse(
        message="User registered successfully",
        token=create_access_token(user.id, user.role),
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await users.authenticate(db, request.email, request.password)
    return AuthResponse(
        message="Login successful",
        token=create_access_token(user.id, user.role),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
async def me(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    user = await users.get_user(db, principal.id)
    return UserResponse.model_validate(user)


@router.put("/profile", response_model=UserEnvelope)
async def update_profile(
    name: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    bio: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    skills: Optional[str] = Form(None),
    experience: Optional[int] = Form(None),
    resume: Optional[UploadFile] = File(None),
    profile_image: Optional[UploadFile] = File(None, alias="profileImage"),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    update = ProfileUpdate(
        name=name, phone=phone, bio=bio, location=location, skills=skills, experience=experience,
    )
    resume_file = await read_optional_upload(resume, PDF_CONTENT_TYPES)
    image_file = await read_optional_upload(profile_image, IMAGE_CONTENT_TYPES)

    user = await users.update_profile(
        db, principal.id, update, resume=resume_file, profile_image=image_file
    )
    return UserEnvelope(message="Profile updated successfully", user=UserResponse.model_validate(user))


@router.get("/me/resume")
async def download_my_resume(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    resume = await users.get_resume(db, principal.id)
    if resume is None:
        raise NotFound("Resume not found")
    return attachment_response(resume)


@router.get("/me/profile-image")
async def get_my_profile_image(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    image = await users.get_profile_image(db, principal.id)
    if image is None:
        raise NotFound("Profile image not found")
    return attachment_response(image)


@router.post("/me/profile-image", response_model=UserEnvelope)
async def upload_profile_image(
    profile_image: Optional[UploadFile] = File(None, alias="profileImage"),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    image = await read_optional_upload(profile_image, IMAGE_CONTENT_TYPES)
    if image is None:
        raise InvalidArgument("No image file provided")

    user = await users.set_profile_image(db, principal.id, image)
    return UserEnvelope(
        message="Profile image uploaded successfully", user=UserResponse.model_validate(user)
    )
