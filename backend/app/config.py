from pydantic import field_validator
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    database_url: str = "sqlite:///./data/jobboard.db"

    # Bearer token signing key. Required, no default.
    secret_key: str
    token_expire_days: int = 7

    # Attachments (resumes, company documents, profile images)
    max_attachment_bytes: int = 5 * 1024 * 1024
    max_company_docs: int = 5

    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3000"]

    @field_validator("secret_key")
    @classmethod
    def secret_key_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("SECRET_KEY must be set to a non-empty value")
        return value

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
