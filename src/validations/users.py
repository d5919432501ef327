"""Account update schema."""

from typing import Optional

from pydantic import EmailStr, Field, field_validator

from src.validations.base import ApiModel


class UserUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None

    @field_validator("email")
    @classmethod
    def limit_email(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > 255:
            raise ValueError("Email must be 255 characters or less")
        return v
