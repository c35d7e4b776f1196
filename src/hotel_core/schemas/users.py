from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator
import re

from hotel_core.models.users import UserRole

PASSWORD_REGEX = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).{8,}$")


class SignupRequest(BaseModel):
    email: EmailStr
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    phone: Optional[str] = Field(default=None, min_length=7, max_length=20)
    password: str

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str):
        if not PASSWORD_REGEX.fullmatch(v):
            raise ValueError(
                "Password must be at least 8 characters long and contain "
                "uppercase, lowercase and a digit"
            )
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UpdateUserRoleRequest(BaseModel):
    role: UserRole
