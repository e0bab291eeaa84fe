from pydantic import BaseModel, EmailStr, Field, validator
from typing import Optional
from core.roles import UserRole
from schemas.user import UserRead


def strip_required(value: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError("must not be empty")
    return value


class UserRegister(BaseModel):
    full_name: str = Field(..., max_length=150)
    mobile_no: str = Field(..., max_length=30)
    email: Optional[EmailStr] = None
    password: str = Field(..., min_length=6, description="Password must be at least 6 characters")
    bank_account_no: Optional[str] = Field(None, max_length=50)
    bank_name: Optional[str] = Field(None, max_length=100)

    @validator("full_name", "mobile_no")
    def not_blank(cls, v):
        return strip_required(v)


class UserLogin(BaseModel):
    mobile_no: str
    password: str

    @validator("mobile_no")
    def not_blank(cls, v):
        return strip_required(v)


class MobileCheck(BaseModel):
    mobile_no: str

    @validator("mobile_no")
    def not_blank(cls, v):
        return strip_required(v)


class OrganizerRegister(BaseModel):
    name: str = Field(..., max_length=150)
    email: EmailStr
    mobile_no: str = Field(..., max_length=30)
    password: str = Field(..., min_length=6, description="Password must be at least 6 characters")

    @validator("name", "mobile_no")
    def not_blank(cls, v):
        return strip_required(v)


class OrganizerLogin(BaseModel):
    email: EmailStr
    password: str


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserRead


class TokenData(BaseModel):
    user_id: int
    role: UserRole
