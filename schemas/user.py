from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from core.roles import UserRole


class UserRead(BaseModel):
    id: int
    full_name: str
    mobile_no: str
    email: Optional[str] = None
    role: UserRole
    bank_account_no: Optional[str] = None
    bank_name: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
