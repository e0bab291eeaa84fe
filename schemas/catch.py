from pydantic import BaseModel, validator
from typing import Optional
from datetime import datetime
from models.catch import ApprovalStatus


class Catch(BaseModel):
    id: int
    registration_id: int
    catch_image: str
    weight: float
    species: Optional[str] = None
    approval_status: ApprovalStatus
    rejection_reason: Optional[str] = None
    uploaded_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    approved_by: Optional[int] = None

    class Config:
        from_attributes = True


class CatchWithAngler(Catch):
    """Organizer review list"""
    full_name: Optional[str] = None
    mobile_no: Optional[str] = None
    fishing_location: Optional[str] = None


class CatchCreated(BaseModel):
    message: str
    catch: Catch


class CatchStatusUpdate(BaseModel):
    approval_status: ApprovalStatus
    rejection_reason: Optional[str] = None

    @validator('rejection_reason')
    def blank_to_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v
