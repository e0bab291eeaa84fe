import json
from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import date, datetime
from models.registration import RegistrationStatus
from schemas.catch import Catch


class RegistrationRequest(BaseModel):
    """A participant's submission (final or draft), parsed from the multipart form"""
    tournament_id: int
    area_ids: List[int] = Field(default_factory=list)
    zone_id: Optional[int] = None
    pond_id: Optional[int] = None
    bank_account_no: Optional[str] = None
    bank_name: Optional[str] = None
    notes: Optional[str] = None

    @validator('area_ids', pre=True)
    def parse_area_ids(cls, v):
        # Multipart forms and the draft autosave send the ids as a JSON array string
        if v is None or v == "":
            return []
        if isinstance(v, str):
            try:
                v = json.loads(v)
            except json.JSONDecodeError:
                raise ValueError('area_ids must be a JSON array of integers')
            if not isinstance(v, list):
                raise ValueError('area_ids must be a JSON array of integers')
        return v

    @validator('area_ids')
    def unique_area_ids(cls, v):
        if len(v) != len(set(v)):
            raise ValueError('Duplicate area IDs')
        return v

    @validator('bank_account_no', 'bank_name', 'notes')
    def strip_text(cls, v):
        if v is None:
            return None
        v = v.strip()
        return v or None


class RegistrationSummary(BaseModel):
    registration_id: int
    tournament_id: int
    total_payment: float
    status: RegistrationStatus
    area_count: int


class RegistrationResult(BaseModel):
    message: str
    registration: RegistrationSummary


class RegistrationStatusUpdate(BaseModel):
    status: RegistrationStatus

    @validator('status')
    def not_draft(cls, v):
        # Drafts are owned by the participant, organizers cannot set them
        if v == RegistrationStatus.DRAFT:
            raise ValueError('Invalid status')
        return v


class SelectedArea(BaseModel):
    area_id: int
    area_number: int
    price: float
    zone_id: int
    zone_name: str
    zone_number: int
    pond_id: int
    pond_name: str


class Registration(BaseModel):
    id: int
    user_id: int
    tournament_id: int
    pond_id: Optional[int] = None
    zone_id: Optional[int] = None
    status: RegistrationStatus
    total_payment: float
    payment_receipt: Optional[str] = None
    bank_account_no: Optional[str] = None
    bank_name: Optional[str] = None
    notes: Optional[str] = None
    registered_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RegistrationWithAreas(Registration):
    selected_areas: List[SelectedArea] = []


class MyRegistration(Registration):
    tournament_name: str
    location: Optional[str] = None
    start_date: date
    end_date: date
    leaderboard_link: str
    area_count: int = 0
    catch_count: int = 0
    total_weight: float = 0


class MyDraft(Registration):
    tournament_name: str
    start_date: date
    registration_link: str
    area_count: int = 0


class TournamentRegistration(Registration):
    """Organizer's view of one participant's registration"""
    full_name: str
    mobile_no: str
    email: Optional[str] = None
    area_count: int = 0
    selected_areas: Optional[str] = None


class RegistrationDetail(RegistrationWithAreas):
    tournament_name: str
    location: Optional[str] = None
    start_date: date
    end_date: date
    leaderboard_link: str
    full_name: str
    mobile_no: str
    email: Optional[str] = None
    catches: List[Catch] = []


class RegistrationStatusResult(BaseModel):
    message: str
    status: RegistrationStatus
