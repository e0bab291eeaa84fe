from pydantic import BaseModel, validator, Field
from typing import Optional, List
from datetime import date, time, datetime
from models.tournament import StructureType, TournamentStatus
from schemas.layout import PondTree


class TournamentBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="Tournament name")
    location: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    start_date: date
    end_date: date
    tournament_start_time: Optional[time] = None
    tournament_end_time: Optional[time] = None
    registration_start_date: Optional[date] = None
    registration_end_date: Optional[date] = None

    @validator('name')
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Tournament name is required')
        return v

    @validator('tournament_start_time', 'tournament_end_time', 'registration_start_date',
               'registration_end_date', pre=True)
    def empty_to_none(cls, v):
        if v == "":
            return None
        return v

    @validator('end_date')
    def validate_end_date(cls, v, values):
        start = values.get('start_date')
        if start and v < start:
            raise ValueError('End date must not be before start date')
        return v

    @validator('registration_end_date')
    def validate_registration_window(cls, v, values):
        start = values.get('registration_start_date')
        if v and start and v < start:
            raise ValueError('Registration end date must not be before registration start date')
        return v


class TournamentCreate(TournamentBase):
    structure_type: StructureType = StructureType.POND_ZONE_AREA


class TournamentUpdate(BaseModel):
    """structure_type is deliberately absent: it cannot change after creation"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    location: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    tournament_start_time: Optional[time] = None
    tournament_end_time: Optional[time] = None
    registration_start_date: Optional[date] = None
    registration_end_date: Optional[date] = None

    @validator('end_date')
    def validate_end_date(cls, v, values):
        start = values.get('start_date')
        if v and start and v < start:
            raise ValueError('End date must not be before start date')
        return v


class TournamentStatusUpdate(BaseModel):
    status: TournamentStatus


class Tournament(TournamentBase):
    id: int
    organizer_id: int
    structure_type: StructureType
    status: TournamentStatus
    registration_link: str
    leaderboard_link: str
    banner_image: Optional[str] = None
    payment_details_image: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TournamentSummary(Tournament):
    participant_count: int = 0
    pond_count: int = 0


class TournamentDetail(Tournament):
    organizer_name: Optional[str] = None
    organizer_mobile: Optional[str] = None


class TournamentRegistrationView(TournamentDetail):
    """Public registration page: the full layout with live availability"""
    ponds: List[PondTree] = []


class LeaderboardEntry(BaseModel):
    user_id: int
    full_name: str
    registration_id: int
    total_catches: int
    total_weight: float
    biggest_catch: float


class LeaderboardTournament(BaseModel):
    id: int
    name: str
    location: Optional[str] = None
    start_date: date
    end_date: date
    status: TournamentStatus
    banner_image: Optional[str] = None

    class Config:
        from_attributes = True


class Leaderboard(LeaderboardTournament):
    leaderboard: List[LeaderboardEntry] = []
