from pydantic import BaseModel, Field, validator
from typing import Optional, List


# Ponds

class PondCreate(BaseModel):
    tournament_id: int
    pond_name: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    price: float = Field(0, ge=0)

    @validator('pond_name')
    def validate_pond_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Pond name is required')
        return v


class PondUpdate(BaseModel):
    pond_name: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)


class Pond(BaseModel):
    id: int
    tournament_id: int
    pond_name: str
    description: Optional[str] = None
    layout_image: Optional[str] = None
    price: float

    class Config:
        from_attributes = True


class PondWithCounts(Pond):
    zone_count: int = 0
    area_count: int = 0


# Zones

class ZoneCreate(BaseModel):
    pond_id: int
    zone_name: str = Field(..., min_length=1, max_length=150)
    zone_number: int = Field(..., ge=1)
    color: Optional[str] = Field(None, max_length=20)
    price: float = Field(0, ge=0)


class ZoneUpdate(BaseModel):
    zone_name: Optional[str] = Field(None, min_length=1, max_length=150)
    zone_number: Optional[int] = Field(None, ge=1)
    color: Optional[str] = Field(None, max_length=20)
    price: Optional[float] = Field(None, ge=0)


class Zone(BaseModel):
    id: int
    pond_id: int
    zone_name: str
    zone_number: int
    color: str
    price: float

    class Config:
        from_attributes = True


class ZoneWithCounts(Zone):
    area_count: int = 0
    available_count: int = 0


# Areas

class AreaCreate(BaseModel):
    zone_id: int
    area_number: int = Field(..., ge=1)
    price: float = Field(..., ge=0)
    position_x: int = 0
    position_y: int = 0


class AreaBulkItem(BaseModel):
    area_number: int = Field(..., ge=1)
    price: float = Field(0, ge=0)
    position_x: int = 0
    position_y: int = 0


class AreaBulkCreate(BaseModel):
    zone_id: int
    areas: List[AreaBulkItem] = Field(..., min_length=1)

    @validator('areas')
    def unique_numbers(cls, v):
        numbers = [a.area_number for a in v]
        if len(numbers) != len(set(numbers)):
            raise ValueError('Duplicate area numbers found')
        return v


class AreaUpdate(BaseModel):
    area_number: Optional[int] = Field(None, ge=1)
    price: Optional[float] = Field(None, ge=0)
    is_available: Optional[bool] = None
    position_x: Optional[int] = None
    position_y: Optional[int] = None


class Area(BaseModel):
    id: int
    zone_id: int
    area_number: int
    price: float
    is_available: bool
    position_x: int
    position_y: int

    class Config:
        from_attributes = True


class AreaLive(Area):
    """is_available here is the live value: default flag AND no active holder"""
    reserved_by: Optional[str] = None


class AvailabilityRequest(BaseModel):
    area_ids: List[int] = Field(..., min_length=1)


class AreaAvailability(BaseModel):
    area_id: int
    is_available: bool


# Layout tree

class ZoneTree(Zone):
    areas: List[AreaLive] = []


class PondTree(Pond):
    zones: List[ZoneTree] = []
