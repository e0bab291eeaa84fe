from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from api.deps.db import get_db
from api.crud.area_crud import create_area, create_areas_bulk, get_zone_areas, update_area, delete_area
from core.validators import validate_zone_owner, validate_area_owner
from core.auth import get_current_organizer
from services.availability import check_availability
from schemas.layout import (
    Area, AreaCreate, AreaBulkCreate, AreaUpdate, AreaLive, AvailabilityRequest, AreaAvailability
)
from models.user import User

router = APIRouter(prefix="/areas", tags=["Areas"])


@router.post("", response_model=Area, status_code=status.HTTP_201_CREATED)
async def create_new_area(
    area: AreaCreate,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    validate_zone_owner(db, area.zone_id, current_user)
    return create_area(db, area)


@router.post("/bulk", response_model=List[Area], status_code=status.HTTP_201_CREATED)
async def create_areas(
    bulk: AreaBulkCreate,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    validate_zone_owner(db, bulk.zone_id, current_user)
    return create_areas_bulk(db, bulk)


@router.post("/availability", response_model=List[AreaAvailability])
async def check_areas_availability(request: AvailabilityRequest, db: Session = Depends(get_db)):
    """Live availability of the given areas; 404 if any of them does not exist"""
    availability = check_availability(db, request.area_ids)
    return [AreaAvailability(area_id=area_id, is_available=availability[area_id]) for area_id in request.area_ids]


@router.get("/zone/{zone_id}", response_model=List[AreaLive])
async def list_zone_areas(
    zone_id: int,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    validate_zone_owner(db, zone_id, current_user)
    return get_zone_areas(db, zone_id)


@router.put("/{area_id}", response_model=Area)
async def update_existing_area(
    area_id: int,
    area_update: AreaUpdate,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    area = validate_area_owner(db, area_id, current_user)
    return update_area(db, area, area_update)


@router.delete("/{area_id}")
async def delete_existing_area(
    area_id: int,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    area = validate_area_owner(db, area_id, current_user)
    delete_area(db, area)
    return {"message": "Area deleted successfully"}
