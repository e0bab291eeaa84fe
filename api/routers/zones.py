from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from api.deps.db import get_db
from api.crud.zone_crud import create_zone, get_pond_zones, update_zone, delete_zone
from core.validators import validate_pond_owner, validate_zone_owner
from core.auth import get_current_organizer
from schemas.layout import Zone, ZoneCreate, ZoneUpdate, ZoneWithCounts
from models.user import User

router = APIRouter(prefix="/zones", tags=["Zones"])


@router.post("", response_model=Zone, status_code=status.HTTP_201_CREATED)
async def create_new_zone(
    zone: ZoneCreate,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    validate_pond_owner(db, zone.pond_id, current_user)
    return create_zone(db, zone)


@router.get("/pond/{pond_id}", response_model=List[ZoneWithCounts])
async def list_pond_zones(
    pond_id: int,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    validate_pond_owner(db, pond_id, current_user)
    return get_pond_zones(db, pond_id)


@router.put("/{zone_id}", response_model=Zone)
async def update_existing_zone(
    zone_id: int,
    zone_update: ZoneUpdate,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    zone = validate_zone_owner(db, zone_id, current_user)
    return update_zone(db, zone, zone_update)


@router.delete("/{zone_id}")
async def delete_existing_zone(
    zone_id: int,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    zone = validate_zone_owner(db, zone_id, current_user)
    delete_zone(db, zone)
    return {"message": "Zone deleted successfully"}
