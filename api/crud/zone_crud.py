from typing import List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from models.zone import Zone
from models.area import Area
from schemas.layout import ZoneCreate, ZoneUpdate
from services.availability import count_active_holders
from core.exceptions import Conflict

DUPLICATE_ZONE = "Zone number already exists in this pond"


def _commit_zone(db: Session):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(DUPLICATE_ZONE)


def create_zone(db: Session, zone: ZoneCreate) -> Zone:
    zone_data = zone.model_dump()
    if not zone_data.get("color"):
        zone_data.pop("color", None)

    db_zone = Zone(**zone_data)
    db.add(db_zone)
    _commit_zone(db)
    db.refresh(db_zone)
    return db_zone


def get_pond_zones(db: Session, pond_id: int) -> List[Zone]:
    """Zones of a pond with area_count and available_count (live) attached"""
    zones = db.query(Zone).filter(Zone.pond_id == pond_id).order_by(Zone.zone_number).all()
    area_rows = db.query(Area.id, Area.zone_id, Area.is_available).join(
        Zone, Area.zone_id == Zone.id
    ).filter(Zone.pond_id == pond_id).all()
    holders = count_active_holders(db, [area_id for area_id, _, _ in area_rows])

    area_counts, available_counts = {}, {}
    for area_id, zone_id, is_available in area_rows:
        area_counts[zone_id] = area_counts.get(zone_id, 0) + 1
        if is_available and holders[area_id] == 0:
            available_counts[zone_id] = available_counts.get(zone_id, 0) + 1

    for zone in zones:
        zone.area_count = area_counts.get(zone.id, 0)
        zone.available_count = available_counts.get(zone.id, 0)
    return zones


def update_zone(db: Session, zone: Zone, zone_update: ZoneUpdate) -> Zone:
    update_data = zone_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None:
            continue
        setattr(zone, field, value)
    _commit_zone(db)
    db.refresh(zone)
    return zone


def delete_zone(db: Session, zone: Zone):
    db.delete(zone)
    db.commit()
