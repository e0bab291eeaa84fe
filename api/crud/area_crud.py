from typing import List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from models.area import Area
from schemas.layout import AreaCreate, AreaBulkCreate, AreaUpdate, AreaLive
from services.availability import count_active_holders, zone_reservations
from core.exceptions import Conflict

DUPLICATE_AREA = "Area number already exists in this zone"


def _commit_areas(db: Session):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(DUPLICATE_AREA)


def create_area(db: Session, area: AreaCreate) -> Area:
    db_area = Area(**area.model_dump())
    db.add(db_area)
    _commit_areas(db)
    db.refresh(db_area)
    return db_area


def create_areas_bulk(db: Session, bulk: AreaBulkCreate) -> List[Area]:
    """All-or-nothing: one duplicate number rejects the whole batch"""
    db_areas = [Area(zone_id=bulk.zone_id, **item.model_dump()) for item in bulk.areas]
    db.add_all(db_areas)
    _commit_areas(db)
    for db_area in db_areas:
        db.refresh(db_area)
    return db_areas


def get_zone_areas(db: Session, zone_id: int) -> List[AreaLive]:
    """Areas of a zone with live availability and the name of whoever holds them"""
    areas = db.query(Area).filter(Area.zone_id == zone_id).order_by(Area.area_number).all()
    holders = count_active_holders(db, [area.id for area in areas])
    reserved_by = zone_reservations(db, zone_id)

    return [
        AreaLive(
            id=area.id,
            zone_id=area.zone_id,
            area_number=area.area_number,
            price=float(area.price),
            is_available=bool(area.is_available) and holders[area.id] == 0,
            position_x=area.position_x,
            position_y=area.position_y,
            reserved_by=reserved_by.get(area.id)
        )
        for area in areas
    ]


def update_area(db: Session, area: Area, area_update: AreaUpdate) -> Area:
    update_data = area_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None:
            continue
        setattr(area, field, value)
    _commit_areas(db)
    db.refresh(area)
    return area


def delete_area(db: Session, area: Area):
    if count_active_holders(db, [area.id])[area.id] > 0:
        raise Conflict("Cannot delete an area reserved by an active registration")
    db.delete(area)
    db.commit()
