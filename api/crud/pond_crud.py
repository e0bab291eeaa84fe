from typing import List
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from models.pond import Pond
from models.zone import Zone
from models.area import Area
from schemas.layout import PondCreate, PondUpdate, PondTree
from services.availability import tournament_availability
from api.crud.tournament_crud import build_pond_tree


def create_pond(db: Session, pond: PondCreate) -> Pond:
    db_pond = Pond(**pond.model_dump())
    db.add(db_pond)
    db.commit()
    db.refresh(db_pond)
    return db_pond


def get_tournament_ponds(db: Session, tournament_id: int) -> List[Pond]:
    """Ponds of a tournament with zone_count and area_count attached"""
    zone_counts = dict(db.query(Zone.pond_id, func.count(Zone.id)).join(
        Pond, Zone.pond_id == Pond.id
    ).filter(Pond.tournament_id == tournament_id).group_by(Zone.pond_id).all())

    area_counts = dict(db.query(Zone.pond_id, func.count(Area.id)).join(
        Area, Area.zone_id == Zone.id
    ).join(
        Pond, Zone.pond_id == Pond.id
    ).filter(Pond.tournament_id == tournament_id).group_by(Zone.pond_id).all())

    ponds = db.query(Pond).filter(Pond.tournament_id == tournament_id).order_by(Pond.id).all()
    for pond in ponds:
        pond.zone_count = zone_counts.get(pond.id, 0)
        pond.area_count = area_counts.get(pond.id, 0)
    return ponds


def get_pond_tree(db: Session, pond: Pond) -> PondTree:
    pond = db.query(Pond).options(
        joinedload(Pond.zones).joinedload(Zone.areas)
    ).filter(Pond.id == pond.id).first()
    return build_pond_tree(pond, tournament_availability(db, pond.tournament_id))


def update_pond(db: Session, pond: Pond, pond_update: PondUpdate) -> Pond:
    update_data = pond_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field in ("pond_name", "price"):
            continue
        setattr(pond, field, value)
    db.commit()
    db.refresh(pond)
    return pond


def set_layout_image(db: Session, pond: Pond, layout_image: str):
    """Returns the reference of the replaced image, if any"""
    previous = pond.layout_image
    pond.layout_image = layout_image
    db.commit()
    db.refresh(pond)
    return previous


def delete_pond(db: Session, pond: Pond):
    db.delete(pond)
    db.commit()
