from typing import Dict, Iterable, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from models.area import Area
from models.zone import Zone
from models.pond import Pond
from models.area_selection import AreaSelection
from models.user import User
from models.registration import Registration, ACTIVE_STATUSES
from core.exceptions import NotFound


def count_active_holders(db: Session, area_ids: Iterable[int]) -> Dict[int, int]:
    """Number of selections per area whose registration is pending or confirmed"""
    area_ids = list(area_ids)
    if not area_ids:
        return {}

    rows = db.query(
        AreaSelection.area_id, func.count(AreaSelection.id)
    ).join(
        Registration, AreaSelection.registration_id == Registration.id
    ).filter(
        AreaSelection.area_id.in_(area_ids),
        Registration.status.in_(ACTIVE_STATUSES)
    ).group_by(AreaSelection.area_id).all()

    counts = {area_id: 0 for area_id in area_ids}
    counts.update({area_id: count for area_id, count in rows})
    return counts


def _areas_query(db: Session, area_ids: Iterable[int], tournament_id: Optional[int] = None):
    query = db.query(Area).filter(Area.id.in_(list(area_ids)))
    if tournament_id is not None:
        query = query.join(Zone, Area.zone_id == Zone.id).join(
            Pond, Zone.pond_id == Pond.id
        ).filter(Pond.tournament_id == tournament_id)
    return query


def check_availability(db: Session, area_ids: Iterable[int], tournament_id: Optional[int] = None) -> Dict[int, bool]:
    """
    Live availability of the requested areas: the area's own flag AND no
    active holder. Fails with NotFound if any requested area does not exist
    (or lies outside the tournament, when one is given).
    """
    requested = set(area_ids)
    areas = _areas_query(db, requested, tournament_id).all()
    if len(areas) != len(requested):
        raise NotFound("Some selected areas do not exist")

    holders = count_active_holders(db, requested)
    return {area.id: bool(area.is_available) and holders[area.id] == 0 for area in areas}


def lock_areas(db: Session, tournament_id: int, area_ids: Iterable[int]) -> List[Area]:
    """
    Lock the candidate areas for the rest of the transaction (SELECT ... FOR UPDATE,
    in id order so concurrent allocations acquire locks in the same sequence).

    Holders must be counted with a separate statement after this returns: under
    READ COMMITTED that statement sees selections committed while we waited.
    """
    return _areas_query(db, area_ids, tournament_id).order_by(Area.id).with_for_update(of=Area).all()


def tournament_availability(db: Session, tournament_id: int) -> Dict[int, bool]:
    """Live availability of every area of a tournament, keyed by area id"""
    areas = db.query(Area.id, Area.is_available).join(
        Zone, Area.zone_id == Zone.id
    ).join(
        Pond, Zone.pond_id == Pond.id
    ).filter(Pond.tournament_id == tournament_id).all()

    holders = count_active_holders(db, [area_id for area_id, _ in areas])
    return {area_id: bool(flag) and holders[area_id] == 0 for area_id, flag in areas}


def zone_reservations(db: Session, zone_id: int) -> Dict[int, str]:
    """Name of the participant holding each reserved area of a zone"""
    rows = db.query(AreaSelection.area_id, User.full_name).join(
        Registration, AreaSelection.registration_id == Registration.id
    ).join(
        User, Registration.user_id == User.id
    ).join(
        Area, AreaSelection.area_id == Area.id
    ).filter(
        Area.zone_id == zone_id,
        Registration.status.in_(ACTIVE_STATUSES)
    ).all()
    return {area_id: full_name for area_id, full_name in rows}
