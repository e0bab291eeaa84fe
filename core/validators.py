from sqlalchemy.orm import Session
from models.tournament import Tournament
from models.pond import Pond
from models.zone import Zone
from models.area import Area
from models.registration import Registration
from models.catch import Catch
from models.user import User
from core.exceptions import TournamentNotFound, NotFound


def validate_tournament_owner(db: Session, tournament_id: int, organizer: User) -> Tournament:
    """Tournament owned by the organizer; someone else's tournament looks like a missing one"""
    tournament = db.query(Tournament).filter(
        Tournament.id == tournament_id,
        Tournament.organizer_id == organizer.id
    ).first()
    if not tournament:
        raise TournamentNotFound("Tournament not found or unauthorized")
    return tournament


def validate_pond_owner(db: Session, pond_id: int, organizer: User) -> Pond:
    pond = db.query(Pond).join(Tournament, Pond.tournament_id == Tournament.id).filter(
        Pond.id == pond_id,
        Tournament.organizer_id == organizer.id
    ).first()
    if not pond:
        raise NotFound("Pond not found or unauthorized")
    return pond


def validate_zone_owner(db: Session, zone_id: int, organizer: User) -> Zone:
    zone = db.query(Zone).join(Pond, Zone.pond_id == Pond.id).join(
        Tournament, Pond.tournament_id == Tournament.id
    ).filter(
        Zone.id == zone_id,
        Tournament.organizer_id == organizer.id
    ).first()
    if not zone:
        raise NotFound("Zone not found or unauthorized")
    return zone


def validate_area_owner(db: Session, area_id: int, organizer: User) -> Area:
    area = db.query(Area).join(Zone, Area.zone_id == Zone.id).join(
        Pond, Zone.pond_id == Pond.id
    ).join(
        Tournament, Pond.tournament_id == Tournament.id
    ).filter(
        Area.id == area_id,
        Tournament.organizer_id == organizer.id
    ).first()
    if not area:
        raise NotFound("Area not found or unauthorized")
    return area


def validate_registration_access(db: Session, registration_id: int, principal: User) -> Registration:
    """Registration visible to its registrant or to the organizer of its tournament"""
    registration = db.query(Registration).filter(Registration.id == registration_id).first()
    if not registration:
        raise NotFound("Registration not found")
    if registration.user_id != principal.id and registration.tournament.organizer_id != principal.id:
        raise NotFound("Registration not found")
    return registration


def validate_registration_owner(db: Session, registration_id: int, organizer: User) -> Registration:
    registration = db.query(Registration).join(
        Tournament, Registration.tournament_id == Tournament.id
    ).filter(
        Registration.id == registration_id,
        Tournament.organizer_id == organizer.id
    ).first()
    if not registration:
        raise NotFound("Registration not found or unauthorized")
    return registration


def validate_catch_owner(db: Session, catch_id: int, organizer: User) -> Catch:
    catch = db.query(Catch).join(
        Registration, Catch.registration_id == Registration.id
    ).join(
        Tournament, Registration.tournament_id == Tournament.id
    ).filter(
        Catch.id == catch_id,
        Tournament.organizer_id == organizer.id
    ).first()
    if not catch:
        raise NotFound("Catch not found or unauthorized")
    return catch
