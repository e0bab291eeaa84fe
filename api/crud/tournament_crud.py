import secrets
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from models.tournament import Tournament, TournamentStatus
from models.pond import Pond
from models.zone import Zone
from models.registration import Registration, ACTIVE_STATUSES
from schemas.tournament import (
    TournamentCreate, TournamentUpdate, TournamentDetail,
    TournamentRegistrationView, Leaderboard
)
from schemas.layout import PondTree, ZoneTree, AreaLive, Pond as PondSchema, Zone as ZoneSchema
from services.availability import tournament_availability
from services.leaderboard import get_leaderboard
from core.exceptions import NotFound, ValidationFailed
from core.logging import logger


def _new_link() -> str:
    return secrets.token_urlsafe(16)


def create_tournament(db: Session, tournament: TournamentCreate, organizer_id: int) -> Tournament:
    db_tournament = Tournament(
        **tournament.model_dump(),
        organizer_id=organizer_id,
        status=TournamentStatus.DRAFT,
        registration_link=_new_link(),
        leaderboard_link=_new_link()
    )
    db.add(db_tournament)
    db.commit()
    db.refresh(db_tournament)
    logger.info(f"Tournament {db_tournament.id} created by organizer {organizer_id}")
    return db_tournament


def get_organizer_tournaments(db: Session, organizer_id: int) -> List[Tournament]:
    """Organizer's tournaments with participant_count and pond_count attached"""
    participants = db.query(
        Registration.tournament_id,
        func.count(Registration.id).label("participant_count")
    ).filter(Registration.status.in_(ACTIVE_STATUSES)).group_by(Registration.tournament_id).subquery()

    ponds = db.query(
        Pond.tournament_id,
        func.count(Pond.id).label("pond_count")
    ).group_by(Pond.tournament_id).subquery()

    rows = db.query(
        Tournament,
        func.coalesce(participants.c.participant_count, 0),
        func.coalesce(ponds.c.pond_count, 0)
    ).outerjoin(
        participants, participants.c.tournament_id == Tournament.id
    ).outerjoin(
        ponds, ponds.c.tournament_id == Tournament.id
    ).filter(
        Tournament.organizer_id == organizer_id
    ).order_by(Tournament.created_at.desc(), Tournament.id.desc()).all()

    tournaments = []
    for tournament, participant_count, pond_count in rows:
        tournament.participant_count = participant_count
        tournament.pond_count = pond_count
        tournaments.append(tournament)
    return tournaments


def _detail(tournament: Tournament) -> dict:
    data = TournamentDetail.model_validate(tournament).model_dump()
    data["organizer_name"] = tournament.organizer.full_name if tournament.organizer else None
    data["organizer_mobile"] = tournament.organizer.mobile_no if tournament.organizer else None
    return data


def get_tournament_detail(db: Session, tournament_id: int) -> TournamentDetail:
    tournament = db.query(Tournament).options(
        joinedload(Tournament.organizer)
    ).filter(Tournament.id == tournament_id).first()
    if not tournament:
        raise NotFound("Tournament not found")
    return TournamentDetail(**_detail(tournament))


def build_pond_tree(pond: Pond, availability: dict) -> PondTree:
    """Pond with its zones and areas; area availability is the live value"""
    zones = []
    for zone in pond.zones:
        areas = [
            AreaLive(
                id=area.id,
                zone_id=area.zone_id,
                area_number=area.area_number,
                price=float(area.price),
                is_available=availability.get(area.id, False),
                position_x=area.position_x,
                position_y=area.position_y,
            )
            for area in zone.areas
        ]
        zones.append(ZoneTree(**ZoneSchema.model_validate(zone).model_dump(), areas=areas))
    return PondTree(**PondSchema.model_validate(pond).model_dump(), zones=zones)


def get_registration_view(db: Session, link: str) -> TournamentRegistrationView:
    """Public registration page. Only active tournaments can be registered for."""
    tournament = db.query(Tournament).options(
        joinedload(Tournament.organizer),
        joinedload(Tournament.ponds).joinedload(Pond.zones).joinedload(Zone.areas)
    ).filter(
        Tournament.registration_link == link,
        Tournament.status == TournamentStatus.ACTIVE
    ).first()
    if not tournament:
        raise NotFound("Tournament not found or registration is closed")

    availability = tournament_availability(db, tournament.id)
    ponds = [build_pond_tree(pond, availability) for pond in tournament.ponds]
    return TournamentRegistrationView(**_detail(tournament), ponds=ponds)


def get_public_leaderboard(db: Session, link: str) -> Leaderboard:
    tournament = db.query(Tournament).filter(Tournament.leaderboard_link == link).first()
    if not tournament:
        raise NotFound("Tournament not found")

    return Leaderboard(
        id=tournament.id,
        name=tournament.name,
        location=tournament.location,
        start_date=tournament.start_date,
        end_date=tournament.end_date,
        status=tournament.status,
        banner_image=tournament.banner_image,
        leaderboard=get_leaderboard(db, tournament.id)
    )


def update_tournament(db: Session, tournament: Tournament, tournament_update: TournamentUpdate) -> Tournament:
    update_data = tournament_update.model_dump(exclude_unset=True)
    if "name" in update_data and update_data["name"] is None:
        del update_data["name"]
    for field in ("start_date", "end_date"):
        if field in update_data and update_data[field] is None:
            raise ValidationFailed(f"{field} cannot be empty")

    for field, value in update_data.items():
        setattr(tournament, field, value)

    if tournament.end_date < tournament.start_date:
        raise ValidationFailed("End date must not be before start date")

    db.commit()
    db.refresh(tournament)
    return tournament


def update_tournament_status(db: Session, tournament: Tournament, new_status: TournamentStatus) -> Tournament:
    previous = tournament.status
    tournament.status = new_status
    db.commit()
    db.refresh(tournament)
    logger.info(f"Tournament {tournament.id} status: {previous.value} -> {new_status.value}")
    return tournament


def update_tournament_images(
    db: Session,
    tournament: Tournament,
    banner_image: Optional[str] = None,
    payment_details_image: Optional[str] = None
) -> List[str]:
    """Set the given image references and return the ones they replaced"""
    replaced = []
    if banner_image:
        if tournament.banner_image:
            replaced.append(tournament.banner_image)
        tournament.banner_image = banner_image
    if payment_details_image:
        if tournament.payment_details_image:
            replaced.append(tournament.payment_details_image)
        tournament.payment_details_image = payment_details_image
    db.commit()
    db.refresh(tournament)
    return replaced


def delete_tournament(db: Session, tournament: Tournament):
    tournament_id = tournament.id
    db.delete(tournament)
    db.commit()
    logger.info(f"Tournament {tournament_id} deleted")