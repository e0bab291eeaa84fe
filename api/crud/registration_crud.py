from typing import Dict, List
from sqlalchemy import case, func
from sqlalchemy.orm import Session, joinedload
from models.registration import Registration, RegistrationStatus
from models.area_selection import AreaSelection
from models.area import Area
from models.zone import Zone
from models.pond import Pond
from models.catch import Catch, ApprovalStatus
from models.tournament import Tournament
from schemas.registration import (
    SelectedArea, RegistrationWithAreas, MyRegistration, MyDraft, TournamentRegistration,
    RegistrationDetail, Registration as RegistrationSchema
)
from schemas.catch import Catch as CatchSchema
from services.registration_state import find_draft
from core.exceptions import NotFound


def get_selected_areas(db: Session, registration_ids: List[int]) -> Dict[int, List[SelectedArea]]:
    """Selected areas (with zone and pond labels) grouped by registration id"""
    grouped = {registration_id: [] for registration_id in registration_ids}
    if not registration_ids:
        return grouped

    rows = db.query(
        AreaSelection.registration_id, Area, Zone, Pond
    ).join(
        Area, AreaSelection.area_id == Area.id
    ).join(
        Zone, Area.zone_id == Zone.id
    ).join(
        Pond, Zone.pond_id == Pond.id
    ).filter(
        AreaSelection.registration_id.in_(registration_ids)
    ).order_by(Pond.id, Zone.zone_number, Area.area_number).all()

    for registration_id, area, zone, pond in rows:
        grouped[registration_id].append(SelectedArea(
            area_id=area.id,
            area_number=area.area_number,
            price=float(area.price),
            zone_id=zone.id,
            zone_name=zone.zone_name,
            zone_number=zone.zone_number,
            pond_id=pond.id,
            pond_name=pond.pond_name
        ))
    return grouped


def _area_counts(db: Session, registration_ids: List[int]) -> Dict[int, int]:
    if not registration_ids:
        return {}
    return dict(db.query(
        AreaSelection.registration_id, func.count(AreaSelection.id)
    ).filter(
        AreaSelection.registration_id.in_(registration_ids)
    ).group_by(AreaSelection.registration_id).all())


def get_draft_with_areas(db: Session, user_id: int, tournament_id: int) -> RegistrationWithAreas:
    draft = find_draft(db, user_id, tournament_id)
    if not draft:
        raise NotFound("No draft found for this tournament")
    selected = get_selected_areas(db, [draft.id])[draft.id]
    return RegistrationWithAreas(**RegistrationSchema.model_validate(draft).model_dump(), selected_areas=selected)


def get_my_drafts(db: Session, user_id: int) -> List[MyDraft]:
    drafts = db.query(Registration).options(
        joinedload(Registration.tournament)
    ).filter(
        Registration.user_id == user_id,
        Registration.status == RegistrationStatus.DRAFT
    ).order_by(Registration.updated_at.desc(), Registration.id.desc()).all()

    counts = _area_counts(db, [draft.id for draft in drafts])
    return [
        MyDraft(
            **RegistrationSchema.model_validate(draft).model_dump(),
            tournament_name=draft.tournament.name,
            start_date=draft.tournament.start_date,
            registration_link=draft.tournament.registration_link,
            area_count=counts.get(draft.id, 0)
        )
        for draft in drafts
    ]


def get_my_registrations(db: Session, user_id: int) -> List[MyRegistration]:
    """Every non-draft registration of the participant with catch statistics"""
    registrations = db.query(Registration).options(
        joinedload(Registration.tournament)
    ).filter(
        Registration.user_id == user_id,
        Registration.status != RegistrationStatus.DRAFT
    ).order_by(Registration.registered_at.desc(), Registration.id.desc()).all()

    registration_ids = [registration.id for registration in registrations]
    counts = _area_counts(db, registration_ids)

    catch_stats = {}
    if registration_ids:
        approved_weight = case(
            (Catch.approval_status == ApprovalStatus.APPROVED, Catch.weight),
            else_=0
        )
        rows = db.query(
            Catch.registration_id, func.count(Catch.id), func.coalesce(func.sum(approved_weight), 0)
        ).filter(
            Catch.registration_id.in_(registration_ids)
        ).group_by(Catch.registration_id).all()
        catch_stats = {registration_id: (count, weight) for registration_id, count, weight in rows}

    result = []
    for registration in registrations:
        catch_count, total_weight = catch_stats.get(registration.id, (0, 0))
        tournament = registration.tournament
        result.append(MyRegistration(
            **RegistrationSchema.model_validate(registration).model_dump(),
            tournament_name=tournament.name,
            location=tournament.location,
            start_date=tournament.start_date,
            end_date=tournament.end_date,
            leaderboard_link=tournament.leaderboard_link,
            area_count=counts.get(registration.id, 0),
            catch_count=catch_count,
            total_weight=float(total_weight or 0)
        ))
    return result


def _area_label(area: SelectedArea) -> str:
    return f"{area.pond_name} / Zone {area.zone_number} / Area {area.area_number}"


def get_tournament_registrations(db: Session, tournament_id: int) -> List[TournamentRegistration]:
    """Organizer's participant list. Drafts are private to the participant and not listed."""
    registrations = db.query(Registration).options(
        joinedload(Registration.user)
    ).filter(
        Registration.tournament_id == tournament_id,
        Registration.status != RegistrationStatus.DRAFT
    ).order_by(Registration.registered_at.desc(), Registration.id.desc()).all()

    selected = get_selected_areas(db, [registration.id for registration in registrations])
    return [
        TournamentRegistration(
            **RegistrationSchema.model_validate(registration).model_dump(),
            full_name=registration.user.full_name,
            mobile_no=registration.user.mobile_no,
            email=registration.user.email,
            area_count=len(selected[registration.id]),
            selected_areas=", ".join(_area_label(area) for area in selected[registration.id]) or None
        )
        for registration in registrations
    ]


def get_registration_detail(db: Session, registration: Registration) -> RegistrationDetail:
    tournament: Tournament = registration.tournament
    user = registration.user
    return RegistrationDetail(
        **RegistrationSchema.model_validate(registration).model_dump(),
        selected_areas=get_selected_areas(db, [registration.id])[registration.id],
        tournament_name=tournament.name,
        location=tournament.location,
        start_date=tournament.start_date,
        end_date=tournament.end_date,
        leaderboard_link=tournament.leaderboard_link,
        full_name=user.full_name,
        mobile_no=user.mobile_no,
        email=user.email,
        catches=[CatchSchema.model_validate(catch) for catch in registration.catches]
    )
