"""
Registration submission and draft saving.

submit_registration is the only place an area gets claimed. Everything it
does (guards, availability re-check, pricing, registration upsert and the
selection rewrite) runs in one transaction and is rolled back as a whole on
any failure, so two registrations can never actively hold the same area.
"""
from decimal import Decimal
from typing import List, Optional, Sequence
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session
from models.tournament import Tournament
from models.registration import Registration, RegistrationStatus
from models.area_selection import AreaSelection
from schemas.registration import RegistrationRequest, RegistrationSummary
from services.pricing import (
    build_selection, calculate_total, PondOnlySelection, PondZoneSelection, PondZoneAreaSelection
)
from services.availability import lock_areas, count_active_holders
from services.registration_state import (
    ensure_registration_open, ensure_no_active_registration, find_draft
)
from core.config import settings
from core.exceptions import (
    PescaException, TournamentNotFound, AlreadyRegistered, AreasMissing, AreasUnavailable,
    Conflict, ServiceUnavailable
)
from core.logging import logger


def _apply_statement_timeout(db: Session):
    if db.get_bind().dialect.name == "postgresql":
        db.execute(text(f"SET LOCAL statement_timeout = {int(settings.allocation_timeout_ms)}"))


def _get_tournament(db: Session, tournament_id: int) -> Tournament:
    tournament = db.query(Tournament).filter(Tournament.id == tournament_id).first()
    if not tournament:
        raise TournamentNotFound()
    return tournament


def _claim_areas(db: Session, tournament_id: int, area_ids: Sequence[int]):
    """Lock the requested areas and verify nobody actively holds them"""
    areas = lock_areas(db, tournament_id, area_ids)
    if len(areas) != len(set(area_ids)):
        raise AreasMissing()

    holders = count_active_holders(db, area_ids)
    unavailable = [area.id for area in areas if not area.is_available or holders[area.id] > 0]
    if unavailable:
        logger.info(f"Allocation rejected for tournament {tournament_id}: areas {unavailable} are taken")
        raise AreasUnavailable()


def _replace_selections(db: Session, registration: Registration, area_ids: Sequence[int]):
    """Rewrite the registration's selections to exactly area_ids (delete, then bulk insert)"""
    db.query(AreaSelection).filter(
        AreaSelection.registration_id == registration.id
    ).delete(synchronize_session=False)
    db.flush()

    db.add_all([AreaSelection(registration_id=registration.id, area_id=area_id) for area_id in area_ids])
    db.flush()
    db.expire(registration, ["selections"])


def _fill_registration(registration: Registration, request: RegistrationRequest, selection, total: Decimal):
    registration.total_payment = total
    registration.bank_account_no = request.bank_account_no
    registration.bank_name = request.bank_name
    registration.notes = request.notes
    registration.pond_id = selection.pond_id if isinstance(selection, PondOnlySelection) else None
    registration.zone_id = selection.zone_id if isinstance(selection, PondZoneSelection) else None


def _selected_area_ids(selection) -> List[int]:
    if isinstance(selection, PondZoneAreaSelection):
        return list(selection.area_ids)
    return []


def _summary(registration: Registration, area_count: int) -> RegistrationSummary:
    return RegistrationSummary(
        registration_id=registration.id,
        tournament_id=registration.tournament_id,
        total_payment=float(registration.total_payment),
        status=registration.status,
        area_count=area_count,
    )


def submit_registration(
    db: Session,
    user_id: int,
    request: RegistrationRequest,
    payment_receipt: Optional[str] = None
) -> RegistrationSummary:
    """
    Finalize a registration: (none) -> pending, or draft -> pending reusing the draft row.

    Raises TournamentNotFound, Conflict (tournament not active, already registered, areas taken or missing),
    NotFound (pond/zone outside the tournament) or ServiceUnavailable (store timeout).
    """
    try:
        _apply_statement_timeout(db)

        tournament = _get_tournament(db, request.tournament_id)
        ensure_registration_open(tournament)
        ensure_no_active_registration(db, user_id, tournament.id)

        selection = build_selection(
            tournament.structure_type,
            area_ids=request.area_ids,
            zone_id=request.zone_id,
            pond_id=request.pond_id,
        )
        area_ids = _selected_area_ids(selection)
        if area_ids:
            _claim_areas(db, tournament.id, area_ids)

        total = calculate_total(db, tournament.id, tournament.structure_type, selection)

        registration = find_draft(db, user_id, tournament.id)
        if registration is None:
            registration = Registration(user_id=user_id, tournament_id=tournament.id)
            db.add(registration)
        registration.status = RegistrationStatus.PENDING
        registration.payment_receipt = payment_receipt
        _fill_registration(registration, request, selection, total)
        db.flush()

        _replace_selections(db, registration, area_ids)
        db.commit()
    except PescaException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        # Lost a race against a concurrent submission for the same (user, tournament)
        logger.warning(f"Registration integrity conflict for user {user_id}, tournament {request.tournament_id}: {e.orig}")
        raise AlreadyRegistered()
    except OperationalError as e:
        db.rollback()
        logger.error(f"Registration transaction failed for user {user_id}, tournament {request.tournament_id}: {e}")
        raise ServiceUnavailable("Registration could not be completed in time, please retry")
    except Exception:
        db.rollback()
        raise

    logger.info(
        f"Registration {registration.id} submitted: user {user_id}, tournament {tournament.id}, "
        f"{len(area_ids)} areas, total {total}"
    )
    return _summary(registration, len(area_ids))


def save_draft(db: Session, user_id: int, request: RegistrationRequest) -> RegistrationSummary:
    """
    Upsert the participant's single draft for a tournament.

    The selections are replaced by exactly the submitted set. Availability is
    not checked: draft selections never block anybody.
    """
    try:
        tournament = _get_tournament(db, request.tournament_id)
        ensure_registration_open(tournament)
        ensure_no_active_registration(db, user_id, tournament.id)

        selection = build_selection(
            tournament.structure_type,
            area_ids=request.area_ids,
            zone_id=request.zone_id,
            pond_id=request.pond_id,
        )
        area_ids = _selected_area_ids(selection)
        total = calculate_total(db, tournament.id, tournament.structure_type, selection)

        draft = find_draft(db, user_id, tournament.id)
        if draft is None:
            draft = Registration(user_id=user_id, tournament_id=tournament.id, status=RegistrationStatus.DRAFT)
            db.add(draft)
        _fill_registration(draft, request, selection, total)
        db.flush()

        _replace_selections(db, draft, area_ids)
        db.commit()
    except PescaException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Draft integrity conflict for user {user_id}, tournament {request.tournament_id}: {e.orig}")
        raise Conflict("Draft was modified concurrently, please retry")
    except Exception:
        db.rollback()
        raise

    logger.debug(f"Draft {draft.id} saved: user {user_id}, tournament {tournament.id}, {len(area_ids)} areas")
    return _summary(draft, len(area_ids))
