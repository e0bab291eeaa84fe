from datetime import datetime, timezone
from typing import Dict, FrozenSet, Optional
from sqlalchemy.orm import Session
from models.registration import Registration, RegistrationStatus, ACTIVE_STATUSES
from models.tournament import Tournament, TournamentStatus
from core.exceptions import AlreadyRegistered, InvalidStatusTransition, TournamentFrozen, RegistrationClosed

S = RegistrationStatus

# Organizer-driven transitions. Participant-driven ones ((none) -> draft,
# draft -> pending, (none) -> pending) live in services.allocation.
ORGANIZER_TRANSITIONS: Dict[RegistrationStatus, FrozenSet[RegistrationStatus]] = {
    S.DRAFT: frozenset(),
    S.PENDING: frozenset({S.CONFIRMED, S.REJECTED, S.CANCELLED}),
    S.CONFIRMED: frozenset({S.CANCELLED}),
    S.REJECTED: frozenset({S.CANCELLED}),
    S.CANCELLED: frozenset(),
}


def can_transition(current: RegistrationStatus, target: RegistrationStatus) -> bool:
    """Whether an organizer may move a registration from current to target"""
    current, target = S(current), S(target)
    if current == S.DRAFT:
        return False
    if current == target:
        # Re-applying the current status is a no-op
        return True
    return target in ORGANIZER_TRANSITIONS[current]


def ensure_tournament_open(tournament: Tournament):
    """Completed and cancelled tournaments accept no further registration or catch changes"""
    if tournament.is_frozen:
        raise TournamentFrozen(tournament.status.value)


def ensure_registration_open(tournament: Tournament):
    ensure_tournament_open(tournament)
    if tournament.status != TournamentStatus.ACTIVE:
        raise RegistrationClosed()


def find_active_registration(db: Session, user_id: int, tournament_id: int) -> Optional[Registration]:
    return db.query(Registration).filter(
        Registration.user_id == user_id,
        Registration.tournament_id == tournament_id,
        Registration.status.in_(ACTIVE_STATUSES)
    ).first()


def find_draft(db: Session, user_id: int, tournament_id: int) -> Optional[Registration]:
    return db.query(Registration).filter(
        Registration.user_id == user_id,
        Registration.tournament_id == tournament_id,
        Registration.status == S.DRAFT
    ).first()


def ensure_no_active_registration(db: Session, user_id: int, tournament_id: int):
    if find_active_registration(db, user_id, tournament_id):
        raise AlreadyRegistered()


def apply_status(registration: Registration, target: RegistrationStatus) -> Registration:
    """Validate and apply an organizer status change in memory; the caller commits"""
    target = S(target)
    current = S(registration.status)
    if not can_transition(current, target):
        raise InvalidStatusTransition(current.value, target.value)

    if current == target:
        return registration

    registration.status = target
    registration.confirmed_at = datetime.now(timezone.utc) if target == S.CONFIRMED else None
    return registration


def change_status(db: Session, registration: Registration, target: RegistrationStatus) -> Registration:
    ensure_tournament_open(registration.tournament)
    apply_status(registration, target)
    db.commit()
    db.refresh(registration)
    return registration
