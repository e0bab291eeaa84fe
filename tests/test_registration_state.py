"""
Organizer-driven registration status transitions
"""
import pytest

from models.registration import Registration, RegistrationStatus as S
from models.tournament import TournamentStatus
from services.registration_state import can_transition, apply_status, change_status, ORGANIZER_TRANSITIONS
from core.exceptions import InvalidStatusTransition, TournamentFrozen

ALLOWED = {
    (S.PENDING, S.CONFIRMED), (S.PENDING, S.REJECTED), (S.PENDING, S.CANCELLED),
    (S.CONFIRMED, S.CANCELLED), (S.REJECTED, S.CANCELLED),
}


class TestTransitionTable:

    @pytest.mark.parametrize("current", list(S))
    @pytest.mark.parametrize("target", list(S))
    def test_table(self, current, target):
        expected = (current, target) in ALLOWED or (current == target and current != S.DRAFT)
        assert can_transition(current, target) is expected

    def test_every_status_listed(self):
        assert set(ORGANIZER_TRANSITIONS) == set(S)

    def test_confirm_stamps_confirmed_at(self):
        registration = Registration(status=S.PENDING)
        apply_status(registration, S.CONFIRMED)
        assert registration.status == S.CONFIRMED
        assert registration.confirmed_at is not None

    def test_cancel_clears_confirmed_at(self):
        registration = Registration(status=S.PENDING)
        apply_status(registration, S.CONFIRMED)
        apply_status(registration, S.CANCELLED)
        assert registration.confirmed_at is None

    def test_same_status_is_noop(self):
        registration = Registration(status=S.CONFIRMED)
        apply_status(registration, S.CONFIRMED)
        assert registration.status == S.CONFIRMED

    def test_rejected_cannot_be_confirmed(self):
        registration = Registration(status=S.REJECTED)
        with pytest.raises(InvalidStatusTransition):
            apply_status(registration, S.CONFIRMED)

    def test_draft_is_not_organizer_controlled(self):
        registration = Registration(status=S.DRAFT)
        with pytest.raises(InvalidStatusTransition):
            apply_status(registration, S.PENDING)


class TestChangeStatus:

    def test_frozen_tournament(self, db, participant, make_tournament):
        tournament = make_tournament(status=TournamentStatus.COMPLETED)
        registration = Registration(user_id=participant.id, tournament_id=tournament.id, status=S.PENDING, total_payment=0)
        db.add(registration)
        db.commit()

        with pytest.raises(TournamentFrozen):
            change_status(db, registration, S.CONFIRMED)

    def test_persists(self, db, participant, make_tournament):
        tournament = make_tournament()
        registration = Registration(user_id=participant.id, tournament_id=tournament.id, status=S.PENDING, total_payment=0)
        db.add(registration)
        db.commit()

        change_status(db, registration, S.CONFIRMED)

        db.expire_all()
        assert db.get(Registration, registration.id).status == S.CONFIRMED
