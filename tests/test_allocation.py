"""
Registration submission, draft saving and the allocation guarantees
"""
import io
import json

import pytest

from models.registration import Registration, RegistrationStatus
from models.area_selection import AreaSelection
from models.tournament import StructureType, TournamentStatus
from schemas.registration import RegistrationRequest
from services.allocation import submit_registration, save_draft
from services.availability import check_availability, lock_areas
from core.exceptions import AreasUnavailable, AlreadyRegistered, AreasMissing, TournamentFrozen, RegistrationClosed
from core.roles import UserRole


def _form(tournament, area_ids=None, **extra):
    data = {"tournament_id": str(tournament.id), "bank_account_no": "1234567890", "bank_name": "BCA"}
    if area_ids is not None:
        data["area_ids"] = json.dumps(area_ids)
    data.update({key: str(value) for key, value in extra.items()})
    return data


def _selected(db, registration_id):
    db.expire_all()
    return sorted(
        area_id for (area_id,) in
        db.query(AreaSelection.area_id).filter(AreaSelection.registration_id == registration_id).all()
    )


class TestSubmitRegistration:

    def test_end_to_end(self, client, db, participant, make_user, make_tournament, make_layout, auth_headers):
        """Two areas at 50 and 30 cost 80; the second angler cannot take an area already held"""
        tournament = make_tournament()
        a1, a2 = make_layout(tournament, area_prices=(50, 30))["areas"]

        response = client.post(
            "/api/registrations", data=_form(tournament, [a1.id, a2.id]), headers=auth_headers(participant)
        )

        assert response.status_code == 201
        body = response.json()["registration"]
        assert body["total_payment"] == 80
        assert body["status"] == "pending"
        assert body["area_count"] == 2
        assert check_availability(db, [a1.id, a2.id]) == {a1.id: False, a2.id: False}

        rival = make_user(UserRole.USER)
        response = client.post("/api/registrations", data=_form(tournament, [a1.id]), headers=auth_headers(rival))

        assert response.status_code == 400
        assert response.json()["detail"] == "Some selected areas are no longer available"

    def test_failure_leaves_nothing_behind(self, client, db, participant, make_user, make_tournament, make_layout, auth_headers):
        tournament = make_tournament()
        a1, a2, a3 = make_layout(tournament, area_prices=(50, 30, 20))["areas"]
        client.post("/api/registrations", data=_form(tournament, [a1.id]), headers=auth_headers(participant))

        rival = make_user(UserRole.USER)
        response = client.post("/api/registrations", data=_form(tournament, [a3.id, a1.id]), headers=auth_headers(rival))

        assert response.status_code == 400
        db.expire_all()
        assert db.query(Registration).filter(Registration.user_id == rival.id).count() == 0
        assert check_availability(db, [a3.id]) == {a3.id: True}

    def test_second_active_registration_rejected(self, client, participant, make_tournament, make_layout, auth_headers):
        tournament = make_tournament()
        a1, a2 = make_layout(tournament)["areas"]
        client.post("/api/registrations", data=_form(tournament, [a1.id]), headers=auth_headers(participant))

        response = client.post("/api/registrations", data=_form(tournament, [a2.id]), headers=auth_headers(participant))

        assert response.status_code == 400
        assert response.json()["detail"] == "You have already registered for this tournament"

    def test_register_again_after_rejection(self, client, db, participant, make_tournament, make_layout, auth_headers):
        tournament = make_tournament()
        a1, _ = make_layout(tournament)["areas"]
        first = client.post("/api/registrations", data=_form(tournament, [a1.id]), headers=auth_headers(participant))
        registration = db.get(Registration, first.json()["registration"]["registration_id"])
        registration.status = RegistrationStatus.REJECTED
        db.commit()

        response = client.post("/api/registrations", data=_form(tournament, [a1.id]), headers=auth_headers(participant))

        assert response.status_code == 201
        assert response.json()["registration"]["registration_id"] != registration.id

    def test_bank_account_required(self, client, participant, make_tournament, make_layout, auth_headers):
        tournament = make_tournament()
        a1, _ = make_layout(tournament)["areas"]
        data = _form(tournament, [a1.id])
        data["bank_account_no"] = "   "

        response = client.post("/api/registrations", data=data, headers=auth_headers(participant))

        assert response.status_code == 400
        assert response.json()["detail"] == "Bank account number is required"

    def test_duplicate_area_ids(self, client, participant, make_tournament, make_layout, auth_headers):
        tournament = make_tournament()
        a1, _ = make_layout(tournament)["areas"]

        response = client.post("/api/registrations", data=_form(tournament, [a1.id, a1.id]), headers=auth_headers(participant))

        assert response.status_code == 400
        assert response.json()["detail"] == "Duplicate area IDs"

    def test_unknown_tournament(self, client, participant, auth_headers):
        response = client.post(
            "/api/registrations",
            data={"tournament_id": "999", "bank_account_no": "1"},
            headers=auth_headers(participant)
        )
        assert response.status_code == 404

    @pytest.mark.parametrize("status", [TournamentStatus.COMPLETED, TournamentStatus.CANCELLED])
    def test_frozen_tournament(self, client, participant, make_tournament, make_layout, auth_headers, status):
        tournament = make_tournament(status=status)
        a1, _ = make_layout(tournament)["areas"]

        response = client.post("/api/registrations", data=_form(tournament, [a1.id]), headers=auth_headers(participant))

        assert response.status_code == 400
        assert response.json()["detail"] == f"Tournament is {status.value}"

    def test_tournament_not_yet_active(self, client, db, participant, make_tournament, make_layout, auth_headers):
        tournament = make_tournament(status=TournamentStatus.DRAFT)
        a1, _ = make_layout(tournament)["areas"]

        response = client.post("/api/registrations", data=_form(tournament, [a1.id]), headers=auth_headers(participant))

        assert response.status_code == 400
        assert response.json()["detail"] == "Registration is only open while the tournament is active"
        assert db.query(Registration).count() == 0

    def test_empty_selection_prices_at_zero(self, client, participant, make_tournament, make_layout, auth_headers):
        tournament = make_tournament()
        make_layout(tournament)

        response = client.post("/api/registrations", data=_form(tournament), headers=auth_headers(participant))

        assert response.status_code == 201
        assert response.json()["registration"]["total_payment"] == 0
        assert response.json()["registration"]["area_count"] == 0

    def test_zone_registration(self, client, db, participant, make_tournament, make_layout, auth_headers):
        tournament = make_tournament(StructureType.POND_ZONE)
        layout = make_layout(tournament, zone_price=75)

        response = client.post(
            "/api/registrations", data=_form(tournament, zone_id=layout["zone"].id), headers=auth_headers(participant)
        )

        assert response.status_code == 201
        assert response.json()["registration"]["total_payment"] == 75
        db.expire_all()
        registration = db.get(Registration, response.json()["registration"]["registration_id"])
        assert registration.zone_id == layout["zone"].id

    def test_payment_receipt_is_stored(self, client, db, participant, make_tournament, make_layout, auth_headers):
        tournament = make_tournament()
        a1, _ = make_layout(tournament)["areas"]
        files = {"payment_receipt": ("receipt.png", io.BytesIO(b"\x89PNG fake"), "image/png")}

        response = client.post(
            "/api/registrations", data=_form(tournament, [a1.id]), files=files, headers=auth_headers(participant)
        )

        assert response.status_code == 201
        db.expire_all()
        registration = db.get(Registration, response.json()["registration"]["registration_id"])
        assert registration.payment_receipt.startswith("/uploads/receipts/")
        assert registration.payment_receipt.endswith(".png")

    def test_receipt_must_be_an_image(self, client, participant, make_tournament, make_layout, auth_headers):
        tournament = make_tournament()
        a1, _ = make_layout(tournament)["areas"]
        files = {"payment_receipt": ("receipt.pdf", io.BytesIO(b"%PDF"), "application/pdf")}

        response = client.post(
            "/api/registrations", data=_form(tournament, [a1.id]), files=files, headers=auth_headers(participant)
        )

        assert response.status_code == 400

    def test_organizer_cannot_register(self, client, organizer, make_tournament, make_layout, auth_headers):
        tournament = make_tournament()
        a1, _ = make_layout(tournament)["areas"]

        response = client.post("/api/registrations", data=_form(tournament, [a1.id]), headers=auth_headers(organizer))

        assert response.status_code == 403


class TestSubmitService:

    def test_missing_area_is_conflict(self, db, participant, make_tournament, make_layout):
        tournament = make_tournament()
        a1, _ = make_layout(tournament)["areas"]
        request = RegistrationRequest(tournament_id=tournament.id, area_ids=[a1.id, 5555], bank_account_no="1")

        with pytest.raises(AreasMissing):
            submit_registration(db, participant.id, request)

    def test_taken_area(self, db, participant, make_user, make_tournament, make_layout):
        tournament = make_tournament()
        a1, _ = make_layout(tournament)["areas"]
        submit_registration(db, participant.id, RegistrationRequest(tournament_id=tournament.id, area_ids=[a1.id]))

        rival = make_user(UserRole.USER)
        with pytest.raises(AreasUnavailable):
            submit_registration(db, rival.id, RegistrationRequest(tournament_id=tournament.id, area_ids=[a1.id]))

    def test_duplicate_active(self, db, participant, make_tournament, make_layout):
        tournament = make_tournament()
        a1, a2 = make_layout(tournament)["areas"]
        submit_registration(db, participant.id, RegistrationRequest(tournament_id=tournament.id, area_ids=[a1.id]))

        with pytest.raises(AlreadyRegistered):
            submit_registration(db, participant.id, RegistrationRequest(tournament_id=tournament.id, area_ids=[a2.id]))

    def test_area_claimed_while_waiting_for_lock(self, db, monkeypatch, participant, make_user, make_tournament, make_layout):
        tournament = make_tournament()
        a1, a2 = make_layout(tournament)["areas"]
        tournament_id, a1_id, a2_id = tournament.id, a1.id, a2.id
        rival_id = make_user(UserRole.USER).id
        rival_registrations = []

        def lock_then_rival_commits(session, locked_tournament_id, area_ids):
            areas = lock_areas(session, locked_tournament_id, area_ids)
            rival = Registration(
                user_id=rival_id, tournament_id=tournament_id, status=RegistrationStatus.PENDING, total_payment=50
            )
            session.add(rival)
            session.flush()
            session.add(AreaSelection(registration_id=rival.id, area_id=a1_id))
            session.commit()
            rival_registrations.append(rival.id)
            return areas

        monkeypatch.setattr("services.allocation.lock_areas", lock_then_rival_commits)

        with pytest.raises(AreasUnavailable):
            submit_registration(
                db, participant.id, RegistrationRequest(tournament_id=tournament_id, area_ids=[a1_id, a2_id])
            )

        db.expire_all()
        assert db.query(Registration).filter(Registration.user_id == participant.id).count() == 0
        assert db.query(AreaSelection).filter(AreaSelection.area_id == a2_id).count() == 0
        holders = db.query(AreaSelection.registration_id).filter(AreaSelection.area_id == a1_id).all()
        assert [registration_id for (registration_id,) in holders] == rival_registrations


class TestDrafts:

    def test_draft_is_replaced_not_duplicated(self, client, db, participant, make_tournament, make_layout, auth_headers):
        tournament = make_tournament()
        a1, a2 = make_layout(tournament, area_prices=(50, 30))["areas"]
        headers = auth_headers(participant)

        first = client.post("/api/registrations/draft", json={"tournament_id": tournament.id, "area_ids": [a1.id]}, headers=headers)
        second = client.post(
            "/api/registrations/draft",
            json={"tournament_id": tournament.id, "area_ids": json.dumps([a2.id])},
            headers=headers
        )

        assert first.status_code == 200
        assert second.status_code == 200
        draft_id = first.json()["registration"]["registration_id"]
        assert second.json()["registration"]["registration_id"] == draft_id
        assert second.json()["registration"]["total_payment"] == 30
        assert second.json()["registration"]["status"] == "draft"
        assert _selected(db, draft_id) == [a2.id]
        assert db.query(Registration).filter(Registration.user_id == participant.id).count() == 1

    def test_draft_does_not_reserve(self, db, participant, make_user, make_tournament, make_layout):
        tournament = make_tournament()
        a1, _ = make_layout(tournament)["areas"]
        save_draft(db, participant.id, RegistrationRequest(tournament_id=tournament.id, area_ids=[a1.id]))

        assert check_availability(db, [a1.id]) == {a1.id: True}
        rival = make_user(UserRole.USER)
        summary = submit_registration(db, rival.id, RegistrationRequest(tournament_id=tournament.id, area_ids=[a1.id]))
        assert summary.status == RegistrationStatus.PENDING

    def test_submit_promotes_the_draft(self, client, db, participant, make_tournament, make_layout, auth_headers):
        tournament = make_tournament()
        a1, a2 = make_layout(tournament, area_prices=(50, 30))["areas"]
        headers = auth_headers(participant)
        draft = client.post("/api/registrations/draft", json={"tournament_id": tournament.id, "area_ids": [a1.id]}, headers=headers)
        draft_id = draft.json()["registration"]["registration_id"]

        response = client.post("/api/registrations", data=_form(tournament, [a1.id, a2.id]), headers=headers)

        assert response.status_code == 201
        assert response.json()["registration"]["registration_id"] == draft_id
        assert response.json()["registration"]["status"] == "pending"
        assert _selected(db, draft_id) == sorted([a1.id, a2.id])

    def test_draft_after_active_registration(self, db, participant, make_tournament, make_layout):
        tournament = make_tournament()
        a1, _ = make_layout(tournament)["areas"]
        submit_registration(db, participant.id, RegistrationRequest(tournament_id=tournament.id, area_ids=[a1.id]))

        with pytest.raises(AlreadyRegistered):
            save_draft(db, participant.id, RegistrationRequest(tournament_id=tournament.id, area_ids=[a1.id]))

    def test_draft_on_frozen_tournament(self, db, participant, make_tournament):
        tournament = make_tournament(status=TournamentStatus.CANCELLED)
        with pytest.raises(TournamentFrozen):
            save_draft(db, participant.id, RegistrationRequest(tournament_id=tournament.id))

    def test_draft_before_tournament_is_active(self, db, participant, make_tournament, make_layout):
        tournament = make_tournament(status=TournamentStatus.DRAFT)
        a1, _ = make_layout(tournament)["areas"]

        with pytest.raises(RegistrationClosed):
            save_draft(db, participant.id, RegistrationRequest(tournament_id=tournament.id, area_ids=[a1.id]))
        assert db.query(Registration).count() == 0

    def test_empty_draft_allowed(self, client, participant, make_tournament, auth_headers):
        tournament = make_tournament()
        response = client.post(
            "/api/registrations/draft", json={"tournament_id": tournament.id}, headers=auth_headers(participant)
        )
        assert response.status_code == 200
        assert response.json()["registration"]["area_count"] == 0

    def test_fetch_draft(self, client, participant, make_tournament, make_layout, auth_headers):
        tournament = make_tournament()
        a1, _ = make_layout(tournament)["areas"]
        headers = auth_headers(participant)

        assert client.get(f"/api/registrations/draft/{tournament.id}", headers=headers).status_code == 404

        client.post("/api/registrations/draft", json={"tournament_id": tournament.id, "area_ids": [a1.id]}, headers=headers)
        response = client.get(f"/api/registrations/draft/{tournament.id}", headers=headers)

        assert response.status_code == 200
        assert [area["area_id"] for area in response.json()["selected_areas"]] == [a1.id]

        drafts = client.get("/api/registrations/my-drafts", headers=headers).json()
        assert len(drafts) == 1
        assert drafts[0]["area_count"] == 1
        assert client.get("/api/registrations/my-registrations", headers=headers).json() == []
