"""
Accounts, tokens and role checks
"""
from datetime import timedelta

from fastapi.security import HTTPAuthorizationCredentials

from core.auth import create_access_token, create_user_token, get_current_user_optional
from core.roles import UserRole


class TestParticipantAccounts:

    def test_register_and_login(self, client):
        response = client.post("/api/auth/user/register", json={
            "full_name": "Andi Angler",
            "mobile_no": "081234567890",
            "password": "secret123",
            "bank_account_no": "987654",
            "bank_name": "BRI",
        })

        assert response.status_code == 201
        body = response.json()
        assert body["token"]
        assert body["user"]["role"] == "user"
        assert "password_hash" not in body["user"]

        login = client.post("/api/auth/user/login", json={"mobile_no": "081234567890", "password": "secret123"})
        assert login.status_code == 200
        assert login.json()["user"]["full_name"] == "Andi Angler"

    def test_duplicate_mobile(self, client, participant):
        response = client.post("/api/auth/user/register", json={
            "full_name": "Someone Else", "mobile_no": participant.mobile_no, "password": "secret123"
        })
        assert response.status_code == 400

    def test_short_password(self, client):
        response = client.post("/api/auth/user/register", json={
            "full_name": "Andi", "mobile_no": "0811", "password": "123"
        })
        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"

    def test_wrong_password(self, client, participant):
        response = client.post("/api/auth/user/login", json={"mobile_no": participant.mobile_no, "password": "nope"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    def test_check_mobile(self, client, participant):
        known = client.post("/api/auth/user/check-mobile", json={"mobile_no": participant.mobile_no}).json()
        unknown = client.post("/api/auth/user/check-mobile", json={"mobile_no": "0000"}).json()

        assert known["exists"] is True
        assert known["user"]["full_name"] == participant.full_name
        assert unknown == {"exists": False}


class TestOrganizerAccounts:

    def test_register_and_login(self, client):
        response = client.post("/api/auth/organizer/register", json={
            "name": "Olivia", "email": "olivia@mail.com", "mobile_no": "0899", "password": "secret123"
        })
        assert response.status_code == 201
        assert response.json()["user"]["role"] == "organizer"

        login = client.post("/api/auth/organizer/login", json={"email": "olivia@mail.com", "password": "secret123"})
        assert login.status_code == 200

    def test_participant_cannot_use_organizer_login(self, client, participant):
        response = client.post("/api/auth/organizer/login", json={"email": participant.email, "password": "secret123"})
        assert response.status_code == 401


class TestTokens:

    def test_validate(self, client, participant, auth_headers):
        response = client.get("/api/auth/validate", headers=auth_headers(participant))
        assert response.status_code == 200
        assert response.json()["valid"] is True
        assert response.json()["user"]["id"] == participant.id

    def test_missing_token(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["detail"] == "Authentication required"

    def test_expired_token(self, client, participant):
        token = create_access_token(
            {"sub": str(participant.id), "role": "user"}, expires_delta=timedelta(minutes=-5)
        )
        response = client.get("/api/auth/validate", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Token expired"

    def test_garbage_token(self, client):
        response = client.get("/api/auth/validate", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    def test_role_mismatch_with_stored_user(self, client, participant):
        token = create_access_token({"sub": str(participant.id), "role": UserRole.ORGANIZER.value})
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_wrong_role_is_forbidden(self, client, participant, auth_headers):
        response = client.get("/api/tournaments/my-tournaments", headers=auth_headers(participant))
        assert response.status_code == 403
        assert response.json()["detail"] == "Access denied. Organizer privileges required."


class TestOptionalPrincipal:

    def test_anonymous_and_broken_credentials_yield_none(self, db):
        assert get_current_user_optional(None, db) is None
        broken = HTTPAuthorizationCredentials(scheme="Bearer", credentials="not-a-jwt")
        assert get_current_user_optional(broken, db) is None

    def test_valid_token(self, db, participant):
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=create_user_token(participant))
        assert get_current_user_optional(credentials, db).id == participant.id
