"""Tests for registration, login and the advisory login rate limit."""

import time

from app.api.models.security import AuthAttempt
from app.api.services.permission_service import PermissionManager
from app.core.constants import LOGIN_ATTEMPT_LIMIT, LOGIN_LOCKOUT_SECONDS

DEFAULT_PASSWORD = "senha-forte-123"


def register(client, email="nova@example.com", password="senha-forte-123", **extra):
    payload = {"email": email, "password": password, "name": "Nova Clínica", "service_type": "medicina"}
    payload.update(extra)
    return client.post("/auth/register", json=payload)


def login(client, email, password=DEFAULT_PASSWORD):
    return client.post("/auth/login", json={"email": email, "password": password})


# =============================================================================
# Register / login
# =============================================================================

class TestRegister:

    def test_creates_client_on_free_plan(self, client):
        r = register(client, email="Nova@Example.com", phone="(11) 3333-4444")

        assert r.status_code == 201
        body = r.json()
        assert body["email"] == "nova@example.com"
        assert body["role"] == "client"
        assert body["plan"] == "free"
        assert body["phone"] == "1133334444"
        assert "password_hash" not in body

    def test_duplicate_email_is_400(self, client):
        register(client)
        r = register(client)
        assert r.status_code == 400
        assert r.json()["detail"] == "Email already registered"

    def test_short_password_is_422(self, client):
        assert register(client, password="123").status_code == 422

    def test_password_over_72_bytes_is_rejected(self, client):
        r = register(client, password="ç" * 40)
        assert r.status_code == 400
        assert r.json()["error"] == "VALIDATION_ERROR"


class TestLogin:

    def test_login_returns_token_usable_on_me(self, client, user):
        r = login(client, user.email)

        assert r.status_code == 200
        body = r.json()
        assert body["token_type"] == "bearer"
        assert body["user"]["id"] == user.id

        me = client.get("/users/me", headers={"Authorization": f"Bearer {body['access_token']}"})
        assert me.status_code == 200
        assert me.json()["email"] == user.email

    def test_wrong_password_is_401(self, client, user):
        r = login(client, user.email, "errada-123")
        assert r.status_code == 401
        assert r.json()["detail"] == "Invalid credentials"

    def test_inactive_account_cannot_log_in(self, client, make_user):
        inactive = make_user(is_active=False)
        r = login(client, inactive.email)
        assert r.status_code == 403
        assert r.json()["error"] == "ACCOUNT_INACTIVE"

    def test_garbage_token_is_401(self, client):
        r = client.get("/users/me", headers={"Authorization": "Bearer nao-e-um-jwt"})
        assert r.status_code == 401

    def test_update_me(self, client, user, auth_headers):
        r = client.put("/users/me", json={"clinic_name": "Clínica Sorriso"}, headers=auth_headers(user))
        assert r.status_code == 200
        assert r.json()["clinic_name"] == "Clínica Sorriso"

    def test_attempts_are_recorded(self, client, db, user):
        login(client, user.email, "errada-123")
        login(client, user.email)

        attempts = db.query(AuthAttempt).order_by(AuthAttempt.id).all()
        assert [(a.attempt_type, a.success) for a in attempts] == [("login", False), ("login", True)]


# =============================================================================
# Rate limiting
# =============================================================================

class TestRateLimit:

    def test_sixth_attempt_is_refused_even_with_right_password(self, client, user):
        for _ in range(LOGIN_ATTEMPT_LIMIT):
            assert login(client, user.email, "errada-123").status_code == 401

        r = login(client, user.email)
        assert r.status_code == 429
        assert r.json()["error"] == "RATE_LIMIT"

    def test_limit_is_per_email(self, client, make_user):
        victim = make_user()
        other = make_user()
        for _ in range(LOGIN_ATTEMPT_LIMIT):
            login(client, victim.email, "errada-123")

        assert login(client, other.email).status_code == 200

    def test_window_expires(self, db):
        start = time.time()
        for i in range(LOGIN_ATTEMPT_LIMIT):
            PermissionManager.track_auth_attempt(db, "a@example.com", "login", False, now=start + i)

        assert PermissionManager.check_rate_limit("a@example.com", now=start + 10) is False
        assert PermissionManager.check_rate_limit("a@example.com", now=start + LOGIN_LOCKOUT_SECONDS + 10) is True

    def test_success_clears_failures(self, db):
        for _ in range(LOGIN_ATTEMPT_LIMIT - 1):
            PermissionManager.track_auth_attempt(db, "b@example.com", "login", False)
        PermissionManager.track_auth_attempt(db, "b@example.com", "login", True)
        PermissionManager.track_auth_attempt(db, "b@example.com", "login", False)

        assert PermissionManager.check_rate_limit("b@example.com") is True

    def test_email_case_does_not_bypass_limit(self, client, user):
        for _ in range(LOGIN_ATTEMPT_LIMIT):
            login(client, user.email.upper(), "errada-123")

        assert login(client, user.email).status_code == 429
