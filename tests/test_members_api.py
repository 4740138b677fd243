"""Member registration, login, profile edits, uploads and reports."""

from datetime import date

import pytest
from fastapi.testclient import TestClient

from bebaby.core.app_factory import create_application
from bebaby.core.config import Settings
from bebaby.domain.errors import StorageError
from bebaby.domain.models import ContentStatus, ContentType, UserStatus, UserType

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _registration(**overrides):
    payload = {
        "email": "ana@example.com",
        "username": "ana_b",
        "password": "password123",
        "birthdate": "1998-04-12",
        "userType": "SUGAR_BABY",
        "name": "Ana",
        "gender": "FEMALE",
        "state": "SP",
        "city": "Sao Paulo",
    }
    payload.update(overrides)
    return payload


class TestRegistrationAndLogin:
    def test_register_then_login(self, client):
        registered = client.post("/api/auth/register", json=_registration())
        logged_in = client.post("/api/auth/login", json={"email": "ANA@example.com", "password": "password123"})

        assert registered.status_code == 201
        assert registered.json()["user"]["userType"] == "SUGAR_BABY"
        assert logged_in.status_code == 200
        token = logged_in.json()["access_token"]
        profile = client.get("/api/user/profile", headers={"Authorization": f"Bearer {token}"})
        assert profile.json()["user"]["username"] == "ana_b"

    def test_duplicate_registration_conflicts(self, client):
        client.post("/api/auth/register", json=_registration())

        response = client.post("/api/auth/register", json=_registration(email="other@example.com"))

        assert response.status_code == 409

    def test_underage_member_is_rejected(self, client):
        today = date.today()
        response = client.post(
            "/api/auth/register",
            json=_registration(birthdate=date(today.year - 17, 1, 1).isoformat()),
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("birthdate")

    def test_invalid_username(self, client):
        response = client.post("/api/auth/register", json=_registration(username="a b"))

        assert response.status_code == 400

    def test_wrong_password(self, client):
        client.post("/api/auth/register", json=_registration())

        response = client.post("/api/auth/login", json={"email": "ana@example.com", "password": "wrongpass"})

        assert response.status_code == 401

    def test_banned_member_cannot_log_in(self, client, persistence):
        user_id = client.post("/api/auth/register", json=_registration()).json()["user"]["id"]
        persistence.set_user_status(user_id, UserStatus.BANNED, "abuse")

        response = client.post("/api/auth/login", json={"email": "ana@example.com", "password": "password123"})

        assert response.status_code == 403

    def test_invalid_token(self, client):
        response = client.get("/api/user/profile", headers={"Authorization": "Bearer nonsense"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid token"}


class TestProfile:
    def test_direct_fields_apply_and_text_is_queued(self, client, bearer, persistence, make_user):
        user = make_user("member")

        response = client.put(
            "/api/user/profile",
            json={"city": "Campinas", "about": "New bio"},
            headers=bearer(user),
        )

        body = response.json()
        assert response.status_code == 200
        assert body["user"]["city"] == "Campinas"
        assert body["user"]["about"] is None
        assert body["pending"][0]["field"] == "about"
        assert persistence.list_pending_content(ContentType.TEXT)[0].content == "New bio"

    def test_unknown_field_is_rejected(self, client, bearer, make_user):
        user = make_user("member")

        response = client.put("/api/user/profile", json={"premium": True}, headers=bearer(user))

        assert response.status_code == 400

    def test_photo_upload_is_stored_and_pending(self, client, bearer, settings, persistence, make_user):
        user = make_user("member")

        response = client.post(
            "/api/user/photos",
            content=PNG_BYTES,
            headers={"Content-Type": "image/png", **bearer(user)},
        )

        assert response.status_code == 201
        content = response.json()["content"]
        assert content["status"] == ContentStatus.PENDING.value
        assert content["photoURL"].startswith(f"/uploads/{user.id}/")
        stored = list((settings.upload_dir / user.id).iterdir())
        assert len(stored) == 1 and stored[0].read_bytes() == PNG_BYTES
        assert client.get(content["photoURL"]).content == PNG_BYTES

    def test_photo_upload_rejects_other_types(self, client, bearer, make_user):
        user = make_user("member")

        response = client.post(
            "/api/user/photos",
            content=b"GIF89a",
            headers={"Content-Type": "image/gif", **bearer(user)},
        )

        assert response.status_code == 400


class TestPhotoUploadLimits:
    @pytest.fixture
    def small_upload_client(self, settings, monkeypatch):
        monkeypatch.setenv("MAX_UPLOAD_BYTES", "1024")
        app = create_application(Settings())
        with TestClient(app) as test_client:
            yield test_client

    @pytest.fixture
    def member_headers(self, small_upload_client):
        container = small_upload_client.app.state.container
        user = container.persistence.create_user(
            email="uploader@example.com",
            username="uploader",
            password_hash="unused",
            user_type=UserType.SUGAR_BABY,
            name="Uploader",
            birthdate=date(1995, 5, 10),
            state="SP",
            city="Sao Paulo",
            status=UserStatus.ACTIVE,
        )
        return user, {"Authorization": f"Bearer {container.user_service.create_token(user)}"}

    def test_declared_length_over_the_limit_is_refused(self, small_upload_client, member_headers, settings):
        user, headers = member_headers

        response = small_upload_client.post(
            "/api/user/photos",
            content=PNG_BYTES + b"\x00" * 2048,
            headers={"Content-Type": "image/png", **headers},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Image is larger than 1024 bytes"}
        assert not (settings.upload_dir / user.id).exists()

    def test_streamed_body_over_the_limit_is_refused(self, small_upload_client, member_headers, settings):
        user, headers = member_headers

        def chunks():
            yield PNG_BYTES
            for _ in range(4):
                yield b"\x00" * 512

        response = small_upload_client.post(
            "/api/user/photos",
            content=chunks(),
            headers={"Content-Type": "image/png", **headers},
        )

        assert response.status_code == 400
        assert not (settings.upload_dir / user.id).exists()

    def test_failed_insert_leaves_no_file_behind(self, small_upload_client, member_headers, settings, monkeypatch):
        user, headers = member_headers
        persistence = small_upload_client.app.state.container.persistence

        def failing_insert(*args, **kwargs):
            raise StorageError("Failed to save content")

        monkeypatch.setattr(persistence, "create_pending_content", failing_insert)

        response = small_upload_client.post(
            "/api/user/photos",
            content=PNG_BYTES,
            headers={"Content-Type": "image/png", **headers},
        )

        assert response.status_code == 500
        assert list((settings.upload_dir / user.id).iterdir()) == []


class TestReportUser:
    def test_report_and_cooldown(self, client, bearer, make_user):
        reporter = make_user("reporter")
        reported = make_user("reported")
        payload = {"reportedId": reported.id, "reason": "fake profile"}

        first = client.post("/api/report-user", json=payload, headers=bearer(reporter))
        second = client.post("/api/report-user", json=payload, headers=bearer(reporter))

        assert first.status_code == 201
        assert first.json()["report"]["status"] == "PENDING"
        assert second.status_code == 409

    def test_self_report(self, client, bearer, make_user):
        reporter = make_user("reporter")

        response = client.post(
            "/api/report-user",
            json={"reportedId": reporter.id, "reason": "test"},
            headers=bearer(reporter),
        )

        assert response.status_code == 400

    def test_unknown_reported_user(self, client, bearer, make_user):
        reporter = make_user("reporter")

        response = client.post(
            "/api/report-user",
            json={"reportedId": "missing", "reason": "spam"},
            headers=bearer(reporter),
        )

        assert response.status_code == 404


class TestRateLimitedRoutes:
    @pytest.fixture
    def strict_client(self, settings, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_AUTH", "2/60")
        app = create_application(Settings())
        with TestClient(app) as test_client:
            yield test_client

    def test_login_is_limited_per_client(self, strict_client):
        payload = {"email": "nobody@example.com", "password": "whatever"}

        statuses = [strict_client.post("/api/auth/login", json=payload).status_code for _ in range(3)]
        limited = strict_client.post("/api/auth/login", json=payload)

        assert statuses == [401, 401, 429]
        assert limited.json() == {"error": "Too many requests"}
        assert limited.headers["X-RateLimit-Limit"] == "2"
        assert limited.headers["X-RateLimit-Remaining"] == "0"
        assert "Retry-After" in limited.headers

    def test_rotating_forwarded_header_does_not_reset_the_count(self, strict_client):
        payload = {"email": "nobody@example.com", "password": "whatever"}

        statuses = [
            strict_client.post(
                "/api/auth/login",
                json=payload,
                headers={"X-Forwarded-For": f"10.0.0.{attempt}"},
            ).status_code
            for attempt in range(4)
        ]

        assert statuses == [401, 401, 429, 429]

    def test_trusted_proxy_hop_identifies_the_client(self, settings, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_AUTH", "2/60")
        monkeypatch.setenv("TRUSTED_PROXY_HOPS", "1")
        payload = {"email": "nobody@example.com", "password": "whatever"}

        with TestClient(create_application(Settings())) as proxied:
            # The proxy appends the real peer; anything before it is client supplied.
            for _ in range(2):
                proxied.post("/api/auth/login", json=payload, headers={"X-Forwarded-For": "1.1.1.1, 10.0.0.1"})
            spoofed = proxied.post("/api/auth/login", json=payload, headers={"X-Forwarded-For": "2.2.2.2, 10.0.0.1"})
            other = proxied.post("/api/auth/login", json=payload, headers={"X-Forwarded-For": "10.0.0.2"})

        assert spoofed.status_code == 429
        assert other.status_code == 401
