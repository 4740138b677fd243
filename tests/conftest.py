from datetime import date
from typing import Callable, Dict

import pytest
from fastapi.testclient import TestClient

from bebaby.core.app_factory import create_application
from bebaby.core.config import Settings
from bebaby.core.container import ApplicationContainer
from bebaby.domain.models import User, UserStatus, UserType


@pytest.fixture
def settings(tmp_path, monkeypatch) -> Settings:
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "bebaby.db"))
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("ADMIN_USERNAME", "admin")
    monkeypatch.setenv("ADMIN_PASSWORD", "s3cret-pass")
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    monkeypatch.setenv("RATE_LIMIT_API", "1000/60")
    monkeypatch.setenv("RATE_LIMIT_AUTH", "1000/60")
    monkeypatch.setenv("RATE_LIMIT_UPLOAD", "1000/60")
    for key in ("SMTP_HOST", "SMTP_USERNAME", "SMTP_PASSWORD"):
        monkeypatch.delenv(key, raising=False)
    return Settings()


@pytest.fixture
def client(settings):
    app = create_application(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def container(client) -> ApplicationContainer:
    return client.app.state.container


@pytest.fixture
def persistence(container):
    return container.persistence


@pytest.fixture
def make_user(persistence) -> Callable[..., User]:
    def factory(
        username: str,
        *,
        user_type: UserType = UserType.SUGAR_BABY,
        state: str = "SP",
        status: UserStatus = UserStatus.ACTIVE,
    ) -> User:
        return persistence.create_user(
            email=f"{username}@example.com",
            username=username,
            password_hash="unused",
            user_type=user_type,
            name=username.title(),
            birthdate=date(1995, 5, 10),
            state=state,
            city="Sao Paulo",
            status=status,
        )

    return factory


@pytest.fixture
def bearer(container) -> Callable[[User], Dict[str, str]]:
    def headers(user: User) -> Dict[str, str]:
        return {"Authorization": f"Bearer {container.user_service.create_token(user)}"}

    return headers


@pytest.fixture
def admin_client(client, settings):
    response = client.post(
        "/api/admin/login",
        json={"username": settings.admin_username, "password": settings.admin_password},
    )
    assert response.status_code == 200
    return client


@pytest.fixture
def csrf_headers(admin_client) -> Callable[[], Dict[str, str]]:
    """Fetch a fresh single-use CSRF token for the logged-in admin."""

    def fetch() -> Dict[str, str]:
        response = admin_client.get("/api/admin/csrf")
        assert response.status_code == 200
        return {"X-CSRF-Token": response.json()["csrfToken"]}

    return fetch
