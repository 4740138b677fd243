"""Full admin flow: login, CSRF token, report resolution, token replay."""

from bebaby.domain.models import ReportStatus, UserStatus


def test_admin_blocks_reported_user_and_token_cannot_be_replayed(client, settings, persistence, make_user):
    reporter = make_user("reporter")
    reported = make_user("reported")
    report = persistence.create_report(reporter.id, reported.id, "harassment", None)

    login = client.post(
        "/api/admin/login",
        json={"username": settings.admin_username, "password": settings.admin_password},
    )
    assert login.status_code == 200
    assert client.cookies.get("admin_session") == "authenticated"

    token = client.get("/api/admin/csrf").json()["csrfToken"]
    payload = {"reportId": report.id, "action": "block_user"}

    response = client.put("/api/admin/manage-report", json=payload, headers={"X-CSRF-Token": token})

    assert response.status_code == 200
    assert response.json()["report"]["status"] == "RESOLVED"
    assert persistence.get_report(report.id).status is ReportStatus.RESOLVED
    assert persistence.get_user(reported.id).status is UserStatus.BANNED

    replay = client.put("/api/admin/manage-report", json=payload, headers={"X-CSRF-Token": token})

    assert replay.status_code == 403
    assert replay.json() == {"error": "CSRF token invalid"}


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"ok": True, "rateLimiters": ["api", "auth", "upload"]}
