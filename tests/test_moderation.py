"""Report state machine and pending-content moderation."""

import pytest

from bebaby.domain.errors import ConflictError, NotFoundError, ValidationError
from bebaby.domain.models import (
    ContentStatus,
    ContentType,
    ReportAction,
    ReportStatus,
    UserStatus,
)


@pytest.fixture
def moderation(container):
    return container.moderation_service


@pytest.fixture
def report(persistence, make_user):
    reporter = make_user("reporter")
    reported = make_user("reported")
    return persistence.create_report(reporter.id, reported.id, "fake profile", "Photos are stolen")


class TestReportStateMachine:
    def test_review_keeps_report_pending(self, moderation, persistence, report):
        updated = moderation.manage_report(report.id, "review", "Looking into it")

        assert updated.status is ReportStatus.PENDING
        assert updated.reviewed is True
        assert updated.action_taken == "review"
        assert updated.admin_notes == "Looking into it"
        assert updated.reviewed_at is not None
        assert persistence.get_user(report.reported_id).status is UserStatus.ACTIVE

    def test_block_user_resolves_report_and_bans(self, moderation, persistence, report):
        updated = moderation.manage_report(report.id, "block_user")

        assert updated.status is ReportStatus.RESOLVED
        assert persistence.get_user(report.reported_id).status is UserStatus.BANNED

    def test_delete_user_is_a_soft_delete(self, moderation, persistence, report):
        moderation.manage_report(report.id, "delete_user", "Repeated abuse")

        reported = persistence.get_user(report.reported_id)
        assert reported is not None
        assert reported.status is UserStatus.INACTIVE
        assert reported.status_reason == "Repeated abuse"

    def test_review_then_block(self, moderation, persistence, report):
        moderation.manage_report(report.id, "review")
        updated = moderation.manage_report(report.id, "block_user")

        assert updated.status is ReportStatus.RESOLVED
        assert persistence.get_user(report.reported_id).status is UserStatus.BANNED

    def test_resolved_report_is_terminal(self, moderation, persistence, report):
        moderation.manage_report(report.id, "block_user")

        with pytest.raises(ConflictError):
            moderation.manage_report(report.id, "review")
        assert persistence.get_report(report.id).action_taken == "block_user"

    def test_unknown_action_is_rejected_before_any_write(self, moderation, persistence, report):
        with pytest.raises(ValidationError):
            moderation.manage_report(report.id, "nuke_user")

        unchanged = persistence.get_report(report.id)
        assert unchanged.version == report.version
        assert unchanged.reviewed is False
        assert persistence.get_user(report.reported_id).status is UserStatus.ACTIVE

    def test_unknown_report(self, moderation):
        with pytest.raises(NotFoundError):
            moderation.manage_report("missing", "review")

    def test_stale_version_is_a_conflict(self, persistence, report):
        with pytest.raises(ConflictError):
            persistence.apply_report_action(
                report.id,
                expected_version=report.version + 1,
                action=ReportAction.BLOCK_USER,
                admin_notes=None,
                report_status=ReportStatus.RESOLVED,
                user_status=UserStatus.BANNED,
            )
        assert persistence.get_user(report.reported_id).status is UserStatus.ACTIVE

    def test_reporter_is_notified_once_of_the_outcome(self, moderation, persistence, report):
        moderation.manage_report(report.id, "block_user")

        notifications = persistence.list_notifications(report.reporter_id, 10)
        assert [item.type for item in notifications] == ["report"]

    def test_delete_report_removes_only_the_report(self, moderation, persistence, report):
        moderation.delete_report(report.id)

        assert persistence.get_report(report.id) is None
        assert persistence.get_user(report.reported_id) is not None
        with pytest.raises(NotFoundError):
            moderation.delete_report(report.id)

    def test_list_reports_filters_by_status(self, moderation, report):
        assert [item.id for item in moderation.list_reports("pending")] == [report.id]
        assert moderation.list_reports("RESOLVED") == []
        with pytest.raises(ValidationError):
            moderation.list_reports("closed")


class TestContentModeration:
    def test_approving_text_applies_it_to_the_profile(self, moderation, persistence, make_user):
        owner = make_user("owner")
        item = persistence.create_pending_content(
            owner.id, ContentType.TEXT, field="about", content="I love hiking"
        )

        decided = moderation.moderate_content(item.id, "text", "approve")

        assert decided.status is ContentStatus.APPROVED
        assert persistence.get_user(owner.id).about == "I love hiking"

    def test_rejecting_text_leaves_profile_untouched(self, moderation, persistence, make_user):
        owner = make_user("owner")
        item = persistence.create_pending_content(
            owner.id, ContentType.TEXT, field="about", content="Call me at 555-0100"
        )

        decided = moderation.moderate_content(item.id, "text", "reject")

        assert decided.status is ContentStatus.REJECTED
        assert persistence.get_user(owner.id).about is None

    def test_approving_photo_sets_missing_profile_photo(self, moderation, persistence, make_user):
        owner = make_user("owner")
        item = persistence.create_pending_content(owner.id, ContentType.PHOTO, photo_url="/uploads/o/a.png")

        moderation.moderate_content(item.id, "photo", "approve")

        assert persistence.get_user(owner.id).photo_url == "/uploads/o/a.png"

    @pytest.mark.parametrize("first", ["approve", "reject"])
    def test_decisions_are_terminal(self, moderation, persistence, make_user, first):
        owner = make_user("owner")
        item = persistence.create_pending_content(owner.id, ContentType.PHOTO, photo_url="/uploads/o/b.png")
        moderation.moderate_content(item.id, "photo", first)

        with pytest.raises(ConflictError):
            moderation.moderate_content(item.id, "photo", "approve")

    def test_owner_is_notified(self, moderation, persistence, make_user):
        owner = make_user("owner")
        item = persistence.create_pending_content(owner.id, ContentType.PHOTO, photo_url="/uploads/o/c.png")

        moderation.moderate_content(item.id, "photo", "reject")

        notifications = persistence.list_notifications(owner.id, 10)
        assert len(notifications) == 1
        assert notifications[0].title == "Your photo was rejected"

    def test_type_mismatch_is_not_found(self, moderation, persistence, make_user):
        owner = make_user("owner")
        item = persistence.create_pending_content(owner.id, ContentType.PHOTO, photo_url="/uploads/o/d.png")

        with pytest.raises(NotFoundError):
            moderation.moderate_content(item.id, "text", "approve")

    def test_invalid_content_type_and_action(self, moderation):
        with pytest.raises(ValidationError):
            moderation.moderate_content("any", "video", "approve")
        with pytest.raises(ValidationError):
            moderation.moderate_content("any", "photo", "publish")

    def test_pending_listing_is_grouped(self, moderation, persistence, make_user):
        owner = make_user("owner")
        photo = persistence.create_pending_content(owner.id, ContentType.PHOTO, photo_url="/uploads/o/e.png")
        text = persistence.create_pending_content(owner.id, ContentType.TEXT, field="looking_for", content="Travel")
        decided = persistence.create_pending_content(owner.id, ContentType.PHOTO, photo_url="/uploads/o/f.png")
        moderation.moderate_content(decided.id, "photo", "reject")

        grouped = moderation.list_pending_content()

        assert [item.id for item in grouped["photos"]] == [photo.id]
        assert [item.id for item in grouped["texts"]] == [text.id]


class TestModerationRoutes:
    def test_reports_listing(self, admin_client, report):
        response = admin_client.get("/api/admin/reports")

        assert response.status_code == 200
        body = response.json()
        assert body["reports"][0]["id"] == report.id
        assert body["reports"][0]["status"] == "PENDING"

    def test_unknown_action_returns_400(self, admin_client, csrf_headers, persistence, report):
        response = admin_client.put(
            "/api/admin/manage-report",
            json={"reportId": report.id, "action": "explode"},
            headers=csrf_headers(),
        )

        assert response.status_code == 400
        assert persistence.get_report(report.id).status is ReportStatus.PENDING

    def test_unknown_report_returns_404(self, admin_client, csrf_headers):
        response = admin_client.put(
            "/api/admin/manage-report",
            json={"reportId": "missing", "action": "review"},
            headers=csrf_headers(),
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Report not found"}

    def test_missing_report_id_names_the_field(self, admin_client, csrf_headers):
        response = admin_client.put(
            "/api/admin/manage-report",
            json={"action": "review"},
            headers=csrf_headers(),
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("reportId")

    def test_delete_report(self, admin_client, csrf_headers, persistence, report):
        response = admin_client.request(
            "DELETE",
            "/api/admin/manage-report",
            json={"reportId": report.id},
            headers=csrf_headers(),
        )

        assert response.status_code == 200
        assert persistence.get_report(report.id) is None

    def test_moderate_content_twice(self, admin_client, csrf_headers, persistence, make_user):
        owner = make_user("owner")
        item = persistence.create_pending_content(owner.id, ContentType.TEXT, field="about", content="Hi")
        payload = {"contentId": item.id, "contentType": "text", "action": "approve"}

        first = admin_client.put("/api/admin/moderate-content", json=payload, headers=csrf_headers())
        second = admin_client.put("/api/admin/moderate-content", json=payload, headers=csrf_headers())

        assert first.status_code == 200
        assert first.json()["content"]["status"] == "APPROVED"
        assert second.status_code == 409

    def test_pending_content_listing(self, admin_client, persistence, make_user):
        owner = make_user("owner")
        persistence.create_pending_content(owner.id, ContentType.TEXT, field="about", content="Hello")

        body = admin_client.get("/api/admin/pending-content").json()

        assert body["photos"] == []
        assert body["texts"][0]["content"] == "Hello"
        assert body["texts"][0]["field"] == "about"
