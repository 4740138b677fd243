from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ...core.logging import audit
from ...domain.errors import ConflictError, NotFoundError, StorageError, ValidationError
from ...domain.models import (
    ContentStatus,
    ContentType,
    ModerationAction,
    PendingContent,
    Report,
    ReportAction,
    ReportStatus,
    UserStatus,
)
from ...domain.ports.persistence import PersistenceGateway
from ...services.email_service import EmailService

logger = logging.getLogger(__name__)

# action -> (report status after the action, reported user status or None to leave it)
_REPORT_TRANSITIONS = {
    ReportAction.REVIEW: (ReportStatus.PENDING, None),
    ReportAction.BLOCK_USER: (ReportStatus.RESOLVED, UserStatus.BANNED),
    ReportAction.DELETE_USER: (ReportStatus.RESOLVED, UserStatus.INACTIVE),
}

_CONTENT_TRANSITIONS = {
    ModerationAction.APPROVE: ContentStatus.APPROVED,
    ModerationAction.REJECT: ContentStatus.REJECTED,
}


def parse_report_action(value: str) -> ReportAction:
    try:
        return ReportAction(value)
    except ValueError as exc:
        allowed = ", ".join(item.value for item in ReportAction)
        raise ValidationError(f"Invalid action. Expected one of: {allowed}") from exc


def parse_content_type(value: str) -> ContentType:
    try:
        return ContentType(value)
    except ValueError as exc:
        raise ValidationError('Content type must be "photo" or "text"') from exc


def parse_moderation_action(value: str) -> ModerationAction:
    try:
        return ModerationAction(value)
    except ValueError as exc:
        raise ValidationError('Action must be "approve" or "reject"') from exc


class ModerationService:
    """Applies administrator decisions to reports and content awaiting review."""

    def __init__(self, persistence: PersistenceGateway, email_service: EmailService) -> None:
        self._persistence = persistence
        self._email = email_service

    # Reports ----------------------------------------------------------------
    def list_reports(self, status: Optional[str] = None) -> List[Report]:
        parsed: Optional[ReportStatus] = None
        if status:
            try:
                parsed = ReportStatus(status.upper())
            except ValueError as exc:
                raise ValidationError("status: must be PENDING or RESOLVED") from exc
        return self._persistence.list_reports(parsed)

    def manage_report(
        self,
        report_id: str,
        action: str,
        admin_notes: Optional[str] = None,
        *,
        actor: str = "admin",
    ) -> Report:
        parsed = parse_report_action(action)
        report = self._persistence.get_report(report_id)
        if report is None:
            raise NotFoundError("Report not found")
        if report.status is ReportStatus.RESOLVED:
            raise ConflictError("Report is already resolved")

        report_status, user_status = _REPORT_TRANSITIONS[parsed]
        updated = self._persistence.apply_report_action(
            report_id,
            expected_version=report.version,
            action=parsed,
            admin_notes=admin_notes,
            report_status=report_status,
            user_status=user_status,
        )
        audit(
            "report.action",
            report_id=report_id,
            action=parsed.value,
            reported_id=updated.reported_id,
            status=updated.status.value,
            actor=actor,
        )
        if user_status is not None:
            self._announce_outcome(updated, parsed, admin_notes)
        return updated

    def delete_report(self, report_id: str, *, actor: str = "admin") -> None:
        if not self._persistence.delete_report(report_id):
            raise NotFoundError("Report not found")
        audit("report.deleted", report_id=report_id, actor=actor)

    def _announce_outcome(self, report: Report, action: ReportAction, admin_notes: Optional[str]) -> None:
        reported = self._persistence.get_user(report.reported_id)
        if reported is not None:
            self._email.send_account_status_email(
                reported.email,
                blocked=action is ReportAction.BLOCK_USER,
                reason=admin_notes,
            )
        try:
            self._persistence.create_notification(
                report.reporter_id,
                title="Your report was resolved",
                message="Thank you for your report. Our team reviewed it and took action.",
                type="report",
                dedupe_key=f"report:{report.id}",
            )
        except StorageError:
            logger.exception("Could not notify reporter %s about report %s", report.reporter_id, report.id)

    # Pending content --------------------------------------------------------
    def list_pending_content(self) -> Dict[str, List[PendingContent]]:
        return {
            "photos": self._persistence.list_pending_content(ContentType.PHOTO),
            "texts": self._persistence.list_pending_content(ContentType.TEXT),
        }

    def moderate_content(
        self,
        content_id: str,
        content_type: str,
        action: str,
        *,
        actor: str = "admin",
    ) -> PendingContent:
        parsed_type = parse_content_type(content_type)
        parsed_action = parse_moderation_action(action)

        item = self._persistence.get_pending_content(content_id)
        if item is None or item.content_type is not parsed_type:
            raise NotFoundError("Content not found")
        if item.is_terminal:
            raise ConflictError("Content was already moderated")

        decided = self._persistence.decide_content(content_id, _CONTENT_TRANSITIONS[parsed_action])
        audit(
            "content.moderated",
            content_id=content_id,
            content_type=parsed_type.value,
            status=decided.status.value,
            owner_id=decided.user_id,
            actor=actor,
        )
        subject = "photo" if parsed_type is ContentType.PHOTO else "profile text"
        verdict = "approved" if decided.status is ContentStatus.APPROVED else "rejected"
        try:
            self._persistence.create_notification(
                decided.user_id,
                title=f"Your {subject} was {verdict}",
                message=f"An administrator {verdict} your {subject}.",
                type="moderation",
                dedupe_key=f"moderation:{decided.id}",
            )
        except StorageError:
            logger.exception("Could not notify %s about moderated content %s", decided.user_id, decided.id)
        return decided
