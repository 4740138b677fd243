from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from ...domain.errors import ConflictError, NotFoundError, ValidationError
from ...domain.models import Report, User
from ...domain.ports.persistence import PersistenceGateway
from ...services.email_service import EmailService

logger = logging.getLogger(__name__)


class ReportService:
    """Files member reports for the moderation queue."""

    def __init__(
        self,
        persistence: PersistenceGateway,
        email_service: EmailService,
        *,
        admin_email: str,
        cooldown_hours: int = 24,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._persistence = persistence
        self._email = email_service
        self._admin_email = admin_email
        self._cooldown = timedelta(hours=cooldown_hours)
        self._clock = clock

    def report_user(
        self,
        reporter: User,
        reported_id: str,
        reason: str,
        description: Optional[str] = None,
    ) -> Report:
        if reporter.id == reported_id:
            raise ValidationError("reportedId: you cannot report yourself")
        reported = self._persistence.get_user(reported_id)
        if reported is None:
            raise NotFoundError("Reported user not found")

        since = self._clock() - self._cooldown
        if self._persistence.find_recent_report(reporter.id, reported_id, since):
            raise ConflictError("You already reported this user recently")

        report = self._persistence.create_report(reporter.id, reported_id, reason, description)
        logger.info("Report %s filed by %s against %s", report.id, reporter.id, reported_id)
        self._email.send_new_report_email(
            self._admin_email,
            reporter=f"{reporter.username} ({reporter.id})",
            reported=f"{reported.username} ({reported.id})",
            reason=reason,
            description=description,
        )
        return report
