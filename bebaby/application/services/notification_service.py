from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from ...domain.errors import NotFoundError, ValidationError
from ...domain.models import Notification
from ...domain.ports.persistence import PersistenceGateway

logger = logging.getLogger(__name__)

TRIP_PAGE_SIZE = 100


def trip_dedupe_key(user_id: str, state: str, start: date, end: date) -> str:
    return f"trip:{user_id}:{state}:{start.isoformat()}:{end.isoformat()}"


class NotificationService:
    """Creates and reads in-app notifications, including the trip fan-out."""

    def __init__(self, persistence: PersistenceGateway, *, trip_fanout_limit: int = 500) -> None:
        self._persistence = persistence
        self._trip_fanout_limit = trip_fanout_limit

    def notify_trip(
        self,
        *,
        user_id: str,
        username: str,
        state: str,
        city: str,
        start: date,
        end: date,
    ) -> int:
        """Notify members living in ``state`` that ``username`` is visiting.

        Every notification carries a dedupe key derived from the announcing user,
        state and dates, so announcing the same trip twice notifies nobody twice.
        At most ``trip_fanout_limit`` members are considered.

        Returns the number of notifications created by this call.
        """
        if start > end:
            raise ValidationError("end: must not be before start")

        key = trip_dedupe_key(user_id, state, start, end)
        title = "A member is visiting your region!"
        message = (
            f"{username} will be in {city} ({state}) from {start:%d/%m/%Y} to {end:%d/%m/%Y}. "
            "How about saying hello?"
        )

        created = 0
        seen = 0
        offset = 0
        while seen < self._trip_fanout_limit:
            page_size = min(TRIP_PAGE_SIZE, self._trip_fanout_limit - seen)
            targets = self._persistence.list_users_by_state(
                state, exclude_user_id=user_id, limit=page_size, offset=offset
            )
            if not targets:
                break
            for target in targets:
                if self._persistence.create_notification(
                    target.id, title=title, message=message, type="trip", dedupe_key=key
                ):
                    created += 1
            seen += len(targets)
            offset += len(targets)
            if len(targets) < page_size:
                break

        if seen >= self._trip_fanout_limit:
            logger.warning("Trip fan-out for %s in %s stopped at the limit of %s members.", user_id, state, seen)
        logger.info("Trip announcement by %s to %s: %s notifications created.", user_id, state, created)
        return created

    def notify(self, user_id: str, *, title: str, message: str, type: str) -> Optional[Notification]:
        return self._persistence.create_notification(user_id, title=title, message=message, type=type)

    def list_for_user(self, user_id: str, limit: int = 50, offset: int = 0) -> List[Notification]:
        return self._persistence.list_notifications(user_id, limit, offset)

    def mark_read(self, user_id: str, notification_id: str) -> None:
        if not self._persistence.mark_notification_read(notification_id, user_id):
            raise NotFoundError("Notification not found")

    def mark_all_read(self, user_id: str) -> int:
        return self._persistence.mark_all_notifications_read(user_id)
