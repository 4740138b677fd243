from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ...domain.errors import StorageError, ValidationError
from ...domain.models import ContentType, PendingContent, User
from ...domain.models.content import MODERATED_TEXT_FIELDS
from ...domain.ports.persistence import PersistenceGateway

logger = logging.getLogger(__name__)

DIRECT_PROFILE_FIELDS = ("name", "state", "city", "education", "profession")

_IMAGE_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


class ProfileService:
    """Member profile edits and photo uploads.

    Free-text fields other members read (``about``, ``looking_for``) and photos are
    held as pending content until an administrator approves them.
    """

    def __init__(
        self,
        persistence: PersistenceGateway,
        *,
        upload_dir: Path,
        upload_url_prefix: str = "/uploads",
        max_upload_bytes: int = 5 * 1024 * 1024,
    ) -> None:
        self._persistence = persistence
        self._upload_dir = upload_dir
        self._upload_url_prefix = upload_url_prefix
        self._max_upload_bytes = max_upload_bytes

    def check_upload_size(self, size: int) -> None:
        if size > self._max_upload_bytes:
            raise ValidationError(f"Image is larger than {self._max_upload_bytes} bytes")

    def update_profile(self, user: User, changes: Dict[str, Any]) -> Tuple[User, List[PendingContent]]:
        direct = {key: value for key, value in changes.items() if key in DIRECT_PROFILE_FIELDS}
        moderated = {key: value for key, value in changes.items() if key in MODERATED_TEXT_FIELDS}
        unknown = set(changes) - set(direct) - set(moderated)
        if unknown:
            raise ValidationError(f"Unsupported profile fields: {', '.join(sorted(unknown))}")

        updated = user
        if direct:
            updated = self._persistence.update_user_profile(user.id, **direct)

        pending: List[PendingContent] = []
        for field, content in moderated.items():
            if content is None:
                continue
            pending.append(
                self._persistence.create_pending_content(
                    user.id, ContentType.TEXT, field=field, content=content
                )
            )
        if pending:
            logger.info("Queued %s profile text edits from %s for moderation", len(pending), user.id)
        return updated, pending

    def upload_photo(self, user: User, data: bytes, content_type: Optional[str]) -> PendingContent:
        media_type = (content_type or "").split(";", 1)[0].strip().lower()
        extension = _IMAGE_EXTENSIONS.get(media_type)
        if extension is None:
            raise ValidationError("Unsupported image type. Use JPEG, PNG or WebP")
        if not data:
            raise ValidationError("Image body is empty")
        self.check_upload_size(len(data))

        name = f"{uuid.uuid4().hex}.{extension}"
        target_dir = self._upload_dir / user.id
        target = target_dir / name
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            with open(target, "xb") as handle:
                handle.write(data)
        except OSError as exc:
            logger.error("Could not store upload for %s: %s", user.id, exc)
            raise StorageError("Could not store the uploaded image") from exc

        url = f"{self._upload_url_prefix}/{user.id}/{name}"
        try:
            item = self._persistence.create_pending_content(user.id, ContentType.PHOTO, photo_url=url)
        except Exception:
            target.unlink(missing_ok=True)
            raise
        logger.info("Stored photo %s for %s pending moderation", item.id, user.id)
        return item
