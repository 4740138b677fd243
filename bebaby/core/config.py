import logging
import os
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_DEV_ADMIN_PASSWORD = "admin123"


class Settings:
    """Centralised application configuration sourced from environment variables."""

    def __init__(self) -> None:
        load_dotenv()
        self.environment = os.getenv("APP_ENV", "development").lower()
        self.database_path = Path(os.getenv("DATABASE_PATH", "data/bebaby.db")).resolve()
        self.upload_dir = Path(os.getenv("UPLOAD_DIR", "data/uploads")).resolve()
        self.upload_url_prefix = os.getenv("UPLOAD_URL_PREFIX", "/uploads").rstrip("/")
        self.max_upload_bytes = self._get_int("MAX_UPLOAD_BYTES", default=5 * 1024 * 1024)

        self.admin_username = os.getenv("ADMIN_USERNAME", "admin")
        self.admin_password = os.getenv("ADMIN_PASSWORD") or self._dev_admin_password()
        self.admin_session_max_age = self._get_int("ADMIN_SESSION_MAX_AGE", default=60 * 60 * 24)
        self.csrf_token_ttl = self._get_int("CSRF_TOKEN_TTL", default=60 * 60)

        self.jwt_secret = os.getenv("JWT_SECRET", "change-me")
        self.jwt_expiration_hours = self._get_int("JWT_EXPIRATION_HOURS", default=24 * 7)

        self.rate_limit_api = self._get_rate("RATE_LIMIT_API", default=(100, 60))
        self.rate_limit_auth = self._get_rate("RATE_LIMIT_AUTH", default=(5, 15 * 60))
        self.rate_limit_upload = self._get_rate("RATE_LIMIT_UPLOAD", default=(10, 60))
        self.csrf_sweep_seconds = self._get_int("CSRF_SWEEP_SECONDS", default=5 * 60)
        self.trusted_proxy_hops = self._get_int("TRUSTED_PROXY_HOPS", default=0)

        self.trip_fanout_limit = self._get_int("TRIP_FANOUT_LIMIT", default=500)
        self.premium_duration_days = self._get_int("PREMIUM_DURATION_DAYS", default=30)
        self.report_cooldown_hours = self._get_int("REPORT_COOLDOWN_HOURS", default=24)

        self.smtp_host = os.getenv("SMTP_HOST", "")
        self.smtp_port = self._get_int("SMTP_PORT", default=587)
        self.smtp_username = os.getenv("SMTP_USERNAME", "")
        self.smtp_password = os.getenv("SMTP_PASSWORD", "")
        self.smtp_from_email = os.getenv("SMTP_FROM_EMAIL", "no-reply@bebaby.app")
        self.admin_notification_email = os.getenv("ADMIN_NOTIFICATION_EMAIL", "admin@bebaby.app")

        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            self.cors_allow_origins = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            self.cors_allow_origins = ["http://localhost:3000"]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def _dev_admin_password(self) -> str:
        if self.environment == "production":
            raise RuntimeError("Missing required environment variable: ADMIN_PASSWORD")
        logger.warning("ADMIN_PASSWORD not set; using the development default.")
        return _DEV_ADMIN_PASSWORD

    @staticmethod
    def _get_int(key: str, default: Optional[int] = None) -> int:
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise RuntimeError(f"Missing required environment variable: {key}")
            return default
        try:
            return int(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be an integer") from exc

    @staticmethod
    def _get_rate(key: str, default: Tuple[int, int]) -> Tuple[int, int]:
        """Parse ``requests/window_seconds`` into a ``(limit, window_seconds)`` pair."""
        value = os.getenv(key)
        if value is None:
            return default
        try:
            limit_text, window_text = value.split("/", 1)
            limit, window = int(limit_text), int(window_text)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must look like '<requests>/<seconds>'") from exc
        if limit <= 0 or window <= 0:
            raise RuntimeError(f"Environment variable {key} must use positive numbers")
        return limit, window
