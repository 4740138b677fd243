import logging
import os
from typing import Any, Optional

AUDIT_LOGGER_NAME = "bebaby.audit"

_audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure logging defaults for the application and the access log."""
    resolved = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("uvicorn.access").setLevel(os.getenv("ACCESS_LOG_LEVEL", "WARNING").upper())


def audit(event: str, **details: Any) -> None:
    """Record an administrative or security event as a single key=value line."""
    rendered = " ".join(f"{key}={value!r}" for key, value in sorted(details.items()))
    _audit_logger.info("%s %s", event, rendered)
