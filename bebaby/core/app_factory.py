from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from ..application.services.admin_auth_service import AdminAuthService
from ..application.services.conversation_service import ConversationService
from ..application.services.moderation_service import ModerationService
from ..application.services.notification_service import NotificationService
from ..application.services.profile_service import ProfileService
from ..application.services.report_service import ReportService
from ..application.services.user_lifecycle_service import UserLifecycleService
from ..domain.errors import AppError, RateLimitError
from ..infrastructure.persistence.sqlite import SQLitePersistence
from ..presentation.api.routers import admin as admin_router
from ..presentation.api.routers import conversations as conversations_router
from ..presentation.api.routers import members as members_router
from ..presentation.api.routers import moderation as moderation_router
from ..presentation.api.routers import notifications as notifications_router
from ..presentation.api.routers import reports as reports_router
from ..presentation.api.routers import users_admin as users_admin_router
from ..services.csrf import CsrfTokenStore
from ..services.email_service import EmailService
from ..services.rate_limiter import FixedWindowRateLimiter
from ..services.security_state import SecurityState
from ..services.user_service import UserService

logger = logging.getLogger(__name__)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title="Bebaby Admin API", lifespan=_create_lifespan(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_exception_handlers(app)

    app.include_router(admin_router.router)
    app.include_router(moderation_router.router)
    app.include_router(users_admin_router.router)
    app.include_router(members_router.router)
    app.include_router(reports_router.router)
    app.include_router(conversations_router.router)
    app.include_router(notifications_router.router)

    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount(settings.upload_url_prefix, StaticFiles(directory=settings.upload_dir), name="uploads")

    @app.get("/api/health")
    async def health() -> Dict[str, Any]:
        container: ApplicationContainer = app.state.container  # type: ignore[attr-defined]
        return {"ok": True, "rateLimiters": container.security.limiter_names}

    return app


def build_container(settings: Settings) -> ApplicationContainer:
    persistence = SQLitePersistence(settings.database_path)
    email_service = EmailService(
        smtp_host=settings.smtp_host,
        smtp_port=settings.smtp_port,
        smtp_username=settings.smtp_username,
        smtp_password=settings.smtp_password,
        from_email=settings.smtp_from_email,
    )
    security = SecurityState(
        CsrfTokenStore(ttl_seconds=settings.csrf_token_ttl),
        {
            name: FixedWindowRateLimiter(window * 1000, limit, name=name)
            for name, (limit, window) in (
                ("api", settings.rate_limit_api),
                ("auth", settings.rate_limit_auth),
                ("upload", settings.rate_limit_upload),
            )
        },
        sweep_interval_seconds=settings.csrf_sweep_seconds,
    )

    return ApplicationContainer(
        settings=settings,
        persistence=persistence,
        security=security,
        email_service=email_service,
        user_service=UserService(
            persistence,
            jwt_secret=settings.jwt_secret,
            jwt_expiration_hours=settings.jwt_expiration_hours,
        ),
        admin_auth_service=AdminAuthService(persistence, settings.admin_username, settings.admin_password),
        moderation_service=ModerationService(persistence, email_service),
        user_lifecycle_service=UserLifecycleService(
            persistence,
            email_service,
            premium_duration_days=settings.premium_duration_days,
        ),
        notification_service=NotificationService(persistence, trip_fanout_limit=settings.trip_fanout_limit),
        report_service=ReportService(
            persistence,
            email_service,
            admin_email=settings.admin_notification_email,
            cooldown_hours=settings.report_cooldown_hours,
        ),
        conversation_service=ConversationService(persistence),
        profile_service=ProfileService(
            persistence,
            upload_dir=settings.upload_dir,
            upload_url_prefix=settings.upload_url_prefix,
            max_upload_bytes=settings.max_upload_bytes,
        ),
    )


def _create_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        container = build_container(settings)
        app.state.container = container  # type: ignore[attr-defined]

        await container.security.start()
        try:
            yield
        finally:
            await container.security.stop()
            container.persistence.close()

    return lifespan


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RateLimitError)
    async def rate_limit_handler(request: Request, exc: RateLimitError) -> JSONResponse:
        headers = {
            "X-RateLimit-Limit": str(exc.limit),
            "X-RateLimit-Remaining": "0",
            "X-RateLimit-Reset": str(exc.reset),
        }
        if exc.retry_after is not None:
            headers["Retry-After"] = str(exc.retry_after)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=headers)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
            return JSONResponse(status_code=exc.status_code, content={"error": "Internal server error"})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(location)
    message = first.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message
