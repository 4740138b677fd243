from dataclasses import dataclass

from ..application.services.admin_auth_service import AdminAuthService
from ..application.services.conversation_service import ConversationService
from ..application.services.moderation_service import ModerationService
from ..application.services.notification_service import NotificationService
from ..application.services.profile_service import ProfileService
from ..application.services.report_service import ReportService
from ..application.services.user_lifecycle_service import UserLifecycleService
from ..domain.ports.persistence import PersistenceGateway
from ..services.email_service import EmailService
from ..services.security_state import SecurityState
from ..services.user_service import UserService
from .config import Settings


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    persistence: PersistenceGateway
    security: SecurityState
    email_service: EmailService
    user_service: UserService
    admin_auth_service: AdminAuthService
    moderation_service: ModerationService
    user_lifecycle_service: UserLifecycleService
    notification_service: NotificationService
    report_service: ReportService
    conversation_service: ConversationService
    profile_service: ProfileService
