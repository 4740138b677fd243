from fastapi import Depends, Request

from .container import ApplicationContainer


def get_container(request: Request) -> ApplicationContainer:
    container = getattr(request.app.state, "container", None)
    if not container:
        raise RuntimeError("Application container not initialised.")
    return container


def get_settings(container: ApplicationContainer = Depends(get_container)):
    return container.settings


def get_security_state(container: ApplicationContainer = Depends(get_container)):
    return container.security


def get_user_service(container: ApplicationContainer = Depends(get_container)):
    return container.user_service


def get_admin_auth_service(container: ApplicationContainer = Depends(get_container)):
    return container.admin_auth_service


def get_moderation_service(container: ApplicationContainer = Depends(get_container)):
    return container.moderation_service


def get_user_lifecycle_service(container: ApplicationContainer = Depends(get_container)):
    return container.user_lifecycle_service


def get_notification_service(container: ApplicationContainer = Depends(get_container)):
    return container.notification_service


def get_report_service(container: ApplicationContainer = Depends(get_container)):
    return container.report_service


def get_conversation_service(container: ApplicationContainer = Depends(get_container)):
    return container.conversation_service


def get_profile_service(container: ApplicationContainer = Depends(get_container)):
    return container.profile_service
