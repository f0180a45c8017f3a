"""Services layer - regras de negócio"""

from biggestor.services.admin import BugReportManager, LicenseManager
from biggestor.services.app_data import AppDataService, ClientDeletionImpact
from biggestor.services.assistant import AssistantResult, AssistantService
from biggestor.services.auth import AuthService, AuthState
from biggestor.services.notifications import NotificationCenter, derive_notifications
from biggestor.services.session import SessionManager

__all__ = [
    "AppDataService",
    "ClientDeletionImpact",
    "AuthService",
    "AuthState",
    "SessionManager",
    "NotificationCenter",
    "derive_notifications",
    "AssistantService",
    "AssistantResult",
    "LicenseManager",
    "BugReportManager",
]
