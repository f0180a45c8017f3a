"""Domain layer - modelos e interfaces sem dependências externas"""

from biggestor.domain.errors import (
    AssistantError,
    AssistantThrottledError,
    AuthProviderError,
    BigGestorError,
    ImportDataError,
    StorageWriteError,
    ValidationError,
)
from biggestor.domain.models import (
    AppSettings,
    AssistantReply,
    Attachment,
    BugReport,
    Client,
    Contract,
    ContractDuration,
    DraftNote,
    DraftType,
    Job,
    JobObservation,
    JobStatus,
    License,
    LicenseStatus,
    Notification,
    Payment,
    ScriptLine,
    ServiceType,
    Task,
    ToolCall,
    User,
)
from biggestor.domain.ports import (
    AuthProvider,
    ContentGenerator,
    DataStore,
    KeyValueStorage,
    Toaster,
)

__all__ = [
    # Models
    "User",
    "Client",
    "Job",
    "JobStatus",
    "ServiceType",
    "Payment",
    "Task",
    "JobObservation",
    "Contract",
    "ContractDuration",
    "DraftNote",
    "DraftType",
    "ScriptLine",
    "Attachment",
    "AppSettings",
    "License",
    "LicenseStatus",
    "BugReport",
    "Notification",
    "ToolCall",
    "AssistantReply",
    # Errors
    "BigGestorError",
    "StorageWriteError",
    "AuthProviderError",
    "ValidationError",
    "ImportDataError",
    "AssistantError",
    "AssistantThrottledError",
    # Ports
    "DataStore",
    "KeyValueStorage",
    "AuthProvider",
    "ContentGenerator",
    "Toaster",
]
