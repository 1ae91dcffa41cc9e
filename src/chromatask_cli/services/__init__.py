"""Services module for Chromatask CLI - Business logic layer."""

from .attachment_service import AttachmentService
from .auth_service import AuthService
from .data_service import DataService
from .preference_service import PreferenceService
from .tag_service import TagService
from .task_service import TaskCollection

__all__ = [
    "TaskCollection",
    "TagService",
    "DataService",
    "AttachmentService",
    "PreferenceService",
    "AuthService",
]
