"""Service layer exports."""

from .activity_log import ActivityLog
from .credential_store import CredentialStore
from .notes import NoteService
from .token_cipher import TokenCipherService
from .token_manager import TokenManager, TokenState, TokenStatus
from .youtube_actions import YouTubeActionService

__all__ = [
    "ActivityLog",
    "CredentialStore",
    "NoteService",
    "TokenCipherService",
    "TokenManager",
    "TokenState",
    "TokenStatus",
    "YouTubeActionService",
]
