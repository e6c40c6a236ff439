"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_activity_log,
    get_credential_store,
    get_document_store,
    get_google_oauth_client,
    get_note_service,
    get_token_cipher_service,
    get_token_manager,
    get_youtube_action_service,
    get_youtube_client,
)
from .config import SettingsDependency, get_app_settings

__all__ = [
    "SettingsDependency",
    "get_activity_log",
    "get_app_settings",
    "get_credential_store",
    "get_document_store",
    "get_google_oauth_client",
    "get_note_service",
    "get_token_cipher_service",
    "get_token_manager",
    "get_youtube_action_service",
    "get_youtube_client",
]
