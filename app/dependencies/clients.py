"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from app.clients import (
    DocumentStore,
    GoogleOAuthClient,
    SQLiteDocumentStore,
    YouTubeClient,
)
from app.core.config import get_settings
from app.services import (
    ActivityLog,
    CredentialStore,
    NoteService,
    TokenCipherService,
    TokenManager,
    YouTubeActionService,
)


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_google_oauth_client() -> GoogleOAuthClient:
    """Create a singleton Google OAuth client."""
    settings = _settings()
    return GoogleOAuthClient(settings.google, settings.oauth)


@lru_cache()
def get_document_store() -> DocumentStore:
    """MongoDB when a connection string is configured, SQLite otherwise."""
    settings = _settings()
    if settings.database.mongo_uri:
        from app.clients.mongo_store import MongoDocumentStore

        return MongoDocumentStore(settings.database)
    return SQLiteDocumentStore(settings.database.local_db_path)


@lru_cache()
def get_token_cipher_service() -> TokenCipherService:
    """Provide symmetric encryption helper for token storage."""
    settings = _settings()
    secret = settings.security.token_encryption_secret or settings.google.client_secret
    return TokenCipherService(secret=secret)


@lru_cache()
def get_credential_store() -> CredentialStore:
    settings = _settings()
    return CredentialStore(
        store=get_document_store(),
        google_settings=settings.google,
        token_cipher=get_token_cipher_service(),
    )


@lru_cache()
def get_token_manager() -> TokenManager:
    """Process-wide owner of the OAuth token state.

    Reads the persisted refresh token; the app lifespan resolves it on a worker
    thread before the first request.
    """
    return TokenManager(
        get_google_oauth_client(),
        refresh_token=get_credential_store().load_refresh_token(),
    )


@lru_cache()
def get_youtube_client() -> YouTubeClient:
    return YouTubeClient()


@lru_cache()
def get_activity_log() -> ActivityLog:
    return ActivityLog(get_document_store())


def get_note_service(
    store: Annotated[DocumentStore, Depends(get_document_store)],
    activity_log: Annotated[ActivityLog, Depends(get_activity_log)],
) -> NoteService:
    """Build a note service over the shared store and activity log."""
    return NoteService(store, activity_log)


def get_youtube_action_service(
    youtube_client: Annotated[YouTubeClient, Depends(get_youtube_client)],
    token_manager: Annotated[TokenManager, Depends(get_token_manager)],
    activity_log: Annotated[ActivityLog, Depends(get_activity_log)],
) -> YouTubeActionService:
    """Build the YouTube proxy service using the shared token manager."""
    return YouTubeActionService(
        youtube_client=youtube_client,
        token_manager=token_manager,
        activity_log=activity_log,
    )


__all__ = [
    "get_activity_log",
    "get_credential_store",
    "get_document_store",
    "get_google_oauth_client",
    "get_note_service",
    "get_token_cipher_service",
    "get_token_manager",
    "get_youtube_action_service",
    "get_youtube_client",
]
