"""Expose constructed client wrappers."""

from .document_store import DocumentStore, DocumentStoreError
from .google_auth import GoogleOAuthClient, OAuthTokenExchangeError
from .sqlite_store import SQLiteDocumentStore
from .youtube import YouTubeClient

__all__ = [
    "DocumentStore",
    "DocumentStoreError",
    "GoogleOAuthClient",
    "OAuthTokenExchangeError",
    "SQLiteDocumentStore",
    "YouTubeClient",
]
