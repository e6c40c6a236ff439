"""
Resolution and persistence of the long-lived Google refresh token.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from app.clients.document_store import DocumentStore, DocumentStoreError
from app.core.config import GoogleSettings
from app.services.token_cipher import TokenCipherService

logger = logging.getLogger(__name__)

CREDENTIALS_COLLECTION = "credentials"
GOOGLE_CREDENTIAL_ID = "oauth#google"


class CredentialStore:
    """Supplies the refresh token the token manager starts with.

    A refresh token set in configuration always wins. Otherwise the token saved
    by the last OAuth callback is read back from the document store, where it
    is kept encrypted. Access tokens are never written anywhere.
    """

    def __init__(
        self,
        *,
        store: DocumentStore,
        google_settings: GoogleSettings,
        token_cipher: TokenCipherService,
    ) -> None:
        self._store = store
        self._google = google_settings
        self._cipher = token_cipher

    def load_refresh_token(self) -> Optional[str]:
        if self._google.refresh_token:
            return self._google.refresh_token

        try:
            record = self._store.get_document(CREDENTIALS_COLLECTION, GOOGLE_CREDENTIAL_ID)
        except DocumentStoreError as exc:
            logger.warning("Could not load persisted refresh token: %s", exc)
            return None
        if not record or not record.get("refresh_token_encrypted"):
            return None

        try:
            return self._cipher.decrypt(record["refresh_token_encrypted"])
        except ValueError as exc:
            logger.warning("Ignoring persisted refresh token: %s", exc)
            return None

    def save_refresh_token(self, refresh_token: str) -> None:
        """Persist ``refresh_token`` encrypted, replacing any previous one."""
        now = datetime.now(timezone.utc)
        self._store.put_document(
            CREDENTIALS_COLLECTION,
            {
                "id": GOOGLE_CREDENTIAL_ID,
                "provider": "google",
                "refresh_token_encrypted": self._cipher.encrypt(refresh_token),
                "updatedAt": now,
            },
        )


__all__ = ["CredentialStore", "CREDENTIALS_COLLECTION", "GOOGLE_CREDENTIAL_ID"]
