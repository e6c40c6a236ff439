"""
Append-only activity log backed by the document store.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from app.clients.document_store import DocumentStore, DocumentStoreError
from app.core.errors import ApiError
from app.schemas import LogEntry

logger = logging.getLogger(__name__)

LOGS_COLLECTION = "logs"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ActivityLog:
    """Records actions and failures; entries are never updated or removed."""

    def __init__(
        self,
        store: DocumentStore,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._store = store
        self._clock = clock

    async def record(self, action: str, details: Optional[Dict[str, Any]] = None) -> LogEntry:
        """Append an entry. Raises ``DocumentStoreError`` if the write fails."""
        document = {
            "id": uuid.uuid4().hex,
            "action": action,
            "details": dict(details or {}),
            "createdAt": self._clock(),
        }
        stored = await asyncio.to_thread(self._store.insert_document, LOGS_COLLECTION, document)
        return LogEntry.model_validate(stored)

    async def try_record(self, action: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Append an entry, logging rather than raising when the store fails."""
        try:
            await self.record(action, details)
        except DocumentStoreError:
            logger.exception("Failed to write activity log entry %s", action)

    async def list_entries(self) -> List[LogEntry]:
        """Return every entry, newest first."""
        try:
            documents = await asyncio.to_thread(
                self._store.find_documents,
                LOGS_COLLECTION,
                sort_field="createdAt",
                descending=True,
            )
        except DocumentStoreError as exc:
            logger.error("Error fetching logs: %s", exc)
            raise ApiError.internal("Failed to fetch logs", details=str(exc)) from exc
        return [LogEntry.model_validate(document) for document in documents]


__all__ = ["ActivityLog", "LOGS_COLLECTION"]
