"""
Note storage and keyword search.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional

from app.clients.document_store import DocumentStore, DocumentStoreError
from app.core.errors import ApiError
from app.schemas import Note, NoteCreateRequest
from app.services.activity_log import ActivityLog

logger = logging.getLogger(__name__)

NOTES_COLLECTION = "notes"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class NoteService:
    """Create notes and search them by text."""

    def __init__(
        self,
        store: DocumentStore,
        activity_log: ActivityLog,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._store = store
        self._activity_log = activity_log
        self._clock = clock

    async def create_note(self, request: NoteCreateRequest) -> Note:
        now = self._clock()
        document = {
            "id": uuid.uuid4().hex,
            "videoId": request.video_id,
            "text": request.text,
            "tags": list(request.tags),
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            stored = await asyncio.to_thread(
                self._store.insert_document, NOTES_COLLECTION, document
            )
        except DocumentStoreError as exc:
            logger.error("Error adding note: %s", exc)
            raise ApiError.internal("Failed to add note", details=str(exc)) from exc

        note = Note.model_validate(stored)
        await self._activity_log.try_record("ADD_NOTE", note.model_dump(mode="json", by_alias=True))
        return note

    async def search_notes(self, query: Optional[str] = None) -> List[Note]:
        """All notes, or only those whose text contains ``query`` (any case)."""
        try:
            documents = await asyncio.to_thread(
                self._store.find_documents,
                NOTES_COLLECTION,
                search_field="text" if query else None,
                search_text=query or None,
            )
        except DocumentStoreError as exc:
            logger.error("Error fetching notes: %s", exc)
            raise ApiError.internal("Failed to fetch notes", details=str(exc)) from exc
        return [Note.model_validate(document) for document in documents]


__all__ = ["NoteService", "NOTES_COLLECTION"]
