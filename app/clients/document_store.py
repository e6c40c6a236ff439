"""Shared contract for the document store backends."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol


class DocumentStoreError(Exception):
    """Raised when a document store backend fails to read or write."""


class DocumentStore(Protocol):
    """Minimal document persistence used by notes, logs and credentials.

    Documents are plain dictionaries keyed by their ``id`` field.
    """

    def insert_document(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def put_document(self, collection: str, document: Dict[str, Any]) -> None:
        ...

    def get_document(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        ...

    def find_documents(
        self,
        collection: str,
        *,
        search_field: Optional[str] = None,
        search_text: Optional[str] = None,
        sort_field: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        """Return documents, optionally filtered and sorted.

        ``search_text`` matches case-insensitively anywhere inside
        ``search_field`` and is taken literally.
        """
        ...


__all__ = ["DocumentStore", "DocumentStoreError"]
