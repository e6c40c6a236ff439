"""
MongoDB document store used in deployed environments.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.errors import PyMongoError

from app.clients.document_store import DocumentStoreError
from app.core.config import DatabaseSettings


def _to_mongo(document: Dict[str, Any]) -> Dict[str, Any]:
    stored = dict(document)
    stored["_id"] = stored.pop("id")
    return stored


def _from_mongo(document: Dict[str, Any]) -> Dict[str, Any]:
    restored = dict(document)
    restored["id"] = str(restored.pop("_id"))
    return restored


class MongoDocumentStore:
    """Persist documents in MongoDB collections, using ``id`` as ``_id``."""

    def __init__(self, settings: DatabaseSettings, client: MongoClient | None = None) -> None:
        if client is None:
            if not settings.mongo_uri:
                raise ValueError("MONGO_URI must be configured for the MongoDB store")
            client = MongoClient(settings.mongo_uri, tz_aware=True)
        self._client = client
        self._db = client.get_default_database(default=settings.mongo_database)

    def insert_document(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        if not document.get("id"):
            raise ValueError("Document must include an 'id' key")
        try:
            self._db[collection].insert_one(_to_mongo(document))
        except PyMongoError as exc:
            raise DocumentStoreError(f"Failed to insert into {collection}: {exc}") from exc
        return dict(document)

    def put_document(self, collection: str, document: Dict[str, Any]) -> None:
        if not document.get("id"):
            raise ValueError("Document must include an 'id' key")
        stored = _to_mongo(document)
        try:
            self._db[collection].replace_one({"_id": stored["_id"]}, stored, upsert=True)
        except PyMongoError as exc:
            raise DocumentStoreError(f"Failed to write to {collection}: {exc}") from exc

    def get_document(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        try:
            found = self._db[collection].find_one({"_id": document_id})
        except PyMongoError as exc:
            raise DocumentStoreError(f"Failed to read from {collection}: {exc}") from exc
        return _from_mongo(found) if found else None

    def find_documents(
        self,
        collection: str,
        *,
        search_field: Optional[str] = None,
        search_text: Optional[str] = None,
        sort_field: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        query: Dict[str, Any] = {}
        if search_field and search_text:
            query[search_field] = {"$regex": re.escape(search_text), "$options": "i"}

        try:
            cursor = self._db[collection].find(query)
            if sort_field:
                cursor = cursor.sort(sort_field, DESCENDING if descending else ASCENDING)
            return [_from_mongo(document) for document in cursor]
        except PyMongoError as exc:
            raise DocumentStoreError(f"Failed to query {collection}: {exc}") from exc

    def close(self) -> None:
        self._client.close()


__all__ = ["MongoDocumentStore"]
