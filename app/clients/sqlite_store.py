"""SQLite-backed substitute for the MongoDB document store."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from app.clients.document_store import DocumentStoreError


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat(timespec="microseconds")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class SQLiteDocumentStore:
    """Document store using a single table keyed by (collection, id)."""

    def __init__(self, db_path: str) -> None:
        self._db_path = Path(db_path)
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS documents (
                        collection TEXT NOT NULL,
                        id TEXT NOT NULL,
                        data TEXT NOT NULL,
                        PRIMARY KEY (collection, id)
                    )
                    """
                )
        except sqlite3.Error as exc:
            raise DocumentStoreError(f"Failed to initialise {self._db_path}: {exc}") from exc

    def insert_document(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        document_id = document.get("id")
        if not document_id:
            raise ValueError("Document must include an 'id' key")

        data_json = json.dumps(document, default=_json_default)
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO documents (collection, id, data) VALUES (?, ?, ?)",
                    (collection, document_id, data_json),
                )
        except sqlite3.Error as exc:
            raise DocumentStoreError(f"Failed to insert into {collection}: {exc}") from exc
        return json.loads(data_json)

    def put_document(self, collection: str, document: Dict[str, Any]) -> None:
        document_id = document.get("id")
        if not document_id:
            raise ValueError("Document must include an 'id' key")

        data_json = json.dumps(document, default=_json_default)
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO documents (collection, id, data)
                    VALUES (?, ?, ?)
                    ON CONFLICT(collection, id) DO UPDATE SET data = excluded.data
                    """,
                    (collection, document_id, data_json),
                )
        except sqlite3.Error as exc:
            raise DocumentStoreError(f"Failed to write to {collection}: {exc}") from exc

    def get_document(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT data FROM documents WHERE collection = ? AND id = ?",
                    (collection, document_id),
                ).fetchone()
        except sqlite3.Error as exc:
            raise DocumentStoreError(f"Failed to read from {collection}: {exc}") from exc
        if not row:
            return None
        return json.loads(row["data"])

    def find_documents(
        self,
        collection: str,
        *,
        search_field: Optional[str] = None,
        search_text: Optional[str] = None,
        sort_field: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        query = "SELECT data FROM documents WHERE collection = ?"
        params: list[Any] = [collection]
        if sort_field:
            direction = "DESC" if descending else "ASC"
            query += f" ORDER BY json_extract(data, ?) {direction}, rowid {direction}"
            params.append(f"$.{sort_field}")
        else:
            query += " ORDER BY rowid"

        try:
            with self._connect() as conn:
                rows = conn.execute(query, params).fetchall()
        except sqlite3.Error as exc:
            raise DocumentStoreError(f"Failed to query {collection}: {exc}") from exc

        documents = [json.loads(row["data"]) for row in rows]
        if search_field and search_text:
            # SQLite's LIKE/lower() only fold ASCII, so filter here.
            needle = search_text.casefold()
            documents = [
                document
                for document in documents
                if needle in str(document.get(search_field) or "").casefold()
            ]
        return documents


__all__ = ["SQLiteDocumentStore"]
