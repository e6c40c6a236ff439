from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from pymongo import DESCENDING
from pymongo.errors import ServerSelectionTimeoutError

from app.clients.document_store import DocumentStoreError
from app.clients.mongo_store import MongoDocumentStore
from app.clients.sqlite_store import SQLiteDocumentStore
from app.core.config import DatabaseSettings


@pytest.fixture()
def sqlite_store(tmp_path) -> SQLiteDocumentStore:
    return SQLiteDocumentStore(str(tmp_path / "nested" / "store.db"))


def test_sqlite_insert_and_get_roundtrip_serializes_datetimes(sqlite_store) -> None:
    created = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    stored = sqlite_store.insert_document("notes", {"id": "n1", "text": "hi", "createdAt": created})

    assert stored["createdAt"] == "2025-01-02T03:04:05.000000+00:00"
    assert sqlite_store.get_document("notes", "n1") == stored
    assert sqlite_store.get_document("notes", "missing") is None


def test_sqlite_insert_rejects_duplicate_ids(sqlite_store) -> None:
    sqlite_store.insert_document("logs", {"id": "same"})

    with pytest.raises(DocumentStoreError):
        sqlite_store.insert_document("logs", {"id": "same"})


def test_sqlite_put_document_upserts(sqlite_store) -> None:
    sqlite_store.put_document("credentials", {"id": "c", "value": 1})
    sqlite_store.put_document("credentials", {"id": "c", "value": 2})

    assert sqlite_store.get_document("credentials", "c") == {"id": "c", "value": 2}


def test_sqlite_search_is_case_insensitive_substring(sqlite_store) -> None:
    for index, text in enumerate(["Café society", "CAFÉ racer", "tea time", None]):
        sqlite_store.insert_document("notes", {"id": f"n{index}", "text": text})

    found = sqlite_store.find_documents("notes", search_field="text", search_text="café")

    assert [document["id"] for document in found] == ["n0", "n1"]


def test_sqlite_sort_descending_by_field(sqlite_store) -> None:
    base = datetime(2025, 1, 1, tzinfo=timezone.utc)
    for offset, document_id in [(1, "t1"), (3, "t3"), (2, "t2")]:
        sqlite_store.insert_document(
            "logs", {"id": document_id, "createdAt": base + timedelta(seconds=offset)}
        )

    found = sqlite_store.find_documents("logs", sort_field="createdAt", descending=True)

    assert [document["id"] for document in found] == ["t3", "t2", "t1"]


def test_sqlite_collections_are_isolated(sqlite_store) -> None:
    sqlite_store.insert_document("notes", {"id": "x"})
    sqlite_store.insert_document("logs", {"id": "x"})

    assert len(sqlite_store.find_documents("notes")) == 1


def _mongo_store() -> tuple[MongoDocumentStore, MagicMock]:
    client = MagicMock()
    database = MagicMock()
    client.get_default_database.return_value = database
    store = MongoDocumentStore(DatabaseSettings(MONGO_URI="mongodb://db/app"), client=client)
    return store, database


def test_mongo_maps_id_and_escapes_search_pattern() -> None:
    store, database = _mongo_store()
    collection = database.__getitem__.return_value
    cursor = MagicMock()
    collection.find.return_value = cursor
    cursor.sort.return_value = [{"_id": "n1", "text": "a+b"}]

    found = store.find_documents(
        "notes", search_field="text", search_text="a+b", sort_field="createdAt", descending=True
    )

    collection.find.assert_called_once_with({"text": {"$regex": r"a\+b", "$options": "i"}})
    cursor.sort.assert_called_once_with("createdAt", DESCENDING)
    assert found == [{"id": "n1", "text": "a+b"}]


def test_mongo_insert_uses_id_as_primary_key() -> None:
    store, database = _mongo_store()
    collection = database.__getitem__.return_value

    store.insert_document("logs", {"id": "e1", "action": "FETCH_VIDEO"})

    collection.insert_one.assert_called_once_with({"_id": "e1", "action": "FETCH_VIDEO"})


def test_mongo_errors_become_document_store_errors() -> None:
    store, database = _mongo_store()
    database.__getitem__.return_value.find_one.side_effect = ServerSelectionTimeoutError("down")

    with pytest.raises(DocumentStoreError):
        store.get_document("credentials", "oauth#google")
