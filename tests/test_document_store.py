"""Tests for the SQLAlchemy document store."""

import pytest
from decimal import Decimal
from sqlalchemy.exc import SQLAlchemyError

from networth.database.base import DocumentStore
from networth.database.factories import create_sqlite_store
from networth.database.models import Document


class TestSQLAlchemyDocumentStore:
    """Tests for SQLAlchemyDocumentStore."""

    def test_is_document_store(self, temp_store):
        assert isinstance(temp_store, DocumentStore)

    def test_read_missing_returns_default(self, temp_store):
        assert temp_store.read("missing") is None
        assert temp_store.read("missing", {}) == {}

    def test_write_and_read(self, temp_store):
        assert temp_store.write("doc", {"a": [1, 2, None]}) is True
        assert temp_store.read("doc") == {"a": [1, 2, None]}

        assert temp_store.write("doc", ["replaced"]) is True
        assert temp_store.read("doc") == ["replaced"]

    def test_write_many(self, temp_store):
        assert temp_store.write_many({"one": 1, "two": {"x": "y"}}) is True

        assert temp_store.keys() == ["one", "two"]
        assert temp_store.read("two") == {"x": "y"}

    def test_write_many_is_all_or_nothing(self, temp_store):
        """Test a document that cannot be serialized stops every write."""
        temp_store.write("one", "before")

        assert temp_store.write_many({"one": "after", "two": Decimal("1")}) is False

        assert temp_store.read("one") == "before"
        assert temp_store.read("two") is None

    def test_delete(self, temp_store):
        temp_store.write("doc", 1)

        assert temp_store.delete("doc") is True
        assert temp_store.delete("doc") is False
        assert temp_store.keys() == []

    def test_delete_many(self, temp_store):
        temp_store.write_many({"one": 1, "two": 2, "three": 3})

        assert temp_store.delete_many(["one", "two", "missing"]) is True
        assert temp_store.keys() == ["three"]

    def test_failed_delete_keeps_every_document(self, temp_store, monkeypatch):
        """Test a failing commit is rolled back and reported instead of raised."""
        temp_store.write_many({"one": 1, "two": 2})

        def failing_commit():
            raise SQLAlchemyError("disk I/O error")

        monkeypatch.setattr(temp_store._get_session(), "commit", failing_commit)

        assert temp_store.delete_many(["one", "two"]) is False
        assert temp_store.delete("one") is False
        monkeypatch.undo()
        assert temp_store.keys() == ["one", "two"]

    def test_invalid_json_returns_default(self, temp_store):
        session = temp_store._get_session()
        session.add(Document(key="broken", payload="{not json"))
        session.commit()

        assert temp_store.read("broken", "fallback") == "fallback"

    def test_second_store_sees_writes(self, temp_store):
        """Test a store opened on the same file reads the latest documents."""
        other = create_sqlite_store(database_path=temp_store.database_path)
        try:
            assert other.read("doc") is None
            temp_store.write("doc", "first")
            assert other.read("doc") == "first"
            temp_store.write("doc", "second")
            assert other.read("doc") == "second"
        finally:
            other.disconnect()


def test_create_sqlite_store_uses_environment(tmp_path, monkeypatch):
    db_path = tmp_path / "env.db"
    monkeypatch.setenv("NETWORTH_DB_PATH", str(db_path))

    store = create_sqlite_store()
    try:
        store.write("doc", 1)
    finally:
        store.disconnect()

    assert db_path.exists()
