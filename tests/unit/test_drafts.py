"""Unit tests for draft and admin key storage."""

import asyncio
import json

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from troubleshooting_flows.editing.editor import EditorMode, FlowEditor
from troubleshooting_flows.repositories.keyvalue import InMemoryKeyValueStore, SqlKeyValueStore
from troubleshooting_flows.services.drafts import AdminKeyStore, DraftStore


@pytest.fixture
def sql_engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


class TestSqlKeyValueStore:
    """Tests for the SQL-backed key-value store."""

    def test_set_get_delete(self, sql_engine):
        """Test the basic lifecycle of an entry."""
        store = SqlKeyValueStore(engine=sql_engine)

        assert store.get("k") is None
        store.set("k", "one")
        store.set("k", "two")
        assert store.get("k") == "two"

        assert store.delete("k") is True
        assert store.delete("k") is False
        assert store.get("k") is None

    def test_scopes_are_isolated(self, sql_engine):
        """Test two scopes sharing a database."""
        first = SqlKeyValueStore(scope="first", engine=sql_engine)
        second = SqlKeyValueStore(scope="second", engine=sql_engine)

        first.set("k", "1")

        assert second.get("k") is None
        assert first.get("k") == "1"


class TestDraftStore:
    """Tests for debounced draft persistence."""

    def test_writes_immediately_without_event_loop(self, scenario_graph):
        """Test sync callers get a direct write."""
        store = InMemoryKeyValueStore()
        drafts = DraftStore(store)

        drafts.schedule(FlowEditor(scenario_graph))

        assert store.write_count == 1
        assert not drafts.has_pending_write

    @pytest.mark.asyncio
    async def test_debounces_bursts_of_edits(self, scenario_graph):
        """Test a burst of edits produces a single write of the latest state."""
        store = InMemoryKeyValueStore()
        drafts = DraftStore(store, debounce_seconds=0.05)
        editor = FlowEditor(scenario_graph)
        drafts.attach(editor)

        editor.update_node_text("s1", title="One")
        editor.update_node_text("s1", title="Two")
        editor.update_node_text("s1", title="Three")
        assert store.write_count == 0

        await asyncio.sleep(0.15)

        assert store.write_count == 1
        assert drafts.load().graph.nodes["s1"].title == "Three"

    @pytest.mark.asyncio
    async def test_flush(self, scenario_graph):
        """Test flushing writes the pending draft right away."""
        store = InMemoryKeyValueStore()
        drafts = DraftStore(store, debounce_seconds=10)

        drafts.schedule(FlowEditor(scenario_graph))
        assert drafts.has_pending_write
        drafts.flush()

        assert store.write_count == 1
        assert not drafts.has_pending_write

    @pytest.mark.asyncio
    async def test_clear_cancels_pending_write(self, scenario_graph):
        """Test clearing drops both the stored and the pending draft."""
        store = InMemoryKeyValueStore()
        drafts = DraftStore(store, debounce_seconds=0.01)
        drafts.save_now(FlowEditor(scenario_graph))

        drafts.schedule(FlowEditor(scenario_graph))
        drafts.clear()
        await asyncio.sleep(0.05)

        assert drafts.load() is None
        assert store.write_count == 1

    def test_load_builder_draft(self, scenario_graph):
        """Test a builder draft restores the graph and variant."""
        drafts = DraftStore(InMemoryKeyValueStore())
        drafts.save_now(FlowEditor(scenario_graph, strict=True))

        editor = drafts.load()

        assert editor.mode == EditorMode.BUILDER
        assert editor.strict is True
        assert editor.graph == scenario_graph

    def test_load_json_draft(self, scenario_graph):
        """Test a JSON-mode draft keeps the typed text as is."""
        drafts = DraftStore(InMemoryKeyValueStore())
        editor = FlowEditor(scenario_graph)
        editor.edit_json('{"version": 1, "start": "s1"')
        drafts.save_now(editor)

        restored = drafts.load()

        assert restored.mode == EditorMode.JSON
        assert restored.json_text == '{"version": 1, "start": "s1"'

    def test_unreadable_draft_is_ignored(self):
        """Test a corrupt draft loads as nothing."""
        store = InMemoryKeyValueStore()
        drafts = DraftStore(store)

        store.set(drafts.key, "not json")
        assert drafts.load() is None

        store.set(drafts.key, json.dumps({"mode": "builder", "flow": {"start": "x"}}))
        assert drafts.load() is None

    def test_load_without_draft(self):
        """Test loading when nothing was saved."""
        assert DraftStore(InMemoryKeyValueStore()).load() is None


class TestAdminKeyStore:
    """Tests for the saved admin key."""

    def test_save_get_clear(self, sql_engine):
        """Test the key is trimmed, kept and cleared."""
        keys = AdminKeyStore(SqlKeyValueStore(scope="admin", engine=sql_engine))

        assert keys.get() == ""
        keys.save("  secret-key \n")
        assert keys.get() == "secret-key"

        keys.clear()
        assert keys.get() == ""
