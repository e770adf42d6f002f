"""
Unit tests for event sinks.
"""

import asyncio
import json
import logging

from sync_trigger.core.models import Envelope, Snapshot
from sync_trigger.sinks import CollectingSink, JsonLinesSink, LoggingSink


class TestCollectingSink:
    """Tests for CollectingSink."""

    def test_keeps_order_and_splits_by_type(self):
        sink = CollectingSink()

        async def emit_all():
            await sink.emit("data", Envelope(metadata={}, data=1))
            await sink.emit("data", Envelope(metadata={}, data=2))
            await sink.emit("snapshot", Snapshot(last_updated="x"))

        asyncio.run(emit_all())

        assert [kind for kind, _ in sink.events] == ["data", "data", "snapshot"]
        assert [env.data for env in sink.data_events] == [1, 2]
        assert sink.snapshot_events == [Snapshot(last_updated="x")]

    def test_payloads_are_copied(self):
        sink = CollectingSink()
        snapshot = Snapshot(last_updated="a")

        asyncio.run(sink.emit("snapshot", snapshot))
        snapshot.last_updated = "b"

        assert sink.snapshot_events[0].last_updated == "a"

    def test_clear(self):
        sink = CollectingSink()
        asyncio.run(sink.emit("data", 1))
        sink.clear()
        assert sink.events == []


class TestJsonLinesSink:
    """Tests for JsonLinesSink."""

    def test_writes_one_line_per_event(self, tmp_path):
        path = tmp_path / "out" / "events.jsonl"
        sink = JsonLinesSink(path)

        async def emit_all():
            await sink.emit("data", Envelope(metadata={"oihUid": "o"}, data={"id": 1}))
            await sink.emit("snapshot", Snapshot(last_updated="2024-01-01"))

        asyncio.run(emit_all())
        sink.close()

        lines = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
        assert [line["type"] for line in lines] == ["data", "snapshot"]
        assert lines[0]["payload"] == {"metadata": {"oihUid": "o"}, "data": {"id": 1}}
        assert lines[1]["payload"] == {"lastUpdated": "2024-01-01"}
        assert "emitted_at" in lines[0]

    def test_appends_across_instances(self, tmp_path):
        path = tmp_path / "events.jsonl"
        for value in (1, 2):
            sink = JsonLinesSink(path)
            asyncio.run(sink.emit("data", {"v": value}))
            sink.close()

        assert len(path.read_text(encoding="utf-8").splitlines()) == 2


class TestLoggingSink:
    """Tests for LoggingSink."""

    def test_logs_events(self, caplog):
        sink = LoggingSink(logger=logging.getLogger("tests.sink"))

        with caplog.at_level(logging.INFO, logger="tests.sink"):
            asyncio.run(sink.emit("snapshot", Snapshot(last_updated="2024-01-01")))

        assert 'Emitted snapshot: {"lastUpdated": "2024-01-01"}' in caplog.text
