# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""Unit tests for ContextStore"""

import json

import pytest

from focus_client.focus_store import ContextStore
from focus_client.models import FocusStatus, FocusTool


@pytest.fixture
def context_file(tmp_path):
    return tmp_path / "data" / "context.json"


@pytest.fixture
def store(context_file):
    return ContextStore(context_file)


class TestRead:
    """Test read method"""

    def test_missing_file_is_empty(self, store):
        data = store.read()

        assert data.current_focus is None
        assert data.focus_history == []

    def test_corrupt_file_is_empty(self, store, context_file):
        context_file.parent.mkdir(parents=True)
        context_file.write_text("{not json")

        assert store.read().current_focus is None

    def test_reads_wire_format(self, store, context_file, make_focus):
        context_file.parent.mkdir(parents=True)
        context_file.write_text(json.dumps({
            "currentFocus": make_focus("2", "now", status="active"),
            "focusHistory": [make_focus("1", "before")]
        }))

        data = store.read()

        assert data.current_focus.topic == "now"
        assert data.focus_history[0].status == FocusStatus.COMPLETED


class TestSetFocus:
    """Test set_focus method"""

    def test_first_focus(self, store):
        focus = store.set_focus("Write spec")

        assert focus.status == FocusStatus.ACTIVE
        assert focus.context == ""
        assert focus.tool == FocusTool.DESKTOP
        assert focus.id
        assert focus.started_at is not None
        assert store.read().current_focus.to_dict() == focus.to_dict()

    def test_completes_previous_focus(self, store):
        first = store.set_focus("Write spec")
        second = store.set_focus("Review spec", context="with team", tool="code")

        data = store.read()

        assert data.current_focus.id == second.id
        assert data.current_focus.tool == FocusTool.CODE
        assert len(data.focus_history) == 1
        completed = data.focus_history[0]
        assert completed.id == first.id
        assert completed.status == FocusStatus.COMPLETED
        assert completed.completed_at is not None
        assert completed.completed_at >= completed.started_at

    def test_never_two_active(self, store):
        for topic in ("a", "b", "c", "d"):
            store.set_focus(topic)

        data = store.read()
        foci = [data.current_focus] + data.focus_history
        assert sum(1 for focus in foci if focus.is_active) == 1
        assert [focus.topic for focus in data.focus_history] == ["c", "b", "a"]

    def test_ids_are_unique(self, store):
        ids = {store.set_focus(f"topic {i}").id for i in range(20)}
        assert len(ids) == 20

    def test_preserves_other_keys(self, store, context_file):
        context_file.parent.mkdir(parents=True)
        context_file.write_text(json.dumps({"decisions": [{"text": "keep me"}], "currentFocus": None}))

        store.set_focus("Write spec")

        document = json.loads(context_file.read_text())
        assert document["decisions"] == [{"text": "keep me"}]
        assert document["currentFocus"]["topic"] == "Write spec"
        assert document["focusHistory"] == []

    def test_writes_camel_case(self, store, context_file):
        store.set_focus("Write spec")

        document = json.loads(context_file.read_text())
        assert "startedAt" in document["currentFocus"]
        assert "completedAt" not in document["currentFocus"]

    def test_failed_write_leaves_no_temp_file(self, store, context_file):
        store.set_focus("Write spec")
        before = context_file.read_text()

        with pytest.raises(TypeError):
            store._write_atomic({"currentFocus": None, "unserialisable": object()})

        assert context_file.read_text() == before
        assert list(context_file.parent.iterdir()) == [context_file]
