"""Tests for the view state container and request state union."""

from __future__ import annotations

import dataclasses

import pytest

from autoticket.services.view_state import (
    Error,
    Loading,
    Success,
    ViewStateStore,
)


class TestRequestState:
    def test_kinds(self):
        assert Loading().kind == "loading"
        assert Success().kind == "success"
        assert Error("boom").kind == "error"

    def test_states_are_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Error("boom").message = "other"  # type: ignore[misc]

    def test_success_equality_by_content(self, sample_tickets):
        assert Success(tuple(sample_tickets)) == Success(tuple(sample_tickets))


class TestViewStateStore:
    def test_initial_state_is_loading(self):
        assert isinstance(ViewStateStore().state, Loading)

    def test_set_replaces_state(self):
        store = ViewStateStore()
        store.set(Error("down"))
        assert store.state == Error("down")

    def test_listeners_notified_in_order(self):
        store = ViewStateStore()
        seen: list[str] = []
        store.subscribe(lambda s: seen.append(f"a:{s.kind}"))
        store.subscribe(lambda s: seen.append(f"b:{s.kind}"))
        store.set(Success())
        assert seen == ["a:success", "b:success"]

    def test_unsubscribe(self):
        store = ViewStateStore()
        seen: list[object] = []
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()
        unsubscribe()  # second call is a no-op
        store.set(Success())
        assert seen == []

    def test_failing_listener_does_not_block_others(self, caplog):
        store = ViewStateStore()
        seen: list[object] = []

        def broken(_state: object) -> None:
            raise RuntimeError("renderer crashed")

        store.subscribe(broken)
        store.subscribe(seen.append)
        store.set(Error("x"))
        assert seen == [Error("x")]
        assert "listener" in caplog.text

    def test_clear_listeners(self):
        store = ViewStateStore()
        seen: list[object] = []
        store.subscribe(seen.append)
        store.clear_listeners()
        store.set(Loading())
        assert seen == []
