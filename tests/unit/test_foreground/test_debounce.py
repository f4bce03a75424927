"""Tests for the trailing-edge debouncer."""

from __future__ import annotations

import asyncio
import logging

import pytest

from habit_reminders.foreground.debounce import Debouncer


@pytest.mark.unit
class TestDebouncer:
    async def test_burst_runs_once_with_latest_arguments(self):
        calls = []
        debouncer = Debouncer(0.05, calls.append)

        debouncer.trigger("v1")
        debouncer.trigger("v2")
        debouncer.trigger("v3")
        assert debouncer.pending

        await asyncio.sleep(0.15)

        assert calls == ["v3"]
        assert not debouncer.pending

    async def test_separate_bursts_run_separately(self):
        calls = []
        debouncer = Debouncer(0.02, calls.append)

        debouncer.trigger(1)
        await asyncio.sleep(0.08)
        debouncer.trigger(2)
        await asyncio.sleep(0.08)

        assert calls == [1, 2]

    async def test_cancel(self):
        calls = []
        debouncer = Debouncer(0.02, calls.append)

        debouncer.trigger(1)
        debouncer.cancel()
        await asyncio.sleep(0.06)

        assert calls == []

    async def test_coroutine_callback(self):
        done = asyncio.Event()

        async def callback(value):
            assert value == "x"
            done.set()

        Debouncer(0.01, callback).trigger("x")

        await asyncio.wait_for(done.wait(), timeout=1)

    async def test_callback_errors_are_logged(self, caplog):
        def callback():
            raise ValueError("boom")

        debouncer = Debouncer(0.01, callback)

        with caplog.at_level(logging.ERROR):
            debouncer.trigger()
            await asyncio.sleep(0.05)

        assert "Debounced callback failed" in caplog.text
