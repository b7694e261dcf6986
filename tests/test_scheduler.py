"""Tests for livability_map.interaction.scheduler."""

import asyncio

import pytest

from livability_map.interaction.scheduler import AsyncioFrameScheduler, FrameHandle


class TestFrameHandle:
    def test_runs_once(self):
        calls = []
        handle = FrameHandle(lambda: calls.append(1))
        handle.run()
        handle.run()
        assert calls == [1]
        assert handle.done
        assert not handle.pending

    def test_cancel_prevents_run(self):
        calls = []
        handle = FrameHandle(lambda: calls.append(1))
        assert handle.cancel() is True
        handle.run()
        assert calls == []
        assert handle.cancelled

    def test_cancel_after_run_is_noop(self):
        handle = FrameHandle(lambda: None)
        handle.run()
        assert handle.cancel() is False
        assert not handle.cancelled


class TestAsyncioFrameScheduler:
    def test_runs_on_next_frame(self):
        calls = []

        async def scenario():
            scheduler = AsyncioFrameScheduler(frame_interval=0.01)
            handle = scheduler.schedule(lambda: calls.append("frame"))
            assert handle.pending
            await asyncio.sleep(0.05)
            return handle

        handle = asyncio.run(scenario())
        assert calls == ["frame"]
        assert handle.done

    def test_cancelled_callback_never_runs(self):
        calls = []

        async def scenario():
            scheduler = AsyncioFrameScheduler(frame_interval=0.01)
            handle = scheduler.schedule(lambda: calls.append("frame"))
            handle.cancel()
            await asyncio.sleep(0.05)

        asyncio.run(scenario())
        assert calls == []

    def test_superseded_callbacks_skip(self):
        calls = []

        async def scenario():
            scheduler = AsyncioFrameScheduler(frame_interval=0.01)
            previous = None
            for i in range(10):
                if previous is not None:
                    previous.cancel()
                previous = scheduler.schedule(lambda i=i: calls.append(i))
            await asyncio.sleep(0.05)

        asyncio.run(scenario())
        assert calls == [9]

    def test_zero_interval(self):
        calls = []

        async def scenario():
            scheduler = AsyncioFrameScheduler(frame_interval=0)
            scheduler.schedule(lambda: calls.append(1))
            await asyncio.sleep(0)
            await asyncio.sleep(0)

        asyncio.run(scenario())
        assert calls == [1]

    def test_requires_running_loop(self):
        with pytest.raises(RuntimeError):
            AsyncioFrameScheduler().schedule(lambda: None)

    def test_negative_interval(self):
        with pytest.raises(ValueError):
            AsyncioFrameScheduler(frame_interval=-1)
