import asyncio
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from quizdeck.timers import AsyncioScheduler, ManualScheduler


def test_call_later_fires_once_when_due():
    scheduler = ManualScheduler()
    fired = []
    scheduler.call_later(1.0, lambda: fired.append(scheduler.now()))

    scheduler.advance(0.5)
    assert fired == []
    scheduler.advance(0.5)
    assert fired == [1.0]
    scheduler.advance(5.0)
    assert fired == [1.0]
    assert scheduler.now() == 6.0


def test_callbacks_fire_in_due_order():
    scheduler = ManualScheduler()
    fired = []
    scheduler.call_later(0.3, lambda: fired.append("late"))
    scheduler.call_later(0.1, lambda: fired.append("early"))
    scheduler.call_later(0.3, lambda: fired.append("late-second"))

    scheduler.advance(1.0)
    assert fired == ["early", "late", "late-second"]


def test_cancelled_task_never_fires():
    scheduler = ManualScheduler()
    fired = []
    handle = scheduler.call_later(0.2, lambda: fired.append(True))
    handle.cancel()
    handle.cancel()

    scheduler.advance(1.0)
    assert fired == []
    assert scheduler.pending == 0


def test_call_every_repeats_until_cancelled():
    scheduler = ManualScheduler()
    ticks = []
    handle = scheduler.call_every(0.5, lambda: ticks.append(scheduler.now()))

    scheduler.advance(1.6)
    assert ticks == [0.5, 1.0, 1.5]

    handle.cancel()
    scheduler.advance(2.0)
    assert len(ticks) == 3
    assert scheduler.pending == 0


def test_call_every_can_cancel_itself():
    scheduler = ManualScheduler()
    ticks = []

    def tick():
        ticks.append(scheduler.now())
        if len(ticks) == 2:
            handle.cancel()

    handle = scheduler.call_every(1.0, tick)
    scheduler.advance(10.0)
    assert ticks == [1.0, 2.0]


def test_call_every_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        ManualScheduler().call_every(0, lambda: None)


def test_asyncio_scheduler_runs_and_cancels_on_loop():
    async def scenario():
        scheduler = AsyncioScheduler()
        fired = []
        scheduler.call_later(0.01, lambda: fired.append("kept"))
        dropped = scheduler.call_later(0.01, lambda: fired.append("dropped"))
        dropped.cancel()
        ticker = scheduler.call_every(0.01, lambda: fired.append("tick"))
        await asyncio.sleep(0.1)
        ticker.cancel()
        count = fired.count("tick")
        await asyncio.sleep(0.05)
        return fired, count

    fired, count = asyncio.run(scenario())
    assert "kept" in fired
    assert "dropped" not in fired
    assert count >= 2
    assert fired.count("tick") == count
