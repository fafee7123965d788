import pytest
from unittest.mock import Mock

from aetheria_engine.application.ports.logger import ILogger
from aetheria_engine.domain.events import GameEnded, TurnFailed, TurnRejected, TurnResolved
from aetheria_engine.infrastructure.event_bus.local_event_bus import LocalEventBus
from aetheria_engine.infrastructure.logging.event_handler import LoggingEventHandler


@pytest.fixture
def logger():
    return Mock(spec=ILogger)


@pytest.fixture
def event_bus(logger):
    bus = LocalEventBus()
    LoggingEventHandler(logger).subscribe(bus)
    return bus


@pytest.mark.asyncio
async def test_resolved_turn_is_logged(event_bus, logger):
    await event_bus.publish(TurnResolved(
        save_id="s1",
        turn_number=3,
        action_text="Walk north",
        narrative="The woods close in.",
        applied_actions=["ADD_LOG", "ADVANCE_TURN"],
    ))

    assert "TURN 3: 'Walk north'" in logger.info.call_args[0][0]
    assert "ADD_LOG, ADVANCE_TURN" in logger.debug.call_args[0][0]


@pytest.mark.asyncio
async def test_failures_rejections_and_endings_are_logged(event_bus, logger):
    await event_bus.publish(TurnFailed(save_id="s1", category="rate_limit", error="429"))
    await event_bus.publish(TurnRejected(save_id="s1", reason="rejected_busy"))
    await event_bus.publish(GameEnded(save_id="s1", turn_number=9, cause="hp_depleted"))

    assert "rate_limit" in logger.warning.call_args[0][0]
    assert "rejected_busy" in logger.debug.call_args[0][0]
    assert "GAME ENDED on turn 9 (hp_depleted)" in logger.info.call_args[0][0]


@pytest.mark.asyncio
async def test_event_bus_only_runs_matching_handlers():
    bus = LocalEventBus()
    calls = []

    async def on_failed(event):
        calls.append(event.name)

    bus.subscribe(TurnFailed, on_failed)
    await bus.publish(TurnRejected(save_id="s1", reason="rejected_empty"))
    await bus.publish(TurnFailed(save_id="s1", category="generic", error="boom"))

    assert calls == ["turn.failed"]
