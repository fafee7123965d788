import pytest
from unittest.mock import AsyncMock, Mock

from aetheria_engine.application.ports.logger import ILogger
from aetheria_engine.application.ports.save_repository import (
    ISaveRepository,
    PersistenceUnavailableError,
)
from aetheria_engine.application.services.game_store import GameStore
from aetheria_engine.domain.actions import AddLog, GameOver, RemoveItem, UpdateGold
from aetheria_engine.domain.entities import LogEntry
from aetheria_engine.domain.initial_state import create_initial_state
from aetheria_engine.infrastructure.repositories.in_memory_save_repository import InMemorySaveRepository


@pytest.fixture
def logger():
    return Mock(spec=ILogger)


@pytest.mark.asyncio
async def test_dispatch_saves_new_state_under_its_id(logger):
    """
    Tests the happy path: a real transition replaces the live state and a
    snapshot is written to the save repository keyed by the state's id.
    """
    # 1. ARRANGE
    repo = InMemorySaveRepository()
    initial = create_initial_state("Ayla")
    store = GameStore(save_repository=repo, logger=logger, initial_state=initial)

    # 2. ACT
    new_state = await store.dispatch(UpdateGold(delta=5))

    # 3. ASSERT
    assert store.state is new_state
    assert new_state.player.gold == 15
    saved = await repo.load(initial.id)
    assert saved == new_state
    assert saved is not new_state


@pytest.mark.asyncio
async def test_noop_actions_are_not_saved(logger):
    repo = AsyncMock(spec=ISaveRepository)
    initial = create_initial_state("Ayla")
    store = GameStore(save_repository=repo, logger=logger, initial_state=initial)

    result = await store.dispatch(RemoveItem(name="Aether Core"))

    assert result is initial
    repo.save.assert_not_called()


@pytest.mark.asyncio
async def test_game_over_is_not_saved(logger):
    repo = AsyncMock(spec=ISaveRepository)
    store = GameStore(save_repository=repo, logger=logger, initial_state=create_initial_state("Ayla"))

    new_state = await store.dispatch(GameOver())

    assert new_state.is_game_over is True
    repo.save.assert_not_called()


@pytest.mark.asyncio
async def test_unreachable_save_store_does_not_stop_play(logger):
    """
    Tests that a failing save store only produces a warning: the state
    transition still happens.
    """
    # 1. ARRANGE
    repo = AsyncMock(spec=ISaveRepository)
    repo.save.side_effect = PersistenceUnavailableError("connection refused")
    store = GameStore(save_repository=repo, logger=logger, initial_state=create_initial_state("Ayla"))

    # 2. ACT
    new_state = await store.dispatch(AddLog(entry=LogEntry.player("Look around")))

    # 3. ASSERT
    assert store.state is new_state
    assert new_state.game_log[-1].content == "Look around"
    logger.warning.assert_called_once()


@pytest.mark.asyncio
async def test_offline_store_keeps_playing(logger):
    store = GameStore(save_repository=None, logger=logger)

    new_state = await store.dispatch(UpdateGold(delta=1))

    assert store.is_offline is True
    assert new_state.player.gold == 11


@pytest.mark.asyncio
async def test_dispatch_all_applies_actions_in_order(logger):
    repo = AsyncMock(spec=ISaveRepository)
    store = GameStore(save_repository=repo, logger=logger, initial_state=create_initial_state("Ayla"))

    final = await store.dispatch_all([UpdateGold(delta=-10), UpdateGold(delta=3)])

    assert final.player.gold == 3
    assert repo.save.call_count == 2
