import pytest

from aetheria_engine.domain.initial_state import create_initial_state
from aetheria_engine.infrastructure.repositories.in_memory_save_repository import InMemorySaveRepository


@pytest.mark.asyncio
async def test_save_and_load_returns_independent_copies():
    """
    Tests that the repository owns its snapshots: mutating what was saved
    or what was loaded does not change what is stored.
    """
    # 1. ARRANGE
    repo = InMemorySaveRepository()
    state = create_initial_state("Ayla")
    await repo.save(state)

    # 2. ACT
    state.player.gold = 999
    loaded = await repo.load(state.id)
    loaded.player.name = "Changed"
    reloaded = await repo.load(state.id)

    # 3. ASSERT
    assert reloaded.player.gold == 10
    assert reloaded.player.name == "Ayla"


@pytest.mark.asyncio
async def test_save_overwrites_same_id():
    repo = InMemorySaveRepository()
    state = create_initial_state("Ayla")
    await repo.save(state)

    await repo.save(state.model_copy(update={"turn_count": 4}))

    saves = await repo.load_all()
    assert len(saves) == 1
    assert saves[0].turn_count == 4


@pytest.mark.asyncio
async def test_load_missing_and_clear():
    repo = InMemorySaveRepository()
    await repo.save(create_initial_state("Ayla"))

    repo.clear()

    assert await repo.load("missing") is None
    assert await repo.load_all() == []
