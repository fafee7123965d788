import pytest
from unittest.mock import Mock

from aetheria_engine.application.commands.inventory import ItemOperation, ManageItemCommand
from aetheria_engine.application.ports.logger import ILogger
from aetheria_engine.application.services.game_store import GameStore
from aetheria_engine.application.use_cases.manage_inventory import ManageItemHandler
from aetheria_engine.domain.actions import GameOver
from aetheria_engine.domain.initial_state import create_initial_state


@pytest.fixture
def store():
    return GameStore(save_repository=None, logger=Mock(spec=ILogger), initial_state=create_initial_state("Ayla"))


@pytest.mark.asyncio
async def test_unequip_then_equip(store):
    handler = ManageItemHandler(game_store=store)

    unequipped = await handler.execute(ManageItemCommand(item_name="Rusted Dagger", operation=ItemOperation.UNEQUIP))
    equipped = await handler.execute(ManageItemCommand(item_name="Rusted Dagger", operation=ItemOperation.EQUIP))

    assert unequipped.player.find_item("Rusted Dagger").equipped is False
    assert equipped.player.find_item("Rusted Dagger").equipped is True


@pytest.mark.asyncio
async def test_drop_item(store):
    handler = ManageItemHandler(game_store=store)

    state = await handler.execute(ManageItemCommand(item_name="Dried Biscuit", operation=ItemOperation.DROP))

    assert state.player.find_item("Dried Biscuit") is None
    assert state.game_log[-1].content == "You dropped 2x Dried Biscuit."


@pytest.mark.asyncio
async def test_unknown_item_raises_error(store):
    handler = ManageItemHandler(game_store=store)

    with pytest.raises(ValueError, match="not carrying"):
        await handler.execute(ManageItemCommand(item_name="Aether Core", operation=ItemOperation.DROP))


@pytest.mark.asyncio
async def test_equipping_item_without_slot_raises_error(store):
    handler = ManageItemHandler(game_store=store)

    with pytest.raises(ValueError, match="cannot be equipped"):
        await handler.execute(ManageItemCommand(item_name="Flint & Steel", operation=ItemOperation.EQUIP))


@pytest.mark.asyncio
async def test_inventory_is_locked_after_game_over(store):
    await store.dispatch(GameOver())
    handler = ManageItemHandler(game_store=store)

    with pytest.raises(ValueError, match="over"):
        await handler.execute(ManageItemCommand(item_name="Dried Biscuit", operation=ItemOperation.DROP))
