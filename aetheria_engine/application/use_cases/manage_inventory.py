from aetheria_engine.application.commands.inventory import ItemOperation, ManageItemCommand
from aetheria_engine.application.services.game_store import GameStore
from aetheria_engine.domain.actions import DropItem, EquipItem, UnequipItem
from aetheria_engine.domain.entities import GameState

_ACTIONS = {
    ItemOperation.EQUIP: EquipItem,
    ItemOperation.UNEQUIP: UnequipItem,
    ItemOperation.DROP: DropItem,
}


class ManageItemHandler:
    """
    Handles the ManageItemCommand use case (equip, unequip, drop).
    These happen outside the narrator turn cycle and are applied immediately.
    """

    def __init__(self, game_store: GameStore):
        self._store = game_store

    async def execute(self, command: ManageItemCommand) -> GameState:
        state = self._store.state
        if state.is_game_over:
            raise ValueError("The adventure is over.")

        item = state.player.find_item(command.item_name)
        if item is None:
            raise ValueError(f"You are not carrying '{command.item_name}'.")
        if command.operation == ItemOperation.EQUIP and item.slot is None:
            raise ValueError(f"'{item.name}' cannot be equipped.")

        action_type = _ACTIONS[command.operation]
        return await self._store.dispatch(action_type(name=item.name))
