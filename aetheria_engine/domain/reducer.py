"""
The state reducer: a pure, total function from (state, action) to a new state.

Handlers never mutate the incoming state. A handler that changes something
works on a deep copy; a handler with nothing to do returns the input object
itself, which callers use to tell a no-op from a real transition.
"""
from typing import Any, Callable, Dict, Type

from pydantic import ValidationError

from aetheria_engine.domain.actions import (
    Action,
    AddItem,
    AddJournal,
    AddLog,
    AdvanceTurn,
    DropItem,
    EndCombat,
    EquipItem,
    GameOver,
    LoadState,
    RemoveItem,
    SetLocation,
    StartCombat,
    UnequipItem,
    UpdateCombat,
    UpdateGold,
    UpdateMap,
    UpdateNpcMemory,
    UpdateQuests,
    UpdateReputation,
    UpdateStats,
)
from aetheria_engine.domain.entities import (
    CharacterStats,
    CombatState,
    EquipmentSlot,
    GameState,
    LogEntry,
)
from aetheria_engine.domain.initial_state import create_initial_state
from aetheria_engine.domain.value_objects import Tile

DEFAULT_CHARACTER_NAME = "Traveler"

# Actions that still apply once the game is over.
_ALLOWED_AFTER_GAME_OVER = (LoadState, AddLog, GameOver)


def _clone(state: GameState) -> GameState:
    return state.model_copy(deep=True)


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively overlays `override` onto `base`. Nested dicts are merged,
    everything else (lists included) is replaced. An explicit None in the
    override never hides a non-None default.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            merged[key] = _deep_merge(current, value)
        elif value is None and current is not None:
            continue
        else:
            merged[key] = value
    return merged


def _load_state(state: GameState, action: LoadState) -> GameState:
    payload = action.payload
    if isinstance(payload, GameState):
        return payload.model_copy(deep=True)

    player = payload.get("player")
    name = player.get("name") if isinstance(player, dict) else None
    try:
        defaults = create_initial_state(name or DEFAULT_CHARACTER_NAME).model_dump()
        return GameState.model_validate(_deep_merge(defaults, payload))
    except ValidationError:
        # An unreadable save leaves the current session untouched.
        return state


def _add_log(state: GameState, action: AddLog) -> GameState:
    new_state = _clone(state)
    new_state.game_log.append(action.entry.model_copy())
    return new_state


def _advance_turn(state: GameState, action: AdvanceTurn) -> GameState:
    new_state = _clone(state)
    new_state.turn_count += 1
    return new_state


def _update_stats(state: GameState, action: UpdateStats) -> GameState:
    # Clamping is the caller's job: the turn decoder computes clamped values.
    changes = {key: value for key, value in action.changes.items() if key in CharacterStats.model_fields}
    if not changes:
        return state
    new_state = _clone(state)
    new_state.player.stats = new_state.player.stats.model_copy(update=changes)
    return new_state


def _update_gold(state: GameState, action: UpdateGold) -> GameState:
    new_state = _clone(state)
    new_state.player.gold = max(0, state.player.gold + action.delta)
    return new_state


def _add_item(state: GameState, action: AddItem) -> GameState:
    new_state = _clone(state)
    existing = new_state.player.find_item(action.item.name)
    if existing:
        existing.quantity += action.item.quantity
    else:
        new_state.player.inventory.append(action.item.model_copy(update={"equipped": False}))
    return new_state


def _remove_item(state: GameState, action: RemoveItem) -> GameState:
    if state.player.find_item(action.name) is None:
        return state
    new_state = _clone(state)
    item = new_state.player.find_item(action.name)
    if item.quantity > 1:
        item.quantity -= 1
    else:
        new_state.player.inventory.remove(item)
    return new_state


def _drop_item(state: GameState, action: DropItem) -> GameState:
    if state.player.find_item(action.name) is None:
        return state
    new_state = _clone(state)
    item = new_state.player.find_item(action.name)
    new_state.player.inventory.remove(item)
    new_state.game_log.append(LogEntry.system(f"You dropped {item.quantity}x {item.name}."))
    return new_state


def _equip_item(state: GameState, action: EquipItem) -> GameState:
    item = state.player.find_item(action.name)
    if item is None or item.slot is None:
        return state
    new_state = _clone(state)
    target = new_state.player.find_item(action.name)
    if target.slot != EquipmentSlot.NONE:
        for other in new_state.player.inventory:
            if other is not target and other.slot == target.slot and other.equipped:
                other.equipped = False
    target.equipped = True
    return new_state


def _unequip_item(state: GameState, action: UnequipItem) -> GameState:
    if state.player.find_item(action.name) is None:
        return state
    new_state = _clone(state)
    new_state.player.find_item(action.name).equipped = False
    return new_state


def _set_location(state: GameState, action: SetLocation) -> GameState:
    new_state = _clone(state)
    new_state.world.location_name = action.name
    new_state.world.location_description = action.description
    return new_state


def _update_npc_memory(state: GameState, action: UpdateNpcMemory) -> GameState:
    new_state = _clone(state)
    new_state.world.npc_memory.update(action.memories)
    return new_state


def _update_reputation(state: GameState, action: UpdateReputation) -> GameState:
    new_state = _clone(state)
    new_state.player.reputation += action.delta
    return new_state


def _add_journal(state: GameState, action: AddJournal) -> GameState:
    new_state = _clone(state)
    new_state.player.journal.append(action.text)
    return new_state


def _update_quests(state: GameState, action: UpdateQuests) -> GameState:
    if action.new_quest is None and action.completed_id is None:
        return state
    new_state = _clone(state)
    if action.new_quest is not None:
        new_state.player.active_quests.append(action.new_quest.model_copy())
    if action.completed_id is not None:
        for quest in new_state.player.active_quests:
            if quest.id == action.completed_id:
                quest.completed = True
    return new_state


def _update_map(state: GameState, action: UpdateMap) -> GameState:
    new_state = _clone(state)
    position = state.player.position.step(action.direction)
    new_state.player.position = position
    new_state.world.map.tiles[position.key] = Tile(type=action.terrain, visited=True)
    return new_state


def _start_combat(state: GameState, action: StartCombat) -> GameState:
    new_state = _clone(state)
    new_state.combat = CombatState(
        is_active=True,
        enemy_name=action.name,
        enemy_hp=action.hp,
        enemy_max_hp=action.hp,
        enemy_description=action.description,
        enemy_type=action.enemy_type,
        round_log=[],
    )
    return new_state


def _update_combat(state: GameState, action: UpdateCombat) -> GameState:
    combat = state.combat
    if not combat.is_active or not combat.enemy_hp:
        return state
    new_state = _clone(state)
    enemy_hp = max(0, combat.enemy_hp - action.damage)
    if combat.enemy_max_hp is not None:
        enemy_hp = min(enemy_hp, combat.enemy_max_hp)
    new_state.combat.enemy_hp = enemy_hp
    new_state.combat.round_log.append(
        f"{combat.enemy_name} takes {action.damage} damage ({enemy_hp} HP left)."
    )
    return new_state


def _end_combat(state: GameState, action: EndCombat) -> GameState:
    new_state = _clone(state)
    new_state.combat = CombatState()
    return new_state


def _game_over(state: GameState, action: GameOver) -> GameState:
    if state.is_game_over:
        return state
    new_state = _clone(state)
    new_state.is_game_over = True
    return new_state


_HANDLERS: Dict[Type[Action], Callable[[GameState, Any], GameState]] = {
    LoadState: _load_state,
    AddLog: _add_log,
    AdvanceTurn: _advance_turn,
    UpdateStats: _update_stats,
    UpdateGold: _update_gold,
    AddItem: _add_item,
    RemoveItem: _remove_item,
    DropItem: _drop_item,
    EquipItem: _equip_item,
    UnequipItem: _unequip_item,
    SetLocation: _set_location,
    UpdateNpcMemory: _update_npc_memory,
    UpdateReputation: _update_reputation,
    AddJournal: _add_journal,
    UpdateQuests: _update_quests,
    UpdateMap: _update_map,
    StartCombat: _start_combat,
    UpdateCombat: _update_combat,
    EndCombat: _end_combat,
    GameOver: _game_over,
}


def reduce(state: GameState, action: Action) -> GameState:
    """
    Applies one action to the state and returns the resulting state.
    Unknown action types, and gameplay actions after the game is over,
    return the input state unchanged.
    """
    if state.is_game_over and not isinstance(action, _ALLOWED_AFTER_GAME_OVER):
        return state
    handler = _HANDLERS.get(type(action))
    if handler is None:
        return state
    return handler(state, action)
