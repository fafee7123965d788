from aetheria_engine.application.ports.narrator_service import (
    EncumbranceSnapshot,
    EnemySnapshot,
    NarratorContext,
    PlayerSnapshot,
    WorldSnapshot,
)
from aetheria_engine.domain import rules
from aetheria_engine.domain.entities import GameState
from aetheria_engine.domain.value_objects import StatName

DEFAULT_HISTORY_WINDOW = 5

ATTRIBUTES = (
    StatName.STRENGTH,
    StatName.DEXTERITY,
    StatName.CONSTITUTION,
    StatName.INTELLIGENCE,
    StatName.WISDOM,
    StatName.CHARISMA,
    StatName.DEFENSE,
)


def build_narrator_context(state: GameState, history_window: int = DEFAULT_HISTORY_WINDOW) -> NarratorContext:
    """
    Summarizes the state for the narrator: stats with equipment applied,
    inventory, encumbrance, surroundings, quests, combat and the last few
    log lines as short-term memory.
    """
    player = state.player
    stats = player.stats
    inventory = player.inventory

    effective = {stat.value: rules.effective_stat(stats, inventory, stat) for stat in ATTRIBUTES}
    modifiers = {
        stat.value: rules.ability_modifier(effective[stat.value])
        for stat in ATTRIBUTES
        if stat != StatName.DEFENSE
    }

    player_snapshot = PlayerSnapshot(
        name=player.name,
        character_class=player.character_class,
        level=stats.level,
        base_stats=stats.model_dump(),
        effective_stats=effective,
        modifiers=modifiers,
        armor_class=rules.armor_class(stats, inventory),
        gold=player.gold,
        reputation=player.reputation,
        inventory=[
            f"{item.name}{' (Equipped)' if item.equipped else ''} (x{item.quantity})"
            for item in inventory
        ],
        encumbrance=EncumbranceSnapshot(
            current=rules.carried_weight(inventory),
            max=rules.carry_capacity(stats, inventory),
            is_overencumbered=rules.is_overencumbered(stats, inventory),
        ),
        position={"x": player.position.x, "y": player.position.y},
    )

    tile = state.current_tile
    world_snapshot = WorldSnapshot(
        location=state.world.location_name,
        description=state.world.location_description,
        time_of_day=state.world.time_of_day,
        danger_level=state.world.danger_level,
        map_tile_type=tile.type if tile else None,
        known_npcs=list(state.world.npc_memory.keys()),
    )

    enemy = None
    if state.combat.is_active:
        enemy = EnemySnapshot(
            name=state.combat.enemy_name,
            current_hp=state.combat.enemy_hp,
            max_hp=state.combat.enemy_max_hp,
            type=state.combat.enemy_type,
        )

    history = state.game_log[-history_window:] if history_window > 0 else []

    return NarratorContext(
        player=player_snapshot,
        world=world_snapshot,
        active_quests=[quest.title for quest in player.active_quests if not quest.completed],
        combat_active=state.combat.is_active,
        enemy_status=enemy,
        recent_history="\n".join(f"{entry.sender.value}: {entry.content}" for entry in history),
    )
