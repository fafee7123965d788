from typing import List

from pydantic import BaseModel, Field

from aetheria_engine.application.ports.narrator_service import NarratorResponse
from aetheria_engine.domain.actions import (
    Action,
    AddItem,
    AddJournal,
    AddLog,
    AdvanceTurn,
    EndCombat,
    GameOver,
    RemoveItem,
    SetLocation,
    StartCombat,
    UpdateCombat,
    UpdateGold,
    UpdateMap,
    UpdateNpcMemory,
    UpdateQuests,
    UpdateReputation,
    UpdateStats,
)
from aetheria_engine.domain.entities import GameState, LogEntry, QuestId
from aetheria_engine.domain.rules import apply_level_ups

DEFAULT_ENEMY_NAME = "Unknown Enemy"
DEFAULT_ENEMY_HP = 10
DEFAULT_ENEMY_DESCRIPTION = "A menacing foe."
GAME_OVER_MESSAGE = "GAME OVER."


class DecodedTurn(BaseModel):
    """The ordered reducer actions for one narrated turn, plus what the UI shows next."""
    actions: List[Action] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    is_game_over: bool = False
    levels_reached: List[int] = Field(default_factory=list)


def decode_turn(state: GameState, response: NarratorResponse) -> DecodedTurn:
    """
    Translates a validated narrator response into reducer actions.

    `state` is the snapshot the turn was requested from; every derived value
    (new hp, level-ups, game over) is computed from it, so the whole sequence
    is known before the first action is dispatched.

    The order of the returned actions is significant and must be preserved.
    """
    stats = state.player.stats
    actions: List[Action] = [
        AddLog(entry=LogEntry.narrator(response.narrative)),
        AdvanceTurn(),
    ]

    new_hp = min(stats.max_hp, max(0, stats.hp + response.hp_change))
    new_supplies = max(0, stats.supplies - response.supplies_consumed)
    new_xp = stats.xp + max(0, response.xp_gained)

    new_level, new_max_hp, levels_reached = apply_level_ups(new_xp, stats.level, stats.max_hp)
    for level in levels_reached:
        actions.append(AddLog(entry=LogEntry.system(f"LEVEL UP! Level {level}.")))

    actions.append(UpdateStats(changes={
        "hp": new_hp,
        "supplies": new_supplies,
        "xp": new_xp,
        "level": new_level,
        "max_hp": new_max_hp,
    }))

    if response.gold_change:
        actions.append(UpdateGold(delta=response.gold_change))

    for item in response.items_added:
        actions.append(AddItem(item=item))
    for name in response.items_removed_names:
        actions.append(RemoveItem(name=name))

    if response.new_location_name:
        actions.append(SetLocation(
            name=response.new_location_name,
            description=response.new_location_description or "",
        ))

    # Direction and terrain are both required by the response schema.
    actions.append(UpdateMap(
        direction=response.movement_direction,
        terrain=response.current_terrain_type,
    ))

    if response.updated_npc_memories:
        actions.append(UpdateNpcMemory(memories={
            update.npc_name: update.memory for update in response.updated_npc_memories
        }))

    if response.reputation_change:
        actions.append(UpdateReputation(delta=response.reputation_change))

    if response.new_quest is not None or response.quest_completed_id:
        actions.append(UpdateQuests(
            new_quest=response.new_quest,
            completed_id=QuestId(response.quest_completed_id) if response.quest_completed_id else None,
        ))

    if response.new_journal_entry:
        actions.append(AddJournal(text=response.new_journal_entry))

    if response.combat_start:
        actions.append(StartCombat(
            name=response.enemy_name or DEFAULT_ENEMY_NAME,
            hp=response.enemy_hp if response.enemy_hp and response.enemy_hp > 0 else DEFAULT_ENEMY_HP,
            description=response.enemy_desc or DEFAULT_ENEMY_DESCRIPTION,
            enemy_type=response.enemy_type,
        ))
    if response.enemy_damage_taken:
        actions.append(UpdateCombat(damage=response.enemy_damage_taken))
    if response.combat_ended:
        actions.append(EndCombat())

    is_game_over = new_hp <= 0 or bool(response.is_game_over)
    if is_game_over:
        actions.append(GameOver())
        actions.append(AddLog(entry=LogEntry.system(GAME_OVER_MESSAGE)))

    return DecodedTurn(
        actions=actions,
        suggestions=[] if is_game_over else list(response.suggested_actions),
        is_game_over=is_game_over,
        levels_reached=levels_reached,
    )
