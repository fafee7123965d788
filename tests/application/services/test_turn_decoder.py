import pytest
from pydantic import ValidationError

from aetheria_engine.application.ports.narrator_service import (
    MAX_XP_PER_TURN,
    NarratorResponse,
    NpcMemoryUpdate,
)
from aetheria_engine.application.services.turn_decoder import (
    DEFAULT_ENEMY_DESCRIPTION,
    DEFAULT_ENEMY_HP,
    DEFAULT_ENEMY_NAME,
    GAME_OVER_MESSAGE,
    decode_turn,
)
from aetheria_engine.domain.actions import (
    AddLog,
    GameOver,
    StartCombat,
    UpdateMap,
    UpdateNpcMemory,
    UpdateStats,
)
from aetheria_engine.domain.entities import LogSender
from aetheria_engine.domain.initial_state import create_initial_state
from aetheria_engine.domain.value_objects import Direction, TerrainType


def make_response(**overrides) -> NarratorResponse:
    fields = dict(
        narrative="The road is quiet.",
        hp_change=0,
        xp_gained=0,
        supplies_consumed=0,
        items_added=[],
        items_removed_names=[],
        suggested_actions=["Rest"],
        movement_direction=Direction.NONE,
        current_terrain_type=TerrainType.PLAINS,
    )
    fields.update(overrides)
    return NarratorResponse(**fields)


def test_quiet_turn_produces_narration_turn_stats_and_map():
    decoded = decode_turn(create_initial_state("Ayla"), make_response())

    assert [action.type for action in decoded.actions] == [
        "ADD_LOG", "ADVANCE_TURN", "UPDATE_STATS", "UPDATE_MAP",
    ]
    assert decoded.actions[0].entry.sender == LogSender.NARRATOR
    assert decoded.suggestions == ["Rest"]
    assert decoded.is_game_over is False


def test_large_xp_grant_levels_up_twice():
    """
    Tests that 250 xp on a level 1 character reaches level 3, raises max hp
    by 10 and announces each level before the stats are written.
    """
    # 2. ACT
    decoded = decode_turn(create_initial_state("Ayla"), make_response(xp_gained=250))

    # 3. ASSERT
    level_logs = [
        action.entry.content for action in decoded.actions
        if isinstance(action, AddLog) and action.entry.sender == LogSender.SYSTEM
    ]
    assert level_logs == ["LEVEL UP! Level 2.", "LEVEL UP! Level 3."]
    stats = next(action for action in decoded.actions if isinstance(action, UpdateStats)).changes
    assert stats["level"] == 3
    assert stats["max_hp"] == 30
    assert stats["xp"] == 250
    assert decoded.levels_reached == [2, 3]


def test_hp_and_supplies_are_clamped():
    decoded = decode_turn(create_initial_state("Ayla"), make_response(hp_change=50, supplies_consumed=9, xp_gained=-5))

    stats = next(action for action in decoded.actions if isinstance(action, UpdateStats)).changes
    assert stats["hp"] == 20
    assert stats["supplies"] == 0
    assert stats["xp"] == 0


def test_lethal_damage_ends_the_game_last():
    decoded = decode_turn(create_initial_state("Ayla"), make_response(hp_change=-25))

    assert isinstance(decoded.actions[-2], GameOver)
    assert decoded.actions[-1].entry.content == GAME_OVER_MESSAGE
    assert decoded.is_game_over is True
    assert decoded.suggestions == []


def test_narrated_game_over_with_hp_left():
    decoded = decode_turn(create_initial_state("Ayla"), make_response(is_game_over=True))

    assert decoded.is_game_over is True
    assert any(isinstance(action, GameOver) for action in decoded.actions)


def test_combat_start_uses_fallbacks_for_missing_enemy_details():
    decoded = decode_turn(create_initial_state("Ayla"), make_response(combat_start=True, enemy_hp=0))

    start = next(action for action in decoded.actions if isinstance(action, StartCombat))
    assert start.name == DEFAULT_ENEMY_NAME
    assert start.hp == DEFAULT_ENEMY_HP
    assert start.description == DEFAULT_ENEMY_DESCRIPTION


def test_full_response_keeps_action_order():
    """
    Tests the order of a turn that touches everything: items before the
    map, combat after quests and journal.
    """
    # 1. ARRANGE
    response = make_response(
        gold_change=4,
        items_added=[{"name": "Torch", "type": "TOOL", "weight": 0.5}],
        items_removed_names=["Dried Biscuit"],
        new_location_name="Whispering Woods",
        updated_npc_memories=[NpcMemoryUpdate(npcName="Old Hermit", memory="Wary")],
        reputation_change=1,
        new_quest={"id": "q1", "title": "Find the Aether Core"},
        new_journal_entry="Met a hermit.",
        movement_direction=Direction.NORTH,
        current_terrain_type=TerrainType.FOREST,
        combat_start=True,
        enemy_name="Wolf",
        enemy_hp=8,
        enemy_desc="Grey and hungry.",
        enemy_damage_taken=3,
    )

    # 2. ACT
    decoded = decode_turn(create_initial_state("Ayla"), response)

    # 3. ASSERT
    assert [action.type for action in decoded.actions] == [
        "ADD_LOG", "ADVANCE_TURN", "UPDATE_STATS", "UPDATE_GOLD", "ADD_ITEM", "REMOVE_ITEM",
        "SET_LOCATION", "UPDATE_MAP", "UPDATE_NPC_MEMORY", "UPDATE_REPUTATION",
        "UPDATE_QUESTS", "ADD_JOURNAL", "START_COMBAT", "UPDATE_COMBAT",
    ]
    map_action = next(action for action in decoded.actions if isinstance(action, UpdateMap))
    assert map_action.direction == Direction.NORTH
    memory = next(action for action in decoded.actions if isinstance(action, UpdateNpcMemory))
    assert memory.memories == {"Old Hermit": "Wary"}


def test_oversized_xp_grant_is_rejected_before_decoding():
    with pytest.raises(ValidationError):
        make_response(xp_gained=MAX_XP_PER_TURN + 1)


def test_largest_allowed_xp_grant_stays_small():
    decoded = decode_turn(create_initial_state("Ayla"), make_response(xp_gained=MAX_XP_PER_TURN))

    # Thresholds are level * 100, so 1000 xp from level 1 reaches level 11 at most
    assert decoded.levels_reached == list(range(2, 12))
    assert len(decoded.actions) == 14
