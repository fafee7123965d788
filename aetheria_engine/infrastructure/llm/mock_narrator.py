import re

from aetheria_engine.application.ports.narrator_service import (
    INarratorService,
    NarratorContext,
    NarratorResponse,
)
from aetheria_engine.domain.value_objects import Direction, TerrainType

_DIRECTION_WORDS = {
    "north": Direction.NORTH,
    "south": Direction.SOUTH,
    "east": Direction.EAST,
    "west": Direction.WEST,
}


class MockNarrator(INarratorService):
    """
    A mock implementation of INarratorService for testing and development.
    It answers every action with a harmless canned turn and follows compass
    words in the action so the map can be explored offline.
    """

    def __init__(self):
        # These can be overridden in tests for different scenarios
        self.canned_narrative = "You {action}. The wind carries distant voices, but nothing stirs."
        self.terrain = TerrainType.PLAINS
        self.calls = 0

    async def generate_turn(self, context: NarratorContext, action_text: str) -> NarratorResponse:
        self.calls += 1
        words = set(re.findall(r"[a-z]+", action_text.lower()))
        direction = next(
            (direction for word, direction in _DIRECTION_WORDS.items() if word in words),
            Direction.NONE,
        )
        return NarratorResponse(
            narrative=self.canned_narrative.format(action=action_text.rstrip(".").lower()),
            hp_change=0,
            xp_gained=5,
            supplies_consumed=1 if direction != Direction.NONE else 0,
            items_added=[],
            items_removed_names=[],
            suggested_actions=["Look around", "Go North", "Rest"],
            movement_direction=direction,
            current_terrain_type=self.terrain,
            enemy_damage_taken=5 if context.combat_active else None,
        )
