from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from aetheria_engine.domain.entities import Item, Quest
from aetheria_engine.domain.value_objects import Direction, TerrainType


# Data Transfer Objects (DTOs) for the narrator interface.
# These keep the domain independent of the LLM provider's API.

# Largest xp grant a single narrated turn may carry; anything above is a malformed response.
MAX_XP_PER_TURN = 1000


class EncumbranceSnapshot(BaseModel):
    current: float
    max: float
    is_overencumbered: bool


class PlayerSnapshot(BaseModel):
    name: str
    character_class: str
    level: int
    base_stats: Dict[str, int]
    effective_stats: Dict[str, int]
    modifiers: Dict[str, int]
    armor_class: int
    gold: int
    reputation: int
    inventory: List[str]
    encumbrance: EncumbranceSnapshot
    position: Dict[str, int]


class WorldSnapshot(BaseModel):
    location: str
    description: str
    time_of_day: str
    danger_level: int
    map_tile_type: Optional[TerrainType] = None
    known_npcs: List[str] = Field(default_factory=list)


class EnemySnapshot(BaseModel):
    name: Optional[str] = None
    current_hp: Optional[int] = None
    max_hp: Optional[int] = None
    type: Optional[str] = None


class NarratorContext(BaseModel):
    """
    Everything the narrator is told about the current game, in a JSON-serializable shape.
    """
    player: PlayerSnapshot
    world: WorldSnapshot
    active_quests: List[str] = Field(default_factory=list)
    combat_active: bool = False
    enemy_status: Optional[EnemySnapshot] = None
    recent_history: str = ""


class NpcMemoryUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    npc_name: str = Field(alias="npcName")
    memory: str


class NarratorResponse(BaseModel):
    """
    The structured result of one narrated turn.
    Produced by an untrusted service, so it is validated in full before use.
    """
    narrative: str
    hp_change: int
    xp_gained: int = Field(le=MAX_XP_PER_TURN)
    supplies_consumed: int
    gold_change: Optional[int] = None
    items_added: List[Item]
    items_removed_names: List[str]
    new_location_name: Optional[str] = None
    new_location_description: Optional[str] = None
    updated_npc_memories: Optional[List[NpcMemoryUpdate]] = None
    reputation_change: Optional[int] = None
    new_quest: Optional[Quest] = None
    quest_completed_id: Optional[str] = None
    new_journal_entry: Optional[str] = None
    suggested_actions: List[str]
    is_game_over: Optional[bool] = None
    movement_direction: Direction
    current_terrain_type: TerrainType
    combat_start: Optional[bool] = None
    enemy_name: Optional[str] = None
    enemy_desc: Optional[str] = None
    enemy_type: Optional[str] = None
    enemy_hp: Optional[int] = None
    enemy_damage_taken: Optional[int] = None
    combat_ended: Optional[bool] = None


class NarratorError(Exception):
    """Generic failure of the narrator: transport, parsing or schema validation."""


class NarratorConfigurationError(NarratorError):
    """The narrator cannot be used at all, e.g. credentials are missing."""


class NarratorRateLimitError(NarratorError):
    """The narrator refused the request because of its request-rate limits."""


_RATE_LIMIT_MARKERS = ("429", "quota", "resource_exhausted", "rate limit")


def looks_rate_limited(message: str) -> bool:
    """Providers word rate limiting differently; this recognizes the usual signatures."""
    lowered = message.lower()
    return any(marker in lowered for marker in _RATE_LIMIT_MARKERS)


class INarratorService(ABC):
    """
    An interface (Port) for the external narrator that turns a player action
    into narrative text and structured gameplay effects.
    """

    @abstractmethod
    async def generate_turn(self, context: NarratorContext, action_text: str) -> NarratorResponse:
        """
        Narrates the outcome of `action_text` given the current game context.
        Raises a NarratorError subclass on failure.
        """
        pass
