import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import NewType, List, Dict, Optional

from pydantic import BaseModel, Field, model_validator

from aetheria_engine.domain.value_objects import Coordinates, ItemEffect, Tile

# Using NewType for semantic clarity in the domain model.
SaveId = NewType('SaveId', str)
QuestId = NewType('QuestId', str)


class ItemType(str, Enum):
    WEAPON = "WEAPON"
    ARMOR = "ARMOR"
    CONSUMABLE = "CONSUMABLE"
    KEY = "KEY"
    ARTIFACT = "ARTIFACT"
    TOOL = "TOOL"


class EquipmentSlot(str, Enum):
    HAND = "hand"
    BODY = "body"
    HEAD = "head"
    ACCESSORY = "accessory"
    NONE = "none"


class QuestType(str, Enum):
    MINOR = "minor"
    MAJOR = "major"
    WORLD = "world"


class LogSender(str, Enum):
    PLAYER = "player"
    NARRATOR = "narrator"
    SYSTEM = "system"


class Item(BaseModel):
    """
    An inventory entry. The name is the identity key used for stacking,
    removal and equipping; two entries never share a name.
    """
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str
    description: str = ""
    type: ItemType
    quantity: int = Field(default=1, ge=1)
    weight: float = Field(default=0.0, ge=0.0)
    slot: Optional[EquipmentSlot] = None
    effect: Optional[ItemEffect] = None
    equipped: bool = False


class CharacterStats(BaseModel):
    """
    Core stats of the player character.
    Clamping of hp and supplies is done by whoever computes the new values.
    """
    hp: int = Field(default=20, ge=0)
    max_hp: int = Field(default=20, ge=1)
    xp: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    strength: int = 10
    dexterity: int = 10
    constitution: int = 10
    intelligence: int = 10
    wisdom: int = 10
    charisma: int = 10
    defense: int = 10
    supplies: int = Field(default=5, ge=0)

    @model_validator(mode="after")
    def _hp_within_max(self) -> "CharacterStats":
        if self.hp > self.max_hp:
            raise ValueError(f"hp {self.hp} exceeds max_hp {self.max_hp}")
        return self


class Quest(BaseModel):
    id: QuestId
    title: str
    description: str = ""
    type: Optional[QuestType] = None
    completed: bool = False


class Companion(BaseModel):
    name: str
    role: str = ""
    status: str = ""


class WorldMap(BaseModel):
    """Discovered tiles keyed by coordinate key ("x,y")."""
    tiles: Dict[str, Tile] = Field(default_factory=dict)


class CombatState(BaseModel):
    """Either inactive (all enemy fields unset) or an active encounter."""
    is_active: bool = False
    enemy_name: Optional[str] = None
    enemy_hp: Optional[int] = None
    enemy_max_hp: Optional[int] = None
    enemy_description: Optional[str] = None
    enemy_type: Optional[str] = None
    round_log: List[str] = Field(default_factory=list)


class LogEntry(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    sender: LogSender
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def player(cls, content: str) -> "LogEntry":
        return cls(sender=LogSender.PLAYER, content=content)

    @classmethod
    def narrator(cls, content: str) -> "LogEntry":
        return cls(sender=LogSender.NARRATOR, content=content)

    @classmethod
    def system(cls, content: str) -> "LogEntry":
        return cls(sender=LogSender.SYSTEM, content=content)


class PlayerState(BaseModel):
    name: str
    character_class: str = "Wanderer"
    stats: CharacterStats = Field(default_factory=CharacterStats)
    reputation: int = 0
    gold: int = Field(default=0, ge=0)
    inventory: List[Item] = Field(default_factory=list)
    companions: List[Companion] = Field(default_factory=list)
    active_quests: List[Quest] = Field(default_factory=list)
    journal: List[str] = Field(default_factory=list)
    position: Coordinates = Field(default_factory=Coordinates)

    def find_item(self, name: str) -> Optional[Item]:
        return next((item for item in self.inventory if item.name == name), None)


class WorldState(BaseModel):
    location_name: str = ""
    location_description: str = ""
    time_of_day: str = ""
    danger_level: int = 1
    # NPC name -> last known disposition
    npc_memory: Dict[str, str] = Field(default_factory=dict)
    map: WorldMap = Field(default_factory=WorldMap)


class GameState(BaseModel):
    """
    The aggregate root for a play session.
    Every nested record is owned by it; only the reducer produces new versions.
    """
    id: SaveId
    player: PlayerState
    world: WorldState = Field(default_factory=WorldState)
    combat: CombatState = Field(default_factory=CombatState)
    game_log: List[LogEntry] = Field(default_factory=list)
    turn_count: int = Field(default=0, ge=0)
    is_game_over: bool = False

    @property
    def turn_number(self) -> int:
        return self.turn_count

    @property
    def current_tile(self) -> Optional[Tile]:
        return self.world.map.tiles.get(self.player.position.key)
