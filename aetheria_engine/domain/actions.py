from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from aetheria_engine.domain.entities import GameState, Item, LogEntry, Quest, QuestId
from aetheria_engine.domain.value_objects import Direction, TerrainType


class Action(BaseModel):
    """
    Base class for reducer actions.
    An action is an immutable description of one state transition,
    discriminated by its literal `type` field.
    """
    model_config = ConfigDict(frozen=True)

    type: str


class LoadState(Action):
    """Replaces the working state. The payload may be a GameState or a partial/older save dict."""
    type: Literal["LOAD_STATE"] = "LOAD_STATE"
    # Dicts stay raw so partial saves are merged onto defaults, not validated as-is.
    payload: Union[Dict[str, Any], GameState] = Field(union_mode="left_to_right")


class AddLog(Action):
    type: Literal["ADD_LOG"] = "ADD_LOG"
    entry: LogEntry


class AdvanceTurn(Action):
    type: Literal["ADVANCE_TURN"] = "ADVANCE_TURN"


class UpdateStats(Action):
    type: Literal["UPDATE_STATS"] = "UPDATE_STATS"
    changes: Dict[str, int]


class UpdateGold(Action):
    type: Literal["UPDATE_GOLD"] = "UPDATE_GOLD"
    delta: int


class AddItem(Action):
    type: Literal["ADD_ITEM"] = "ADD_ITEM"
    item: Item


class RemoveItem(Action):
    type: Literal["REMOVE_ITEM"] = "REMOVE_ITEM"
    name: str


class DropItem(Action):
    type: Literal["DROP_ITEM"] = "DROP_ITEM"
    name: str


class EquipItem(Action):
    type: Literal["EQUIP_ITEM"] = "EQUIP_ITEM"
    name: str


class UnequipItem(Action):
    type: Literal["UNEQUIP_ITEM"] = "UNEQUIP_ITEM"
    name: str


class SetLocation(Action):
    type: Literal["SET_LOCATION"] = "SET_LOCATION"
    name: str
    description: str = ""


class UpdateNpcMemory(Action):
    type: Literal["UPDATE_NPC_MEMORY"] = "UPDATE_NPC_MEMORY"
    memories: Dict[str, str]


class UpdateReputation(Action):
    type: Literal["UPDATE_REPUTATION"] = "UPDATE_REPUTATION"
    delta: int


class AddJournal(Action):
    type: Literal["ADD_JOURNAL"] = "ADD_JOURNAL"
    text: str


class UpdateQuests(Action):
    type: Literal["UPDATE_QUESTS"] = "UPDATE_QUESTS"
    new_quest: Optional[Quest] = None
    completed_id: Optional[QuestId] = None


class UpdateMap(Action):
    type: Literal["UPDATE_MAP"] = "UPDATE_MAP"
    direction: Direction = Direction.NONE
    terrain: TerrainType = TerrainType.UNKNOWN


class StartCombat(Action):
    type: Literal["START_COMBAT"] = "START_COMBAT"
    name: str
    hp: int = Field(ge=0)
    description: str
    enemy_type: Optional[str] = None


class UpdateCombat(Action):
    type: Literal["UPDATE_COMBAT"] = "UPDATE_COMBAT"
    damage: int


class EndCombat(Action):
    type: Literal["END_COMBAT"] = "END_COMBAT"


class GameOver(Action):
    type: Literal["GAME_OVER"] = "GAME_OVER"

