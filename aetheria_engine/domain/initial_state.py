import uuid
from typing import List

from aetheria_engine.domain.entities import (
    CharacterStats,
    EquipmentSlot,
    GameState,
    Item,
    ItemType,
    LogEntry,
    PlayerState,
    SaveId,
    WorldMap,
    WorldState,
)
from aetheria_engine.domain.value_objects import (
    Coordinates,
    ItemEffect,
    StatName,
    TerrainType,
    Tile,
)

STARTING_LOCATION = "Crossroads of Echoes"


def _starting_inventory() -> List[Item]:
    return [
        Item(
            id="1",
            name="Rusted Dagger",
            description="Rusty but sharp.",
            type=ItemType.WEAPON,
            weight=1.0,
            slot=EquipmentSlot.HAND,
            effect=ItemEffect(stat=StatName.STRENGTH, value=2),
            equipped=True,
        ),
        Item(
            id="2",
            name="Torn Tunic",
            description="Better than naked.",
            type=ItemType.ARMOR,
            weight=1.5,
            slot=EquipmentSlot.BODY,
            effect=ItemEffect(stat=StatName.DEFENSE, value=1),
            equipped=True,
        ),
        Item(
            id="3",
            name="Dried Biscuit",
            description="Hard as a rock.",
            type=ItemType.CONSUMABLE,
            quantity=2,
            weight=0.1,
        ),
        Item(
            id="4",
            name="Flint & Steel",
            description="Strikes a spark, most of the time.",
            type=ItemType.TOOL,
            weight=0.2,
        ),
    ]


def create_initial_state(character_name: str) -> GameState:
    """
    Builds a brand-new session for the given character.
    This is the only place where starting values are decided.
    """
    spawn = Coordinates(x=0, y=0)
    return GameState(
        id=SaveId(uuid.uuid4().hex),
        player=PlayerState(
            name=character_name,
            stats=CharacterStats(
                hp=20, max_hp=20, xp=0, level=1,
                strength=10, dexterity=10, constitution=10,
                intelligence=10, wisdom=10, charisma=10,
                defense=10, supplies=5,
            ),
            reputation=0,
            gold=10,
            inventory=_starting_inventory(),
            position=spawn,
        ),
        world=WorldState(
            location_name=STARTING_LOCATION,
            location_description="A foggy intersection. A signpost points North to the Whispering Woods.",
            time_of_day="Dusk",
            danger_level=1,
            map=WorldMap(tiles={spawn.key: Tile(type=TerrainType.PLAINS, visited=True)}),
        ),
        game_log=[
            LogEntry.narrator(
                f"Welcome, {character_name}. You stand at the {STARTING_LOCATION} (0,0). "
                "To the North, the Whispering Woods await."
            )
        ],
        turn_count=0,
        is_game_over=False,
    )
