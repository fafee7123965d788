from enum import Enum

from pydantic import BaseModel, ConfigDict


class ImmutableValueObject(BaseModel):
    """
    A base class for value objects to ensure they are immutable.
    Value objects are compared by their values, not their identity.
    """
    model_config = ConfigDict(frozen=True)


class TerrainType(str, Enum):
    TOWN = "TOWN"
    FOREST = "FOREST"
    MOUNTAIN = "MOUNTAIN"
    DUNGEON = "DUNGEON"
    PLAINS = "PLAINS"
    WATER = "WATER"
    UNKNOWN = "UNKNOWN"


class Direction(str, Enum):
    NORTH = "NORTH"
    SOUTH = "SOUTH"
    EAST = "EAST"
    WEST = "WEST"
    NONE = "NONE"


# Unit step on the grid for each compass direction.
DIRECTION_STEPS = {
    Direction.NORTH: (0, 1),
    Direction.SOUTH: (0, -1),
    Direction.EAST: (1, 0),
    Direction.WEST: (-1, 0),
    Direction.NONE: (0, 0),
}


class StatName(str, Enum):
    """Stats an item effect may modify."""
    STRENGTH = "strength"
    DEXTERITY = "dexterity"
    CONSTITUTION = "constitution"
    INTELLIGENCE = "intelligence"
    WISDOM = "wisdom"
    CHARISMA = "charisma"
    DEFENSE = "defense"
    HP = "hp"
    MAX_HP = "max_hp"


class Coordinates(ImmutableValueObject):
    """A position on the unbounded exploration grid. (0, 0) is the spawn point."""
    x: int = 0
    y: int = 0

    @property
    def key(self) -> str:
        return coordinate_key(self.x, self.y)

    def step(self, direction: Direction) -> "Coordinates":
        dx, dy = DIRECTION_STEPS[direction]
        return Coordinates(x=self.x + dx, y=self.y + dy)


class ItemEffect(ImmutableValueObject):
    """A signed modifier an item applies to one stat while equipped."""
    stat: StatName
    value: int


class Tile(ImmutableValueObject):
    """A discovered unit of the world map."""
    type: TerrainType = TerrainType.UNKNOWN
    visited: bool = False


def coordinate_key(x: int, y: int) -> str:
    """Builds the map key for a coordinate pair, e.g. "0,1"."""
    return f"{x},{y}"
