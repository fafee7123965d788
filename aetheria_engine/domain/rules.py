"""
Derived game values. Nothing here is stored on the state; everything is
recomputed from the stats and the equipped inventory when needed.
"""
from typing import Iterable, List, Optional, Tuple

from aetheria_engine.domain.entities import CharacterStats, EquipmentSlot, Item
from aetheria_engine.domain.value_objects import StatName

XP_PER_LEVEL = 100
MAX_HP_PER_LEVEL = 5
CARRY_CAPACITY_PER_STRENGTH = 2
BASE_ARMOR_CLASS = 10


def equipped_items(inventory: Iterable[Item]) -> List[Item]:
    return [item for item in inventory if item.equipped]


def equipped_bonus(inventory: Iterable[Item], stat: StatName) -> int:
    """Sums the effect values that equipped items apply to `stat`."""
    return sum(
        item.effect.value
        for item in equipped_items(inventory)
        if item.effect is not None and item.effect.stat == stat
    )


def effective_stat(stats: CharacterStats, inventory: Iterable[Item], stat: StatName) -> int:
    return getattr(stats, stat.value) + equipped_bonus(inventory, stat)


def ability_modifier(score: int) -> int:
    return (score - 10) // 2


def armor_class(stats: CharacterStats, inventory: List[Item]) -> int:
    dexterity = effective_stat(stats, inventory, StatName.DEXTERITY)
    return BASE_ARMOR_CLASS + ability_modifier(dexterity) + equipped_bonus(inventory, StatName.DEFENSE)


def equipped_weapon(inventory: Iterable[Item]) -> Optional[Item]:
    return next(
        (item for item in inventory if item.equipped and item.slot == EquipmentSlot.HAND),
        None,
    )


def carried_weight(inventory: Iterable[Item]) -> float:
    return sum(item.weight * item.quantity for item in inventory)


def carry_capacity(stats: CharacterStats, inventory: List[Item]) -> int:
    return effective_stat(stats, inventory, StatName.STRENGTH) * CARRY_CAPACITY_PER_STRENGTH


def is_overencumbered(stats: CharacterStats, inventory: List[Item]) -> bool:
    return carried_weight(inventory) > carry_capacity(stats, inventory)


def xp_threshold(level: int) -> int:
    return level * XP_PER_LEVEL


def apply_level_ups(xp: int, level: int, max_hp: int) -> Tuple[int, int, List[int]]:
    """
    Applies the level-up rule repeatedly until xp is below the next threshold,
    so a single large xp grant can raise several levels.

    Returns the new level, the new max hp and the list of levels reached.
    """
    reached: List[int] = []
    while xp >= xp_threshold(level):
        level += 1
        max_hp += MAX_HP_PER_LEVEL
        reached.append(level)
    return level, max_hp, reached
