from enum import Enum

from pydantic import BaseModel


class ItemOperation(str, Enum):
    EQUIP = "equip"
    UNEQUIP = "unequip"
    DROP = "drop"


class ManageItemCommand(BaseModel):
    """
    A Command DTO representing a direct inventory manipulation by the player.
    Items are addressed by name.
    """
    item_name: str
    operation: ItemOperation
