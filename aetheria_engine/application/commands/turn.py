from typing import Optional

from pydantic import BaseModel, Field


class SubmitActionCommand(BaseModel):
    """
    A Command DTO representing the player's free-text action for one turn.
    Blank text is only accepted while a combat encounter is active.
    """
    text: str = ""


class CombatRollCommand(BaseModel):
    """
    A Command DTO representing the player's attack roll during combat.
    When `roll` is not given the handler rolls a d20 itself.
    """
    roll: Optional[int] = Field(default=None, ge=1, le=20)
