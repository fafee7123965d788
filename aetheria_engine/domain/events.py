from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

# Note: Using str for IDs here to avoid circular dependencies with entities
SaveId = str


class DomainEvent(BaseModel, ABC):
    """
    An abstract base class for domain events.
    Represents something significant that has happened during play.
    """
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    @abstractmethod
    def name(self) -> str:
        """A unique, machine-readable name for the event."""
        pass


class TurnRejected(DomainEvent):
    """Event triggered when a submitted turn is refused before reaching the narrator."""
    save_id: SaveId
    reason: str

    @property
    def name(self) -> str:
        return "turn.rejected"


class TurnResolved(DomainEvent):
    """Event triggered after a narrator response has been applied to the state."""
    save_id: SaveId
    turn_number: int
    action_text: str
    narrative: str
    applied_actions: List[str] = Field(default_factory=list)

    @property
    def name(self) -> str:
        return "turn.resolved"


class TurnFailed(DomainEvent):
    """Event triggered when the narrator call fails and the turn is discarded."""
    save_id: SaveId
    category: str  # "configuration", "rate_limit" or "generic"
    error: str

    @property
    def name(self) -> str:
        return "turn.failed"


class GameEnded(DomainEvent):
    """Event triggered when a turn drives the session into the game-over state."""
    save_id: SaveId
    turn_number: int
    cause: Optional[str] = None

    @property
    def name(self) -> str:
        return "game.ended"
