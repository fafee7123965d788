from abc import ABC, abstractmethod
from typing import List, Optional

from aetheria_engine.domain.entities import GameState, SaveId


class PersistenceUnavailableError(Exception):
    """The save store cannot be reached. Play continues without durability."""


class ISaveRepository(ABC):
    """
    An interface (Port) for persisting and retrieving game session snapshots.
    Snapshots are keyed by the state's own `id`.
    """

    @abstractmethod
    async def save(self, state: GameState) -> None:
        """
        Stores a snapshot of the state, overwriting any previous snapshot
        with the same id.
        """
        pass

    @abstractmethod
    async def load(self, save_id: SaveId) -> Optional[GameState]:
        """
        Retrieves the snapshot with the given id.
        Returns None if no such save exists.
        """
        pass

    @abstractmethod
    async def load_all(self) -> List[GameState]:
        """Retrieves every stored snapshot."""
        pass
