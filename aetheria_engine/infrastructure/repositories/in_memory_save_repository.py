from typing import Dict, List, Optional

from aetheria_engine.application.ports.save_repository import ISaveRepository
from aetheria_engine.domain.entities import GameState, SaveId


class InMemorySaveRepository(ISaveRepository):
    """
    An in-memory implementation of the ISaveRepository.
    It keeps snapshots in a dictionary keyed by save id, so a later save of
    the same session simply overwrites the earlier one.
    """
    _saves: Dict[str, GameState]

    def __init__(self):
        self._saves = {}

    async def save(self, state: GameState) -> None:
        """
        Stores a copy to ensure the repository owns its snapshot.
        """
        self._saves[state.id] = state.model_copy(deep=True)

    async def load(self, save_id: SaveId) -> Optional[GameState]:
        """
        Returns a copy to prevent mutation of the stored snapshot.
        """
        saved = self._saves.get(save_id)
        return saved.model_copy(deep=True) if saved else None

    async def load_all(self) -> List[GameState]:
        return [saved.model_copy(deep=True) for saved in self._saves.values()]

    def clear(self) -> None:
        """A helper method for tests to clear the repository state."""
        self._saves = {}
