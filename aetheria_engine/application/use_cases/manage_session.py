from typing import List, Optional

from aetheria_engine.application.commands.session import LoadSessionCommand, StartSessionCommand
from aetheria_engine.application.ports.logger import ILogger
from aetheria_engine.application.ports.save_repository import (
    ISaveRepository,
    PersistenceUnavailableError,
)
from aetheria_engine.application.services.game_store import GameStore
from aetheria_engine.application.use_cases.resolve_turn import TurnResolver
from aetheria_engine.domain.actions import LoadState
from aetheria_engine.domain.entities import GameState
from aetheria_engine.domain.initial_state import create_initial_state


class StartSessionHandler:
    """
    Handles the StartSessionCommand use case.
    Replaces whatever is loaded (including a finished game) with a fresh character.
    """

    def __init__(self, game_store: GameStore, turn_resolver: TurnResolver):
        self._store = game_store
        self._resolver = turn_resolver

    async def execute(self, command: StartSessionCommand) -> GameState:
        state = create_initial_state(command.character_name.strip())
        await self._store.dispatch(LoadState(payload=state))
        self._resolver.reset_suggestions()
        return self._store.state


class LoadSessionHandler:
    """
    Handles the LoadSessionCommand use case.
    1. Fetches the snapshot from the save repository.
    2. Loads it through LOAD_STATE, which fills in fields missing from older saves.
    """

    def __init__(
        self,
        game_store: GameStore,
        save_repository: Optional[ISaveRepository],
        turn_resolver: TurnResolver,
    ):
        self._store = game_store
        self._repo = save_repository
        self._resolver = turn_resolver

    async def execute(self, command: LoadSessionCommand) -> GameState:
        if self._repo is None:
            raise ValueError("Saved games are not available in offline mode.")
        try:
            saved = await self._repo.load(command.save_id)
        except PersistenceUnavailableError as e:
            raise ValueError(f"Could not reach the save store: {e}") from e
        if saved is None:
            raise ValueError(f"Save with id '{command.save_id}' not found.")

        await self._store.dispatch(LoadState(payload=saved))
        if self._store.state.id != saved.id:
            raise ValueError(f"Save with id '{command.save_id}' could not be loaded.")
        self._resolver.reset_suggestions()
        return self._store.state


class ListSavesHandler:
    """Lists the saved sessions a player can resume. Empty when offline."""

    def __init__(self, save_repository: Optional[ISaveRepository], logger: ILogger):
        self._repo = save_repository
        self._logger = logger

    async def execute(self) -> List[GameState]:
        if self._repo is None:
            return []
        try:
            return await self._repo.load_all()
        except PersistenceUnavailableError as e:
            self._logger.warning(f"[Saves] Save store unavailable: {e}")
            return []
