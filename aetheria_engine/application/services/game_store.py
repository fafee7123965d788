from typing import Iterable, Optional

from aetheria_engine.application.ports.logger import ILogger
from aetheria_engine.application.ports.save_repository import (
    ISaveRepository,
    PersistenceUnavailableError,
)
from aetheria_engine.domain.actions import Action, GameOver
from aetheria_engine.domain.entities import GameState
from aetheria_engine.domain.initial_state import create_initial_state
from aetheria_engine.domain.reducer import DEFAULT_CHARACTER_NAME, reduce


class GameStore:
    """
    Holds the live GameState and is the only way to change it.

    `dispatch` runs the pure reducer and then saves the result, keyed by the
    state's id. Saving is skipped when the reducer returned the same object
    (a no-op or unhandled action) and for GAME_OVER, so a finished run is not
    overwritten before the player has seen it end.

    Without a save repository the store runs in offline mode: play goes on,
    only cross-session durability is lost.
    """

    def __init__(
        self,
        save_repository: Optional[ISaveRepository],
        logger: ILogger,
        initial_state: Optional[GameState] = None,
    ):
        self._repo = save_repository
        self._logger = logger
        self._state = initial_state or create_initial_state(DEFAULT_CHARACTER_NAME)

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def is_offline(self) -> bool:
        return self._repo is None

    async def dispatch(self, action: Action) -> GameState:
        previous = self._state
        new_state = reduce(previous, action)
        self._state = new_state

        if new_state is previous:
            self._logger.debug(f"[Store] {action.type} left the state unchanged.")
            return new_state
        if isinstance(action, GameOver):
            self._logger.info(f"[Store] Session {new_state.id} is over; not auto-saving.")
            return new_state

        await self._persist(new_state)
        return new_state

    async def dispatch_all(self, actions: Iterable[Action]) -> GameState:
        """Dispatches actions strictly in the given order."""
        for action in actions:
            await self.dispatch(action)
        return self._state

    async def _persist(self, state: GameState) -> None:
        if self._repo is None:
            return
        try:
            await self._repo.save(state)
        except PersistenceUnavailableError as e:
            self._logger.warning(f"[Store] Could not save session {state.id}, continuing offline: {e}")
