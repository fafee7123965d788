import time
from enum import Enum
from typing import Callable, List, Optional

from aetheria_engine.application.commands.turn import SubmitActionCommand
from aetheria_engine.application.ports.event_bus import IEventBus
from aetheria_engine.application.ports.logger import ILogger
from aetheria_engine.application.ports.narrator_service import (
    INarratorService,
    NarratorConfigurationError,
    NarratorRateLimitError,
    looks_rate_limited,
)
from aetheria_engine.application.services.context_builder import (
    DEFAULT_HISTORY_WINDOW,
    build_narrator_context,
)
from aetheria_engine.application.services.game_store import GameStore
from aetheria_engine.application.services.turn_decoder import decode_turn
from aetheria_engine.domain.actions import AddLog
from aetheria_engine.domain.entities import LogEntry
from aetheria_engine.domain.events import GameEnded, TurnFailed, TurnRejected, TurnResolved

DEFAULT_COOLDOWN_SECONDS = 6.0
DEFAULT_SUGGESTIONS = ["Look around", "Check Inventory"]


class TurnStatus(str, Enum):
    RESOLVED = "resolved"
    FAILED = "failed"
    REJECTED_EMPTY = "rejected_empty"
    REJECTED_BUSY = "rejected_busy"
    REJECTED_COOLDOWN = "rejected_cooldown"
    REJECTED_GAME_OVER = "rejected_game_over"


class FailureCategory(str, Enum):
    CONFIGURATION = "configuration"
    RATE_LIMIT = "rate_limit"
    GENERIC = "generic"


FAILURE_MESSAGES = {
    FailureCategory.CONFIGURATION: (
        "Configuration Error: the narrator is not configured (missing API key). "
        "Set LLM_API_KEY and restart the game."
    ),
    FailureCategory.RATE_LIMIT: (
        "A sudden wave of exhaustion washes over you. The magical energies of the world are "
        "too dense right now. You must catch your breath for a moment. "
        "(Rate limit reached - please wait a few seconds before acting.)"
    ),
    FailureCategory.GENERIC: (
        "The mists of reality swirl chaotically, preventing your action. "
        "(The narrator is confused. Please try again.)"
    ),
}

FAILURE_SUGGESTIONS = {
    FailureCategory.CONFIGURATION: [],
    FailureCategory.RATE_LIMIT: ["Wait"],
    FailureCategory.GENERIC: ["Wait"],
}


def classify_failure(error: Exception) -> FailureCategory:
    if isinstance(error, NarratorConfigurationError):
        return FailureCategory.CONFIGURATION
    if isinstance(error, NarratorRateLimitError) or looks_rate_limited(str(error)):
        return FailureCategory.RATE_LIMIT
    return FailureCategory.GENERIC


class TurnResult:
    def __init__(
        self,
        status: TurnStatus,
        narrative: Optional[str] = None,
        suggestions: Optional[List[str]] = None,
        failure: Optional[FailureCategory] = None,
    ):
        self.status = status
        self.narrative = narrative
        self.suggestions = suggestions or []
        self.failure = failure

    @property
    def accepted(self) -> bool:
        return self.status in (TurnStatus.RESOLVED, TurnStatus.FAILED)


class TurnResolver:
    """
    Handles the SubmitActionCommand use case: one player turn, end to end.

    At most one turn runs at a time. A turn arriving while another is in
    flight, or during the cooldown that follows every turn, is rejected
    rather than queued.
    """

    def __init__(
        self,
        game_store: GameStore,
        narrator_service: INarratorService,
        event_bus: IEventBus,
        logger: ILogger,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        history_window: int = DEFAULT_HISTORY_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._store = game_store
        self._narrator = narrator_service
        self._bus = event_bus
        self._logger = logger
        self._cooldown_seconds = cooldown_seconds
        self._history_window = history_window
        self._clock = clock

        self._in_flight = False
        self._cooldown_until: Optional[float] = None
        self._suggestions: List[str] = list(DEFAULT_SUGGESTIONS)
        self.input_buffer = ""

    @property
    def is_processing(self) -> bool:
        return self._in_flight

    @property
    def cooldown_remaining(self) -> float:
        if self._cooldown_until is None:
            return 0.0
        return max(0.0, self._cooldown_until - self._clock())

    @property
    def is_cooling_down(self) -> bool:
        return self.cooldown_remaining > 0

    @property
    def suggestions(self) -> List[str]:
        return list(self._suggestions)

    def reset_suggestions(self, suggestions: Optional[List[str]] = None) -> None:
        self._suggestions = list(DEFAULT_SUGGESTIONS if suggestions is None else suggestions)

    def rejection_reason(self, action_text: str) -> Optional[TurnStatus]:
        state = self._store.state
        if state.is_game_over:
            return TurnStatus.REJECTED_GAME_OVER
        if self._in_flight:
            return TurnStatus.REJECTED_BUSY
        if self.is_cooling_down:
            return TurnStatus.REJECTED_COOLDOWN
        if not action_text.strip() and not state.combat.is_active:
            return TurnStatus.REJECTED_EMPTY
        return None

    async def execute(self, command: SubmitActionCommand) -> TurnResult:
        """
        Executes one turn:
        1. Rejects the turn if the game is over, a turn is in flight, the
           cooldown is active, or the input is blank outside combat.
        2. Logs the player's action immediately.
        3. Asks the narrator, with a context built from the pre-turn state.
        4. Decodes the response into actions and dispatches them in order.
        5. On any narrator failure, logs a system message instead and
           changes nothing else.
        6. Always releases the in-flight guard, clears the input buffer and
           starts the cooldown.
        """
        action_text = command.text.strip()
        rejection = self.rejection_reason(action_text)
        if rejection is not None:
            self._logger.debug(f"[Turn] Rejected '{action_text}': {rejection.value}")
            await self._bus.publish(TurnRejected(save_id=self._store.state.id, reason=rejection.value))
            return TurnResult(status=rejection, suggestions=self.suggestions)

        snapshot = self._store.state
        self._in_flight = True
        self._suggestions = []
        try:
            await self._store.dispatch(AddLog(entry=LogEntry.player(action_text)))

            try:
                context = build_narrator_context(snapshot, self._history_window)
                response = await self._narrator.generate_turn(context, action_text)
                decoded = decode_turn(snapshot, response)
            except Exception as e:
                # Transport, parsing and schema failures all end the turn here.
                return await self._fail(e)

            await self._store.dispatch_all(decoded.actions)
            self._suggestions = decoded.suggestions

            state = self._store.state
            await self._bus.publish(TurnResolved(
                save_id=state.id,
                turn_number=state.turn_number,
                action_text=action_text,
                narrative=response.narrative,
                applied_actions=[action.type for action in decoded.actions],
            ))
            if decoded.is_game_over:
                cause = "hp_depleted" if state.player.stats.hp <= 0 else "narrated"
                await self._bus.publish(GameEnded(save_id=state.id, turn_number=state.turn_number, cause=cause))

            return TurnResult(
                status=TurnStatus.RESOLVED,
                narrative=response.narrative,
                suggestions=self.suggestions,
            )
        finally:
            self._in_flight = False
            self.input_buffer = ""
            self._cooldown_until = self._clock() + self._cooldown_seconds

    async def _fail(self, error: Exception) -> TurnResult:
        category = classify_failure(error)
        message = FAILURE_MESSAGES[category]
        self._logger.error(f"[Turn] Narrator call failed ({category.value}): {error}")

        await self._store.dispatch(AddLog(entry=LogEntry.system(message)))
        self._suggestions = list(FAILURE_SUGGESTIONS[category])
        await self._bus.publish(TurnFailed(
            save_id=self._store.state.id,
            category=category.value,
            error=str(error),
        ))
        return TurnResult(
            status=TurnStatus.FAILED,
            narrative=message,
            suggestions=self.suggestions,
            failure=category,
        )
