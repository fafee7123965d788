from aetheria_engine.application.ports.event_bus import IEventBus
from aetheria_engine.application.ports.logger import ILogger
from aetheria_engine.domain.events import (
    DomainEvent,
    GameEnded,
    TurnFailed,
    TurnRejected,
    TurnResolved,
)


class LoggingEventHandler:
    """
    An event handler that writes turn lifecycle events to the diagnostic log.
    """

    def __init__(self, logger: ILogger):
        self._logger = logger

    async def handle(self, event: DomainEvent):
        """Dispatches to a specific method based on event type."""
        try:
            if isinstance(event, TurnResolved):
                self._handle_turn_resolved(event)
            elif isinstance(event, TurnFailed):
                self._handle_turn_failed(event)
            elif isinstance(event, TurnRejected):
                self._logger.debug(f"[{event.save_id}] TURN REJECTED: {event.reason}")
            elif isinstance(event, GameEnded):
                self._logger.info(f"[{event.save_id}] GAME ENDED on turn {event.turn_number} ({event.cause}).")
            else:
                self._logger.debug(f"Received unknown event type: {type(event).__name__}")
        except Exception as e:
            self._logger.error(f"Error in LoggingEventHandler: {e}")

    def _handle_turn_resolved(self, event: TurnResolved):
        self._logger.info(
            f"[{event.save_id}] TURN {event.turn_number}: '{event.action_text}' -> \"{event.narrative}\""
        )
        self._logger.debug(f"[{event.save_id}] APPLIED ACTIONS: {', '.join(event.applied_actions)}")

    def _handle_turn_failed(self, event: TurnFailed):
        self._logger.warning(f"[{event.save_id}] TURN FAILED ({event.category}): {event.error}")

    def subscribe(self, event_bus: IEventBus):
        """Subscribes the handler to all events on the event bus."""
        event_bus.subscribe(DomainEvent, self.handle)
