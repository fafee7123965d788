from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Type

from aetheria_engine.domain.events import DomainEvent

EventHandler = Callable[[DomainEvent], Awaitable[None]]


class IEventBus(ABC):
    """
    An interface (Port) for an event bus.
    Lets the turn resolver announce what happened without knowing who listens
    (the diagnostic log, the presentation layer).
    """

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        """Publishes a domain event to all subscribed handlers."""
        pass

    @abstractmethod
    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler):
        """
        Subscribes an awaitable handler to a type of domain event.
        Subscribing to DomainEvent receives every event.
        """
        pass
