import asyncio
from collections import defaultdict
from typing import Dict, List, Type

from aetheria_engine.application.ports.event_bus import EventHandler, IEventBus
from aetheria_engine.domain.events import DomainEvent


class LocalEventBus(IEventBus):
    """
    A simple in-process implementation of the event bus.
    Subscriptions live in memory and handlers are awaited concurrently.
    """
    _subscriptions: Dict[Type[DomainEvent], List[EventHandler]]

    def __init__(self):
        self._subscriptions = defaultdict(list)

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler):
        self._subscriptions[event_type].append(handler)

    async def publish(self, event: DomainEvent) -> None:
        """
        Runs every handler subscribed to the event's type or one of its parent types.
        """
        handlers_to_run = []
        for subscribed_type, handlers in self._subscriptions.items():
            if isinstance(event, subscribed_type):
                handlers_to_run.extend(handlers)

        if handlers_to_run:
            await asyncio.gather(*(handler(event) for handler in handlers_to_run))
