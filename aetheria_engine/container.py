from dependency_injector import containers, providers

from aetheria_engine.application.services.game_store import GameStore
from aetheria_engine.application.use_cases.combat_roll import CombatRollHandler
from aetheria_engine.application.use_cases.manage_inventory import ManageItemHandler
from aetheria_engine.application.use_cases.manage_session import (
    ListSavesHandler,
    LoadSessionHandler,
    StartSessionHandler,
)
from aetheria_engine.application.use_cases.resolve_turn import TurnResolver
from aetheria_engine.infrastructure.config.settings import settings
from aetheria_engine.infrastructure.event_bus.local_event_bus import LocalEventBus
from aetheria_engine.infrastructure.llm.litellm_narrator import LitellmNarrator
from aetheria_engine.infrastructure.llm.mock_narrator import MockNarrator
from aetheria_engine.infrastructure.logging.event_handler import LoggingEventHandler
from aetheria_engine.infrastructure.logging.file_logger import FileLogger
from aetheria_engine.infrastructure.repositories.in_memory_save_repository import InMemorySaveRepository


def _storage_mode() -> str:
    return "offline" if settings.game.offline else "online"


def _narrator_mode() -> str:
    return "mock" if settings.game.use_mock_narrator else "litellm"


class Container(containers.DeclarativeContainer):
    """
    The Dependency Injection (DI) container for the application.
    It wires together the different components of the system.
    """

    # =====================================================================
    # Infrastructure Layer
    # =====================================================================
    # A single instance of each infrastructure service is shared across the app
    # This is known as the Singleton scope.
    logger = providers.Singleton(FileLogger, log_file=settings.game.log_file)
    event_bus = providers.Singleton(LocalEventBus)
    logging_event_handler = providers.Singleton(LoggingEventHandler, logger=logger)

    # Offline mode has no save store at all; play continues without durability.
    save_repository = providers.Selector(
        providers.Callable(_storage_mode),
        online=providers.Singleton(InMemorySaveRepository),
        offline=providers.Object(None),
    )

    narrator_service = providers.Selector(
        providers.Callable(_narrator_mode),
        litellm=providers.Singleton(LitellmNarrator, logger=logger, llm_settings=settings.llm),
        mock=providers.Singleton(MockNarrator),
    )

    # =====================================================================
    # Application Layer (Services)
    # =====================================================================
    game_store = providers.Singleton(
        GameStore,
        save_repository=save_repository,
        logger=logger,
    )

    turn_resolver = providers.Singleton(
        TurnResolver,
        game_store=game_store,
        narrator_service=narrator_service,
        event_bus=event_bus,
        logger=logger,
        cooldown_seconds=settings.game.cooldown_seconds,
        history_window=settings.game.history_window,
    )

    # =====================================================================
    # Application Layer (Use Case Handlers)
    # =====================================================================
    # Handlers are created on-demand (Factory scope).
    # The container automatically injects the required dependencies.
    start_session_handler = providers.Factory(
        StartSessionHandler,
        game_store=game_store,
        turn_resolver=turn_resolver,
    )

    load_session_handler = providers.Factory(
        LoadSessionHandler,
        game_store=game_store,
        save_repository=save_repository,
        turn_resolver=turn_resolver,
    )

    list_saves_handler = providers.Factory(
        ListSavesHandler,
        save_repository=save_repository,
        logger=logger,
    )

    combat_roll_handler = providers.Factory(
        CombatRollHandler,
        game_store=game_store,
        turn_resolver=turn_resolver,
    )

    manage_item_handler = providers.Factory(
        ManageItemHandler,
        game_store=game_store,
    )


def wire_dependencies():
    """Connects the diagnostic log to the event bus."""
    container.logging_event_handler().subscribe(container.event_bus())


# A global instance of the container
container = Container()
