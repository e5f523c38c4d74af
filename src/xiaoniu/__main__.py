"""Application entry point."""

import asyncio
import logging
import signal
import sys
from pathlib import Path

from xiaoniu.application.services import RepeatDetector
from xiaoniu.application.use_cases import (
    AIChatUseCase,
    LocalCommandUseCase,
    RelayToMasterUseCase,
)
from xiaoniu.config import Config, ConfigError, LoggingConfig, load_config
from xiaoniu.domain.entities import SpecialIdentities
from xiaoniu.domain.repositories import SnapshotKind, SnapshotRepository
from xiaoniu.infrastructure.events import EventDispatcher
from xiaoniu.infrastructure.http import GatewayServer
from xiaoniu.infrastructure.llm import LLMClient, PromptBuilder
from xiaoniu.infrastructure.memory import (
    GroupMemoryStore,
    IdentityStore,
    PrivateMemoryStore,
)
from xiaoniu.infrastructure.onebot import OneBotEventAdapter, OneBotReplySender
from xiaoniu.infrastructure.persistence import (
    DatabaseManager,
    InMemorySnapshotRepository,
    JsonFileSnapshotRepository,
    SnapshotWriter,
    SQLiteSnapshotRepository,
)

# Default logging for early startup
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def configure_logging(config: LoggingConfig | None) -> None:
    """Configure logging based on config.

    Args:
        config: Logging configuration. If None, uses defaults.
    """
    if config is None:
        return

    root_logger = logging.getLogger()
    level = getattr(logging, config.level.upper(), logging.INFO)
    root_logger.setLevel(level)

    if root_logger.handlers:
        formatter = logging.Formatter(config.format)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)

    if config.loggers:
        for logger_name, logger_level in config.loggers.items():
            individual_logger = logging.getLogger(logger_name)
            individual_level = getattr(logging, logger_level.upper(), logging.INFO)
            individual_logger.setLevel(individual_level)
            logger.debug(
                "Set logger '%s' to level %s", logger_name, logger_level.upper()
            )


async def build_repository(
    config: Config,
) -> tuple[SnapshotRepository, DatabaseManager | None]:
    """Create the snapshot backend selected in the memory config.

    Returns:
        The repository, and the database manager when the backend owns one.
    """
    backend = config.memory.backend
    if backend == "sqlite":
        db_manager = DatabaseManager(config.memory.database_path)
        await db_manager.create_tables()
        logger.info("Memory backend: sqlite (%s)", config.memory.database_path)
        return SQLiteSnapshotRepository(db_manager.get_session), db_manager
    if backend == "memory":
        logger.warning("Memory backend: memory (nothing survives a restart)")
        return InMemorySnapshotRepository(), None

    logger.info("Memory backend: file (%s)", config.memory.data_dir)
    return JsonFileSnapshotRepository(config.memory.data_dir), None


async def main() -> None:
    """Start the application."""
    config_path = Path("config.yaml")
    if not config_path.exists():
        logger.error("config.yaml not found")
        sys.exit(1)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        logger.error("Failed to load config: %s", e)
        sys.exit(1)

    # Apply logging configuration
    configure_logging(config.logging)

    if "default" not in config.llm:
        logger.error("No 'default' LLM config found")
        sys.exit(1)

    repository, db_manager = await build_repository(config)

    writers = {
        kind: SnapshotWriter(repository, kind, config.memory.writer_queue_size)
        for kind in SnapshotKind
    }
    for writer in writers.values():
        writer.start()

    identities = SpecialIdentities(
        bot_id=config.identities.bot_id,
        master_id=config.identities.master_id,
        partner_id=config.identities.partner_id,
    )
    identity_store = IdentityStore(
        identities,
        config.persona.name,
        repository,
        writers[SnapshotKind.IDENTITY_MAP],
    )
    private_store = PrivateMemoryStore(
        repository,
        writers[SnapshotKind.PRIVATE_THREAD],
        max_messages=config.memory.max_history_messages,
    )
    group_store = GroupMemoryStore(
        identity_store,
        repository,
        writers[SnapshotKind.GROUP_THREAD],
        max_messages=config.memory.max_group_context_messages,
        max_message_length=config.memory.max_message_length,
    )

    debug_llm_messages = bool(config.logging and config.logging.debug_llm_messages)
    llm_client = LLMClient(config.llm["default"], debug_messages=debug_llm_messages)
    prompt_builder = PromptBuilder(config.persona)
    reply_sender = OneBotReplySender()

    dispatcher = EventDispatcher(
        repeat_detector=RepeatDetector(identities, config.memory.repeat_window_size),
        local_command=LocalCommandUseCase(reply_sender, config.persona),
        ai_chat=AIChatUseCase(
            completer=llm_client,
            prompt_builder=prompt_builder,
            identity_store=identity_store,
            private_store=private_store,
            group_store=group_store,
            reply_sender=reply_sender,
            persona=config.persona,
        ),
        relay_to_master=RelayToMasterUseCase(
            completer=llm_client,
            prompt_builder=prompt_builder,
            identity_store=identity_store,
            group_store=group_store,
            reply_sender=reply_sender,
            persona=config.persona,
        ),
        reply_sender=reply_sender,
        master_id=identities.master_id,
        call_name=config.persona.call_name,
    )

    server = GatewayServer(
        adapter=OneBotEventAdapter(identity_store, group_store),
        dispatcher=dispatcher,
        reply_sender=reply_sender,
        config=config.onebot,
        persistence_check=db_manager.is_healthy if db_manager is not None else None,
    )

    logger.info("Starting %s (model: %s)...", config.persona.name, llm_client.model)
    await server.start()

    # Setup signal handlers for graceful shutdown
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def shutdown_handler() -> None:
        logger.info("Received shutdown signal...")
        stop_event.set()

    loop.add_signal_handler(signal.SIGINT, shutdown_handler)
    loop.add_signal_handler(signal.SIGTERM, shutdown_handler)

    # Wait for shutdown signal
    await stop_event.wait()

    # Graceful shutdown
    logger.info("Shutting down...")

    # No new events once the gateway is closed
    await server.stop()

    # Let in-flight replies finish so their memory writes are queued
    await dispatcher.drain()

    for writer in writers.values():
        await writer.flush()
        await writer.stop()

    if db_manager is not None:
        await db_manager.close()

    logger.info("Shutdown complete")


def run() -> None:
    """Run the async main function."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    run()
