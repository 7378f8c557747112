"""FastAPI application factory and lifespan management."""

import asyncio
import contextlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from watchdog.events import FileSystemEvent

from agency.config import Settings
from agency.content.repository import ContentRepository
from agency.events import ContentWatcher, DocumentEvent, normalize_event
from agency.middleware.auth import APIKeyMiddleware
from agency.middleware.cors import configure_cors
from agency.middleware.logging import RequestLoggingMiddleware
from agency.routes import health, search
from agency.search.indexer import SearchIndexer
from agency.search.store import SearchRecordStore
from agency.search.subscriber import run_sync_subscriber

logger = structlog.get_logger()


def build_indexer(settings: Settings) -> tuple[SearchRecordStore, ContentRepository, SearchIndexer]:
    """Open the record store and wire the repository and indexer to it.

    Args:
        settings: Service configuration.

    Returns:
        Tuple of (initialized store, repository, indexer).
    """
    store = SearchRecordStore(settings.database_path)
    store.initialize()
    repository = ContentRepository(settings.content_root)
    indexer = SearchIndexer(repository, store, locales=settings.locales)
    return store, repository, indexer


def _start_watcher(
    settings: Settings,
    queue: "asyncio.Queue[DocumentEvent]",
) -> ContentWatcher | None:
    """Start watching the content root, feeding document events to a queue."""
    content_root = settings.content_root

    async def on_filesystem_event(raw_event: FileSystemEvent) -> None:
        for event in normalize_event(raw_event, content_root):
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning(
                    "event_queue_full",
                    collection=event.collection,
                    doc_id=event.doc_id,
                    event_type=event.type.value,
                )

    watcher = ContentWatcher(
        root=content_root,
        loop=asyncio.get_running_loop(),
        on_event=on_filesystem_event,
        debounce_ms=settings.event_debounce_ms,
    )
    try:
        watcher.start()
    except ValueError as e:
        logger.error("watcher_start_failed", error=str(e))
        return None
    return watcher


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle events.

    Opens the search record store, optionally rebuilds it from the content
    repository, and optionally starts the content watcher with its sync
    subscriber. Ensures clean shutdown of all subsystems.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings: Settings = app.state.settings
    logger.info("api_startup", host=settings.host, port=settings.port)

    store, repository, indexer = build_indexer(settings)
    app.state.store = store
    app.state.repository = repository
    app.state.indexer = indexer

    if settings.reindex_on_startup:
        record_count = await asyncio.to_thread(indexer.reindex)
        logger.info("search_store_ready", record_count=record_count)

    watcher: ContentWatcher | None = None
    sync_task: asyncio.Task[None] | None = None
    if settings.watch_content:
        queue: asyncio.Queue[DocumentEvent] = asyncio.Queue(maxsize=settings.event_queue_size)
        watcher = _start_watcher(settings, queue)
        if watcher is not None:
            sync_task = asyncio.create_task(run_sync_subscriber(queue, indexer))
            logger.info("content_sync_enabled", path=str(watcher.root))
    app.state.watcher = watcher

    try:
        yield
    finally:
        if watcher is not None:
            watcher.stop()

        try:
            if sync_task is not None:
                sync_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await sync_task
        finally:
            store.close()
            logger.info("api_shutdown")


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Report malformed query parameters as 400 with the common error body."""
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "request"
        message = f'Invalid parameter "{field}": {first.get("msg", "invalid value")}'
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory function to create configured FastAPI application.

    Args:
        settings: Configuration instance. Creates default if None.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="Agency Search API",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if settings.debug else None,
    )
    app.state.settings = settings

    app.add_exception_handler(RequestValidationError, validation_error_handler)

    configure_cors(app, settings.cors_origins)
    app.add_middleware(RequestLoggingMiddleware)
    if settings.key:
        app.add_middleware(APIKeyMiddleware, api_key=settings.key)

    app.include_router(health.router, prefix="/api")
    app.include_router(search.router, prefix="/api")

    return app
