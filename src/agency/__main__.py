"""Command line entry point: serve the API or maintain the search indexes."""

import argparse
import asyncio
import contextlib
import signal
import sys

import structlog
import uvicorn

from agency.app import build_indexer, create_app
from agency.config import Settings
from agency.lifecycle import GracefulShutdown
from agency.logging import configure_logging
from agency.search.static_index import StaticIndexError, generate_static_index

logger = structlog.get_logger()


async def serve(settings: Settings) -> None:
    """Run uvicorn server with graceful shutdown support.

    Handles SIGTERM/SIGINT for clean shutdown.

    Args:
        settings: Server configuration.
    """
    app = create_app(settings)
    shutdown = GracefulShutdown(timeout=settings.shutdown_timeout)

    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level="warning",
        access_log=False,
        timeout_graceful_shutdown=int(shutdown.timeout),
    )
    server = uvicorn.Server(config)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, shutdown.trigger)

    async def shutdown_server() -> None:
        await shutdown.wait_for_trigger()
        server.should_exit = True

    watcher_task = asyncio.create_task(shutdown_server())
    try:
        await server.serve()
    finally:
        watcher_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await watcher_task


def reindex(settings: Settings) -> int:
    """Rebuild the search record store once and exit.

    Returns:
        Process exit code.
    """
    store, _, indexer = build_indexer(settings)
    try:
        count = indexer.reindex()
    finally:
        store.close()
    logger.info("reindex_completed", record_count=count)
    return 0


def generate_index(settings: Settings, rebuild: bool) -> int:
    """Write the static fallback indexes from the current store.

    Args:
        settings: Service configuration.
        rebuild: Rebuild the store from content first.

    Returns:
        Process exit code.
    """
    store, _, indexer = build_indexer(settings)
    try:
        if rebuild:
            indexer.reindex()
        summary = generate_static_index(
            store, settings.public_dir, settings.locales, settings.static_index_format
        )
    except StaticIndexError as e:
        logger.error("static_index_failed", error=str(e))
        return 1
    finally:
        store.close()

    logger.info("static_index_completed", files=summary["files"], stats=summary["stats"])
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for ``python -m agency``."""
    parser = argparse.ArgumentParser(prog="agency", description="Agency site search service")
    commands = parser.add_subparsers(dest="command")

    commands.add_parser("serve", help="Run the HTTP API (default)")
    commands.add_parser("reindex", help="Rebuild all search records from content")

    generate = commands.add_parser(
        "generate-index", help="Write search-index-{locale}.json files"
    )
    generate.add_argument(
        "--format",
        choices=["simple", "categorized"],
        help="Override the configured static index format",
    )
    generate.add_argument(
        "--rebuild",
        action="store_true",
        help="Rebuild the search records before writing",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for python -m agency."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    configure_logging(debug=settings.debug)

    if args.command == "reindex":
        sys.exit(reindex(settings))

    if args.command == "generate-index":
        if args.format:
            settings = settings.model_copy(update={"static_index_format": args.format})
        sys.exit(generate_index(settings, rebuild=args.rebuild))

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(serve(settings))

    sys.exit(0)


if __name__ == "__main__":
    main()
