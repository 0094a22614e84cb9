"""Command-line interface for dlasim."""

import argparse
import logging
import sys

import uvicorn

from dlasim.config import get_settings
from dlasim.engine.simulation import create_world, tick_world
from dlasim.logging_config import configure_logging
from dlasim.projection.projector import export_frame

logger = logging.getLogger(__name__)


def run_headless(ticks: int, export_path: str | None) -> int:
    """Run the simulation without a server and optionally export the last frame."""
    world = create_world(get_settings())
    for _ in range(ticks):
        tick_world(world)

    logger.info(
        "Finished %d ticks: %d cluster particles, %d walkers",
        world.tick,
        len(world.cluster()),
        world.num_walkers,
    )
    if export_path:
        export_frame(world, export_path)
        logger.info("Exported frame to %s", export_path)
    return 0


def main(args: list[str] | None = None) -> int:
    """Run the dlasim server, or a headless batch with --ticks.

    Args:
        args: Command-line arguments. If None, uses sys.argv[1:].

    Returns:
        Exit code (0 for success).
    """
    parser = argparse.ArgumentParser(
        prog="dlasim",
        description="dlasim - diffusion-limited aggregation engine",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=None,
        help="Run headless for this many ticks instead of serving",
    )
    parser.add_argument(
        "--export",
        default=None,
        metavar="PATH",
        help="With --ticks, write the final frame as JSON to PATH",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    parsed = parser.parse_args(args)
    configure_logging()

    if parsed.ticks is not None:
        if parsed.ticks < 0:
            parser.error("--ticks must be non-negative")
        return run_headless(parsed.ticks, parsed.export)

    print(f"Starting dlasim server at http://{parsed.host}:{parsed.port}")
    print("Press Ctrl+C to stop")

    uvicorn.run(
        "dlasim.server.app:app",
        host=parsed.host,
        port=parsed.port,
        reload=parsed.reload,
    )

    return 0


if __name__ == "__main__":
    sys.exit(main())
