"""Entry point for code-timeline MCP server."""

import argparse
import asyncio
import logging
import sys

from code_timeline import __version__
from code_timeline.config import Settings, set_settings
from code_timeline.server import create_server, initialize_services, shutdown_services


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="code-timeline",
        description="Code Timeline - snapshot history of saved files via MCP",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--storage-path",
        help="History file (overrides CODE_TIMELINE_STORAGE_PATH)",
    )
    return parser.parse_args()


async def main(args: argparse.Namespace) -> None:
    """Main entry point for the MCP server."""
    overrides = {"storage_path": args.storage_path} if args.storage_path else {}
    settings = Settings(**overrides)
    set_settings(settings)

    # stdout carries the stdio transport
    logging.basicConfig(
        level=settings.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    await initialize_services()

    mcp = create_server()

    try:
        await mcp.run_stdio_async()
    finally:
        await shutdown_services()


def cli() -> None:
    """CLI entry point."""
    args = parse_args()
    asyncio.run(main(args))


if __name__ == "__main__":
    cli()
