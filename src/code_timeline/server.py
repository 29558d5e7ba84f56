"""MCP server implementation for code-timeline."""

from typing import Any

from mcp.server.fastmcp import FastMCP

from code_timeline.config import Settings, get_settings
from code_timeline.services.timeline_service import TimelineService
from code_timeline.tools import timeline_tools
from code_timeline.utils.path_filter import TrackingFilter

# Initialize FastMCP server
mcp = FastMCP("code-timeline")

# Service instances (initialized in main)
timeline_service: TimelineService | None = None
tracking_filter: TrackingFilter | None = None


async def initialize_services(settings: Settings | None = None) -> None:
    """Load the history and build the timeline service.

    Args:
        settings: Application settings (defaults to the global settings)
    """
    global timeline_service, tracking_filter

    if settings is None:
        settings = get_settings()

    timeline_service = await TimelineService.open(settings)
    tracking_filter = TrackingFilter(settings.workspace_roots, settings.exclude_patterns)


async def shutdown_services() -> None:
    """Drop service instances."""
    global timeline_service, tracking_filter
    timeline_service = None
    tracking_filter = None


def _service() -> TimelineService:
    if not timeline_service:
        raise RuntimeError("Services not initialized")
    return timeline_service


@mcp.tool()
async def timeline_record_change(
    file_path: str,
    content: str | None = None,
    file_name: str | None = None,
) -> dict[str, Any]:
    """Record a save of a file in the timeline.

    Args:
        file_path: Absolute path of the saved file
        content: Saved text; read from disk when omitted
        file_name: Display name (default: last path component)

    Returns:
        Whether a snapshot was recorded, with its change count
    """
    return await timeline_tools.timeline_record_change(
        _service(), file_path, content, file_name, tracking_filter
    )


@mcp.tool()
async def timeline_history(
    interval_ms: int | None = None,
    include_content: bool = False,
) -> dict[str, Any]:
    """Get the timeline grouped into fixed time windows.

    Args:
        interval_ms: Window width in ms (60000, 120000 or 300000 for the display)
        include_content: Include snapshot content and HTML diffs

    Returns:
        Buckets with their total change counts and snapshots
    """
    return await timeline_tools.timeline_history(_service(), interval_ms, include_content)


@mcp.tool()
async def timeline_recent(limit: int | None = None) -> dict[str, Any]:
    """Get the most recent snapshots, newest first.

    Args:
        limit: Maximum number of snapshots

    Returns:
        Recent snapshot summaries
    """
    return await timeline_tools.timeline_recent(_service(), limit)


@mcp.tool()
async def timeline_stats(interval_ms: int | None = None) -> dict[str, Any]:
    """Get the number of files, total changes and today's changes.

    Args:
        interval_ms: Window width used for today's total

    Returns:
        Timeline statistics
    """
    return await timeline_tools.timeline_stats(_service(), interval_ms)


@mcp.tool()
async def timeline_restore(file_path: str, timestamp: int) -> dict[str, Any]:
    """Restore a file to a snapshot, replacing its current content.

    Args:
        file_path: Path of the file
        timestamp: Timestamp of the snapshot (ms since epoch)

    Returns:
        Restore outcome
    """
    return await timeline_tools.timeline_restore(_service(), file_path, timestamp)


@mcp.tool()
async def timeline_clear() -> dict[str, Any]:
    """Clear all timeline history.

    Returns:
        Number of removed snapshots
    """
    return await timeline_tools.timeline_clear(_service())


def create_server() -> FastMCP:
    """Create and return MCP server instance.

    Returns:
        FastMCP server instance
    """
    return mcp
