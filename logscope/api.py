"""
FastAPI routes for the Logscope console.

This module exposes the console's query and command surface to the local
presentation layer. It renders nothing; the caller decides how to draw the
visible set.
"""

import logging
from datetime import datetime
from typing import Any

from fastapi import Body, FastAPI, HTTPException

from .console import LogConsole
from .errors import ExportWriteError
from .filtering import compute_visible
from .ingestion import IngestionAdapter
from .models import (
    ApiResponse, AutoScrollUpdate, ConsoleStateResponse, CopyResponse, ExportResponse,
    HealthResponse, IngestResponse, LevelsUpdate, LogsResponse, ScrollPosition, SearchUpdate,
    StatsResponse
)

logger = logging.getLogger(__name__)


def create_app(console: LogConsole, adapter: IngestionAdapter) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        console: The console whose state the routes expose
        adapter: The ingestion adapter feeding the console

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title="Logscope - Debug Console Engine",
        description="Bounded real-time log buffer with live filtering and export",
        version="0.1.0"
    )
    app.state.console = console
    app.state.adapter = adapter

    _add_routes(app, console, adapter)

    return app


def _console_state(console: LogConsole) -> ConsoleStateResponse:
    state = console.filter_state
    return ConsoleStateResponse(
        levels=console.enabled_levels(),
        search_term=state.search_term,
        auto_follow=console.scroll_state.auto_follow
    )


def _add_routes(app: FastAPI, console: LogConsole, adapter: IngestionAdapter) -> None:
    """Add all routes to the FastAPI application."""

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            service="logscope",
            timestamp=datetime.now().isoformat(),
            log_count=len(console.store),
            dropped=adapter.dropped_count
        )

    @app.get("/logs", response_model=LogsResponse)
    async def get_logs():
        """Get the visible entries, oldest first."""
        entries = console.snapshot()
        visible = compute_visible(entries, console.filter_state)
        return LogsResponse(logs=visible, visible=len(visible), total=len(entries))

    @app.post("/logs", response_model=IngestResponse)
    async def submit_log(record: Any = Body(...)):
        """Ingest one raw record; malformed records and non-object bodies are dropped, not rejected."""
        entry = adapter.ingest(record)
        if entry is None:
            return IngestResponse(status="dropped")
        return IngestResponse(status="accepted", entry=entry)

    @app.delete("/logs", response_model=ApiResponse)
    async def clear_logs():
        """Clear every retained entry."""
        console.clear()
        return ApiResponse(status="success", message="Logs cleared")

    @app.get("/stats", response_model=StatsResponse)
    async def get_stats():
        """Get buffer statistics and per-level counts."""
        info = console.store.get_storage_info()
        return StatsResponse(
            count=info['count'],
            capacity=info['capacity'],
            is_full=info['is_full'],
            evicted=info['evicted'],
            dropped=adapter.dropped_count,
            level_counts={level.value: count for level, count in console.level_counts().items()},
            auto_follow=console.scroll_state.auto_follow
        )

    @app.get("/state", response_model=ConsoleStateResponse)
    async def get_state():
        """Get the current filter and scroll state."""
        return _console_state(console)

    @app.put("/filter/levels", response_model=ConsoleStateResponse)
    async def set_levels(update: LevelsUpdate):
        """Replace the enabled level set."""
        try:
            console.set_filter(update.levels)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _console_state(console)

    @app.post("/filter/levels/{level}/toggle", response_model=ConsoleStateResponse)
    async def toggle_level(level: str):
        """Switch one level on or off."""
        try:
            console.toggle_level(level)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _console_state(console)

    @app.put("/filter/search", response_model=ConsoleStateResponse)
    async def set_search(update: SearchUpdate):
        """Replace the search term."""
        console.set_search_term(update.term)
        return _console_state(console)

    @app.post("/scroll/position", response_model=ConsoleStateResponse)
    async def report_position(position: ScrollPosition):
        """Report whether the view is within the bottom threshold."""
        console.report_at_bottom(position.at_bottom)
        return _console_state(console)

    @app.post("/scroll/jump", response_model=ConsoleStateResponse)
    async def jump_to_latest():
        """Resume following and move to the latest entry."""
        console.jump_to_latest()
        return _console_state(console)

    @app.put("/scroll/auto", response_model=ConsoleStateResponse)
    async def set_auto_scroll(update: AutoScrollUpdate):
        """Pause or resume following."""
        console.set_auto_scroll(update.enabled)
        return _console_state(console)

    @app.post("/copy", response_model=CopyResponse)
    async def copy_logs():
        """Copy the visible entries to the clipboard."""
        count = len(console.visible())
        return CopyResponse(success=console.copy_visible(), count=count)

    @app.post("/export", response_model=ExportResponse)
    async def export_logs():
        """Export the visible entries as JSON lines."""
        count = len(console.visible())
        try:
            filename = console.export_visible()
        except ExportWriteError as e:
            logger.error(f"Error exporting logs: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        return ExportResponse(filename=filename, count=count)
