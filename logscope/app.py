"""
Main application module for the Logscope console engine.

This module wires configuration, the console, the ingestion adapter and the
OS-backed capabilities together and builds the FastAPI application.
"""

import logging
import time
from typing import Optional, Tuple

from fastapi import FastAPI

from . import __version__
from .api import create_app
from .capabilities import ClipboardWriter, CommandClipboard, DirectoryFileWriter, FileWriter
from .config import Config
from .console import LogConsole
from .export import ExportFormatter
from .ingestion import IngestionAdapter

logger = logging.getLogger(__name__)


def configure_logging(config: Config) -> None:
    """Configure process logging from the server log level."""
    logging.basicConfig(
        level=getattr(logging, config.server.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def build_console(
    config: Config,
    clipboard: Optional[ClipboardWriter] = None,
    file_writer: Optional[FileWriter] = None
) -> Tuple[LogConsole, IngestionAdapter]:
    """
    Build a console and its ingestion adapter from configuration.

    Args:
        config: Loaded configuration
        clipboard: Clipboard capability, the platform copy command by default
        file_writer: File capability, the configured export directory by default

    Returns:
        tuple: (LogConsole, IngestionAdapter)
    """
    formatter = ExportFormatter(
        clipboard=clipboard or CommandClipboard(),
        file_writer=file_writer or DirectoryFileWriter(config.export.export_dir),
        app_name=config.get_app_name()
    )
    console = LogConsole.from_config(config, formatter=formatter)
    adapter = IngestionAdapter(console)
    return console, adapter


def create_logscope_app(
    config: Optional[Config] = None,
    clipboard: Optional[ClipboardWriter] = None,
    file_writer: Optional[FileWriter] = None
) -> FastAPI:
    """
    Create and initialize the Logscope application.

    Returns:
        FastAPI: The configured application, with a startup entry already ingested
    """
    config = config or Config()
    configure_logging(config)

    console, adapter = build_console(config, clipboard=clipboard, file_writer=file_writer)
    app = create_app(console, adapter)

    adapter.ingest({
        'timestamp': int(time.time() * 1000),
        'level': 'INFO',
        'target': 'logscope::app',
        'message': 'Logscope console started',
        'fields': {'version': __version__, 'capacity': str(config.get_capacity())}
    })
    logger.info(f"Logscope console started with capacity {config.get_capacity()}")

    return app
