#!/usr/bin/env python3
"""
Logscope - Debug console engine server

Serves the console's query and command surface for a local presentation layer.
"""

import uvicorn

from logscope.app import create_logscope_app
from logscope.config import Config

config = Config()
app = create_logscope_app(config)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.server.host,
        port=config.server.port,
        log_level=config.server.log_level,
        access_log=config.server.access_log
    )
