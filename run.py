#!/usr/bin/env python3
"""
sixmax - Server Startup Script

Usage:
    python run.py [--host HOST] [--port PORT] [--reload]

Defaults come from SIXMAX_HOST / SIXMAX_PORT / SIXMAX_LOG_LEVEL.
"""

import argparse
import uvicorn

from sixmax.config import get_settings


def main():
    settings = get_settings()
    parser = argparse.ArgumentParser(description="sixmax hand recorder server")
    parser.add_argument("--host", default=settings.host, help="Host to bind to")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    args = parser.parse_args()

    uvicorn.run(
        "sixmax.server.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
