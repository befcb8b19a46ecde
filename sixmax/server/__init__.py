"""
sixmax Server - FastAPI + WebSocket Server Layer
"""

from sixmax.server.app import app, create_app

__all__ = ["app", "create_app"]
