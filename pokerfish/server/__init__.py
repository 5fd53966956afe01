"""
Pokerfish Server - FastAPI + WebSocket Server Layer
"""

from pokerfish.server.app import app, create_app

__all__ = ["app", "create_app"]
