"""
FastAPI Application Entry Point for Pokerfish.

This module creates and configures the FastAPI application with:
- HTTP routes for table management
- WebSocket endpoint for live table updates
- CORS middleware for development
"""

from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pokerfish import __version__
from pokerfish.server.routes import router
from pokerfish.server.session import Scheduler, TableManager
from pokerfish.server.websocket import websocket_endpoint

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_app(scheduler: Optional[Scheduler] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        scheduler: Deferred-call scheduler for agent turns; defaults to the
            running event loop

    Returns:
        Configured FastAPI application instance
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Pokerfish server starting up...")
        yield
        app.state.tables.close_all()
        logger.info("Pokerfish server shutting down...")

    app = FastAPI(
        title="Pokerfish",
        description="Texas Hold'em table with heuristic opponents",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.tables = TableManager(scheduler=scheduler)

    # CORS middleware for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    app.websocket("/ws/{table_id}")(websocket_endpoint)

    return app


# Create the application instance
app = create_app()


def main():
    """Run the server (for use as entry point)."""
    import uvicorn
    uvicorn.run(
        "pokerfish.server.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
