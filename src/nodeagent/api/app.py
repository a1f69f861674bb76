# src/nodeagent/api/app.py
"""
FastAPI application factory for the node-agent status endpoint, and the
uvicorn server that runs it inside the agent's event loop.
"""

import logging

import uvicorn
from fastapi import FastAPI

from .. import __version__
from .routers import health

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="node-agent",
        description="Liveness and reconciliation status of the node-agent.",
        version=__version__,
        docs_url=None,
        redoc_url=None,
    )
    app.include_router(health.router, tags=["Health"])
    return app


def create_server(host: str, port: int) -> uvicorn.Server:
    """
    Build a uvicorn server for the status app; the caller awaits ``serve()``.
    uvicorn handles SIGINT/SIGTERM itself while serving and exits, so callers
    should treat the server finishing as a shutdown request.
    """
    server_config = uvicorn.Config(create_app(), host=host, port=port, log_level="warning")
    server = uvicorn.Server(server_config)
    logger.info("Status endpoint listening on %s:%d", host, port)
    return server
