# src/nodeagent/api/routers/health.py
"""
API routes exposing liveness, version and reconciliation status.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ... import __version__
from ...core.config import WatcherConfig
from ...core.scheduler import Scheduler
from ..dependencies import get_scheduler, get_watcher_config
from ..schemas import HealthResponse, StatusResponse, VersionResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/healthz", response_model=HealthResponse)
async def healthz():
    """Liveness endpoint."""
    return HealthResponse(status="ok", version=__version__)


@router.get("/version", response_model=VersionResponse)
async def version():
    """Return the current application version."""
    return VersionResponse(version=__version__)


@router.get("/status", response_model=StatusResponse)
async def status(
    scheduler: Optional[Scheduler] = Depends(get_scheduler),
    watcher_config: Optional[WatcherConfig] = Depends(get_watcher_config),
):
    """Return the tick status of the reconciliation loop. Secrets are never exposed."""
    if scheduler is None or watcher_config is None:
        raise HTTPException(status_code=503, detail="Agent not started")
    return StatusResponse(
        cluster_id=watcher_config.cluster_id,
        node_pool_id=watcher_config.node_pool_id,
        jobs=scheduler.get_status(),
    )
