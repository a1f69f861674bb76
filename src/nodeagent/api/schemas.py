# src/nodeagent/api/schemas.py
"""
Pydantic response schemas for the status API.
"""

from typing import List

from pydantic import BaseModel, Field

from ..models.status import JobStatus


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str = Field(..., description="Health status of the agent.")
    version: str = Field(..., description="Current application version.")


class VersionResponse(BaseModel):
    """Response schema for the version endpoint."""

    version: str = Field(..., description="Current application version.")


class StatusResponse(BaseModel):
    """Scheduler status of every reconciliation job."""

    cluster_id: str = Field(..., description="Cluster the agent watches.")
    node_pool_id: str = Field(..., description="Node pool the agent watches.")
    jobs: List[JobStatus] = Field(default_factory=list, description="Per-job tick status.")
