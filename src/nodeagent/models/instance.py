# src/nodeagent/models/instance.py

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Instance(BaseModel):
    """
    Compute instance backing a cluster node, as returned by the provider API.

    Only ``id`` is needed to remediate; the rest is kept for log context.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., description="Instance ID")
    hostname: str = Field(default="", description="Instance hostname (matches the node name)")
    status: Optional[str] = Field(None, description="Instance status, e.g. ACTIVE")
    region: Optional[str] = Field(None, description="Region the instance lives in")
