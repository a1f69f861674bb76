# src/nodeagent/models/remediation.py

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class HealthVerdict(str, Enum):
    HEALTHY = "Healthy"
    UNHEALTHY = "Unhealthy"


class OutcomeKind(str, Enum):
    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


# Reasons recorded on skipped outcomes
SKIP_HEALTHY = "healthy"
SKIP_COOLDOWN = "cooldown"
SKIP_DRY_RUN = "dry-run"


class RemediationOutcome(BaseModel):
    """What happened to one node during one tick. Never persisted."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    node_name: str = Field(..., description="Node the outcome refers to")
    kind: OutcomeKind = Field(..., description="Skipped, succeeded or failed")
    reason: Optional[str] = Field(None, description="Why the node was skipped")
    instance_id: Optional[str] = Field(None, description="Instance that was rebooted")
    error: Optional[str] = Field(None, description="Error message of a failed remediation")

    @classmethod
    def skipped(cls, node_name: str, reason: str) -> "RemediationOutcome":
        return cls(node_name=node_name, kind=OutcomeKind.SKIPPED, reason=reason)

    @classmethod
    def succeeded(cls, node_name: str, instance_id: str) -> "RemediationOutcome":
        return cls(node_name=node_name, kind=OutcomeKind.SUCCEEDED, instance_id=instance_id)

    @classmethod
    def failed(cls, node_name: str, error: Exception) -> "RemediationOutcome":
        return cls(node_name=node_name, kind=OutcomeKind.FAILED, error=str(error))
