# src/nodeagent/models/node.py

from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

NODE_READY = "Ready"


class ConditionStatus(str, Enum):
    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


class NodeCondition(BaseModel):
    """
    One entry of a node's ``status.conditions`` as reported by the API server.

    Attributes:
        type: Condition type (e.g. 'Ready', 'MemoryPressure')
        status: 'True', 'False' or 'Unknown'
        last_transition_time: When the condition last changed status, if reported
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: str = Field(..., description="Condition type")
    status: ConditionStatus = Field(default=ConditionStatus.UNKNOWN, description="Condition status")
    last_transition_time: Optional[datetime] = Field(None, description="Last status transition time")


class NodeSnapshot(BaseModel):
    """
    Immutable view of one cluster node, built fresh on every tick.

    Conditions are kept in the order the API server reported them, duplicates
    included. Readiness uses the first ``Ready`` entry while the cooldown check
    uses the latest transition among all of them.

    Attributes:
        name: Node name, unique within the pool
        labels: Node labels
        conditions: Reported node conditions, in reported order
        allocatable_gpu: Allocatable GPU count, 0 when absent
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Node name")
    labels: Dict[str, str] = Field(default_factory=dict, description="Node labels")
    conditions: Tuple[NodeCondition, ...] = Field(default=(), description="Node conditions in reported order")
    allocatable_gpu: int = Field(default=0, ge=0, description="Allocatable GPU count")

    @property
    def ready_conditions(self) -> Tuple[NodeCondition, ...]:
        return tuple(c for c in self.conditions if c.type == NODE_READY)

    @property
    def ready_condition(self) -> Optional[NodeCondition]:
        """The first reported Ready condition, or None."""
        for cond in self.conditions:
            if cond.type == NODE_READY:
                return cond
        return None
