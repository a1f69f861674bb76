# src/nodeagent/models/status.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class JobStatus(BaseModel):
    """
    Pydantic model tracking the runs of one scheduled job.

    Attributes:
        name: Job name
        interval_seconds: Configured tick interval
        runs: Number of completed ticks, successful or not
        failures: Number of ticks that raised
        skipped_ticks: Ticks dropped because the previous one overran
        last_started_at: Start of the most recent tick
        last_finished_at: End of the most recent tick
        last_success_at: End of the most recent successful tick
        last_error: Error message of the most recent failed tick, cleared on success
        in_flight: Whether a tick is running right now
    """

    name: str = Field(..., description="Job name")
    interval_seconds: float = Field(..., description="Tick interval in seconds")
    runs: int = Field(default=0, description="Completed ticks")
    failures: int = Field(default=0, description="Failed ticks")
    skipped_ticks: int = Field(default=0, description="Ticks skipped after an overrun")
    last_started_at: Optional[datetime] = Field(None, description="Last tick start")
    last_finished_at: Optional[datetime] = Field(None, description="Last tick end")
    last_success_at: Optional[datetime] = Field(None, description="Last successful tick end")
    last_error: Optional[str] = Field(None, description="Last tick error, if the last tick failed")
    in_flight: bool = Field(default=False, description="Whether a tick is running right now")
