"""Election configuration and status Pydantic v2 schemas."""

from datetime import datetime
from typing import Self

from pydantic import BaseModel, Field, model_validator

from ballot_api.lib.election_status import ElectionStatus, validate_window


class ElectionConfigRequest(BaseModel):
    """Replace the election window (admin settings form)."""

    start_time: datetime
    end_time: datetime
    is_active: bool = True
    allow_late_voting: bool = False

    @model_validator(mode="after")
    def check_window(self) -> Self:
        validate_window(self.start_time, self.end_time)
        return self


class ElectionStartRequest(BaseModel):
    """Start voting immediately for a number of hours."""

    duration_hours: int | None = Field(default=None, gt=0, le=24 * 30)


class ElectionExtendRequest(BaseModel):
    """Push the end time back by a number of minutes."""

    minutes: int | None = Field(default=None, gt=0, le=24 * 60)


class ElectionConfigResponse(BaseModel):
    """The stored election configuration."""

    start_time: datetime
    end_time: datetime
    is_active: bool
    allow_late_voting: bool
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class ElectionStatusResponse(BaseModel):
    """Derived election status for display."""

    status: ElectionStatus
    time_remaining: str
    countdown: str = Field(description="DD:HH:MM:SS until the end time, or a banner")
    evaluated_at: datetime
