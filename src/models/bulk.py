"""Bulk issuance models."""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import ConfigDict, Field, field_validator

from models.event import ApiModel


class BulkTicketRow(ApiModel):
    """
    One holder row, accepted as sent. Blank or non-text values are reported
    per row by bulk issuance rather than rejected for the whole request.
    """

    model_config = ConfigDict(extra="allow")

    name: Any = None
    surname: Any = None
    email: Any = None


class BulkCreateRequest(ApiModel):
    """Inbound payload for POST /tickets/bulk."""

    event_id: str
    tickets: List[Any]

    @field_validator("event_id", mode="before")
    @classmethod
    def validate_event_id(cls, value):
        if not (value.strip() if isinstance(value, str) else value):
            raise ValueError("Event ID is required")
        return value

    @field_validator("tickets")
    @classmethod
    def validate_tickets(cls, value: List[Any]) -> List[Any]:
        if not value:
            raise ValueError("No tickets provided")
        return value


class BulkRowError(ApiModel):
    """Failure for a single input row, keyed by its original index."""

    index: int
    error: str
    data: Any = None


class BulkTicketSummary(ApiModel):
    """Created ticket as echoed back from a bulk run."""

    id: str
    code: str
    name: str
    surname: str
    used: bool = False
    event_id: Optional[str] = None
    created_at: datetime
    event_name: Optional[str] = None


class BulkCreateResponse(ApiModel):
    """Aggregate outcome of a bulk run."""

    success: bool
    created: int
    failed: int
    tickets: List[BulkTicketSummary] = Field(default_factory=list)
    errors: List[BulkRowError] = Field(default_factory=list)
