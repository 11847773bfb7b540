"""Pydantic models for API payloads."""

from models.bulk import (  # noqa: F401
    BulkCreateRequest,
    BulkCreateResponse,
    BulkRowError,
    BulkTicketRow,
    BulkTicketSummary,
)
from models.event import EventCreate, EventResponse, EventSummary, EventUpdate  # noqa: F401
from models.redemption import (  # noqa: F401
    RedemptionResult,
    RedemptionStatus,
    ScanActivity,
    ScanRequest,
    ScanResult,
    ScanStatus,
)
from models.ticket import TicketCreate, TicketResponse, TicketUpdate  # noqa: F401
