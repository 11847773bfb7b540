"""Redemption and scanning models."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from models.event import ApiModel
from models.ticket import TicketResponse


class RedemptionStatus(str, Enum):
    """Outcome of a used/unused transition request."""

    REDEEMED = "redeemed"
    ALREADY_USED = "already_used"
    REVERTED = "reverted"
    NOT_USED = "not_used"


class RedemptionResult(ApiModel):
    """Ticket after a transition request, plus what actually happened."""

    status: RedemptionStatus
    ticket: TicketResponse

    @property
    def changed(self) -> bool:
        return self.status in (RedemptionStatus.REDEEMED, RedemptionStatus.REVERTED)


class ScanStatus(str, Enum):
    """What door staff see after a scan."""

    VALID = "valid"
    ALREADY_USED = "already_used"
    INVALID = "invalid"


class ScanRequest(ApiModel):
    """Raw decoder payload for POST /tickets/scan."""

    code: str = ""


class ScanResult(ApiModel):
    """Scanner outcome; ``ticket`` is absent for invalid codes."""

    status: ScanStatus
    message: str
    ticket: Optional[TicketResponse] = None


class RecentRedemption(ApiModel):
    """One entry of the scanning activity feed."""

    ticket_id: str
    code: str
    name: str
    surname: str
    used_at: datetime
    message: str


class EventUsage(ApiModel):
    """Per-event redemption counts."""

    event_id: Optional[str] = None
    event_name: Optional[str] = None
    total: int
    used: int


class ScanActivity(ApiModel):
    """Door dashboard snapshot."""

    total: int
    used: int
    unused: int
    usage_rate: float
    recent_count: int
    recent: List[RecentRedemption] = Field(default_factory=list)
    events: List[EventUsage] = Field(default_factory=list)
