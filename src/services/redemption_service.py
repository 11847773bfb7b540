"""
Ticket redemption at the door.

Unused -> Used is a compare-and-set in the store, so two scanners reading the
same badge produce one transition and one authoritative ``used_at``; the
loser sees the original timestamp and is told the ticket was already used.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from models.redemption import (
    EventUsage,
    RecentRedemption,
    RedemptionResult,
    RedemptionStatus,
    ScanActivity,
    ScanResult,
    ScanStatus,
)
from models.ticket import TicketResponse
from utils.error_handling import InvalidCodeError, NotFoundError
from utils.logging_config import get_logger
from utils.validators import MIN_LOOKUP_CODE_LENGTH, normalize_code

logger = get_logger(__name__)

RECENT_WINDOW = timedelta(hours=1)
RECENT_COUNT_WINDOW = timedelta(minutes=10)
RECENT_LIMIT = 20


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RedemptionService:
    """Lookup and used/unused transitions for tickets."""

    def __init__(
        self,
        store,
        clock: Callable[[], datetime] = utc_now,
        min_code_length: int = MIN_LOOKUP_CODE_LENGTH,
    ):
        self.store = store
        self.clock = clock
        self.min_code_length = min_code_length

    def lookup(self, raw_code: Optional[str]) -> TicketResponse:
        """Resolve a typed or scanned code to a ticket. Never mutates state."""
        code = normalize_code(raw_code, self.min_code_length)
        row = self.store.get_ticket_by_code(code)
        if not row:
            raise NotFoundError("Ticket not found")
        return TicketResponse.from_row(row)

    # Manual search only looks the ticket up; staff confirm with mark_used.
    search = lookup

    def mark_used(self, ticket_id: str) -> RedemptionResult:
        if self.store.mark_used(ticket_id, self.clock()):
            ticket = self._fetch(ticket_id)
            logger.info("Ticket redeemed", extra={"ticket_id": ticket_id, "code": ticket.code})
            return RedemptionResult(status=RedemptionStatus.REDEEMED, ticket=ticket)

        ticket = self._fetch(ticket_id)
        if not ticket.used:
            # Reverted between our write and read; report what the store holds.
            logger.warning("Ticket reverted during redemption", extra={"ticket_id": ticket_id})
            return RedemptionResult(status=RedemptionStatus.NOT_USED, ticket=ticket)
        logger.info(
            "Ticket already used",
            extra={"ticket_id": ticket_id, "code": ticket.code, "used_at": ticket.used_at.isoformat()},
        )
        return RedemptionResult(status=RedemptionStatus.ALREADY_USED, ticket=ticket)

    def mark_unused(self, ticket_id: str) -> RedemptionResult:
        """Staff correction: any used ticket may be reverted."""
        if self.store.mark_unused(ticket_id):
            ticket = self._fetch(ticket_id)
            logger.info("Ticket redemption reverted", extra={"ticket_id": ticket_id, "code": ticket.code})
            return RedemptionResult(status=RedemptionStatus.REVERTED, ticket=ticket)
        return RedemptionResult(status=RedemptionStatus.NOT_USED, ticket=self._fetch(ticket_id))

    def set_used(self, ticket_id: str, used: bool) -> RedemptionResult:
        return self.mark_used(ticket_id) if used else self.mark_unused(ticket_id)

    def scan(self, raw_payload: Optional[str]) -> ScanResult:
        """
        Scanner flow: an unused ticket is redeemed immediately, without the
        confirmation step manual search requires.
        """
        try:
            ticket = self.lookup(raw_payload)
        except (InvalidCodeError, NotFoundError) as exc:
            logger.info("Scan rejected", extra={"reason": str(exc)})
            return ScanResult(status=ScanStatus.INVALID, message=str(exc))

        if ticket.used:
            return self._already_used(ticket)

        result = self.mark_used(ticket.id)
        if result.status == RedemptionStatus.REDEEMED:
            return ScanResult(
                status=ScanStatus.VALID,
                message=f"Valid ticket for {result.ticket.name} {result.ticket.surname}",
                ticket=result.ticket,
            )
        if result.status == RedemptionStatus.ALREADY_USED:
            return self._already_used(result.ticket)
        return ScanResult(
            status=ScanStatus.INVALID,
            message="Ticket state changed, scan again",
            ticket=result.ticket,
        )

    @staticmethod
    def _already_used(ticket: TicketResponse) -> ScanResult:
        return ScanResult(
            status=ScanStatus.ALREADY_USED,
            message=f"Ticket already used for {ticket.name} {ticket.surname}",
            ticket=ticket,
        )

    def activity(self, now: Optional[datetime] = None) -> ScanActivity:
        """Door dashboard: usage totals, per-event usage and recent scans."""
        now = now or self.clock()
        per_event = self.store.usage_by_event()
        total = sum(item["total"] for item in per_event)
        used = sum(item["used"] for item in per_event)
        recent = [
            RecentRedemption(
                ticket_id=row["id"],
                code=row["code"],
                name=row["name"],
                surname=row["surname"],
                used_at=row["used_at"],
                message=f"Ticket {row['code']} scanned and marked as used",
            )
            for row in self.store.redemptions_since(now - RECENT_WINDOW, limit=RECENT_LIMIT)
        ]
        return ScanActivity(
            total=total,
            used=used,
            unused=total - used,
            usage_rate=round(used / total * 100, 1) if total else 0.0,
            recent_count=self.store.count_redemptions_since(now - RECENT_COUNT_WINDOW),
            recent=recent,
            events=[EventUsage(**item) for item in per_event],
        )

    def _fetch(self, ticket_id: str) -> TicketResponse:
        row = self.store.get_ticket(ticket_id)
        if not row:
            raise NotFoundError("Ticket not found")
        return TicketResponse.from_row(row)
