"""Single-ticket issuance and holder maintenance."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List

from models.ticket import TicketCreate, TicketResponse, TicketUpdate
from services.code_resolver import UniqueCodeResolver
from services.redemption_service import RedemptionService
from utils.error_handling import NotFoundError
from utils.logging_config import get_logger

logger = get_logger(__name__)


def new_ticket_record(code: str, name: str, surname: str, event_id, created_at: datetime) -> dict:
    """Row for a freshly issued, unused ticket."""
    return {
        "id": str(uuid.uuid4()),
        "code": code,
        "name": name,
        "surname": surname,
        "event_id": event_id,
        "used": False,
        "used_at": None,
        "created_at": created_at,
    }


class TicketService:
    """Encapsulates ticket issuance and edits."""

    def __init__(self, store, resolver: UniqueCodeResolver, redemption: RedemptionService):
        self.store = store
        self.resolver = resolver
        self.redemption = redemption

    def create_ticket(self, request: TicketCreate) -> TicketResponse:
        if not self.store.get_event(request.event_id):
            raise NotFoundError("Event not found")

        created_at = datetime.now(timezone.utc)

        def write(code: str) -> dict:
            record = new_ticket_record(code, request.name, request.surname, request.event_id, created_at)
            self.store.insert_ticket(record)
            return record

        record = self.resolver.issue(write)
        logger.info(
            "Ticket created",
            extra={"ticket_id": record["id"], "code": record["code"], "event_id": request.event_id},
        )
        return self.get_ticket(record["id"])

    def list_tickets(self) -> List[TicketResponse]:
        return [TicketResponse.from_row(row) for row in self.store.list_tickets()]

    def get_ticket(self, ticket_id: str) -> TicketResponse:
        row = self.store.get_ticket(ticket_id)
        if not row:
            raise NotFoundError("Ticket not found")
        return TicketResponse.from_row(row)

    def update_ticket(self, ticket_id: str, request: TicketUpdate) -> TicketResponse:
        """
        Apply holder edits and, when ``used`` is present, the redemption toggle.

        Holder edits never touch ``used``/``used_at``.
        """
        existing = self.get_ticket(ticket_id)
        fields = request.holder_fields()

        new_event_id = fields.get("event_id")
        if new_event_id is not None and new_event_id != existing.event_id:
            if not self.store.get_event(new_event_id):
                raise NotFoundError("Event not found")

        if fields and not self.store.update_ticket(ticket_id, fields):
            raise NotFoundError("Ticket not found")

        if request.used is not None:
            return self.redemption.set_used(ticket_id, request.used).ticket
        return self.get_ticket(ticket_id)

    def delete_ticket(self, ticket_id: str) -> None:
        if not self.store.delete_ticket(ticket_id):
            raise NotFoundError("Ticket not found")
        logger.info("Ticket deleted", extra={"ticket_id": ticket_id})
