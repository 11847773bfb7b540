"""Event management with the ticket-ownership delete guard."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List

from models.event import EventCreate, EventResponse, EventUpdate
from utils.error_handling import NotFoundError, ReferentialIntegrityError, ValidationError
from utils.logging_config import get_logger

logger = get_logger(__name__)


class EventService:
    """CRUD for events."""

    def __init__(self, store):
        self.store = store

    def create_event(self, request: EventCreate) -> EventResponse:
        record = {
            "id": str(uuid.uuid4()),
            "name": request.name,
            "start_date": request.start_date,
            "end_date": request.end_date,
            "created_at": datetime.now(timezone.utc),
        }
        self.store.insert_event(record)
        logger.info("Event created", extra={"event_id": record["id"]})
        return self.get_event(record["id"])

    def list_events(self) -> List[EventResponse]:
        return [EventResponse.from_row(row) for row in self.store.list_events()]

    def get_event(self, event_id: str) -> EventResponse:
        row = self.store.get_event(event_id)
        if not row:
            raise NotFoundError("Event not found")
        return EventResponse.from_row(row)

    def update_event(self, event_id: str, request: EventUpdate) -> EventResponse:
        existing = self.get_event(event_id)
        fields = request.model_dump(exclude_unset=True, exclude_none=True)

        start = fields.get("start_date", existing.start_date)
        end = fields.get("end_date", existing.end_date)
        if start >= end:
            raise ValidationError("End date must be after start date")

        if fields and not self.store.update_event(event_id, fields):
            raise NotFoundError("Event not found")
        return self.get_event(event_id)

    def delete_event(self, event_id: str) -> None:
        """Refuse to delete an event that still owns tickets."""
        self.get_event(event_id)
        if self.store.delete_event(event_id):
            logger.info("Event deleted", extra={"event_id": event_id})
            return

        count = self.store.count_tickets(event_id)
        if count > 0:
            logger.info("Event delete blocked", extra={"event_id": event_id, "ticket_count": count})
            raise ReferentialIntegrityError(
                f"Cannot delete event with {count} existing ticket{'s' if count != 1 else ''}",
                blocking_count=count,
            )
        raise NotFoundError("Event not found")
