"""Ticket models."""

from datetime import datetime
from typing import Optional

from pydantic import field_validator, model_validator

from models.event import ApiModel, EventSummary


class TicketCreate(ApiModel):
    """Inbound payload for POST /tickets."""

    name: str
    surname: str
    event_id: str

    @model_validator(mode="before")
    @classmethod
    def validate_required(cls, data):
        if isinstance(data, dict):
            for field, alias in (("name", "name"), ("surname", "surname"), ("event_id", "eventId")):
                value = data.get(alias, data.get(field))
                if value is None or (isinstance(value, str) and not value.strip()):
                    raise ValueError("Name, surname, and event are required")
        return data

    @field_validator("name", "surname", "event_id")
    @classmethod
    def strip(cls, value: str) -> str:
        return value.strip()


class TicketUpdate(ApiModel):
    """Partial update for PUT /tickets/{id}. ``code`` and ``usedAt`` are not writable."""

    name: Optional[str] = None
    surname: Optional[str] = None
    event_id: Optional[str] = None
    used: Optional[bool] = None

    @field_validator("name", "surname")
    @classmethod
    def reject_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("Name and surname cannot be empty")
        return value.strip() if value is not None else None

    @field_validator("event_id")
    @classmethod
    def reject_blank_event(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("Event cannot be empty")
        return value.strip() if value is not None else None

    def holder_fields(self) -> dict:
        """
        Fields that change holder details only.

        An explicit ``eventId: null`` detaches the ticket from its event.
        """
        return {
            key: value
            for key, value in self.model_dump(exclude={"used"}, exclude_unset=True).items()
            if value is not None or key == "event_id"
        }


class TicketResponse(ApiModel):
    """Ticket as returned by the API."""

    id: str
    code: str
    name: str
    surname: str
    used: bool
    used_at: Optional[datetime] = None
    event_id: Optional[str] = None
    event: Optional[EventSummary] = None
    created_at: datetime

    @classmethod
    def from_row(cls, row: dict) -> "TicketResponse":
        """Build from a store row joined with its event columns."""
        event = None
        if row.get("event_id") and row.get("event_name") is not None:
            event = EventSummary(
                id=row["event_id"],
                name=row["event_name"],
                start_date=row["event_start_date"],
                end_date=row["event_end_date"],
            )
        return cls(
            id=row["id"],
            code=row["code"],
            name=row["name"],
            surname=row["surname"],
            used=bool(row["used"]),
            used_at=row.get("used_at"),
            event_id=row.get("event_id"),
            event=event,
            created_at=row["created_at"],
        )
