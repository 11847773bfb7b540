"""Event models."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert to aware UTC; naive timestamps are taken to already be UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ApiModel(BaseModel):
    """Base for payloads exchanged as camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EventCreate(ApiModel):
    """Inbound payload for POST /events."""

    name: str
    start_date: datetime
    end_date: datetime

    @model_validator(mode="before")
    @classmethod
    def validate_required(cls, data):
        if isinstance(data, dict):
            for field, alias in (("name", "name"), ("start_date", "startDate"), ("end_date", "endDate")):
                value = data.get(alias, data.get(field))
                if value is None or (isinstance(value, str) and not value.strip()):
                    raise ValueError("Name, start date, and end date are required")
        return data

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return value.strip()

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_tz(cls, value: datetime) -> datetime:
        return as_utc(value)

    @model_validator(mode="after")
    def validate_range(self) -> "EventCreate":
        if self.start_date >= self.end_date:
            raise ValueError("End date must be after start date")
        return self


class EventUpdate(ApiModel):
    """Partial update for PUT /events/{id}; the merged range is checked by the service."""

    name: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("name")
    @classmethod
    def reject_blank_name(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("Name cannot be empty")
        return value.strip() if value is not None else None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_tz(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class EventSummary(ApiModel):
    """Event fields embedded in ticket responses."""

    id: str
    name: str
    start_date: datetime
    end_date: datetime


class EventResponse(ApiModel):
    """Event as returned by the API."""

    id: str
    name: str
    start_date: datetime
    end_date: datetime
    date: str = Field(description="Display range, YYYY-MM-DD - YYYY-MM-DD")
    ticket_count: int = 0
    created_at: datetime

    @classmethod
    def from_row(cls, row: dict) -> "EventResponse":
        """Build from a store row carrying ``ticket_count``."""
        start, end = as_utc(row["start_date"]), as_utc(row["end_date"])
        return cls(
            id=row["id"],
            name=row["name"],
            start_date=start,
            end_date=end,
            date=f"{start.date().isoformat()} - {end.date().isoformat()}",
            ticket_count=row.get("ticket_count") or 0,
            created_at=row["created_at"],
        )
