"""SQLAlchemy Core table definitions for events and tickets."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    UniqueConstraint,
    false,
)

metadata = MetaData()

events = Table(
    "events",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("start_date", DateTime(timezone=True), nullable=False),
    Column("end_date", DateTime(timezone=True), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

# uq_tickets_code is the final authority on code uniqueness.
tickets = Table(
    "tickets",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("code", String(32), nullable=False),
    Column("name", String(255), nullable=False),
    Column("surname", String(255), nullable=False),
    Column("event_id", String(36), ForeignKey("events.id"), nullable=True),
    Column("used", Boolean, nullable=False, default=False, server_default=false()),
    Column("used_at", DateTime(timezone=True), nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("code", name="uq_tickets_code"),
    Index("ix_tickets_event_id", "event_id"),
)
