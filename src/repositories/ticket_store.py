"""Event and ticket persistence using SQLAlchemy Core."""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Set

from sqlalchemy import case, delete, func, insert, select, true, false, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from models.event import as_utc
from repositories.schema import events, metadata, tickets
from utils.error_handling import DuplicateCodeError, StoreError
from utils.logging_config import get_logger

logger = get_logger(__name__)

HOLDER_FIELDS = ("name", "surname", "event_id")
EVENT_FIELDS = ("name", "start_date", "end_date")
_TIMESTAMPS = ("start_date", "end_date", "created_at", "used_at", "event_start_date", "event_end_date")


def _row(row) -> Dict[str, Any]:
    """Row mapping as a dict with UTC-aware timestamps (SQLite drops tzinfo)."""
    data = dict(row._mapping)
    for key in _TIMESTAMPS:
        if isinstance(data.get(key), datetime):
            data[key] = as_utc(data[key])
    return data


class TicketStore:
    """
    Thin wrapper to keep SQL organized and parameterized.

    The database is the only arbiter of code uniqueness and of used/unused
    state: writes that guard an invariant are single conditional statements.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def create_schema(self) -> None:
        metadata.create_all(self.engine)

    # Events

    def _event_query(self):
        ticket_count = (
            select(func.count())
            .where(tickets.c.event_id == events.c.id)
            .correlate(events)
            .scalar_subquery()
            .label("ticket_count")
        )
        return select(events, ticket_count)

    def insert_event(self, record: Dict[str, Any]) -> None:
        with self.engine.begin() as conn:
            conn.execute(insert(events).values(**record))

    def get_event(self, event_id: str) -> Optional[Dict[str, Any]]:
        with self.engine.connect() as conn:
            row = conn.execute(self._event_query().where(events.c.id == event_id)).fetchone()
            return _row(row) if row else None

    def list_events(self) -> List[Dict[str, Any]]:
        stmt = self._event_query().order_by(events.c.created_at.desc())
        with self.engine.connect() as conn:
            return [_row(row) for row in conn.execute(stmt)]

    def update_event(self, event_id: str, fields: Dict[str, Any]) -> bool:
        values = {key: value for key, value in fields.items() if key in EVENT_FIELDS}
        if not values:
            return self.get_event(event_id) is not None
        with self.engine.begin() as conn:
            result = conn.execute(update(events).where(events.c.id == event_id).values(**values))
            return result.rowcount == 1

    def delete_event(self, event_id: str) -> bool:
        """
        Delete an event only while it owns no tickets. False when the event is
        missing or still referenced; the caller recounts to tell which.
        """
        owned = select(tickets.c.id).where(tickets.c.event_id == event_id).exists()
        stmt = delete(events).where(events.c.id == event_id, ~owned)
        try:
            with self.engine.begin() as conn:
                return conn.execute(stmt).rowcount == 1
        except IntegrityError as exc:
            # A ticket committed outside our snapshot still references the event.
            logger.warning("Event delete rejected by foreign key", extra={"event_id": event_id, "error": str(exc.orig)})
            return False

    def count_tickets(self, event_id: str) -> int:
        stmt = select(func.count()).select_from(tickets).where(tickets.c.event_id == event_id)
        with self.engine.connect() as conn:
            return conn.execute(stmt).scalar() or 0

    # Tickets

    def _ticket_query(self):
        return select(
            tickets,
            events.c.name.label("event_name"),
            events.c.start_date.label("event_start_date"),
            events.c.end_date.label("event_end_date"),
        ).select_from(tickets.outerjoin(events, tickets.c.event_id == events.c.id))

    def code_exists(self, code: str) -> bool:
        stmt = select(tickets.c.id).where(tickets.c.code == code).limit(1)
        with self.engine.connect() as conn:
            return conn.execute(stmt).first() is not None

    def insert_ticket(self, record: Dict[str, Any]) -> None:
        """Insert one ticket; a clash on ``code`` surfaces as DuplicateCodeError."""
        try:
            with self.engine.begin() as conn:
                conn.execute(insert(tickets).values(**record))
        except IntegrityError as exc:
            if self.code_exists(record["code"]):
                raise DuplicateCodeError(record["code"]) from exc
            logger.error("Ticket insert rejected", extra={"ticket_id": record.get("id"), "error": str(exc.orig)})
            raise StoreError("Failed to create ticket") from exc

    def insert_tickets_skip_duplicates(self, records: List[Dict[str, Any]]) -> None:
        """
        Batch insert that silently skips rows clashing on a unique key.

        The driver's rowcount is not reliable for executemany, so callers
        reconcile with ``existing_ids`` afterwards.
        """
        if not records:
            return
        dialect = self.engine.dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert as dialect_insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert as dialect_insert
        else:
            raise StoreError(f"Batch insert not supported for {dialect}")
        stmt = dialect_insert(tickets).on_conflict_do_nothing()
        with self.engine.begin() as conn:
            conn.execute(stmt, records)

    def existing_ids(self, ticket_ids: Iterable[str]) -> Set[str]:
        ids = list(ticket_ids)
        if not ids:
            return set()
        stmt = select(tickets.c.id).where(tickets.c.id.in_(ids))
        with self.engine.connect() as conn:
            return {row.id for row in conn.execute(stmt)}

    def get_ticket(self, ticket_id: str) -> Optional[Dict[str, Any]]:
        with self.engine.connect() as conn:
            row = conn.execute(self._ticket_query().where(tickets.c.id == ticket_id)).fetchone()
            return _row(row) if row else None

    def get_ticket_by_code(self, code: str) -> Optional[Dict[str, Any]]:
        """Exact, case-sensitive match; callers normalize the code."""
        with self.engine.connect() as conn:
            row = conn.execute(self._ticket_query().where(tickets.c.code == code)).fetchone()
            return _row(row) if row else None

    def get_tickets(self, ticket_ids: Iterable[str]) -> List[Dict[str, Any]]:
        ids = list(ticket_ids)
        if not ids:
            return []
        stmt = self._ticket_query().where(tickets.c.id.in_(ids))
        with self.engine.connect() as conn:
            return [_row(row) for row in conn.execute(stmt)]

    def list_tickets(self) -> List[Dict[str, Any]]:
        stmt = self._ticket_query().order_by(tickets.c.created_at.desc())
        with self.engine.connect() as conn:
            return [_row(row) for row in conn.execute(stmt)]

    def update_ticket(self, ticket_id: str, fields: Dict[str, Any]) -> bool:
        """Update holder details only; code and used state are never touched here."""
        values = {key: value for key, value in fields.items() if key in HOLDER_FIELDS}
        if not values:
            return self.get_ticket(ticket_id) is not None
        with self.engine.begin() as conn:
            result = conn.execute(update(tickets).where(tickets.c.id == ticket_id).values(**values))
            return result.rowcount == 1

    def mark_used(self, ticket_id: str, used_at: datetime) -> bool:
        """Compare-and-set Unused -> Used. True only for the caller that made the transition."""
        stmt = (
            update(tickets)
            .where(tickets.c.id == ticket_id, tickets.c.used == false())
            .values(used=True, used_at=used_at)
        )
        with self.engine.begin() as conn:
            return conn.execute(stmt).rowcount == 1

    def mark_unused(self, ticket_id: str) -> bool:
        """Compare-and-set Used -> Unused."""
        stmt = (
            update(tickets)
            .where(tickets.c.id == ticket_id, tickets.c.used == true())
            .values(used=False, used_at=None)
        )
        with self.engine.begin() as conn:
            return conn.execute(stmt).rowcount == 1

    def delete_ticket(self, ticket_id: str) -> bool:
        with self.engine.begin() as conn:
            result = conn.execute(delete(tickets).where(tickets.c.id == ticket_id))
            return result.rowcount == 1

    # Door activity

    def redemptions_since(self, since: datetime, limit: int = 20) -> List[Dict[str, Any]]:
        stmt = (
            select(tickets.c.id, tickets.c.code, tickets.c.name, tickets.c.surname, tickets.c.used_at)
            .where(tickets.c.used == true(), tickets.c.used_at > since)
            .order_by(tickets.c.used_at.desc())
            .limit(limit)
        )
        with self.engine.connect() as conn:
            return [_row(row) for row in conn.execute(stmt)]

    def count_redemptions_since(self, since: datetime) -> int:
        stmt = (
            select(func.count())
            .select_from(tickets)
            .where(tickets.c.used == true(), tickets.c.used_at > since)
        )
        with self.engine.connect() as conn:
            return conn.execute(stmt).scalar() or 0

    def usage_by_event(self) -> List[Dict[str, Any]]:
        """Ticket totals and used counts grouped by owning event."""
        used_count = func.sum(case((tickets.c.used == true(), 1), else_=0))
        stmt = (
            select(
                tickets.c.event_id,
                events.c.name.label("event_name"),
                func.count().label("total"),
                used_count.label("used"),
            )
            .select_from(tickets.outerjoin(events, tickets.c.event_id == events.c.id))
            .group_by(tickets.c.event_id, events.c.name)
            .order_by(events.c.name)
        )
        with self.engine.connect() as conn:
            return [
                {**dict(row._mapping), "used": int(row.used or 0)}
                for row in conn.execute(stmt)
            ]
