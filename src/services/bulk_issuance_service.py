"""
Bulk ticket issuance for one event.

One bad row never aborts the batch: every failure is reported against the
row's original index so the operator can fix and resubmit just those rows.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from sqlalchemy.exc import SQLAlchemyError

from models.bulk import BulkCreateResponse, BulkRowError, BulkTicketRow, BulkTicketSummary
from services.code_resolver import UniqueCodeResolver
from services.ticket_service import new_ticket_record
from utils.error_handling import AppError, ExhaustedRetriesError, NotFoundError
from utils.logging_config import get_logger
from utils.validators import clean_text

logger = get_logger(__name__)

PendingRow = Tuple[int, BulkTicketRow, dict]

INVALID_ROW = "Ticket row must be an object"


def as_row(raw: Any) -> Optional[BulkTicketRow]:
    """Accept a parsed row or a JSON object; anything else is not a row."""
    if isinstance(raw, BulkTicketRow):
        return raw
    if isinstance(raw, dict):
        return BulkTicketRow.model_validate(raw)
    return None


def _field_problem(value: Any, label: str) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        return f"{label} must be text"
    if not clean_text(value):
        return f"{label} is required"
    return None


def validate_row(row: BulkTicketRow) -> List[str]:
    """Required-field problems for one row, in display order."""
    problems = [_field_problem(row.name, "Name"), _field_problem(row.surname, "Surname")]
    return [problem for problem in problems if problem]


class BulkIssuanceService:
    """Coordinates validation, code resolution and batched inserts."""

    def __init__(self, store, resolver: UniqueCodeResolver):
        self.store = store
        self.resolver = resolver

    def issue(self, event_id: str, rows: Sequence[Any]) -> BulkCreateResponse:
        event = self.store.get_event(event_id)
        if not event:
            raise NotFoundError("Event not found")

        errors: List[BulkRowError] = []
        pending: List[PendingRow] = []
        created_at = datetime.now(timezone.utc)

        for index, raw in enumerate(rows):
            row = as_row(raw)
            if row is None:
                errors.append(BulkRowError(index=index, error=INVALID_ROW, data=raw))
                continue
            problems = validate_row(row)
            if problems:
                errors.append(BulkRowError(index=index, error=", ".join(problems), data=row))
                continue
            try:
                code = self.resolver.resolve()
            except ExhaustedRetriesError as exc:
                errors.append(BulkRowError(index=index, error=str(exc), data=row))
                continue
            record = new_ticket_record(
                code, clean_text(row.name), clean_text(row.surname), event_id, created_at
            )
            pending.append((index, row, record))

        created_ids = self._batch_insert(pending)

        order: Dict[str, int] = {}
        for index, row, record in pending:
            if record["id"] in created_ids:
                order[record["id"]] = index
                continue
            try:
                self._insert_one(record)
            except (AppError, SQLAlchemyError) as exc:
                logger.warning(
                    "Bulk row insert failed",
                    extra={"event_id": event_id, "row_index": index, "error": str(exc)},
                )
                errors.append(BulkRowError(index=index, error=str(exc), data=row))
                continue
            order[record["id"]] = index

        tickets = sorted(self.store.get_tickets(order.keys()), key=lambda item: order[item["id"]])
        summaries = [
            BulkTicketSummary(
                id=item["id"],
                code=item["code"],
                name=item["name"],
                surname=item["surname"],
                used=bool(item["used"]),
                event_id=item["event_id"],
                created_at=item["created_at"],
                event_name=item.get("event_name"),
            )
            for item in tickets
        ]
        errors.sort(key=lambda error: error.index)

        logger.info(
            "Bulk ticket creation finished",
            extra={
                "event_id": event_id,
                "requested": len(rows),
                "created_count": len(summaries),
                "failed_count": len(errors),
            },
        )
        return BulkCreateResponse(
            success=len(summaries) > 0,
            created=len(summaries),
            failed=len(errors),
            tickets=summaries,
            errors=errors,
        )

    def _batch_insert(self, pending: List[PendingRow]) -> Set[str]:
        """
        Insert all resolved rows at once, then reconcile which ids actually
        landed. Duplicate-skip drops rows silently, so the count is not trusted.
        """
        if not pending:
            return set()
        records = [record for _, _, record in pending]
        try:
            self.store.insert_tickets_skip_duplicates(records)
        except (AppError, SQLAlchemyError) as exc:
            logger.warning("Batch insert failed, falling back to single inserts", extra={"error": str(exc)})
        created = self.store.existing_ids(record["id"] for record in records)
        skipped = len(records) - len(created)
        if skipped:
            logger.info("Batch insert skipped rows", extra={"skipped": skipped})
        return created

    def _insert_one(self, record: dict) -> None:
        """Retry a skipped row on its own, regenerating the code if it was claimed."""

        def write(code: str) -> None:
            self.store.insert_ticket({**record, "code": code})

        self.resolver.issue(write, candidate=record["code"])
