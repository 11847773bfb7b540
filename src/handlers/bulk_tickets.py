"""
Bulk issuance handlers.

POST /tickets/bulk takes JSON rows; POST /events/{id}/tickets/import takes a
CSV upload. Both answer 201 with per-row outcomes even when some rows fail.
"""

from __future__ import annotations

import base64
from typing import Optional

from models.bulk import BulkCreateRequest
from utils.error_handling import ValidationError
from utils.http import json_response, parse_json_body, path_param, run_handler
from utils.logging_config import get_logger

logger = get_logger(__name__)

# Lazy-loaded service to avoid import-time DB connections
_bulk_service: Optional["BulkIssuanceService"] = None


def _get_bulk_service():
    """Lazy-load BulkIssuanceService."""
    global _bulk_service
    if _bulk_service is None:
        from repositories.engine import get_ticket_store
        from services.wiring import build_bulk_service

        _bulk_service = build_bulk_service(get_ticket_store())
    return _bulk_service


def lambda_handler(event, context):
    """Handle POST /tickets/bulk."""

    def _issue():
        request = BulkCreateRequest.model_validate(parse_json_body(event))
        result = _get_bulk_service().issue(request.event_id, request.tickets)
        return json_response(201, result)

    return run_handler("create tickets", _issue, logger)


def _raw_body(event) -> str:
    body = event.get("body") or ""
    if event.get("isBase64Encoded"):
        body = base64.b64decode(body).decode("utf-8")
    return body


def import_handler(event, context):
    """Handle POST /events/{id}/tickets/import with a text/csv body."""
    from services.csv_import import parse_ticket_csv

    def _import():
        event_id = path_param(event, "id")
        if not event_id:
            raise ValidationError("Event ID is required")
        parsed = parse_ticket_csv(_raw_body(event))
        if not parsed.ok:
            raise ValidationError("; ".join(parsed.errors))
        result = _get_bulk_service().issue(event_id, parsed.rows)
        return json_response(201, result)

    return run_handler("import tickets", _import, logger)
