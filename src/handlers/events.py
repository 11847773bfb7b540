"""Handlers for /events and /events/{id}."""

from typing import Optional

from models.event import EventCreate, EventUpdate
from utils.http import http_method, json_response, parse_json_body, path_param, run_handler
from utils.logging_config import get_logger

logger = get_logger(__name__)

# Lazy-loaded service to avoid import-time DB connections
_event_service: Optional["EventService"] = None


def _get_event_service():
    """Lazy-load EventService."""
    global _event_service
    if _event_service is None:
        from repositories.engine import get_ticket_store
        from services.wiring import build_event_service

        _event_service = build_event_service(get_ticket_store())
    return _event_service


def lambda_handler(event, context):
    """Dispatch on method and on whether an event id is present."""
    method = http_method(event)
    event_id = path_param(event, "id")

    if event_id is None:
        if method == "POST":
            return run_handler(
                "create event",
                lambda: json_response(
                    201, _get_event_service().create_event(EventCreate.model_validate(parse_json_body(event)))
                ),
                logger,
            )
        return run_handler(
            "fetch events", lambda: json_response(200, _get_event_service().list_events()), logger
        )

    if method == "PUT":
        return run_handler(
            "update event",
            lambda: json_response(
                200,
                _get_event_service().update_event(event_id, EventUpdate.model_validate(parse_json_body(event))),
            ),
            logger,
        )
    if method == "DELETE":
        def _delete():
            _get_event_service().delete_event(event_id)
            return json_response(200, {"message": "Event deleted successfully"})

        return run_handler("delete event", _delete, logger)
    return run_handler(
        "fetch event", lambda: json_response(200, _get_event_service().get_event(event_id)), logger
    )
