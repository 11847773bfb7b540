"""Handlers for /tickets and /tickets/{id}."""

from typing import Optional

from models.ticket import TicketCreate, TicketUpdate
from utils.http import http_method, json_response, parse_json_body, path_param, run_handler
from utils.logging_config import get_logger

logger = get_logger(__name__)

# Lazy-loaded service to avoid import-time DB connections
_ticket_service: Optional["TicketService"] = None


def _get_ticket_service():
    """Lazy-load TicketService."""
    global _ticket_service
    if _ticket_service is None:
        from repositories.engine import get_ticket_store
        from services.wiring import build_ticket_service

        _ticket_service = build_ticket_service(get_ticket_store())
    return _ticket_service


def lambda_handler(event, context):
    """
    Issue, list, read, edit and delete tickets.

    A ``used`` field in a PUT body goes through the redemption state machine,
    so toggling twice never refreshes ``usedAt``.
    """
    method = http_method(event)
    ticket_id = path_param(event, "id")

    if ticket_id is None:
        if method == "POST":
            return run_handler(
                "create ticket",
                lambda: json_response(
                    201, _get_ticket_service().create_ticket(TicketCreate.model_validate(parse_json_body(event)))
                ),
                logger,
            )
        return run_handler(
            "fetch tickets", lambda: json_response(200, _get_ticket_service().list_tickets()), logger
        )

    if method == "PUT":
        return run_handler(
            "update ticket",
            lambda: json_response(
                200,
                _get_ticket_service().update_ticket(ticket_id, TicketUpdate.model_validate(parse_json_body(event))),
            ),
            logger,
        )
    if method == "DELETE":
        def _delete():
            _get_ticket_service().delete_ticket(ticket_id)
            return json_response(200, {"message": "Ticket deleted successfully"})

        return run_handler("delete ticket", _delete, logger)
    return run_handler(
        "fetch ticket", lambda: json_response(200, _get_ticket_service().get_ticket(ticket_id)), logger
    )
