"""
Door handlers: code check, scan, confirm/undo redemption and activity feed.

A scan redeems an unused ticket immediately. A manual check only looks the
ticket up; staff confirm with POST /tickets/{id}/redeem.
"""

from typing import Optional

from models.redemption import ScanRequest
from utils.http import json_response, parse_json_body, path_param, run_handler
from utils.logging_config import get_logger

logger = get_logger(__name__)

# Lazy-loaded service to avoid import-time DB connections
_redemption_service: Optional["RedemptionService"] = None


def _get_redemption_service():
    """Lazy-load RedemptionService."""
    global _redemption_service
    if _redemption_service is None:
        from repositories.engine import get_ticket_store
        from services.wiring import build_redemption_service

        _redemption_service = build_redemption_service(get_ticket_store())
    return _redemption_service


def check_handler(event, context):
    """Handle GET /tickets/check/{code}."""
    return run_handler(
        "check ticket",
        lambda: json_response(200, _get_redemption_service().search(path_param(event, "code"))),
        logger,
    )


def scan_handler(event, context):
    """Handle POST /tickets/scan with the decoder's raw payload."""

    def _scan():
        request = ScanRequest.model_validate(parse_json_body(event))
        return json_response(200, _get_redemption_service().scan(request.code))

    return run_handler("scan ticket", _scan, logger)


def redeem_handler(event, context):
    """Handle POST /tickets/{id}/redeem (manual confirmation)."""
    return run_handler(
        "redeem ticket",
        lambda: json_response(200, _get_redemption_service().mark_used(path_param(event, "id"))),
        logger,
    )


def unredeem_handler(event, context):
    """Handle POST /tickets/{id}/unredeem (staff correction)."""
    return run_handler(
        "revert ticket",
        lambda: json_response(200, _get_redemption_service().mark_unused(path_param(event, "id"))),
        logger,
    )


def activity_handler(event, context):
    """Handle GET /tickets/activity."""
    return run_handler(
        "fetch scanning activity",
        lambda: json_response(200, _get_redemption_service().activity()),
        logger,
    )
