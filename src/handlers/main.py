"""
Single entrypoint Lambda that routes HTTP API requests to thin handler modules.

One Lambda keeps the database pool warm across routes.
"""

import re
from typing import Callable, Dict, Tuple

from utils.http import http_method, json_response

from . import bulk_tickets, events, health_check, redemption, tickets

_ID = r"(?P<id>[^/]+)"


def lambda_handler(event, context):
    """
    Entry point invoked by API Gateway HTTP API.

    Matches ``METHOD path`` against the route table and passes path segments
    on as ``pathParameters``.
    """
    method = http_method(event)
    path = event.get("requestContext", {}).get("http", {}).get("path", "")
    path = path.rstrip("/") or "/"
    route_key = f"{method} {path}"

    # Built per call so handlers can be swapped in tests. Order matters:
    # literal /tickets/* routes before /tickets/{id}.
    route_table: Tuple[Tuple[str, str, Callable], ...] = (
        ("GET", r"/health", health_check.lambda_handler),
        ("GET|POST", r"/events", events.lambda_handler),
        ("POST", rf"/events/{_ID}/tickets/import", bulk_tickets.import_handler),
        ("GET|PUT|DELETE", rf"/events/{_ID}", events.lambda_handler),
        ("POST", r"/tickets/bulk", bulk_tickets.lambda_handler),
        ("POST", r"/tickets/scan", redemption.scan_handler),
        ("GET", r"/tickets/activity", redemption.activity_handler),
        ("GET", r"/tickets/check/(?P<code>[^/]*)", redemption.check_handler),
        ("POST", rf"/tickets/{_ID}/redeem", redemption.redeem_handler),
        ("POST", rf"/tickets/{_ID}/unredeem", redemption.unredeem_handler),
        ("GET|POST", r"/tickets", tickets.lambda_handler),
        ("GET|PUT|DELETE", rf"/tickets/{_ID}", tickets.lambda_handler),
    )

    for methods, pattern, handler in route_table:
        if method not in methods.split("|"):
            continue
        match = re.fullmatch(pattern, path)
        if match:
            params: Dict = {**(event.get("pathParameters") or {}), **match.groupdict()}
            return handler({**event, "pathParameters": params}, context)

    return json_response(404, {"message": "Route not found", "route": route_key})
