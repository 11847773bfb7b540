"""Lightweight health check handler."""

import os
from datetime import datetime, timezone

from sqlalchemy import text

from utils.http import json_response, query_param
from utils.logging_config import get_logger

logger = get_logger(__name__)


def _database_status() -> str:
    from repositories.engine import get_db_engine

    try:
        with get_db_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        return "ok"
    except Exception as exc:
        logger.warning("Database health check failed", extra={"error": str(exc)})
        return "unavailable"


def lambda_handler(event, context):
    """Return 200 when the stack is alive; ``?deep=true`` also pings the database."""
    body = {
        "status": "ok",
        "environment": os.environ.get("ENVIRONMENT", "dev"),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if (query_param(event or {}, "deep") or "").lower() == "true":
        body["database"] = _database_status()
        if body["database"] != "ok":
            body["status"] = "degraded"
            return json_response(503, body)
    return json_response(200, body)
