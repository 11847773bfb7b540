import json

import pytest

from handlers import main


def _event(method, path):
    return {"requestContext": {"http": {"method": method, "path": path}}}


def test_main_routes_health(monkeypatch):
    monkeypatch.setattr(main.health_check, "lambda_handler", lambda e, c: {"status": "ok"})
    resp = main.lambda_handler(_event("GET", "/health"), None)
    assert resp["status"] == "ok"


def test_main_routes_ticket_creation(monkeypatch):
    marker = {}

    def fake_handler(event, context):
        marker["called"] = True
        return {"statusCode": 201}

    monkeypatch.setattr(main.tickets, "lambda_handler", fake_handler)
    resp = main.lambda_handler(_event("POST", "/tickets"), None)
    assert resp["statusCode"] == 201
    assert marker["called"] is True


@pytest.mark.parametrize(
    "method, path, module, attr, params",
    [
        ("GET", "/events", "events", "lambda_handler", {}),
        ("DELETE", "/events/e-1", "events", "lambda_handler", {"id": "e-1"}),
        ("POST", "/events/e-1/tickets/import", "bulk_tickets", "import_handler", {"id": "e-1"}),
        ("POST", "/tickets/bulk", "bulk_tickets", "lambda_handler", {}),
        ("POST", "/tickets/scan", "redemption", "scan_handler", {}),
        ("GET", "/tickets/activity", "redemption", "activity_handler", {}),
        ("GET", "/tickets/check/abc123", "redemption", "check_handler", {"code": "abc123"}),
        ("POST", "/tickets/t-1/redeem", "redemption", "redeem_handler", {"id": "t-1"}),
        ("POST", "/tickets/t-1/unredeem", "redemption", "unredeem_handler", {"id": "t-1"}),
        ("PUT", "/tickets/t-1", "tickets", "lambda_handler", {"id": "t-1"}),
        ("GET", "/tickets/t-1/", "tickets", "lambda_handler", {"id": "t-1"}),
    ],
)
def test_main_routes_with_path_parameters(monkeypatch, method, path, module, attr, params):
    seen = {}

    def fake_handler(event, context):
        seen["params"] = event["pathParameters"]
        return {"statusCode": 200}

    monkeypatch.setattr(getattr(main, module), attr, fake_handler)
    resp = main.lambda_handler(_event(method, path), None)
    assert resp["statusCode"] == 200
    assert seen["params"] == params


def test_main_unknown_route():
    resp = main.lambda_handler(_event("GET", "/unknown"), None)
    assert resp["statusCode"] == 404
    body = json.loads(resp["body"])
    assert body["message"] == "Route not found"
    assert body["route"] == "GET /unknown"


def test_main_wrong_method_is_not_routed():
    resp = main.lambda_handler(_event("PATCH", "/tickets/t-1"), None)
    assert resp["statusCode"] == 404
