"""TicketStore tests on in-memory SQLite."""

from datetime import datetime, timedelta, timezone

import pytest

from conftest import add_event, add_ticket
from utils.error_handling import DuplicateCodeError, StoreError


def _record(ticket_id, code, event_id="evt-1"):
    return {
        "id": ticket_id,
        "code": code,
        "name": "Ann",
        "surname": "Lee",
        "event_id": event_id,
        "used": False,
        "used_at": None,
        "created_at": datetime.now(timezone.utc),
    }


def test_duplicate_code_is_rejected_by_the_store(store):
    add_event(store)
    add_ticket(store, "ABCD1234", ticket_id="t1")

    with pytest.raises(DuplicateCodeError) as exc_info:
        add_ticket(store, "ABCD1234", ticket_id="t2")

    assert exc_info.value.code == "ABCD1234"
    assert store.get_ticket("t2") is None


def test_non_code_integrity_failure_is_a_store_error(store):
    add_event(store)
    add_ticket(store, "ABCD1234", ticket_id="t1")

    with pytest.raises(StoreError):
        add_ticket(store, "OTHER123", ticket_id="t1")


def test_lookup_by_code_is_exact_match(store):
    add_event(store)
    add_ticket(store, "ABCD1234", ticket_id="t1")

    assert store.get_ticket_by_code("ABCD1234")["id"] == "t1"
    assert store.get_ticket_by_code("abcd1234") is None
    assert store.code_exists("ABCD1234")
    assert not store.code_exists("ZZZZ0000")


def test_ticket_rows_embed_event_columns(store):
    add_event(store, name="Launch")
    add_ticket(store, "ABCD1234", ticket_id="t1")

    row = store.get_ticket("t1")

    assert row["event_name"] == "Launch"
    assert row["event_start_date"] == datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert row["created_at"].tzinfo is not None


def test_mark_used_is_compare_and_set(store):
    add_event(store)
    add_ticket(store, "ABCD1234", ticket_id="t1")
    first = datetime(2025, 1, 1, 18, 0, tzinfo=timezone.utc)

    assert store.mark_used("t1", first) is True
    assert store.mark_used("t1", first + timedelta(minutes=5)) is False

    row = store.get_ticket("t1")
    assert row["used"] is True
    assert row["used_at"] == first


def test_mark_unused_clears_timestamp(store):
    add_event(store)
    add_ticket(store, "ABCD1234", ticket_id="t1")
    store.mark_used("t1", datetime.now(timezone.utc))

    assert store.mark_unused("t1") is True
    assert store.mark_unused("t1") is False

    row = store.get_ticket("t1")
    assert row["used"] is False
    assert row["used_at"] is None


def test_mark_used_on_missing_ticket_changes_nothing(store):
    assert store.mark_used("missing", datetime.now(timezone.utc)) is False


def test_batch_insert_skips_duplicates_silently(store):
    add_event(store)
    add_ticket(store, "TAKEN000", ticket_id="existing")
    records = [_record("b1", "FRESH001"), _record("b2", "TAKEN000"), _record("b3", "FRESH002")]

    store.insert_tickets_skip_duplicates(records)

    assert store.existing_ids(["b1", "b2", "b3"]) == {"b1", "b3"}
    assert store.get_ticket_by_code("TAKEN000")["id"] == "existing"


def test_update_ticket_only_touches_holder_fields(store):
    add_event(store)
    add_ticket(store, "ABCD1234", ticket_id="t1")

    assert store.update_ticket("t1", {"name": "Jane", "code": "HACKED00", "used": True})

    row = store.get_ticket("t1")
    assert row["name"] == "Jane"
    assert row["code"] == "ABCD1234"
    assert row["used"] is False


def test_event_ticket_counts(store):
    add_event(store, "evt-1")
    add_event(store, "evt-2", name="Other")
    add_ticket(store, "AAAA0001", event_id="evt-1")
    add_ticket(store, "AAAA0002", event_id="evt-1")

    assert store.count_tickets("evt-1") == 2
    assert store.get_event("evt-1")["ticket_count"] == 2
    assert store.get_event("evt-2")["ticket_count"] == 0


def test_usage_by_event_and_recent_redemptions(store):
    add_event(store, "evt-1", name="Alpha")
    add_ticket(store, "AAAA0001", ticket_id="t1")
    add_ticket(store, "AAAA0002", ticket_id="t2")
    now = datetime.now(timezone.utc)
    store.mark_used("t1", now)

    usage = store.usage_by_event()
    assert usage == [{"event_id": "evt-1", "event_name": "Alpha", "total": 2, "used": 1}]

    recent = store.redemptions_since(now - timedelta(hours=1))
    assert [row["id"] for row in recent] == ["t1"]
    assert store.count_redemptions_since(now + timedelta(minutes=1)) == 0


def test_delete_event_refuses_while_tickets_reference_it(store):
    add_event(store)
    add_ticket(store, "ABCD1234", ticket_id="t1")

    assert store.delete_event("evt-1") is False
    assert store.get_event("evt-1") is not None

    store.delete_ticket("t1")
    assert store.delete_event("evt-1") is True
    assert store.delete_event("evt-1") is False


def test_ticket_for_missing_event_is_rejected(store):
    with pytest.raises(StoreError):
        store.insert_ticket(_record("t1", "ABCD1234", event_id="ghost"))
    assert store.get_ticket("t1") is None
