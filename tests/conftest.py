"""
Pytest configuration to ensure paths are set up correctly for tests.

This allows imports like `from handlers import tickets` to work when running
tests, simulating the Lambda environment where code is deployed from the src/
directory.
"""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest


def _ensure_paths_on_sys_path() -> None:
    """Add repository root AND src/ to sys.path if missing.

    The src/ directory is added to simulate Lambda's import behavior,
    where the deployment asset makes src/ the root of the package.
    """
    repo_root = Path(__file__).resolve().parents[1]
    src_root = repo_root / "src"

    root_str = str(repo_root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)

    src_str = str(src_root)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


_ensure_paths_on_sys_path()

# Offline-friendly defaults so nothing reaches AWS or a real database.
os.environ.setdefault("AWS_REGION", "eu-west-2")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-2")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("ENVIRONMENT", "dev")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_SCHEMA", "true")

from repositories.engine import build_engine  # noqa: E402
from repositories.ticket_store import TicketStore  # noqa: E402


@pytest.fixture
def store():
    """Fresh in-memory store with tables created."""
    engine = build_engine("sqlite://")
    ticket_store = TicketStore(engine)
    ticket_store.create_schema()
    yield ticket_store
    engine.dispose()


@pytest.fixture
def file_store(tmp_path):
    """File-backed store so each thread gets its own connection."""
    engine = build_engine(f"sqlite:///{tmp_path / 'tickets.db'}")
    ticket_store = TicketStore(engine)
    ticket_store.create_schema()
    yield ticket_store
    engine.dispose()


def add_event(ticket_store, event_id="evt-1", name="Demo"):
    """Insert an event directly and return its id."""
    ticket_store.insert_event(
        {
            "id": event_id,
            "name": name,
            "start_date": datetime(2025, 1, 1, tzinfo=timezone.utc),
            "end_date": datetime(2025, 1, 2, tzinfo=timezone.utc),
            "created_at": datetime.now(timezone.utc),
        }
    )
    return event_id


def add_ticket(ticket_store, code, ticket_id=None, event_id="evt-1", name="John", surname="Doe"):
    """Insert an unused ticket directly and return its id."""
    ticket_id = ticket_id or f"tkt-{code}"
    ticket_store.insert_ticket(
        {
            "id": ticket_id,
            "code": code,
            "name": name,
            "surname": surname,
            "event_id": event_id,
            "used": False,
            "used_at": None,
            "created_at": datetime.now(timezone.utc),
        }
    )
    return ticket_id


class ScriptedGenerator:
    """Code generator that replays a fixed sequence, then repeats the last code."""

    def __init__(self, *codes):
        self.codes = list(codes)
        self.calls = 0

    def __call__(self):
        code = self.codes[min(self.calls, len(self.codes) - 1)]
        self.calls += 1
        return code
