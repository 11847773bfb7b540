#!/usr/bin/env python3
"""Create the events and tickets tables on the configured database."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from repositories.engine import dispose_engine, get_db_engine  # noqa: E402
from repositories.ticket_store import TicketStore  # noqa: E402


def main():
    try:
        engine = get_db_engine()
    except Exception as e:
        print(f"Error connecting to database: {e}")
        sys.exit(1)

    print(f"Creating schema on {engine.url.render_as_string(hide_password=True)}")

    try:
        TicketStore(engine).create_schema()
        print("Tables created (existing tables were left untouched).")
    except Exception as e:
        print(f"Error creating schema: {e}")
        sys.exit(1)
    finally:
        dispose_engine()


if __name__ == "__main__":
    main()
