"""Process-wide SQLAlchemy engine and store accessors."""

from __future__ import annotations

import json
from typing import Optional

import boto3
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool, StaticPool

from utils.logging_config import get_logger
from utils.settings import Settings

logger = get_logger(__name__)

# Connection pooling for Lambda reuse.
_engine: Optional[Engine] = None
_store = None


def get_db_engine(settings: Optional[Settings] = None) -> Engine:
    """Get or create the SQLAlchemy engine shared by every request."""
    global _engine
    if _engine is None:
        settings = settings or Settings.from_environment()
        db_url = settings.database_url
        if not db_url and settings.db_secret_arn:
            db_url = _secret_to_db_url(settings.db_secret_arn, settings.aws_region)
        if not db_url:
            raise RuntimeError("DATABASE_URL or DB_SECRET_ARN must be configured")
        _engine = build_engine(db_url, settings)
        logger.info("Database engine created", extra={"dialect": _engine.dialect.name})
    return _engine


def build_engine(db_url: str, settings: Optional[Settings] = None) -> Engine:
    """Create an engine; in-memory SQLite gets a single shared connection."""
    settings = settings or Settings()
    if db_url in ("sqlite://", "sqlite:///:memory:"):
        return _enable_sqlite_foreign_keys(
            create_engine(
                db_url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        )
    if db_url.startswith("sqlite"):
        return _enable_sqlite_foreign_keys(create_engine(db_url, connect_args={"timeout": 30}))
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
        pool_recycle=300,
    )


def _enable_sqlite_foreign_keys(engine: Engine) -> Engine:
    """SQLite ships with foreign keys off; turn them on for every new connection."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def _secret_to_db_url(secret_arn: str, region: str) -> Optional[str]:
    """Build a SQLAlchemy URL from an RDS secret."""
    sm = boto3.client("secretsmanager", region_name=region)
    secret = json.loads(sm.get_secret_value(SecretId=secret_arn)["SecretString"])
    host = secret.get("host")
    port = secret.get("port", 5432)
    username = secret.get("username")
    password = secret.get("password")
    dbname = secret.get("dbname", "postgres")
    if not (host and username and password):
        logger.warning("DB secret is missing connection fields", extra={"secret_arn": secret_arn})
        return None
    return f"postgresql+psycopg2://{username}:{password}@{host}:{port}/{dbname}"


def get_ticket_store():
    """Return the shared TicketStore, creating tables on first use when enabled."""
    global _store
    if _store is None:
        from repositories.ticket_store import TicketStore

        settings = Settings.from_environment()
        store = TicketStore(get_db_engine(settings))
        if settings.auto_create_schema:
            store.create_schema()
        _store = store
    return _store


def dispose_engine() -> None:
    """Tear down the pool at process shutdown (and between tests)."""
    global _engine, _store
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _store = None
