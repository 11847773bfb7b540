"""
Environment-specific configuration settings.

Defaults suit local development; production overrides pool sizing.
"""

from dataclasses import dataclass
import os
from typing import Optional


def _env_bool(name: str, default: bool) -> bool:
    return os.environ.get(name, str(default)).lower() == "true"


@dataclass
class Settings:
    """Application settings read once per process."""

    # Environment
    environment: str = "dev"
    aws_region: str = "eu-west-2"

    # Database Configuration
    database_url: Optional[str] = None
    db_secret_arn: Optional[str] = None
    auto_create_schema: bool = False
    db_pool_size: int = 1
    db_max_overflow: int = 2

    # Ticket codes
    code_length: int = 8
    code_max_attempts: int = 10
    min_code_length: int = 3

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        env = os.environ.get("ENVIRONMENT", "dev")
        common = dict(
            environment=env,
            aws_region=os.environ.get("AWS_REGION", "eu-west-2"),
            database_url=os.environ.get("DATABASE_URL") or None,
            db_secret_arn=os.environ.get("DB_SECRET_ARN") or None,
            auto_create_schema=_env_bool("AUTO_CREATE_SCHEMA", False),
            code_length=int(os.environ.get("TICKET_CODE_LENGTH", "8")),
            code_max_attempts=int(os.environ.get("TICKET_CODE_MAX_ATTEMPTS", "10")),
            min_code_length=int(os.environ.get("TICKET_CODE_MIN_LENGTH", "3")),
        )

        # Production overrides
        if env == "prod":
            return cls(db_pool_size=5, db_max_overflow=10, **common)

        return cls(**common)
