"""
Ticket code uniqueness.

The existence check only avoids obvious collisions. The UNIQUE constraint on
``tickets.code`` is the real guarantee, so a write rejected as a duplicate is
treated as one more failed attempt rather than an error.
"""

from __future__ import annotations

from typing import Callable, Optional, TypeVar

from services.code_generator import generate_ticket_code
from utils.error_handling import DuplicateCodeError, ExhaustedRetriesError
from utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 10

T = TypeVar("T")


class UniqueCodeResolver:
    """Bounded generate-check(-write) loop over an authoritative store."""

    def __init__(
        self,
        store,
        generator: Callable[[], str] = generate_ticket_code,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.store = store
        self.generator = generator
        self.max_attempts = max_attempts

    def _candidates(self, candidate: Optional[str]):
        for attempt in range(1, self.max_attempts + 1):
            if attempt == 1 and candidate:
                yield attempt, candidate
            else:
                yield attempt, self.generator()

    def resolve(self, candidate: Optional[str] = None) -> str:
        """Return a code that was free at the time of the check."""
        for attempt, code in self._candidates(candidate):
            if not self.store.code_exists(code):
                return code
            logger.info("Ticket code taken, regenerating", extra={"code": code, "attempt": attempt})
        logger.warning("Ticket code retries exhausted", extra={"attempts": self.max_attempts})
        raise ExhaustedRetriesError(self.max_attempts)

    def issue(self, write: Callable[[str], T], candidate: Optional[str] = None) -> T:
        """
        Find a free code and persist with it via ``write(code)``.

        Existence hits and duplicate rejections at write time share one budget.
        """
        for attempt, code in self._candidates(candidate):
            if self.store.code_exists(code):
                logger.info("Ticket code taken, regenerating", extra={"code": code, "attempt": attempt})
                continue
            try:
                return write(code)
            except DuplicateCodeError:
                logger.warning(
                    "Ticket code claimed concurrently, regenerating",
                    extra={"code": code, "attempt": attempt},
                )
        logger.warning("Ticket code retries exhausted", extra={"attempts": self.max_attempts})
        raise ExhaustedRetriesError(self.max_attempts)
