"""Short, human-typeable ticket codes."""

import secrets
import string

TICKET_CODE_ALPHABET = string.ascii_uppercase + string.digits
TICKET_CODE_LENGTH = 8


def generate_ticket_code(length: int = TICKET_CODE_LENGTH, alphabet: str = TICKET_CODE_ALPHABET) -> str:
    """Return a random candidate code. Uniqueness is the resolver's job."""
    return "".join(secrets.choice(alphabet) for _ in range(length))
