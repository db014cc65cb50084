"""Identifier helpers for teams, trades, trade requests and join codes."""

import secrets
import string
import uuid
from collections.abc import Container

_JOIN_CODE_ALPHABET = string.ascii_uppercase + string.digits


def new_id() -> str:
    """Random UUID4 string, used for team, trade and trade-request ids."""
    return str(uuid.uuid4())


def generate_join_code(length: int = 6, taken: Container[str] = ()) -> str:
    """Return an upper-case alphanumeric join code not present in ``taken``."""
    while True:
        code = "".join(secrets.choice(_JOIN_CODE_ALPHABET) for _ in range(length))
        if code not in taken:
            return code
