"""
Shared access code gate.

Submitting entries requires the office's shared code. The code is a plain
string compared for equality; there is no hashing, rotation or per-user
identity. It only keeps casual viewers (for example the office TV) from
posting numbers and is NOT a security boundary. Anyone who knows the code
can submit for any consultant.

The unlocked flag is kept in the signed session cookie, so it lasts for
the browser session.
"""

import enum
import logging
import secrets
from typing import MutableMapping

logger = logging.getLogger(__name__)

SESSION_KEY = "gate_unlocked"


class GateState(str, enum.Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"


def code_matches(supplied: str, expected: str) -> bool:
    if not supplied or not expected:
        return False
    return secrets.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))


def gate_state(session: MutableMapping) -> GateState:
    return GateState.UNLOCKED if session.get(SESSION_KEY) else GateState.LOCKED


def unlock(session: MutableMapping, supplied: str, expected: str) -> bool:
    """Unlock the session when ``supplied`` equals the configured code."""
    ok = code_matches((supplied or "").strip(), expected)
    if ok:
        session[SESSION_KEY] = True
        logger.info("[gate] session unlocked")
    else:
        session.pop(SESSION_KEY, None)
        logger.info("[gate] wrong access code")
    return ok


def lock(session: MutableMapping) -> None:
    session.pop(SESSION_KEY, None)
