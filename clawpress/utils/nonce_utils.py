"""
CSRF nonces for the admin actions.

A nonce is bound to an action, a user and a time window. Windows ("ticks") are
half a lifetime long and a nonce from the current or the previous tick is
accepted, so a nonce stays valid for between one half and one full lifetime.
"""

import hashlib
import hmac
import math
import time
from typing import Optional

from ..config import get_config

NONCE_LENGTH = 10


def nonce_tick(now: Optional[float] = None, lifetime: Optional[int] = None) -> int:
    """Return the current nonce window number."""
    if lifetime is None:
        lifetime = get_config().security.nonce_lifetime_seconds
    if now is None:
        now = time.time()
    return math.ceil(now / (lifetime / 2))


def _nonce_hash(tick: int, action: str, user_id: int) -> str:
    secret = get_config().security.nonce_secret.encode("utf-8")
    message = f"{tick}|{action}|{user_id}".encode("utf-8")
    return hmac.new(secret, message, hashlib.sha256).hexdigest()[-NONCE_LENGTH - 2 : -2]


def create_nonce(action: str, user_id: int, now: Optional[float] = None) -> str:
    """
    Create a nonce for an action on behalf of a user.

    Args:
        action: Action name, e.g. ``clawpress_create``
        user_id: User the nonce is issued to
        now: Optional unix time, defaults to the current time

    Returns:
        Short hex token
    """
    return _nonce_hash(nonce_tick(now), action, user_id)


def verify_nonce(
    nonce: Optional[str], action: str, user_id: int, now: Optional[float] = None
) -> int:
    """
    Check a nonce.

    Returns:
        1 if issued in the current window, 2 if issued in the previous one,
        0 if invalid or expired
    """
    if not nonce:
        return 0

    tick = nonce_tick(now)

    if hmac.compare_digest(_nonce_hash(tick, action, user_id), nonce):
        return 1
    if hmac.compare_digest(_nonce_hash(tick - 1, action, user_id), nonce):
        return 2
    return 0
