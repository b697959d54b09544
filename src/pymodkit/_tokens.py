"""Probe token generation."""

from __future__ import annotations

import secrets
import time


def fresh_token() -> str:
    """Return a new opaque token, distinct per call.

    Tokens sort roughly by creation time: a nanosecond clock prefix is
    followed by 64 random bits.
    """
    return f"{time.time_ns():016X}{secrets.token_hex(8).upper()}"
