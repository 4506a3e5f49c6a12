"""Cooldown between two batches started by the same caller."""
from typing import Optional

from ..errors import CooldownError


def cooldown_remaining(now: float, last_invocation: Optional[float], window: float) -> float:
    """Seconds still to wait before a new batch may start (0.0 when allowed)."""
    if last_invocation is None or window <= 0:
        return 0.0
    return max(0.0, window - (now - last_invocation))


def ensure_cooldown_elapsed(now: float, last_invocation: Optional[float], window: float) -> None:
    remaining = cooldown_remaining(now, last_invocation, window)
    if remaining > 0:
        raise CooldownError(remaining)
