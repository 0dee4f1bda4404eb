"""Wait durations between retries.

All values are in seconds.
"""
import random
from typing import Optional

# Pause after switching keys so the next key is not hit in the same window.
ROTATION_COOLDOWN = 10.0

TRANSIENT_BASE = 1.0
TRANSIENT_JITTER = 0.5

ROTATION_BACKOFF_BASE = 8.0
ROTATION_BACKOFF_JITTER = 4.0


def transient_backoff(attempt: int, rng: Optional[random.Random] = None) -> float:
    """Exponential backoff for transient failures.

    Args:
        attempt: Attempt number, counted from 1
        rng: Optional random source for the jitter

    Returns:
        ``2**attempt`` seconds plus jitter in [0, 0.5)
    """
    rng = rng or random
    return (2 ** attempt) * TRANSIENT_BASE + rng.random() * TRANSIENT_JITTER


def rotation_backoff(rng: Optional[random.Random] = None) -> float:
    """Backoff for a rate-limited key when there is no other key to switch to.

    Returns:
        8 seconds plus jitter in [0, 4)
    """
    rng = rng or random
    return ROTATION_BACKOFF_BASE + rng.random() * ROTATION_BACKOFF_JITTER
