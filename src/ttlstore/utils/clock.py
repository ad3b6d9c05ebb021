"""Time source for expiration.

Every TTL computation and sweep comparison goes through current_timestamp()
so writes and sweeps agree on units and rounding.
"""

from __future__ import annotations

import math
import time
from typing import Callable

Clock = Callable[[], int]


def current_timestamp() -> int:
    """Get the current Unix time, rounded down to whole seconds."""
    return math.floor(time.time())
