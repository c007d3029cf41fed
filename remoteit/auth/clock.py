"""
Signing timestamps

Timestamps are produced at signing time and never cached. The service bounds
them with a tolerance window, so a large clock skew between this machine and
the service makes every request fail with UnauthenticatedError. That skew is
not corrected here.
"""

import time
from datetime import datetime, timezone
from email.utils import formatdate
from typing import Optional

from ..errors import ClockError

ISO_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def _now(now: Optional[float] = None) -> float:
    if now is not None:
        return now
    try:
        return time.time()
    except (OSError, OverflowError, ValueError) as e:
        raise ClockError("System clock is unavailable", e)


def get_timestamp(now: Optional[float] = None) -> str:
    """
    ISO-8601 UTC timestamp to the second, e.g. ``2024-01-01T00:00:00Z``

    Used by the canonical signing scheme.
    """
    seconds = _now(now)
    try:
        return datetime.fromtimestamp(int(seconds), tz=timezone.utc).strftime(ISO_TIMESTAMP_FORMAT)
    except (OSError, OverflowError, ValueError) as e:
        raise ClockError(f"Cannot format clock reading {seconds!r}", e)


def get_date(now: Optional[float] = None) -> str:
    """
    RFC 7231 IMF-fixdate, e.g. ``Mon, 01 Jan 2024 00:00:00 GMT``

    Used for the Date header of the HTTP-Signature scheme. Independent of
    the process locale.
    """
    seconds = _now(now)
    try:
        return formatdate(int(seconds), usegmt=True)
    except (OSError, OverflowError, ValueError) as e:
        raise ClockError(f"Cannot format clock reading {seconds!r}", e)
