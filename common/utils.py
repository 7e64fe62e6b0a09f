from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def iso_ms(ts: Optional[datetime]) -> Optional[str]:
    """UTC ISO-8601 string with millisecond precision and 'Z' suffix (None passes through)."""
    if ts is None:
        return None
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
