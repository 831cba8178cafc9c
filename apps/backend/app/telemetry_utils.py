from __future__ import annotations

import base64
import math
import secrets
import time
from datetime import datetime, timezone
from typing import Any

# 1x1 transparent gif served by the pixel endpoint
PIXEL_GIF = base64.b64decode("R0lGODlhAQABAIAAAAAAAP///ywAAAAAAQABAAACAUwAOw==")
PIXEL_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
}


def utcnow() -> datetime:
    """Naive UTC, the form every timestamp column is stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_ts(ts: str | None) -> datetime | None:
    if not ts:
        return None
    try:
        # accepts "2026-01-29T12:34:56.000Z" style
        dt = datetime.fromisoformat(str(ts).strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def day_key(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%d")


def epoch_seconds(dt: datetime) -> float:
    return dt.replace(tzinfo=timezone.utc).timestamp()


def sanitize_short(v: Any, max_len: int = 80) -> str | None:
    if v is None:
        return None
    return str(v)[:max_len]


def clean_optional(v: Any, max_len: int = 120) -> str | None:
    # "" / None both mean "not provided"
    if v is None:
        return None
    s = str(v).strip()
    return s[:max_len] if s else None


# INTEGER columns are 32-bit on Postgres
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1


def finite_number(v: Any) -> int | None:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return None
    if isinstance(v, float) and not math.isfinite(v):
        return None
    n = round(v)
    if not INT_MIN <= n <= INT_MAX:
        return None
    return n


def new_session_id() -> str:
    return secrets.token_hex(8) + format(int(time.time() * 1000), "x")
