from __future__ import annotations

import re
from datetime import date, datetime, time, timezone
from typing import Any, Optional

from ..core.exceptions import ValidationError

_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")
_FRACTION_RE = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")
_SHORT_OFFSET_RE = re.compile(r"([+-]\d{2})$")


def _normalize_timestamp(text: str) -> str:
    """Bring Postgres output into the shape ``datetime.fromisoformat`` accepts on 3.10.

    Postgres trims trailing zeros from fractional seconds and may print the
    offset as ``+00``.
    """
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION_RE.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", text, count=1)
    if "T" in text or " " in text:
        text = _SHORT_OFFSET_RE.sub(r"\1:00", text)
    return text


def parse_iso_date(value: Any) -> Optional[date]:
    """Normalize a date-bearing value (``date``, ``datetime`` or ISO string) to ``date``."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            raise ValidationError(f"Invalid date: {value!r}")
    raise ValidationError(f"Unsupported date value: {value!r}")


def parse_iso_datetime(value: Any) -> Optional[datetime]:
    """Normalize a timestamp to an aware UTC ``datetime``.

    Naive values are assumed to already be in UTC. A bare date means midnight.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time())
    elif isinstance(value, str):
        text = _normalize_timestamp(value.strip())
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"Invalid timestamp: {value!r}")
    else:
        raise ValidationError(f"Unsupported timestamp value: {value!r}")

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_month(value: Any) -> str:
    """Validate a ``YYYY-MM`` month string."""
    text = str(value or "").strip()
    if not _MONTH_RE.match(text):
        raise ValidationError(f"Invalid month (YYYY-MM): {value!r}")
    return text


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def today() -> date:
    return now_utc().date()
