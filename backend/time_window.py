# Time-window checks shared by heart-rate analytics
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from errors import AppError, ErrCode


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 string into an aware UTC datetime.

    Returns None when the value is missing or unparsable. A trailing "Z"
    means UTC; timestamps without an offset are taken as UTC.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def is_in_range(timestamp_iso: str, from_: Optional[str] = None, to: Optional[str] = None) -> bool:
    """True when the timestamp parses and lies in the closed window [from_, to]."""
    instant = parse_timestamp(timestamp_iso)
    if instant is None:
        return False

    if from_:
        lower = parse_timestamp(from_)
        if lower is not None and instant < lower:
            return False
    if to:
        upper = parse_timestamp(to)
        if upper is not None and instant > upper:
            return False
    return True


def assert_valid_window(from_: Optional[str], to: Optional[str]) -> None:
    """
    Raise INVALID_TIME_WINDOW when a bound is malformed or from_ > to.

    Does nothing unless both bounds are given. Equal bounds are a valid
    zero-width window.
    """
    if not from_ or not to:
        return
    lower = parse_timestamp(from_)
    upper = parse_timestamp(to)
    if lower is None or upper is None or lower > upper:
        raise AppError.bad_request(
            ErrCode.INVALID_TIME_WINDOW,
            {"from": from_, "to": to},
            "from must be <= to",
        )
