"""Normalization of raw scraper values: counts, timestamps, tags."""

import math
import re
from datetime import datetime, timezone

# Sanity window for post timestamps: 2000-01-01 .. 2033-05-18 (Unix seconds).
MIN_TIMESTAMP_SECONDS = 946_684_800
MAX_TIMESTAMP_SECONDS = 2_000_000_000

_COUNT_MULTIPLIERS = {
    "K": 1_000,
    "M": 1_000_000,
    "B": 1_000_000_000,
}

_TRAILING_NON_WORD = re.compile(r"[^\w]+$")


def _parse_number(value) -> float | None:
    """Parse ints, floats and count strings ("1.2K", "1,234") to a float."""
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None

    if not isinstance(value, str):
        return None

    count_str = value.strip().upper().replace(",", "")
    if not count_str:
        return None

    multiplier = 1
    suffix = count_str[-1]
    if suffix in _COUNT_MULTIPLIERS:
        multiplier = _COUNT_MULTIPLIERS[suffix]
        count_str = count_str[:-1]

    try:
        number = float(count_str) * multiplier
    except ValueError:
        return None

    return number if math.isfinite(number) else None


def normalize_count(value) -> int:
    """
    Convert profile-level counts to integers.

    Examples:
        "1.2K" -> 1200
        "1M" -> 1000000
        "1,234" -> 1234
        "n/a" -> 0
    """
    number = _parse_number(value)
    if number is None or number < 0:
        return 0
    return int(number)


def parse_post_count(value) -> int | None:
    """
    Convert a per-post engagement count.

    Unlike profile counts, absence is preserved: missing, unparseable and
    negative values (hidden like counts are reported as -1) map to None.
    """
    number = _parse_number(value)
    if number is None or number < 0:
        return None
    return int(number)


def parse_float(value) -> float | None:
    """Parse an optional non-negative measurement such as a video duration."""
    number = _parse_number(value)
    if number is None or number < 0:
        return None
    return number


def _from_epoch(number: float) -> datetime | None:
    if MIN_TIMESTAMP_SECONDS <= number < MAX_TIMESTAMP_SECONDS:
        return datetime.fromtimestamp(number, tz=timezone.utc)
    if MIN_TIMESTAMP_SECONDS * 1000 <= number < MAX_TIMESTAMP_SECONDS * 1000:
        return datetime.fromtimestamp(number / 1000, tz=timezone.utc)
    return None


def parse_timestamp(value) -> datetime | None:
    """
    Parse a post timestamp into an aware UTC datetime.

    Accepts:
        - ISO 8601: "2024-01-18T18:17:20.000Z", "2024-01-18T18:17:20+02:00"
        - Unix seconds: 1705601840 or "1705601840"
        - Unix milliseconds: 1705601840000

    Naive ISO values are taken as UTC. Anything outside the 2000..2033
    sanity window is rejected.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        return _from_epoch(float(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return _from_epoch(float(text))
        except ValueError:
            pass
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    parsed = parsed.astimezone(timezone.utc)

    if not MIN_TIMESTAMP_SECONDS <= parsed.timestamp() < MAX_TIMESTAMP_SECONDS:
        return None
    return parsed


def _normalize_tag(value, prefix: str) -> str | None:
    if not isinstance(value, str):
        return None
    tag = value.strip().lstrip(prefix).strip()
    tag = _TRAILING_NON_WORD.sub("", tag).lower()
    return tag or None


def normalize_hashtag(value) -> str | None:
    """'#Sale,' / 'sale' / '#SALE' all normalize to 'sale'."""
    return _normalize_tag(value, "#")


def normalize_mention(value) -> str | None:
    """'@Brand.' / 'brand' normalize to 'brand'."""
    return _normalize_tag(value, "@")


def to_iso(value: datetime) -> str:
    """Render an aware datetime as ISO 8601 with a Z suffix."""
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
