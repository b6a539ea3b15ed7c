"""Formatting helpers for amounts, backend timestamps and phone numbers."""
import re
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

KIGALI_TZ = ZoneInfo("Africa/Kigali")

_HAS_TZ = re.compile(r"(Z|[+-]\d{2}:?\d{2})$")
_PHONE_CHARS = re.compile(r"[^0-9+]")


def format_rwf(amount: int) -> str:
    """Whole RWF with comma thousands separators, e.g. 15000 -> '15,000'."""
    return f"{int(amount):,}"


def parse_backend_date(value) -> datetime | None:
    """
    Parse a timestamp returned by the orders backend.

    The backend serialises LocalDateTime without an offset; those values are
    UTC. Returns None for empty or unparsable input.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    raw = str(value).strip()
    if not raw:
        return None

    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    elif not _HAS_TZ.search(raw):
        raw = raw + "+00:00"

    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        return None


def format_datetime_kigali(value, fmt: str = "%b %d, %Y, %I:%M %p") -> str:
    parsed = parse_backend_date(value)
    if not parsed:
        return "-"
    return parsed.astimezone(KIGALI_TZ).strftime(fmt)


def normalize_phone(phone: str | None) -> str | None:
    """Normalise a Rwandan phone number to 250XXXXXXXXX digits."""
    if phone is None or not phone.strip():
        return None

    clean = _PHONE_CHARS.sub("", phone)
    if not clean:
        return None

    if clean.startswith("+"):
        clean = clean[1:]
    if clean.startswith("0"):
        clean = "250" + clean[1:]
    elif not clean.startswith("250") and len(clean) == 9:
        clean = "250" + clean

    return clean
