"""
Lenient conversion of the text values found in server responses.

Servers encode booleans, numbers and timestamps in several legacy
ways.  None of the functions here raise on malformed input, they return
the given default instead, so that one bad property never aborts the
parsing of a whole listing.
"""
from datetime import datetime
from datetime import timedelta
from datetime import timezone
from email.utils import parsedate_to_datetime
from typing import Any
from typing import Optional

HTTP_DATE_FORMAT = "%a, %d %b %Y %H:%M:%S GMT"
OCS_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def to_bool(text: Optional[str]) -> bool:
    """
    Truthy-string rule used by the server for flags like oc:favorite:
    leading whitespace, an optional sign and leading zeros are skipped,
    then the value is true if it starts with Y, T (any case) or a
    non-zero digit.  "1", "true", "yes" are true; "", "0", "false" are
    false.
    """
    if not text:
        return False
    text = text.lstrip().lstrip("+-").lstrip("0")
    if not text:
        return False
    return text[0] in "YyTt123456789"


def to_int(text: Any, default: int = 0) -> int:
    if text is None:
        return default
    try:
        return int(str(text).strip())
    except ValueError:
        return default


def to_optional_int(text: Any) -> Optional[int]:
    if text is None:
        return None
    try:
        return int(str(text).strip())
    except ValueError:
        return None


def to_float(text: Any, default: float = 0.0) -> float:
    value = to_optional_float(text)
    return default if value is None else value


def to_optional_float(text: Any) -> Optional[float]:
    if text is None:
        return None
    try:
        return float(str(text).strip())
    except ValueError:
        return None


def from_timestamp(seconds: Optional[float]) -> Optional[datetime]:
    if seconds is None:
        return None
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def positive_timestamp(text: Any) -> Optional[datetime]:
    """Unix timestamp to an aware datetime, ignoring zero and negative values"""
    seconds = to_optional_float(text)
    if seconds is None or seconds <= 0:
        return None
    return from_timestamp(seconds)


def add_seconds(instant: Optional[datetime], seconds: float) -> Optional[datetime]:
    if instant is None:
        return None
    return instant + timedelta(seconds=seconds)


def parse_http_date(text: Optional[str]) -> Optional[datetime]:
    """RFC 1123 dates, as used by getlastmodified and creationDateTime"""
    if not text:
        return None
    try:
        return parsedate_to_datetime(text.strip())
    except (TypeError, ValueError, IndexError):
        return None


def format_http_date(instant: datetime) -> str:
    return instant.astimezone(timezone.utc).strftime(HTTP_DATE_FORMAT)


def parse_iso_date(text: Optional[str]) -> Optional[datetime]:
    """ISO8601 timestamps like 2024-03-01T10:00:00+00:00 or ...Z"""
    if not text:
        return None
    text = text.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_iso_date(instant: datetime) -> str:
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.isoformat(timespec="seconds")


def parse_ocs_date(text: Optional[str]) -> Optional[datetime]:
    """The "2024-03-01 10:00:00" format used by the sharing API"""
    if not text:
        return None
    try:
        return datetime.strptime(text.strip(), OCS_DATE_FORMAT)
    except ValueError:
        return None
