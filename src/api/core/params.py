"""Query parameter encoding.

Request objects are flattened into an ordered multi-map, a list of
``(key, value)`` pairs. A key may repeat, once per value, and pairs keep the
order in which they were added. Empty strings, empty lists and unset times
contribute nothing.
"""

from collections.abc import Iterable
from datetime import datetime, timezone

from src.api.core.data_models import SortField

Params = list[tuple[str, str]]


def _as_utc(t: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if t.tzinfo is None:
        return t.replace(tzinfo=timezone.utc)
    return t


def is_zero_time(t: datetime | None) -> bool:
    """Return True for an unset time (None or ``datetime.min``)."""
    return t is None or t.replace(tzinfo=None) == datetime.min


def to_epoch_seconds(t: datetime) -> int:
    """Convert a datetime to whole Unix epoch seconds."""
    return int(_as_utc(t).timestamp())


def format_rfc3339(t: datetime) -> str:
    """Format a datetime as RFC3339 without fractional seconds.

    UTC is written as ``Z``, other offsets as ``+hh:mm``.
    """
    text = _as_utc(t).replace(microsecond=0).isoformat()
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def add_string(name: str, value: str | None, params: Params) -> None:
    if value:
        params.append((name, value))


def add_string_list(name: str, values: Iterable[str] | None, params: Params) -> None:
    for value in values or ():
        add_string(name, value, params)


def add_int(name: str, value: int, params: Params) -> None:
    params.append((name, str(value)))


def add_epoch_time(name: str, t: datetime | None, params: Params) -> None:
    """Add a time as integer epoch seconds (intel API convention)."""
    if not is_zero_time(t):
        add_string(name, str(to_epoch_seconds(t)), params)


def add_rfc3339_time(name: str, t: datetime | None, params: Params) -> None:
    """Add a time as RFC3339 text (host API convention)."""
    if not is_zero_time(t):
        add_string(name, format_rfc3339(t), params)


def add_sort_fields(name: str, sort_fields: Iterable[SortField] | None, params: Params) -> None:
    for sort_field in sort_fields or ():
        add_string(name, sort_field.encode(), params)


def ids_to_params(ids: Iterable[str], **extra: str) -> Params:
    """Build ``ids=...`` pairs followed by any extra non-empty string values."""
    params: Params = []
    add_string_list("ids", ids, params)
    for name, value in extra.items():
        add_string(name, value, params)
    return params
