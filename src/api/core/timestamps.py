"""Epoch to calendar timestamp normalization for decoded responses.

The APIs send dates as epoch seconds. Response models keep the raw number and
carry a derived ``datetime`` next to it. Each model lists its pairs in an
``epoch_fields`` class attribute mapping the derived attribute name to the
raw one, e.g. ``{"created_at": "created_epoch"}``.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, TypeVar

from pydantic import BaseModel

T = TypeVar("T")

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def epoch_to_datetime(value: float) -> datetime | None:
    """Convert epoch seconds to an aware UTC datetime.

    The value is narrowed to an integer first, so fractional seconds are
    dropped rather than rounded. Returns None when the instant falls outside
    the years datetime can represent (1-9999).
    """
    try:
        return UNIX_EPOCH + timedelta(seconds=int(value))
    except (OverflowError, ValueError):
        return None


def normalize_timestamps(obj: T) -> T:
    """Populate derived timestamps in place, recursing into nested models.

    Accepts a model, a list or tuple of models, or anything else (returned
    untouched). Returns its argument.
    """
    if isinstance(obj, BaseModel):
        _normalize_model(obj)
    elif isinstance(obj, (list, tuple)):
        for item in obj:
            normalize_timestamps(item)
    return obj


def _normalize_model(model: BaseModel) -> None:
    epoch_fields: dict[str, str] = getattr(type(model), "epoch_fields", {})
    for derived, raw in epoch_fields.items():
        setattr(model, derived, epoch_to_datetime(getattr(model, raw)))

    for name in type(model).model_fields:
        value: Any = getattr(model, name)
        if isinstance(value, (BaseModel, list, tuple)):
            normalize_timestamps(value)
