"""Core components shared by the API clients."""

from src.api.core.auth import (
    AUTH_HEADER_ID,
    AUTH_HEADER_KEY,
    BasicAuth,
    CredentialAuth,
    HeaderAuth,
)
from src.api.core.data_models import ALL_FIELDS, BASIC_FIELDS, ApiError, Paging, SortField
from src.api.core.options import (
    ClientConfig,
    OptionFunc,
    set_credentials,
    set_error_log,
    set_http_client,
    set_trace_log,
    set_url,
)
from src.api.core.targets import ModelTarget, RawTarget, ResponseTarget
from src.api.core.timestamps import epoch_to_datetime, normalize_timestamps
from src.api.core.transport import Transport

__all__ = [
    "ALL_FIELDS",
    "AUTH_HEADER_ID",
    "AUTH_HEADER_KEY",
    "BASIC_FIELDS",
    "ApiError",
    "BasicAuth",
    "ClientConfig",
    "CredentialAuth",
    "HeaderAuth",
    "ModelTarget",
    "OptionFunc",
    "Paging",
    "RawTarget",
    "ResponseTarget",
    "SortField",
    "Transport",
    "epoch_to_datetime",
    "normalize_timestamps",
    "set_credentials",
    "set_error_log",
    "set_http_client",
    "set_trace_log",
    "set_url",
]
