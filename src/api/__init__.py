"""Client library for the CrowdStrike intelligence and Falcon host APIs."""

from src.api.core import (
    ALL_FIELDS,
    BASIC_FIELDS,
    SortField,
    set_credentials,
    set_error_log,
    set_http_client,
    set_trace_log,
    set_url,
)
from src.api.host import IOC, HostClient, SearchIOCsRequest
from src.api.intel import ActorRequest, IndicatorRequest, IntelClient

__all__ = [
    "ALL_FIELDS",
    "BASIC_FIELDS",
    "IOC",
    "ActorRequest",
    "HostClient",
    "IndicatorRequest",
    "IntelClient",
    "SearchIOCsRequest",
    "SortField",
    "set_credentials",
    "set_error_log",
    "set_http_client",
    "set_trace_log",
    "set_url",
]
