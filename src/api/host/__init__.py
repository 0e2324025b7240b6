"""Falcon host API: IOC management, device and process lookups, detections."""

from src.api.host.client import HostClient, search_iocs_request_to_params
from src.api.host.models import (
    IOC,
    DeviceCountResponse,
    Process,
    ProcessResponse,
    ResolveResponse,
    SearchIOCsRequest,
    SearchIOCsResponse,
)

__all__ = [
    "IOC",
    "DeviceCountResponse",
    "HostClient",
    "Process",
    "ProcessResponse",
    "ResolveResponse",
    "SearchIOCsRequest",
    "SearchIOCsResponse",
    "search_iocs_request_to_params",
]
