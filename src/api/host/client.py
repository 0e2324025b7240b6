"""Client for the CrowdStrike Falcon host API (IOC management and detections).

Requests authenticate with HTTP basic auth. Dates in queries are sent as
RFC3339 text.
"""

from collections.abc import Sequence
from typing import Any, TypeVar

from src.api.core.auth import BasicAuth
from src.api.core.options import OptionFunc, set_url
from src.api.core.params import (
    Params,
    add_int,
    add_rfc3339_time,
    add_sort_fields,
    add_string,
    add_string_list,
    ids_to_params,
)
from src.api.core.targets import ModelTarget, RawTarget, ResponseTarget, SupportsWriteBytes
from src.api.core.timestamps import normalize_timestamps
from src.api.core.transport import Transport
from src.api.host.models import (
    IOC,
    DeviceCountResponse,
    ProcessResponse,
    ResolveResponse,
    SearchIOCsRequest,
    SearchIOCsResponse,
)
from src.core.config.settings import DEFAULT_HOST_URL
from src.core.exceptions.errors import MissingParametersError

T = TypeVar("T")

IOCS_QUERY_PATH = "indicators/queries/iocs/v1"
IOCS_ENTITIES_PATH = "indicators/entities/iocs/v1"
DEVICE_COUNT_PATH = "indicators/aggregates/devices-count/v1"
DEVICES_RAN_ON_PATH = "indicators/queries/devices/v1"
PROCESSES_RAN_ON_PATH = "indicators/queries/processes/v1"
PROCESS_DETAILS_PATH = "processes/entities/processes/v1"
DETECTS_PATH = "detects/entities/detects/v1"


def search_iocs_request_to_params(req: SearchIOCsRequest) -> Params:
    """Encode an IOC search."""
    params: Params = []
    add_string_list("types", req.types, params)
    add_string_list("values", req.values, params)
    add_string_list("policies", req.policies, params)
    add_string_list("share_levels", req.share_levels, params)
    add_string_list("sources", req.sources, params)
    add_rfc3339_time("from.expiration_timestamp", req.from_expiration_timestamp, params)
    add_rfc3339_time("to.expiration_timestamp", req.to_expiration_timestamp, params)
    if req.sort is not None:
        add_sort_fields("sort", [req.sort], params)
    if req.limit != 0:
        add_int("limit", req.limit, params)
    if req.offset != 0:
        add_int("offset", req.offset, params)
    return params


def indicator_params(ioc_type: str, value: str, **extra: str) -> Params:
    """Build the ``type``/``value`` pair used by the per-indicator lookups."""
    params: Params = []
    add_string("type", ioc_type, params)
    add_string("value", value, params)
    for name, val in extra.items():
        add_string(name, val, params)
    return params


def _require(**values: Any) -> None:
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise MissingParametersError(missing=missing)


class HostClient:
    """Falcon host API client.

    Every operation has a typed variant returning the decoded reply and a
    ``*_json`` variant writing the raw JSON reply to a byte sink.

    If no URL option is given, DEFAULT_HOST_URL is used.
    """

    def __init__(self, *options: OptionFunc) -> None:
        """Initialize the client.

        Args:
            *options: Configuration options. Applied after the default URL.

        Raises:
            InvalidURLError: If a URL option is invalid.
            MissingCredentialsError: If the id or key is missing.
        """
        self.transport = Transport(set_url(DEFAULT_HOST_URL), *options)
        config = self.transport.config
        self.auth = BasicAuth(config.client_id, config.client_secret)

    def __enter__(self) -> "HostClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if the transport created it."""
        self.transport.close()

    def _send(
        self,
        method: str,
        path: str,
        target: ResponseTarget[T],
        params: Params | None = None,
        body: Any = None,
    ) -> T | None:
        return self.transport.send(
            method, path, auth=self.auth, params=params, body=body, target=target
        )

    def _typed(
        self,
        method: str,
        path: str,
        model: type[T],
        params: Params | None = None,
        body: Any = None,
    ) -> T:
        """Send a request and decode the reply into ``model`` with normalized timestamps."""
        return normalize_timestamps(self._send(method, path, ModelTarget(model), params, body))

    def _raw(
        self,
        method: str,
        path: str,
        sink: SupportsWriteBytes,
        params: Params | None = None,
        body: Any = None,
    ) -> None:
        self._send(method, path, RawTarget(sink), params, body)

    # Search

    def search_iocs(self, req: SearchIOCsRequest) -> SearchIOCsResponse:
        """Search uploaded IOCs; the reply lists IOC ids."""
        params = search_iocs_request_to_params(req)
        return self._typed("GET", IOCS_QUERY_PATH, SearchIOCsResponse, params)

    def search_iocs_json(self, req: SearchIOCsRequest, sink: SupportsWriteBytes) -> None:
        """Search uploaded IOCs and write the raw JSON reply to ``sink``."""
        self._raw("GET", IOCS_QUERY_PATH, sink, search_iocs_request_to_params(req))

    def device_count(self, ioc_type: str, value: str) -> DeviceCountResponse:
        """Count the devices an indicator was seen on."""
        _require(type=ioc_type, value=value)
        params = indicator_params(ioc_type, value)
        return self._typed("GET", DEVICE_COUNT_PATH, DeviceCountResponse, params)

    def device_count_json(self, ioc_type: str, value: str, sink: SupportsWriteBytes) -> None:
        """Count devices for an indicator and write the raw JSON reply to ``sink``."""
        _require(type=ioc_type, value=value)
        self._raw("GET", DEVICE_COUNT_PATH, sink, indicator_params(ioc_type, value))

    def devices_ran_on(self, ioc_type: str, value: str) -> SearchIOCsResponse:
        """List the ids of devices an indicator ran on."""
        _require(type=ioc_type, value=value)
        params = indicator_params(ioc_type, value)
        return self._typed("GET", DEVICES_RAN_ON_PATH, SearchIOCsResponse, params)

    def devices_ran_on_json(self, ioc_type: str, value: str, sink: SupportsWriteBytes) -> None:
        """List devices for an indicator and write the raw JSON reply to ``sink``."""
        _require(type=ioc_type, value=value)
        self._raw("GET", DEVICES_RAN_ON_PATH, sink, indicator_params(ioc_type, value))

    def processes_ran_on(self, ioc_type: str, value: str, device_id: str) -> SearchIOCsResponse:
        """List the ids of processes on a device associated with an indicator."""
        _require(type=ioc_type, value=value, device_id=device_id)
        params = indicator_params(ioc_type, value, device_id=device_id)
        return self._typed("GET", PROCESSES_RAN_ON_PATH, SearchIOCsResponse, params)

    def processes_ran_on_json(
        self, ioc_type: str, value: str, device_id: str, sink: SupportsWriteBytes
    ) -> None:
        """List processes for an indicator on a device; raw JSON goes to ``sink``."""
        _require(type=ioc_type, value=value, device_id=device_id)
        params = indicator_params(ioc_type, value, device_id=device_id)
        self._raw("GET", PROCESSES_RAN_ON_PATH, sink, params)

    def process_details(self, ids: Sequence[str]) -> ProcessResponse:
        """Fetch process details; start/stop times are normalized."""
        _require(ids=ids)
        return self._typed("GET", PROCESS_DETAILS_PATH, ProcessResponse, ids_to_params(ids))

    def process_details_json(self, ids: Sequence[str], sink: SupportsWriteBytes) -> None:
        """Fetch process details and write the raw JSON reply to ``sink``."""
        _require(ids=ids)
        self._raw("GET", PROCESS_DETAILS_PATH, sink, ids_to_params(ids))

    # Writes

    def upload_iocs(self, iocs: Sequence[IOC]) -> SearchIOCsResponse:
        """Upload new IOCs."""
        _require(iocs=iocs)
        body = [ioc.to_body() for ioc in iocs]
        return self._typed("POST", IOCS_ENTITIES_PATH, SearchIOCsResponse, body=body)

    def upload_iocs_json(self, iocs: Sequence[IOC], sink: SupportsWriteBytes) -> None:
        """Upload new IOCs and write the raw JSON reply to ``sink``."""
        _require(iocs=iocs)
        self._raw("POST", IOCS_ENTITIES_PATH, sink, body=[ioc.to_body() for ioc in iocs])

    def update_iocs(self, ids: Sequence[str], ioc: IOC | None) -> SearchIOCsResponse:
        """Apply the non-empty fields of ``ioc`` to the IOCs with the given ids."""
        _require(ids=ids, ioc=ioc)
        return self._typed(
            "PATCH", IOCS_ENTITIES_PATH, SearchIOCsResponse, ids_to_params(ids), ioc.to_body()
        )

    def update_iocs_json(
        self, ids: Sequence[str], ioc: IOC | None, sink: SupportsWriteBytes
    ) -> None:
        """Update IOCs by id and write the raw JSON reply to ``sink``."""
        _require(ids=ids, ioc=ioc)
        self._raw("PATCH", IOCS_ENTITIES_PATH, sink, ids_to_params(ids), ioc.to_body())

    def delete_iocs(self, ids: Sequence[str]) -> SearchIOCsResponse:
        """Delete the IOCs with the given ids."""
        _require(ids=ids)
        return self._typed("DELETE", IOCS_ENTITIES_PATH, SearchIOCsResponse, ids_to_params(ids))

    def delete_iocs_json(self, ids: Sequence[str], sink: SupportsWriteBytes) -> None:
        """Delete IOCs by id and write the raw JSON reply to ``sink``."""
        _require(ids=ids)
        self._raw("DELETE", IOCS_ENTITIES_PATH, sink, ids_to_params(ids))

    def resolve(self, ids: Sequence[str], to_status: str) -> ResolveResponse:
        """Move detections to a new status, e.g. ``true_positive`` or ``ignored``."""
        _require(ids=ids, to_status=to_status)
        params = ids_to_params(ids, to_status=to_status)
        return self._typed("PATCH", DETECTS_PATH, ResolveResponse, params)

    def resolve_json(self, ids: Sequence[str], to_status: str, sink: SupportsWriteBytes) -> None:
        """Change detection status and write the raw JSON reply to ``sink``."""
        _require(ids=ids, to_status=to_status)
        self._raw("PATCH", DETECTS_PATH, sink, ids_to_params(ids, to_status=to_status))
