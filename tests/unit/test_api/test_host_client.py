"""Tests for the Falcon host API client."""

import base64
import io
import json
from datetime import datetime, timezone

import pytest

from src.api.core.data_models import SortField
from src.api.host import IOC, HostClient, SearchIOCsRequest
from src.core.config.settings import DEFAULT_HOST_URL
from src.core.exceptions.errors import HTTPStatusError, MissingParametersError

IDS_BODY = {
    "meta": {"query_time": 0.5, "trace_id": "abc", "pagination": {"total": 2, "offset": 0, "limit": 100}},
    "resources": ["id-1", "id-2"],
    "errors": [],
}


def basic_header() -> str:
    return "Basic " + base64.b64encode(b"test-id:test-key").decode("ascii")


class TestHostClientInit:
    """Tests for HostClient construction."""

    def test_default_url(self, stub_server) -> None:
        assert HostClient(*stub_server().options()).transport.base_url == DEFAULT_HOST_URL

    def test_public_methods_documented(self) -> None:
        undocumented = [
            name
            for name, member in vars(HostClient).items()
            if callable(member) and not name.startswith("_") and not member.__doc__
        ]
        assert undocumented == []


class TestSearch:
    """Tests for the read operations."""

    def test_search_iocs(self, stub_server) -> None:
        stub = stub_server(body=IDS_BODY)
        req = SearchIOCsRequest(
            types=["domain"],
            from_expiration_timestamp=datetime(2024, 1, 2, tzinfo=timezone.utc),
            sort=SortField(name="type", ascending=True),
            limit=100,
        )

        with HostClient(*stub.options()) as client:
            resp = client.search_iocs(req)

        request = stub.last_request
        assert request.url.path == "/indicators/queries/iocs/v1"
        assert request.url.params.multi_items() == [
            ("types", "domain"),
            ("from.expiration_timestamp", "2024-01-02T00:00:00Z"),
            ("sort", "type.asc"),
            ("limit", "100"),
        ]
        assert request.headers["Authorization"] == basic_header()
        assert resp.resources == ["id-1", "id-2"]
        assert resp.meta.pagination.total == 2
        assert resp.meta.trace_id == "abc"

    def test_search_iocs_json(self, stub_server) -> None:
        stub = stub_server(body=IDS_BODY)
        sink = io.BytesIO()
        HostClient(*stub.options()).search_iocs_json(SearchIOCsRequest(), sink)

        assert json.loads(sink.getvalue()) == IDS_BODY
        assert stub.last_request.url.query == b""

    def test_device_count(self, stub_server) -> None:
        stub = stub_server(body={"resources": [{"device_count": 5, "id": "x"}]})
        resp = HostClient(*stub.options()).device_count("domain", "evil.com")

        assert stub.last_request.url.path == "/indicators/aggregates/devices-count/v1"
        assert stub.last_request.url.params.multi_items() == [("type", "domain"), ("value", "evil.com")]
        assert resp.resources[0].device_count == 5

    def test_devices_ran_on(self, stub_server) -> None:
        stub = stub_server(body=IDS_BODY)
        HostClient(*stub.options()).devices_ran_on("md5", "abc")
        assert stub.last_request.url.path == "/indicators/queries/devices/v1"

    def test_processes_ran_on(self, stub_server) -> None:
        stub = stub_server(body=IDS_BODY)
        HostClient(*stub.options()).processes_ran_on("md5", "abc", "dev-1")

        assert stub.last_request.url.path == "/indicators/queries/processes/v1"
        assert stub.last_request.url.params["device_id"] == "dev-1"

    def test_process_details_normalized(self, stub_server) -> None:
        stub = stub_server(
            body={
                "resources": [
                    {
                        "device_id": "dev-1",
                        "process_id": "p1",
                        "file_name": "evil.exe",
                        "start_timestamp_raw": 1704164645,
                        "stop_timestamp_raw": 1704164705,
                    }
                ]
            }
        )
        resp = HostClient(*stub.options()).process_details(["p1", "p2"])

        assert stub.last_request.url.path == "/processes/entities/processes/v1"
        assert stub.last_request.url.params.get_list("ids") == ["p1", "p2"]
        process = resp.resources[0]
        assert process.file_name == "evil.exe"
        assert process.start_time == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert process.stop_time == datetime(2024, 1, 2, 3, 5, 5, tzinfo=timezone.utc)

    def test_process_details_out_of_range_start(self, stub_server) -> None:
        stub = stub_server(body={"resources": [{"process_id": "p", "start_timestamp_raw": 131234567890123456}]})
        resp = HostClient(*stub.options()).process_details(["p"])

        process = resp.resources[0]
        assert process.process_id == "p"
        assert process.start_time is None
        assert process.stop_time == datetime(1970, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "call",
        [
            lambda c: c.device_count("", "evil.com"),
            lambda c: c.device_count_json("domain", "", io.BytesIO()),
            lambda c: c.devices_ran_on("", ""),
            lambda c: c.processes_ran_on("md5", "abc", ""),
            lambda c: c.process_details([]),
            lambda c: c.process_details_json([], io.BytesIO()),
        ],
    )
    def test_missing_parameters(self, stub_server, call) -> None:
        stub = stub_server(body=IDS_BODY)
        with pytest.raises(MissingParametersError):
            call(HostClient(*stub.options()))
        assert stub.calls == 0


class TestWrites:
    """Tests for the write operations."""

    def test_upload_iocs(self, stub_server) -> None:
        stub = stub_server(body=IDS_BODY)
        iocs = [
            IOC(type="domain", value="evil.com", policy="detect", share_level="red", expiration_days=30),
            IOC(type="md5", value="abc", policy="none"),
        ]

        HostClient(*stub.options()).upload_iocs(iocs)

        request = stub.last_request
        assert request.method == "POST"
        assert request.url.path == "/indicators/entities/iocs/v1"
        assert json.loads(request.content) == [
            {"type": "domain", "value": "evil.com", "policy": "detect", "shareLevel": "red", "expiration_days": 30},
            {"type": "md5", "value": "abc", "policy": "none"},
        ]

    def test_update_iocs(self, stub_server) -> None:
        stub = stub_server(body=IDS_BODY)
        HostClient(*stub.options()).update_iocs(["id-1"], IOC(description="updated"))

        request = stub.last_request
        assert request.method == "PATCH"
        assert request.url.params.get_list("ids") == ["id-1"]
        assert json.loads(request.content) == {"description": "updated"}

    def test_update_iocs_requires_ioc(self, stub_server) -> None:
        stub = stub_server(body=IDS_BODY)
        with pytest.raises(MissingParametersError) as exc_info:
            HostClient(*stub.options()).update_iocs(["id-1"], None)
        assert exc_info.value.missing == ["ioc"]
        assert stub.calls == 0

    def test_delete_iocs(self, stub_server) -> None:
        stub = stub_server(body=IDS_BODY)
        sink = io.BytesIO()
        HostClient(*stub.options()).delete_iocs_json(["id-1", "id-2"], sink)

        request = stub.last_request
        assert request.method == "DELETE"
        assert request.url.params.get_list("ids") == ["id-1", "id-2"]
        assert request.content == b""
        assert json.loads(sink.getvalue()) == IDS_BODY

    def test_resolve(self, stub_server) -> None:
        stub = stub_server(body={"meta": {"writes": {"resources_affected": 2}}, "errors": []})
        resp = HostClient(*stub.options()).resolve(["d1", "d2"], "true_positive")

        request = stub.last_request
        assert request.method == "PATCH"
        assert request.url.path == "/detects/entities/detects/v1"
        assert request.url.params.multi_items() == [("ids", "d1"), ("ids", "d2"), ("to_status", "true_positive")]
        assert resp.meta.writes.resources_affected == 2

    def test_resolve_requires_status(self, stub_server) -> None:
        stub = stub_server()
        with pytest.raises(MissingParametersError):
            HostClient(*stub.options()).resolve(["d1"], "")
        assert stub.calls == 0

    def test_server_errors_in_body(self, stub_server) -> None:
        stub = stub_server(status_code=400, body={"errors": [{"code": 400, "message": "bad ids"}]})
        with pytest.raises(HTTPStatusError) as exc_info:
            HostClient(*stub.options()).delete_iocs(["bad"])
        assert str(exc_info.value) == "http_error: Unexpected status code: 400 (Bad Request)"
