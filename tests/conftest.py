"""Pytest configuration and shared fixtures."""

import json
import shutil
import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any, Generator

import httpx
import pytest

from src.api.core.options import OptionFunc, set_credentials, set_http_client


class CountingStream(httpx.SyncByteStream):
    """Response body stream that counts how often it is closed."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.close_count = 0

    def __iter__(self) -> Iterator[bytes]:
        yield self.data

    def close(self) -> None:
        self.close_count += 1


class StubServer:
    """Answers every request with one canned response and records the requests."""

    def __init__(
        self,
        status_code: int = 200,
        body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        if body is None:
            body = {}
        self.body = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
        self.headers = {"Content-Type": "application/json", **(headers or {})}
        self.requests: list[httpx.Request] = []
        self.streams: list[CountingStream] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        stream = CountingStream(self.body)
        self.streams.append(stream)
        return httpx.Response(self.status_code, headers=self.headers, stream=stream)

    def http_client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    def options(self) -> list[OptionFunc]:
        """Credentials plus an httpx client routed to this stub."""
        return [set_credentials("test-id", "test-key"), set_http_client(self.http_client())]

    @property
    def calls(self) -> int:
        return len(self.requests)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def stub_server() -> Callable[..., StubServer]:
    """Factory for stub servers.

    Returns:
        Callable taking status_code, body and headers.
    """
    return StubServer


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory that is cleaned up after the test.

    Yields:
        Path to the temporary directory.
    """
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)
