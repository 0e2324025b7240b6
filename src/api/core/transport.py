"""HTTP transport shared by all API clients.

One ``send`` call makes exactly one HTTP request. Non-2xx responses raise
``HTTPStatusError``; successful bodies are handed to the caller's result
target. The response is always closed before ``send`` returns.
"""

import json
from datetime import datetime, timezone
from typing import Any, TypeVar

import httpx

from src.api.core.auth import CredentialAuth
from src.api.core.options import ClientConfig, OptionFunc, build_config
from src.api.core.params import Params
from src.api.core.targets import ResponseTarget
from src.core.exceptions.errors import DecodeError, HTTPStatusError
from src.core.logger.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def dump_request(request: httpx.Request) -> str:
    """Render the request line and headers. The body is left out."""
    lines = [f"{request.method} {request.url} HTTP/1.1"]
    lines.extend(f"{name}: {value}" for name, value in request.headers.multi_items())
    return "\r\n".join(lines) + "\r\n"


def dump_response(response: httpx.Response) -> str:
    """Render the status line, headers and the full body.

    Reads the body if it has not been read yet.
    """
    body = response.read()
    lines = [f"{response.http_version} {response.status_code} {response.reason_phrase}"]
    lines.extend(f"{name}: {value}" for name, value in response.headers.multi_items())
    return "\r\n".join(lines) + "\r\n\r\n" + body.decode("utf-8", errors="replace")


class Transport:
    """Authenticated request dispatch for one API base URL.

    The configuration is fixed at construction. A transport may be shared
    between threads as long as its ``httpx.Client`` may.
    """

    def __init__(self, *options: OptionFunc) -> None:
        """Initialize the transport.

        Args:
            *options: Configuration options, applied in order.

        Raises:
            InvalidURLError: If the base URL is malformed or not http(s).
            MissingCredentialsError: If the id or key is missing.
        """
        self._config = build_config(*options)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._config.owns_http_client:
            self._config.http_client.close()

    def _errorf(self, msg: str, *args: object) -> None:
        if self._config.error_log is not None:
            self._config.error_log.error(msg, *args)

    def _tracef(self, msg: str, *args: object) -> None:
        if self._config.trace_log is not None:
            self._config.trace_log.debug(msg, *args)

    def build_url(self, path: str, params: Params | None = None) -> str:
        """Join the base URL and path, adding a query string if there are params."""
        url = self._config.base_url + path
        if params:
            url += "?" + str(httpx.QueryParams(params))
        return url

    def send(
        self,
        method: str,
        path: str,
        *,
        auth: CredentialAuth,
        params: Params | None = None,
        body: Any = None,
        target: ResponseTarget[T] | None = None,
    ) -> T | None:
        """Send one request and hand a successful response to ``target``.

        Args:
            method: HTTP method.
            path: Path relative to the base URL.
            auth: Strategy that adds credentials to the request.
            params: Ordered query parameters.
            body: JSON-serializable request body.
            target: Consumer for the response body. None discards it.

        Returns:
            Whatever the target returns, or None without a target.

        Raises:
            HTTPStatusError: For a status outside 200-299.
            DecodeError: If the target cannot decode the body.
            httpx.HTTPError: For transport level failures.
        """
        headers = {"Accept": "application/json"}
        content: bytes | None = None
        if body is not None:
            content = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"

        request = self._config.http_client.build_request(
            method,
            self.build_url(path, params),
            headers=headers,
            content=content,
        )
        auth.apply(request)

        logger.debug(f"Request: {method} {self._config.base_url}{path}")
        tracing = self._config.trace_log is not None
        start = datetime.now(timezone.utc)
        if tracing:
            self._tracef("%s", dump_request(request))
            self._tracef("Start request %s at %s", path, start.isoformat())
        try:
            response = self._config.http_client.send(request, stream=True)
        finally:
            if tracing:
                end = datetime.now(timezone.utc)
                self._tracef("End request %s at %s - took %s", path, end.isoformat(), end - start)

        try:
            self._check_status(response)
            if tracing:
                self._tracef("%s", dump_response(response))
            if target is None:
                return None
            try:
                return target.consume(response)
            except DecodeError:
                if self._config.error_log is not None:
                    self._errorf("%s", dump_response(response))
                raise
        finally:
            response.close()

    def _check_status(self, response: httpx.Response) -> None:
        """Raise HTTPStatusError for any status outside 200-299."""
        if 200 <= response.status_code < 300:
            return
        if self._config.error_log is not None:
            self._errorf("%s", dump_response(response))
        err = HTTPStatusError(
            response.status_code,
            httpx.codes.get_reason_phrase(response.status_code),
        )
        self._errorf("%s", err.message)
        raise err
