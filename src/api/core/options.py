"""Client configuration and the options that build it.

A client is configured by applying an ordered list of options to a draft.
Each option is a callable that mutates the draft and may raise to abort
construction::

    transport = Transport(
        set_credentials("id", "key"),
        set_url("https://some.url.com:8443/"),
        set_error_log(logging.getLogger("csapi.errors")),
    )
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

import httpx

from src.core.config.settings import DEFAULT_INTEL_URL
from src.core.exceptions.errors import InvalidURLError, MissingCredentialsError


@dataclass
class DraftConfig:
    """Mutable configuration while options are being applied."""

    base_url: str = ""
    client_id: str = ""
    client_secret: str = ""
    http_client: httpx.Client | None = None
    error_log: logging.Logger | None = None
    trace_log: logging.Logger | None = None

    def errorf(self, msg: str, *args: object) -> None:
        if self.error_log is not None:
            self.error_log.error(msg, *args)


@dataclass(frozen=True)
class ClientConfig:
    """Immutable client configuration, owned by one transport."""

    base_url: str
    client_id: str
    client_secret: str
    http_client: httpx.Client
    error_log: logging.Logger | None = None
    trace_log: logging.Logger | None = None
    owns_http_client: bool = False

    def __repr__(self) -> str:
        return f"ClientConfig(base_url={self.base_url!r}, client_id={self.client_id!r})"


OptionFunc = Callable[[DraftConfig], None]


def set_credentials(client_id: str, client_secret: str) -> OptionFunc:
    """Set the API id and key. Both are required."""

    def option(draft: DraftConfig) -> None:
        if not client_id or not client_secret:
            err = MissingCredentialsError()
            draft.errorf("%s", err)
            raise err
        draft.client_id, draft.client_secret = client_id, client_secret

    return option


def set_http_client(http_client: httpx.Client | None) -> OptionFunc:
    """Use the given httpx client for requests. None restores the default.

    Timeouts, proxies and custom transports are configured on this client.
    """

    def option(draft: DraftConfig) -> None:
        draft.http_client = http_client

    return option


def set_url(raw_url: str) -> OptionFunc:
    """Set the API base URL; an empty value selects the intel default.

    The scheme must be http or https. A trailing ``/`` is appended when
    missing so relative paths can be concatenated.
    """

    def option(draft: DraftConfig) -> None:
        url = raw_url or DEFAULT_INTEL_URL
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as e:
            draft.errorf("Invalid URL [%s] - %s", url, e)
            raise InvalidURLError(f"Invalid URL [{url}] - {e}", url=url) from e
        if parsed.scheme not in ("http", "https"):
            err = InvalidURLError(f"Invalid schema specified [{url}]", url=url)
            draft.errorf("%s", err)
            raise err
        if not url.endswith("/"):
            url += "/"
        draft.base_url = url

    return option


def set_error_log(logger: logging.Logger | None) -> OptionFunc:
    """Log failed responses and configuration problems to ``logger``."""

    def option(draft: DraftConfig) -> None:
        draft.error_log = logger

    return option


def set_trace_log(logger: logging.Logger | None) -> OptionFunc:
    """Trace requests and responses to ``logger``."""

    def option(draft: DraftConfig) -> None:
        draft.trace_log = logger

    return option


def build_config(*options: OptionFunc) -> ClientConfig:
    """Apply options in order and validate the result.

    Raises:
        InvalidURLError: From ``set_url``.
        MissingCredentialsError: When the id or key is still empty after all
            options ran.
    """
    draft = DraftConfig()
    for option in options:
        option(draft)

    if draft.trace_log is not None:
        draft.trace_log.debug("Using URL [%s]", draft.base_url)

    if not draft.client_id or not draft.client_secret:
        draft.errorf("Missing credentials")
        raise MissingCredentialsError()

    return ClientConfig(
        base_url=draft.base_url or DEFAULT_INTEL_URL,
        client_id=draft.client_id,
        client_secret=draft.client_secret,
        http_client=draft.http_client or httpx.Client(),
        error_log=draft.error_log,
        trace_log=draft.trace_log,
        owns_http_client=draft.http_client is None,
    )
