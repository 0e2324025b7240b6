"""Authentication strategies.

Each API family proves identity differently. A strategy mutates an outgoing
request in place; the transport calls ``apply`` right before dispatch. The
strategies are also regular ``httpx.Auth`` objects and can be handed to any
httpx client.
"""

from collections.abc import Generator

import httpx

# Header names used by the intel API
AUTH_HEADER_ID = "X-CSIX-CUSTID"
AUTH_HEADER_KEY = "X-CSIX-CUSTKEY"


class CredentialAuth(httpx.Auth):
    """Base class for credential strategies."""

    def __init__(self, client_id: str, client_secret: str) -> None:
        self.client_id = client_id
        self.client_secret = client_secret

    def apply(self, request: httpx.Request) -> None:
        """Add proof of identity to the request."""
        raise NotImplementedError

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        self.apply(request)
        yield request

    def __repr__(self) -> str:
        return f"{type(self).__name__}(client_id={self.client_id!r})"


class HeaderAuth(CredentialAuth):
    """Send the id and key as a pair of custom headers."""

    def apply(self, request: httpx.Request) -> None:
        request.headers[AUTH_HEADER_ID] = self.client_id
        request.headers[AUTH_HEADER_KEY] = self.client_secret


class BasicAuth(CredentialAuth):
    """HTTP basic authentication with the id as user and the key as password."""

    def __init__(self, client_id: str, client_secret: str) -> None:
        super().__init__(client_id, client_secret)
        self._basic = httpx.BasicAuth(client_id, client_secret)

    def apply(self, request: httpx.Request) -> None:
        # httpx.BasicAuth sets the Authorization header on its first step
        next(self._basic.auth_flow(request))
