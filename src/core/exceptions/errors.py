"""Custom exception definitions for csapi."""

from typing import Any


class CSAPIError(Exception):
    """Base exception for all csapi errors.

    Every error carries a short machine-readable code and a human-readable
    message.
    """

    code = "error"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            code: Error code. Uses the class default if not provided.
            details: Additional error details.
        """
        super().__init__(message)
        if code:
            self.code = code
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code}: {self.message}"


class MissingCredentialsError(CSAPIError):
    """Raised when the API id or key is missing."""

    code = "missing_credentials"

    def __init__(self, message: str = "You must provide the CrowdStrike API ID and key") -> None:
        super().__init__(message)


class MissingParametersError(CSAPIError):
    """Raised when a request lacks its required parameters.

    Raised before anything is sent over the wire.
    """

    code = "missing_parameters"

    def __init__(
        self,
        message: str = "You must provide the CrowdStrike API required parameters for the request",
        missing: list[str] | None = None,
    ) -> None:
        """Initialize missing parameters error.

        Args:
            message: Error message.
            missing: Names of the parameters that were not supplied.
        """
        details = {"missing": missing} if missing else None
        super().__init__(message, details=details)
        self.missing = missing or []


class InvalidURLError(CSAPIError):
    """Raised for a base URL that cannot be parsed or has a bad scheme."""

    code = "bad_url"

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message, details={"url": url} if url else None)
        self.url = url


class HTTPStatusError(CSAPIError):
    """Raised when the API answers with a status outside 200-299."""

    code = "http_error"

    def __init__(self, status_code: int, reason: str) -> None:
        """Initialize HTTP status error.

        Args:
            status_code: Numeric HTTP status code.
            reason: Textual reason for the status code.
        """
        super().__init__(f"Unexpected status code: {status_code} ({reason})")
        self.status_code = status_code
        self.reason = reason


class DecodeError(CSAPIError):
    """Raised when a response body does not match the expected JSON shape."""

    code = "decode_error"


class ConfigurationError(CSAPIError):
    """Exception raised for configuration errors."""

    code = "config_error"

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error.

        Args:
            message: Error message.
            config_key: Configuration key that caused the error.
            details: Additional error details.
        """
        details = details or {}
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, details=details)
