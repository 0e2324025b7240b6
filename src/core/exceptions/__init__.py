"""Exception definitions module."""

from src.core.exceptions.errors import (
    ConfigurationError,
    CSAPIError,
    DecodeError,
    HTTPStatusError,
    InvalidURLError,
    MissingCredentialsError,
    MissingParametersError,
)

__all__ = [
    "CSAPIError",
    "ConfigurationError",
    "DecodeError",
    "HTTPStatusError",
    "InvalidURLError",
    "MissingCredentialsError",
    "MissingParametersError",
]
