"""Result targets for successful responses.

A target decides what happens to the body of a 2xx response. The caller
picks one per call: ``ModelTarget`` parses JSON into a typed value,
``RawTarget`` copies the bytes untouched into a sink.
"""

from typing import Any, Generic, Protocol, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from src.core.exceptions.errors import DecodeError

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class SupportsWriteBytes(Protocol):
    def write(self, data: bytes, /) -> Any: ...


class ResponseTarget(Protocol[T_co]):
    """Anything that can consume a successful response."""

    def consume(self, response: httpx.Response) -> T_co: ...


class RawTarget:
    """Copy the response body into a byte sink without parsing it."""

    def __init__(self, sink: SupportsWriteBytes) -> None:
        self.sink = sink

    def consume(self, response: httpx.Response) -> None:
        for chunk in response.iter_bytes():
            self.sink.write(chunk)


class ModelTarget(Generic[T]):
    """Decode the response body as JSON into ``model``.

    ``model`` is anything pydantic can validate against: a model class,
    ``list[Model]``, ``dict[str, Any]`` and so on.
    """

    def __init__(self, model: type[T] | Any) -> None:
        self.model = model
        self._adapter: TypeAdapter[T] = TypeAdapter(model)

    def consume(self, response: httpx.Response) -> T:
        body = response.read()
        try:
            return self._adapter.validate_json(body)
        except ValidationError as e:
            raise DecodeError(f"Failed to decode response body: {e}") from e
