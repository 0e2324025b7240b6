"""Client for the CrowdStrike intelligence API (actors and indicators).

Requests authenticate with the ``X-CSIX-CUSTID``/``X-CSIX-CUSTKEY`` header
pair. Dates in queries are sent as epoch seconds.
"""

from typing import Any

from src.api.core.auth import HeaderAuth
from src.api.core.data_models import BASIC_FIELDS
from src.api.core.options import OptionFunc, set_url
from src.api.core.params import (
    Params,
    add_epoch_time,
    add_int,
    add_sort_fields,
    add_string,
    add_string_list,
)
from src.api.core.targets import ModelTarget, RawTarget, SupportsWriteBytes
from src.api.core.timestamps import normalize_timestamps
from src.api.core.transport import Transport
from src.api.intel.models import ActorRequest, ActorResponse, IndicatorRequest, IndicatorResponse
from src.core.config.settings import DEFAULT_INTEL_URL
from src.core.exceptions.errors import MissingParametersError

ACTORS_PATH = "actor/v1/queries/actors"
INDICATOR_SEARCH_PATH = "indicator/v1/search/"

DEFAULT_LIMIT = 10


def actor_request_to_params(req: ActorRequest) -> Params:
    """Encode an actor query. Fills in the default limit and fields on ``req``."""
    if req.limit == 0:
        req.limit = DEFAULT_LIMIT
    if not req.fields:
        req.fields.append(BASIC_FIELDS)

    params: Params = []
    add_string("q", req.q, params)
    add_string("name", req.name, params)
    add_string("description", req.description, params)
    add_epoch_time("min_last_modified_date", req.min_last_modified_date, params)
    add_epoch_time("max_last_modified_date", req.max_last_modified_date, params)
    add_epoch_time("min_last_activity_date", req.min_last_activity_date, params)
    add_epoch_time("max_last_activity_date", req.max_last_activity_date, params)
    add_string_list("origins", req.origins, params)
    add_string_list("target_countries", req.target_countries, params)
    add_string_list("target_industries", req.target_industries, params)
    add_string_list("motivations", req.motivations, params)
    add_string_list("fields", req.fields, params)
    add_sort_fields("sort", req.sort_fields, params)
    add_int("offset", req.offset, params)
    add_int("limit", req.limit, params)
    return params


def indicator_request_to_params(req: IndicatorRequest) -> Params:
    """Encode an indicator search. Fills in the default page and page size on ``req``.

    The search endpoint takes the sort field and its order as two separate
    parameters, unlike the ``<name>.<order>`` form used elsewhere.
    """
    params: Params = [(req.filter, req.value)]
    if req.sort.name:
        params.append(("sort", req.sort.name))
        params.append(("order", "asc" if req.sort.ascending else "desc"))
    if req.page == 0:
        req.page = 1
    if req.per_page == 0:
        req.per_page = DEFAULT_LIMIT
    add_int("page", req.page, params)
    add_int("perPage", req.per_page, params)
    return params


def validate_indicator_request(req: IndicatorRequest) -> None:
    """Raise MissingParametersError unless parameter, filter and value are set."""
    missing = [name for name in ("parameter", "filter", "value") if not getattr(req, name)]
    if missing:
        raise MissingParametersError(missing=missing)


class IntelClient:
    """Intelligence API client.

    Example::

        with IntelClient(set_credentials("id", "key")) as intel:
            actors = intel.actors(ActorRequest(q="panda"))

    If no URL option is given, DEFAULT_INTEL_URL is used.
    """

    def __init__(self, *options: OptionFunc) -> None:
        """Initialize the client.

        Args:
            *options: Configuration options. Applied after the default URL.

        Raises:
            InvalidURLError: If a URL option is invalid.
            MissingCredentialsError: If the id or key is missing.
        """
        self.transport = Transport(set_url(DEFAULT_INTEL_URL), *options)
        config = self.transport.config
        self.auth = HeaderAuth(config.client_id, config.client_secret)

    def __enter__(self) -> "IntelClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if the transport created it."""
        self.transport.close()

    def actors(self, req: ActorRequest) -> ActorResponse:
        """Query the actors API."""
        params = actor_request_to_params(req)
        resp = self.transport.send(
            "GET", ACTORS_PATH, auth=self.auth, params=params, target=ModelTarget(ActorResponse)
        )
        return normalize_timestamps(resp)

    def actors_json(self, req: ActorRequest, sink: SupportsWriteBytes) -> None:
        """Query the actors API and write the raw JSON reply to ``sink``."""
        params = actor_request_to_params(req)
        self.transport.send("GET", ACTORS_PATH, auth=self.auth, params=params, target=RawTarget(sink))

    def indicators(self, req: IndicatorRequest) -> list[IndicatorResponse]:
        """Search the indicators API.

        Raises:
            MissingParametersError: If parameter, filter or value is empty.
        """
        validate_indicator_request(req)
        params = indicator_request_to_params(req)
        resp = self.transport.send(
            "GET",
            INDICATOR_SEARCH_PATH + req.parameter,
            auth=self.auth,
            params=params,
            target=ModelTarget(list[IndicatorResponse]),
        )
        return normalize_timestamps(resp)

    def indicators_json(self, req: IndicatorRequest, sink: SupportsWriteBytes) -> None:
        """Search the indicators API and write the raw JSON reply to ``sink``."""
        validate_indicator_request(req)
        params = indicator_request_to_params(req)
        self.transport.send(
            "GET",
            INDICATOR_SEARCH_PATH + req.parameter,
            auth=self.auth,
            params=params,
            target=RawTarget(sink),
        )
