"""Intelligence API: threat actors and indicators."""

from src.api.intel.client import (
    IntelClient,
    actor_request_to_params,
    indicator_request_to_params,
)
from src.api.intel.models import (
    Actor,
    ActorRequest,
    ActorResponse,
    IndicatorRequest,
    IndicatorResponse,
    Label,
    Relation,
    Slugable,
)

__all__ = [
    "Actor",
    "ActorRequest",
    "ActorResponse",
    "IndicatorRequest",
    "IndicatorResponse",
    "IntelClient",
    "Label",
    "Relation",
    "Slugable",
    "actor_request_to_params",
    "indicator_request_to_params",
]
