"""Request and response models for the intelligence API."""

from datetime import datetime
from typing import ClassVar

from pydantic import BaseModel, Field

from src.api.core.data_models import ResponseModel, SortField


class ActorRequest(BaseModel):
    """Query for threat actors. All supplied filters are AND'ed together."""

    q: str = Field(default="", description="Search across all fields")
    name: str = Field(default="")
    description: str = Field(default="")
    min_last_modified_date: datetime | None = None
    max_last_modified_date: datetime | None = None
    min_last_activity_date: datetime | None = None
    max_last_activity_date: datetime | None = None
    origins: list[str] = Field(default_factory=list)
    target_countries: list[str] = Field(default_factory=list)
    target_industries: list[str] = Field(default_factory=list)
    motivations: list[str] = Field(default_factory=list)
    fields: list[str] = Field(
        default_factory=list,
        description="Fields to return; accepts ALL_FIELDS and BASIC_FIELDS",
    )
    sort_fields: list[SortField] = Field(default_factory=list)
    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=0, ge=0)


class Slugable(ResponseModel):
    id: int = 0
    value: str = ""
    slug: str = ""


class Actor(ResponseModel):
    """A single threat actor resource."""

    epoch_fields: ClassVar[dict[str, str]] = {
        "created_at": "created_epoch",
        "last_modified_at": "last_modified_epoch",
        "first_activity_at": "first_activity_epoch",
        "last_activity_at": "last_activity_epoch",
    }

    id: int = 0
    name: str = ""
    short_description: str = ""
    known_as: str = ""
    url: str = ""
    slug: str = ""
    target_industries: list[Slugable] = Field(default_factory=list)
    target_countries: list[Slugable] = Field(default_factory=list)
    motivations: list[Slugable] = Field(default_factory=list)
    origins: list[Slugable] = Field(default_factory=list)

    created_epoch: float = Field(default=0, alias="created_date")
    last_modified_epoch: float = Field(default=0, alias="last_modified_date")
    first_activity_epoch: float = Field(default=0, alias="first_activity_date")
    last_activity_epoch: float = Field(default=0, alias="last_activity_date")

    created_at: datetime | None = Field(default=None, exclude=True)
    last_modified_at: datetime | None = Field(default=None, exclude=True)
    first_activity_at: datetime | None = Field(default=None, exclude=True)
    last_activity_at: datetime | None = Field(default=None, exclude=True)


class ActorPaging(ResponseModel):
    total: int = 0
    offset: int = 0
    limit: int = 0


class ActorMeta(ResponseModel):
    paging: ActorPaging = Field(default_factory=ActorPaging)


class ActorResponse(ResponseModel):
    """Reply to an actor query."""

    meta: ActorMeta = Field(default_factory=ActorMeta)
    query_time: float = 0.0
    resources: list[Actor] = Field(default_factory=list)


class IndicatorRequest(BaseModel):
    """Search for indicators by a parameter and a filter on it.

    ``parameter``, ``filter`` and ``value`` are required.
    """

    parameter: str = Field(default="", description="Indicator parameter to search, e.g. indicator")
    filter: str = Field(default="", description="Filter on the parameter, e.g. match")
    value: str = Field(default="", description="Value for the filter")
    sort: SortField = Field(default_factory=SortField)
    page: int = Field(default=0, ge=0, description="1-based page")
    per_page: int = Field(default=0, ge=0)


class Relation(ResponseModel):
    """An indicator related to another indicator."""

    epoch_fields: ClassVar[dict[str, str]] = {
        "created_at": "created_epoch",
        "last_valid_at": "last_valid_epoch",
    }

    indicator: str = ""
    type: str = ""
    created_epoch: float = Field(default=0, alias="created_date")
    last_valid_epoch: float = Field(default=0, alias="last_valid_date")

    created_at: datetime | None = Field(default=None, exclude=True)
    last_valid_at: datetime | None = Field(default=None, exclude=True)


class Label(ResponseModel):
    """A label attached to an indicator."""

    epoch_fields: ClassVar[dict[str, str]] = {
        "created_at": "created_epoch",
        "last_valid_at": "last_valid_epoch",
    }

    name: str = ""
    created_epoch: float = Field(default=0, alias="created_on")
    last_valid_epoch: float = Field(default=0, alias="last_valid_on")

    created_at: datetime | None = Field(default=None, exclude=True)
    last_valid_at: datetime | None = Field(default=None, exclude=True)


class IndicatorResponse(ResponseModel):
    """One indicator returned by an indicator search."""

    epoch_fields: ClassVar[dict[str, str]] = {
        "last_updated_at": "last_updated_epoch",
        "published_at": "published_epoch",
    }

    indicator: str = ""
    type: str = ""
    malicious_confidence: str = ""
    reports: list[str] = Field(default_factory=list)
    actors: list[str] = Field(default_factory=list)
    malware_families: list[str] = Field(default_factory=list)
    kill_chains: list[str] = Field(default_factory=list)
    domain_types: list[str] = Field(default_factory=list)
    ip_address_types: list[str] = Field(default_factory=list)
    relations: list[Relation] = Field(default_factory=list)
    labels: list[Label] = Field(default_factory=list)

    last_updated_epoch: float = Field(default=0, alias="last_updated")
    published_epoch: float = Field(default=0, alias="published_date")

    last_updated_at: datetime | None = Field(default=None, exclude=True)
    published_at: datetime | None = Field(default=None, exclude=True)
