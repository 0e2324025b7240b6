"""Request and response models for the host IOC management API."""

from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from src.api.core.data_models import ApiError, Paging, QueryMeta, ResponseModel, SortField


class SearchIOCsRequest(Paging):
    """Filters for an IOC search. ``limit``/``offset`` are sent only when non-zero."""

    types: list[str] = Field(default_factory=list, description="sha256, sha1, md5, domain, ipv4, ipv6")
    values: list[str] = Field(default_factory=list)
    policies: list[str] = Field(default_factory=list, description="detect, none")
    share_levels: list[str] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)
    from_expiration_timestamp: datetime | None = None
    to_expiration_timestamp: datetime | None = None
    sort: SortField | None = None


class IOC(BaseModel):
    """An indicator of compromise as uploaded or updated on the host API."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = ""
    value: str = ""
    policy: str = ""
    share_level: str = Field(default="", alias="shareLevel")
    expiration_days: int = 0
    source: str = ""
    description: str = ""

    def to_body(self) -> dict[str, Any]:
        """Wire form; empty and zero fields are left out."""
        return self.model_dump(by_alias=True, exclude_defaults=True)


class Pagination(ResponseModel):
    total: int = 0
    offset: int = 0
    limit: int = 0


class SearchMeta(QueryMeta):
    pagination: Pagination = Field(default_factory=Pagination)
    entity: str = ""


class SearchIOCsResponse(ResponseModel):
    """Reply carrying a list of ids (IOCs, devices or processes)."""

    meta: SearchMeta = Field(default_factory=SearchMeta)
    resources: list[str] = Field(default_factory=list)
    errors: list[ApiError] = Field(default_factory=list)


class DeviceCount(ResponseModel):
    device_count: int = 0


class DeviceCountResponse(ResponseModel):
    meta: QueryMeta = Field(default_factory=QueryMeta)
    resources: list[DeviceCount] = Field(default_factory=list)
    errors: list[ApiError] = Field(default_factory=list)


class Process(ResponseModel):
    """A process observed on a device."""

    epoch_fields: ClassVar[dict[str, str]] = {
        "start_time": "start_timestamp_epoch",
        "stop_time": "stop_timestamp_epoch",
    }

    device_id: str = ""
    command_line: str = ""
    process_id: str = ""
    process_id_local: str = ""
    file_name: str = ""
    start_timestamp_epoch: float = Field(default=0, alias="start_timestamp_raw")
    stop_timestamp_epoch: float = Field(default=0, alias="stop_timestamp_raw")

    start_time: datetime | None = Field(default=None, exclude=True)
    stop_time: datetime | None = Field(default=None, exclude=True)


class ProcessResponse(ResponseModel):
    meta: QueryMeta = Field(default_factory=QueryMeta)
    resources: list[Process] = Field(default_factory=list)
    errors: list[ApiError] = Field(default_factory=list)


class Writes(ResponseModel):
    resources_affected: int = 0


class ResolveMeta(QueryMeta):
    writes: Writes = Field(default_factory=Writes)


class ResolveResponse(ResponseModel):
    """Reply to a detection status change."""

    meta: ResolveMeta = Field(default_factory=ResolveMeta)
    errors: list[ApiError] = Field(default_factory=list)
