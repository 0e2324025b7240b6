"""Data models shared by both API families."""

from typing import Any, ClassVar, get_args

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Field-selection sentinels understood by the intel API
ALL_FIELDS = "__full__"
BASIC_FIELDS = "__basic__"


class ResponseModel(BaseModel):
    """Base for decoded response records.

    Wire names are kept as aliases; fields can also be set by their Python
    name. Subclasses list their epoch/derived timestamp pairs in
    ``epoch_fields``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    epoch_fields: ClassVar[dict[str, str]] = {}

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        """Treat JSON null as an absent key so field defaults apply.

        Inside lists, a null record becomes an empty record and a null
        scalar is dropped.
        """
        if not isinstance(data, dict):
            return data
        cleaned: dict[str, Any] = {}
        for key, value in data.items():
            if value is None:
                continue
            if isinstance(value, list):
                value = _fill_null_items(_list_item_type(cls, key), value)
            cleaned[key] = value
        return cleaned


def _list_item_type(model: type[BaseModel], key: str) -> Any:
    """Element type of the list field named or aliased ``key``, if any."""
    for name, info in model.model_fields.items():
        if key in (name, info.alias):
            args = get_args(info.annotation)
            return args[0] if args else None
    return None


def _fill_null_items(item_type: Any, items: list[Any]) -> list[Any]:
    if isinstance(item_type, type) and issubclass(item_type, BaseModel):
        return [{} if item is None else item for item in items]
    return [item for item in items if item is not None]


class SortField(BaseModel):
    """Sort order: a field name and a direction."""

    name: str = Field(default="", description="Field to sort on")
    ascending: bool = Field(default=False, description="Sort ascending instead of descending")

    def encode(self) -> str:
        """Return the ``<name>.<asc|desc>`` wire form."""
        return f"{self.name}.{'asc' if self.ascending else 'desc'}"


class Paging(BaseModel):
    """Offset based paging control."""

    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=0, ge=0)


class ApiError(ResponseModel):
    """An error entry reported by the server inside a response body."""

    code: int | str = Field(default="")
    message: str = Field(default="")


class QueryMeta(ResponseModel):
    """Common part of the ``meta`` envelope."""

    query_time: float = Field(default=0.0)
    trace_id: str = Field(default="")
