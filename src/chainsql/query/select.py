"""Select-list entries for SELECT statements."""

from typing import Annotated, Any, List, Literal, Union

from pydantic import Field, field_validator

from chainsql.query.conditions import copy_nested_builder
from chainsql.types import ChainBaseModel


class ColumnsSelect(ChainBaseModel):
    """Literal column expressions rendered as-is."""

    kind: Literal["columns"] = "columns"
    columns: List[str] = Field(default_factory=list)


class RawSelect(ChainBaseModel):
    """Verbatim select expression with its own binds."""

    kind: Literal["raw"] = "raw"
    sql: str
    binds: List[Any] = Field(default_factory=list)


class SubSelect(ChainBaseModel):
    """A nested statement rendered as ``(<sql>) AS alias``.

    The nested statement's binds are spliced into the outer bind list at
    the position of the sub-select.
    """

    kind: Literal["sub"] = "sub"
    alias: str
    builder: Any

    @field_validator("builder")
    @classmethod
    def validate_builder(cls, v: Any) -> Any:
        return copy_nested_builder(v)


SelectItem = Annotated[
    Union[ColumnsSelect, RawSelect, SubSelect],
    Field(discriminator="kind"),
]
