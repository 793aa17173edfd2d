from typing import Any, List, Optional

from pydantic import Field

from .base import ChainBaseModel


class RawFragment(ChainBaseModel):
    """Verbatim SQL text paired with the binds for its placeholders."""

    sql: str = Field(..., description="SQL spliced verbatim into the statement")
    binds: List[Any] = Field(default_factory=list, description="Bind values for the fragment's placeholders")

    def __init__(self, sql: str, binds: Optional[List[Any]] = None, **data):
        super().__init__(sql=sql, binds=list(binds or []), **data)


class RawExpression(RawFragment):
    """An UPDATE payload value rendered as SQL instead of being bound.

    ``RawExpression("count + ?", [1])`` assigned to ``count`` renders
    ``count = count + ?`` and contributes ``1`` to the bind list.
    """
