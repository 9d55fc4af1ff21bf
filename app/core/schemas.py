from datetime import datetime
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =========================
# BRIDGE (caller facing)
# =========================
class QueryRequest(BaseModel):
    query: str = Field(min_length=1)

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("query must not be blank")
        return value


class NormalizedResult(BaseModel):
    """
    The only result shape callers of the bridge may depend on.

    Exactly one of these forms is produced:
        {"rows": [...]}                              row-producing statement
        {"rows": [], "command": ..., "success": ...} mutating statement
        {"rows": [], "raw": ...}                     unrecognised envelope
        {"error": "..."}                             any failure

    Serialize with ``model_dump(exclude_unset=True)`` so that fields the
    executor never sent stay off the wire.
    """

    rows: Optional[List[Any]] = None
    command: Optional[str] = None
    success: Optional[bool] = None
    raw: Optional[Any] = None
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


# =========================
# EXECUTOR (outbound wire)
# =========================
class InvocationEnvelope(BaseModel):
    function_name: str = Field(alias="functionName")
    payload: Dict[str, Any]

    model_config = ConfigDict(populate_by_name=True)


# =========================
# AGGREGATION
# =========================
class QuerySpec(BaseModel):
    """
    One named query of a batch.

    summary: the statement returns at most one row; its sole row is exposed
             instead of the one-element list.
    default: value stored for this label when the query fails
             (``[]`` for list-shaped results, ``None`` for summaries).
    """

    label: str = Field(min_length=1)
    sql: str = Field(min_length=1)
    summary: bool = False
    default: Any = None

    model_config = ConfigDict(frozen=True)


class BatchSpec(BaseModel):
    queries: List[QuerySpec]

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def labels_are_unique(self) -> "BatchSpec":
        seen = set()
        for query in self.queries:
            if query.label in seen:
                raise ValueError(f"Duplicate batch label: {query.label}")
            seen.add(query.label)
        return self

    @property
    def labels(self) -> List[str]:
        return [query.label for query in self.queries]


class Snapshot(BaseModel):
    """Results of one aggregation cycle, keyed by query label."""

    data: Dict[str, Any]
    failed: List[str] = []
    refreshed_at: datetime
    duration_seconds: float

    model_config = ConfigDict(frozen=True)

    def __getitem__(self, label: str) -> Any:
        return self.data[label]

    def __contains__(self, label: object) -> bool:
        return label in self.data

    def is_known(self, label: str) -> bool:
        """False when the label's value is only a failure default."""
        return label in self.data and label not in self.failed


# =========================
# TOOLS
# =========================
class ToolCallRequest(BaseModel):
    args: Dict[str, Any] = {}
