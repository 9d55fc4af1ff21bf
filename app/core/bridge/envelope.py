# app/core/bridge/envelope.py
"""
Decoding of the executor's response envelope.

Observed shape:
    {"result": {"body": "<json string>" | {...}}}

where the body decodes to:
    {"success": true, "result": [...rows...] | {"command": "UPDATE", ...}}

The body may arrive JSON-encoded a second time or already decoded, so every
nesting level is checked before it is touched. decode_envelope() is total:
any input maps to exactly one of the four outcomes below.
"""

import json
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from app.core import schemas
from app.core.bridge.statement import AGGREGATE_COLUMN


# ============================================================================
# OUTCOMES
# ============================================================================


@dataclass(frozen=True)
class RowsResult:
    rows: List[Any]


@dataclass(frozen=True)
class CommandOutcome:
    command: Optional[str] = None
    success: Optional[bool] = None


@dataclass(frozen=True)
class ErrorResult:
    message: str


@dataclass(frozen=True)
class UnknownEnvelope:
    raw: Any


DecodedEnvelope = Union[RowsResult, CommandOutcome, ErrorResult, UnknownEnvelope]


# ============================================================================
# DECODING
# ============================================================================


def _has_body(body: Any) -> bool:
    return body is not None and body != "" and body is not False


def decode_body(body: Any) -> Any:
    """Parse the inner body if it is still JSON text, else return it as-is."""
    if isinstance(body, str):
        return json.loads(body)
    return body


def unwrap_rows(result: List[Any]) -> List[Any]:
    """
    Pull the real row list out of an aggregated result.

    [{"json_agg": [...]}]  -> [...]
    [{"json_agg": null}]   -> []      (aggregate over zero rows, or any falsy value)
    [{"json_agg": "[...]"}] -> [...]  (column handed back as JSON text)
    anything else          -> returned unchanged
    """
    first = result[0] if result else None
    if isinstance(first, dict) and AGGREGATE_COLUMN in first:
        rows = first[AGGREGATE_COLUMN]
        # null, "", 0, false and [] all mean no rows
        if not rows:
            return []
        if isinstance(rows, str):
            # Some executors hand json columns back as text
            rows = json.loads(rows)
            if not rows:
                return []
        return rows if isinstance(rows, list) else [rows]
    return result


def decode_envelope(data: Any, row_producing: bool) -> DecodedEnvelope:
    """
    Map a decoded executor response onto one outcome.

    Args:
        data: Top-level response JSON
        row_producing: Whether the forwarded statement was wrapped

    Returns:
        RowsResult | CommandOutcome | ErrorResult | UnknownEnvelope
    """
    result = data.get("result") if isinstance(data, dict) else None
    body = result.get("body") if isinstance(result, dict) else None

    if _has_body(body):
        try:
            decoded = decode_body(body)
        except ValueError as e:
            return ErrorResult(f"Invalid executor body: {e}")

        inner = decoded.get("result") if isinstance(decoded, dict) else None
        success = decoded.get("success") if isinstance(decoded, dict) else None

        # Statement-level failure reported inside the body
        if success is False:
            message = decoded.get("error") or decoded.get("message")
            return ErrorResult(str(message) if message else "Statement failed")

        if row_producing and isinstance(inner, list):
            try:
                return RowsResult(unwrap_rows(inner))
            except ValueError as e:
                return ErrorResult(f"Invalid aggregate column: {e}")

        command = inner.get("command") if isinstance(inner, dict) else None
        return CommandOutcome(command=command, success=success)

    if isinstance(data, dict) and data.get("error"):
        return ErrorResult(str(data["error"]))

    return UnknownEnvelope(data)


def to_normalized(outcome: DecodedEnvelope) -> schemas.NormalizedResult:
    """Render an outcome as the wire-level NormalizedResult."""
    if isinstance(outcome, RowsResult):
        return schemas.NormalizedResult(rows=outcome.rows)

    if isinstance(outcome, CommandOutcome):
        fields = {"rows": []}
        if outcome.command is not None:
            fields["command"] = outcome.command
        if outcome.success is not None:
            fields["success"] = outcome.success
        return schemas.NormalizedResult(**fields)

    if isinstance(outcome, ErrorResult):
        return schemas.NormalizedResult(error=outcome.message)

    return schemas.NormalizedResult(rows=[], raw=outcome.raw)
