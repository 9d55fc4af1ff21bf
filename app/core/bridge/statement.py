# app/core/bridge/statement.py
"""
Statement helpers for the query bridge.

The executor's transport mangles plain tabular text output, but a single
JSON-aggregated column survives it intact. Row-producing statements are
therefore wrapped so the whole result set comes back as one json_agg value;
everything else is forwarded untouched.

Classification is a plain prefix check. The bridge never needs to understand
a statement beyond "does it return rows".
"""

from typing import Tuple

ROW_PRODUCING_PREFIX = "SELECT"

# Column name Postgres gives to an unaliased json_agg(...) expression
AGGREGATE_COLUMN = "json_agg"


def is_row_producing(sql: str) -> bool:
    """
    Return True when the statement starts with SELECT (ignoring case and
    surrounding whitespace).

    Example:
        is_row_producing("  select 1")          -> True
        is_row_producing("UPDATE t SET x = 1")  -> False
    """
    return sql.strip().upper().startswith(ROW_PRODUCING_PREFIX)


def wrap_statement(sql: str) -> str:
    """
    Collapse a row-producing statement into one JSON-aggregated column.

    Example:
        SELECT id FROM t
        -> SELECT json_agg(row_to_json(t)) FROM (SELECT id FROM t) t
    """
    # A trailing semicolon is not allowed inside a subquery
    inner = sql.strip().rstrip(";").rstrip()
    return f"SELECT {AGGREGATE_COLUMN}(row_to_json(t)) FROM ({inner}) t"


def prepare_statement(sql: str) -> Tuple[str, bool]:
    """
    Classify once and rewrite if needed.

    Returns the statement to forward and the classification, so the caller
    unwraps the response the same way the statement was rewritten.
    """
    row_producing = is_row_producing(sql)
    if row_producing:
        return wrap_statement(sql), True
    return sql, False
