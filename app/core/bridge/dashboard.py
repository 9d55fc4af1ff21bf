# app/core/bridge/dashboard.py
"""
The finance console's dashboard batch.

Nine independent queries loaded together on every refresh. Summary labels
resolve to a single row (or None), list labels to a row list (or []).
A failed label keeps its default and is listed in Snapshot.failed, which
presenters must show as "unknown" rather than zero.
"""

from app.core import schemas


def rows_query(label: str, sql: str) -> schemas.QuerySpec:
    return schemas.QuerySpec(label=label, sql=sql, default=[])


def summary_query(label: str, sql: str) -> schemas.QuerySpec:
    return schemas.QuerySpec(label=label, sql=sql, summary=True, default=None)


OVERVIEW_SQL = """SELECT
  (SELECT COUNT(*) FROM maat_transactions) as tx_count,
  (SELECT COUNT(*) FROM maat_classification_rules) as rule_count,
  (SELECT COUNT(*) FROM ip_assets) as ip_count,
  (SELECT ROUND(SUM(amount)::numeric,2) FROM maat_transactions) as total_spend,
  (SELECT COUNT(*) FROM maat_transactions WHERE is_rd = true) as rd_tx_count,
  (SELECT ROUND(SUM(amount)::numeric,2) FROM maat_transactions WHERE is_rd = true) as rd_spend,
  (SELECT COUNT(*) FROM rd_evidence_matrix) as rd_matrix_rows"""

RD_SUMMARY_SQL = (
    "SELECT COUNT(*) as rows, ROUND(SUM(maat_spend)::numeric,2) as spend, "
    "ROUND(SUM(rdti_rebate)::numeric,2) as rebate FROM rd_evidence_matrix"
)

RD_ROWS_SQL = (
    "SELECT id, activity_id, activity_title, maat_spend, rdti_rebate, "
    "evidence_status, ausind_section FROM rd_evidence_matrix ORDER BY id"
)

TX_SAMPLE_SQL = (
    "SELECT id, date, description, amount, vendor, category, is_rd, rd_project "
    "FROM maat_transactions ORDER BY date DESC LIMIT 50"
)

RULES_SQL = (
    "SELECT id, rule_name, category, gst_treatment, is_rd, rd_project, match_count "
    "FROM maat_classification_rules ORDER BY match_count DESC NULLS LAST LIMIT 30"
)

IP_SUMMARY_SQL = (
    "SELECT COUNT(*) as total, "
    "COUNT(CASE WHEN status = 'ACTIVE' THEN 1 END) as active, "
    "COUNT(CASE WHEN ip_type = 'PATENT' THEN 1 END) as patents, "
    "COUNT(CASE WHEN ip_type = 'TRADEMARK' THEN 1 END) as trademarks, "
    "COUNT(CASE WHEN ip_type = 'COPYRIGHT' THEN 1 END) as copyrights, "
    "COUNT(CASE WHEN ip_type = 'TRADE_SECRET' THEN 1 END) as secrets, "
    "COUNT(CASE WHEN ip_type = 'DOMAIN' THEN 1 END) as domains "
    "FROM ip_assets"
)

IP_TYPES_SQL = (
    "SELECT ip_type, COUNT(*) as count FROM ip_assets "
    "GROUP BY ip_type ORDER BY count DESC"
)

BAS_SUMMARY_SQL = """SELECT
  ROUND(SUM(CASE WHEN category = 'GST_COLLECTED' THEN amount ELSE 0 END)::numeric,2) as gst_collected,
  ROUND(SUM(CASE WHEN category = 'GST_PAID' THEN amount ELSE 0 END)::numeric,2) as gst_paid
  FROM maat_transactions"""

TX_COUNT_SQL = "SELECT COUNT(*) as total FROM maat_transactions"


DASHBOARD_BATCH = schemas.BatchSpec(
    queries=[
        summary_query("overview", OVERVIEW_SQL),
        summary_query("rd_summary", RD_SUMMARY_SQL),
        rows_query("rd_rows", RD_ROWS_SQL),
        rows_query("tx_sample", TX_SAMPLE_SQL),
        rows_query("rules", RULES_SQL),
        summary_query("ip_summary", IP_SUMMARY_SQL),
        rows_query("ip_types", IP_TYPES_SQL),
        summary_query("bas_summary", BAS_SUMMARY_SQL),
        summary_query("tx_count", TX_COUNT_SQL),
    ]
)
