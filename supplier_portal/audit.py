"""
supplier_portal/audit.py

Audit log export helpers.

Goals:
- Export the currently loaded page of audit-log records as a UTF-8 CSV file.
- Keep WHO did WHAT to WHICH entity readable: actor name (or "System" for
  entries written by the platform itself), action, entity type and id, IP.

IMPORTANT:
- Audit logs are append-only. This module only reads records; it never
  edits or drops an entry, including entries with missing fields.
- Cells containing a comma, a quote or a newline are quoted (csv module,
  minimal quoting), so "Acme, Inc." stays a single cell.
"""

from __future__ import annotations

import csv
import io
from datetime import date
from typing import Any, Iterable, Mapping, Optional

CSV_HEADER = ["ID", "User", "Action", "Entity Type", "Entity ID", "IP Address", "Date"]

SYSTEM_ACTOR = "System"
MISSING_IP = "N/A"


def _safe_str(value: Any) -> str:
    """
    Convert a value to a stable string representation suitable for a CSV cell.

    - For None: empty string.
    - For exotic types: fall back to repr.
    """
    if value is None:
        return ""
    try:
        return str(value)
    except Exception:
        return repr(value)


def actor_name(record: Mapping[str, Any]) -> str:
    """Display name of the user behind an entry, or "System"."""
    user = record.get("user")
    if not user:
        return SYSTEM_ACTOR
    name = f"{user.get('firstName') or ''} {user.get('lastName') or ''}".strip()
    return name or _safe_str(user.get("email")) or SYSTEM_ACTOR


def audit_log_row(record: Mapping[str, Any]) -> list[str]:
    return [
        _safe_str(record.get("id")),
        actor_name(record),
        _safe_str(record.get("action")),
        _safe_str(record.get("entityType")),
        _safe_str(record.get("entityId")),
        _safe_str(record.get("ipAddress")) or MISSING_IP,
        _safe_str(record.get("createdAt")),
    ]


def export_audit_logs_csv(records: Iterable[Mapping[str, Any]]) -> str:
    """Header row plus one row per record, in the order given."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for record in records:
        writer.writerow(audit_log_row(record))
    return buffer.getvalue()


def export_filename(resource: str, on: Optional[date] = None) -> str:
    """`<resource>-<YYYY-MM-DD>.csv` for the export date."""
    on = on or date.today()
    return f"{resource}-{on.isoformat()}.csv"
