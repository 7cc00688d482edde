from __future__ import annotations

import csv
import io
from datetime import date

from supplier_portal.audit import CSV_HEADER, actor_name, export_audit_logs_csv, export_filename


def _entry(**overrides) -> dict:
    entry = {
        "id": "a1",
        "user": {"id": "u1", "firstName": "Anna", "lastName": "Berg", "email": "anna@example.com"},
        "action": "UPDATE",
        "entityType": "Supplier",
        "entityId": "s1",
        "ipAddress": "10.0.0.7",
        "createdAt": "2025-02-03T09:30:00.000Z",
    }
    entry.update(overrides)
    return entry


def test_header_and_row_layout() -> None:
    text = export_audit_logs_csv([_entry()])
    assert text == (
        "ID,User,Action,Entity Type,Entity ID,IP Address,Date\n"
        "a1,Anna Berg,UPDATE,Supplier,s1,10.0.0.7,2025-02-03T09:30:00.000Z\n"
    )


def test_field_with_comma_is_quoted() -> None:
    text = export_audit_logs_csv([_entry(entityType="Acme, Inc.")])
    assert '"Acme, Inc."' in text.splitlines()[1]
    row = next(r for i, r in enumerate(csv.reader(io.StringIO(text))) if i == 1)
    assert row[3] == "Acme, Inc."


def test_embedded_quotes_are_doubled() -> None:
    text = export_audit_logs_csv([_entry(action='said "hi"')])
    assert '"said ""hi"""' in text


def test_system_actor_and_missing_ip() -> None:
    text = export_audit_logs_csv([_entry(user=None, ipAddress=None)])
    assert text.splitlines()[1] == "a1,System,UPDATE,Supplier,s1,N/A,2025-02-03T09:30:00.000Z"


def test_actor_name_falls_back_to_email() -> None:
    assert actor_name({"user": {"email": "ops@example.com"}}) == "ops@example.com"


def test_empty_page_is_header_only() -> None:
    assert export_audit_logs_csv([]) == ",".join(CSV_HEADER) + "\n"


def test_filename_uses_export_date() -> None:
    assert export_filename("audit-logs", date(2025, 3, 9)) == "audit-logs-2025-03-09.csv"
    assert export_filename("audit-logs").startswith(f"audit-logs-{date.today().isoformat()}")
