"""
Fixed-width spreadsheet row for a ConsultationRecord.

``SHEET_COLUMNS`` is the single source of truth for column order: the header
row written to the sheet and every data row come from it, so the two cannot
drift apart. Every cell is a plain string.
"""

import json
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Sequence, Tuple

from consult_bridge.models.consultation import ConsultationRecord


def _timestamp(record: ConsultationRecord) -> Any:
    ms = record.call_meta.start_timestamp
    if ms is None:
        return None
    try:
        moment = datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        # Unrepresentable epoch: keep the raw value rather than losing the row.
        return str(ms)
    return moment.isoformat().replace("+00:00", "Z")


SHEET_COLUMNS: Tuple[Tuple[str, Callable[[ConsultationRecord], Any]], ...] = (
    ("Timestamp", _timestamp),
    ("Call ID", lambda r: r.call_meta.call_id),
    ("Duration (ms)", lambda r: r.call_meta.duration_ms),
    ("Phone Number", lambda r: r.contact.phone),
    ("First Name", lambda r: r.contact.first_name),
    ("Last Name", lambda r: r.contact.last_name),
    ("Email", lambda r: r.contact.email),
    ("Address", lambda r: r.contact.address),
    ("City", lambda r: r.contact.city),
    ("Postal Code", lambda r: r.contact.postal_code),
    ("Date of Birth", lambda r: r.contact.date_of_birth),
    ("Health Card Number", lambda r: r.contact.health_card_number),
    ("Emergency Contact Name", lambda r: r.contact.emergency_contact_name),
    ("Emergency Contact Phone", lambda r: r.contact.emergency_contact_phone),
    ("Reason for Call", lambda r: r.consultation.reason_for_call),
    ("Minor Ailment", lambda r: r.consultation.minor_ailment),
    ("Appointment Date/Time", lambda r: r.appointment.date_time),
    ("Appointment Booked", lambda r: r.appointment.booked),
    ("Consent Given", lambda r: r.appointment.consent_given),
    ("Primary Condition", lambda r: r.symptoms.primary_condition),
    ("Severity", lambda r: r.symptoms.severity),
    ("Duration", lambda r: r.symptoms.duration),
    ("Location", lambda r: r.symptoms.location),
    ("Additional Symptoms", lambda r: r.symptoms.additional_symptoms),
    ("Medications", lambda r: r.symptoms.medications_taken),
    ("Sentiment", lambda r: r.analysis.sentiment),
    ("Success", lambda r: r.analysis.successful),
    ("Task Completion", lambda r: r.analysis.task_completion),
    ("Summary", lambda r: r.analysis.summary),
    ("Custom Data", lambda r: r.analysis.raw_custom_data),
)

SHEET_HEADERS: List[str] = [header for header, _ in SHEET_COLUMNS]


def to_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ", ".join(to_cell(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, default=str)
    return str(value)


def record_to_row(record: ConsultationRecord) -> List[str]:
    return [to_cell(accessor(record)) for _, accessor in SHEET_COLUMNS]


def row_to_mapping(row: Sequence[str]) -> Dict[str, str]:
    """Read a row back against the header order. Short rows are padded with ""."""
    padded = list(row) + [""] * (len(SHEET_HEADERS) - len(row))
    return dict(zip(SHEET_HEADERS, padded))
