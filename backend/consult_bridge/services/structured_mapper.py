# backend/consult_bridge/services/structured_mapper.py

import json
from typing import Any, Dict, Mapping, Optional

from consult_bridge.core.logging import get_logger
from consult_bridge.models.consultation import ConsultationRecord
from consult_bridge.models.events import CallAnalysis
from consult_bridge.services.field_aliases import FIELD_ALIASES, FieldAliases

logger = get_logger(__name__)

TRUTHY_STRINGS = ("true", "True")

# canonical field -> (record section, attribute)
_TEXT_TARGETS: Dict[str, tuple] = {
    "firstName": ("contact", "first_name"),
    "lastName": ("contact", "last_name"),
    "phone": ("contact", "phone"),
    "email": ("contact", "email"),
    "address": ("contact", "address"),
    "city": ("contact", "city"),
    "postalCode": ("contact", "postal_code"),
    "dateOfBirth": ("contact", "date_of_birth"),
    "emergencyContactName": ("contact", "emergency_contact_name"),
    "emergencyContactPhone": ("contact", "emergency_contact_phone"),
    "healthCardNumber": ("contact", "health_card_number"),
    "appointmentDateTime": ("appointment", "date_time"),
    "reasonForCall": ("consultation", "reason_for_call"),
    "minorAilment": ("consultation", "minor_ailment"),
}

_FLAG_TARGETS: Dict[str, tuple] = {
    "appointmentBooked": ("appointment", "booked"),
    "consentGiven": ("appointment", "consent_given"),
}


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def is_truthy(value: Any) -> bool:
    """
    Normalize the upstream yes/no flags.

    Depending on the agent release these arrive as a JSON boolean or as the
    strings ``"true"``/``"True"``; those three spellings are truthy and
    everything else is not.
    """
    if value is True:
        return True
    return isinstance(value, str) and value.strip() in TRUTHY_STRINGS


def as_text(value: Any) -> Optional[str]:
    if not _is_present(value):
        return None
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def resolve_field(data: Mapping[str, Any], canonical: str, aliases: FieldAliases = FIELD_ALIASES) -> Any:
    """Value of the first accepted spelling of ``canonical`` present in ``data``, else None."""
    for key in aliases.get(canonical, ()):
        if key in data and _is_present(data[key]):
            return data[key]
    return None


def map_custom_data(
    record: ConsultationRecord,
    data: Optional[Mapping[str, Any]],
    caller_phone: Optional[str] = None,
    aliases: FieldAliases = FIELD_ALIASES,
) -> ConsultationRecord:
    """
    Map the custom analysis data onto contact, consultation and appointment
    fields of ``record``.

    A missing payload is normal for calls that ended before analysis; the
    record then keeps its defaults apart from the caller-number fallback.
    The payload is kept verbatim in ``analysis.raw_custom_data`` whether or
    not every key could be mapped.
    """
    payload: Dict[str, Any] = dict(data or {})
    record.analysis.raw_custom_data = payload

    for canonical, (section, attribute) in _TEXT_TARGETS.items():
        value = as_text(resolve_field(payload, canonical, aliases))
        if value is not None:
            setattr(getattr(record, section), attribute, value)

    for canonical, (section, attribute) in _FLAG_TARGETS.items():
        value = resolve_field(payload, canonical, aliases)
        if value is not None:
            setattr(getattr(record, section), attribute, is_truthy(value))

    if record.contact.phone is None and _is_present(caller_phone):
        record.contact.phone = caller_phone.strip()

    primary = as_text(resolve_field(payload, "primarySymptom", aliases))
    if primary is not None:
        record.symptoms.set_primary_condition(primary)

    if payload:
        mapped = [c for c in aliases if resolve_field(payload, c, aliases) is not None]
        logger.info(f"MAPPER: Call '{record.call_id}' mapped {len(mapped)} canonical field(s) from {len(payload)} key(s).")
    return record


def map_call_analysis(record: ConsultationRecord, analysis: Optional[CallAnalysis]) -> ConsultationRecord:
    """Copy the platform's own post-call analysis fields onto ``record.analysis``."""
    if analysis is None:
        return record
    record.analysis.summary = as_text(analysis.call_summary)
    record.analysis.sentiment = as_text(analysis.user_sentiment)
    record.analysis.successful = analysis.call_successful
    record.analysis.task_completion = as_text(analysis.agent_task_completion_rating)
    return record
