# backend/consult_bridge/services/notification.py

import re
from dataclasses import dataclass
from typing import Optional

from consult_bridge.core.config import Settings
from consult_bridge.core.logging import get_logger
from consult_bridge.models.consultation import ConsultationRecord
from consult_bridge.models.events import OutboundMessage

logger = get_logger(__name__)

HEALTH_CARD_PLACEHOLDER = "Not on file"

APPOINTMENT_TEMPLATE = """\
Hi {name},

Your pharmacy appointment is confirmed for {date_time}.
Location: {location}

Please bring:
- Government ID
- Health card ({health_card})
- Medication list

Questions? Call {pharmacy_phone}

Ref: {call_id}
- {pharmacy_name}"""


@dataclass
class NotificationDecision:
    send: bool
    message: Optional[OutboundMessage] = None
    reason: str = ""


def format_phone_number(phone: Optional[str]) -> Optional[str]:
    """
    Normalize to E.164. Ten digits are treated as North American and get
    ``+1``; eleven or more are assumed to carry a country code. Anything
    shorter is not a deliverable number and yields None.
    """
    if not phone:
        return None
    digits = re.sub(r"\D", "", str(phone))
    if len(digits) == 10:
        return f"+1{digits}"
    if len(digits) > 10:
        return f"+{digits}"
    return None


def render_appointment_message(record: ConsultationRecord, settings: Settings) -> str:
    return APPOINTMENT_TEMPLATE.format(
        name=record.contact.full_name or "there",
        date_time=record.appointment.date_time or "your scheduled time",
        location=settings.PHARMACY_LOCATION or settings.PHARMACY_NAME,
        health_card=record.contact.health_card_number or HEALTH_CARD_PLACEHOLDER,
        pharmacy_phone=settings.PHARMACY_PHONE or "the pharmacy",
        call_id=record.call_id,
        pharmacy_name=settings.PHARMACY_NAME,
    )


def decide_notification(record: ConsultationRecord, settings: Settings) -> NotificationDecision:
    """Decide whether ``record`` warrants a confirmation SMS and render it. No I/O."""
    if record.appointment.booked is not True:
        return NotificationDecision(send=False, reason="no appointment booked")

    destination = format_phone_number(record.contact.phone)
    if destination is None:
        logger.warning(
            f"NOTIFY: Call '{record.call_id}' booked an appointment but has no usable phone number "
            f"({record.contact.phone!r}); confirmation skipped."
        )
        return NotificationDecision(send=False, reason="missing or invalid phone number")

    message = OutboundMessage(destination_phone=destination, body=render_appointment_message(record, settings))
    return NotificationDecision(send=True, message=message, reason="appointment booked")
