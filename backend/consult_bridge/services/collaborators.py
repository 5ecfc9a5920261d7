# backend/consult_bridge/services/collaborators.py

from dataclasses import dataclass
from typing import Protocol

from consult_bridge.core.logging import get_logger
from consult_bridge.models.consultation import ConsultationRecord

logger = get_logger(__name__)


@dataclass
class Result:
    ok: bool
    detail: str = ""


class RecordStore(Protocol):
    def store(self, record: ConsultationRecord) -> Result: ...


class MessageSender(Protocol):
    def send(self, phone: str, body: str) -> Result: ...


class LoggingRecordStore:
    """Stand-in store used when ENABLE_DATA_STORAGE is off."""

    def store(self, record: ConsultationRecord) -> Result:
        logger.info(f"STORE: Data storage disabled; record for call '{record.call_id}' not persisted.")
        return Result(ok=True, detail="storage disabled")


class LoggingMessageSender:
    """Stand-in sender used when SMS_ENABLED is off."""

    def send(self, phone: str, body: str) -> Result:
        logger.info(f"SMS: Sending disabled; would have sent {len(body)} chars to {phone}.")
        return Result(ok=True, detail="sms disabled")
