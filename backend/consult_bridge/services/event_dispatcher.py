"""
Routing of call lifecycle webhooks.

Each envelope is classified on its own from the ``event`` tag; nothing is
remembered between requests. Only ``call_analyzed`` produces a record: the
custom analysis data is mapped first, transcript extraction then fills the
gaps, and the finished record goes to the notification decision, the record
store and the message sender, in that order.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional
from uuid import uuid4

from pydantic import ValidationError

from consult_bridge.core.config import Settings
from consult_bridge.core.logging import get_logger
from consult_bridge.models.consultation import CallMeta, ConsultationRecord
from consult_bridge.models.events import CallEnvelope, CallPayload
from consult_bridge.services.collaborators import MessageSender, RecordStore, Result
from consult_bridge.services.field_extractor import DEFAULT_DURATION_UNITS, extract_symptoms
from consult_bridge.services.notification import NotificationDecision, decide_notification
from consult_bridge.services.structured_mapper import map_call_analysis, map_custom_data
from consult_bridge.services.transcript import patient_lines

logger = get_logger(__name__)

MAX_REPAIR_PASSES = 5


class EventKind(str, Enum):
    STARTED = "started"
    ENDED = "ended"
    ANALYZED = "analyzed"
    UNRECOGNIZED = "unrecognized"


EVENT_TAGS: Dict[str, EventKind] = {
    "call_started": EventKind.STARTED,
    "call_ended": EventKind.ENDED,
    "call_analyzed": EventKind.ANALYZED,
}


def classify(tag: Optional[str]) -> EventKind:
    return EVENT_TAGS.get((tag or "").strip(), EventKind.UNRECOGNIZED)


def _drop_path(payload: Any, path: tuple) -> bool:
    target = payload
    for key in path[:-1]:
        try:
            target = target[key]
        except (KeyError, IndexError, TypeError):
            return False
    try:
        del target[path[-1]]
    except (KeyError, IndexError, TypeError):
        return False
    return True


def _path_sort_key(path: tuple) -> tuple:
    return tuple((0, key) if isinstance(key, int) else (1, str(key)) for key in path)


def parse_envelope(payload: Mapping[str, Any]) -> CallEnvelope:
    """
    Validate a lifecycle envelope without ever rejecting it.

    Values that fail validation are removed and validation is retried, so a
    wrongly typed field costs that field only. If repair does not converge,
    only the event tag is kept.
    """
    data: Dict[str, Any] = copy.deepcopy(dict(payload))
    for _ in range(MAX_REPAIR_PASSES):
        try:
            return CallEnvelope.model_validate(data)
        except ValidationError as e:
            dropped: List[str] = []
            paths = {tuple(error.get("loc", ())) for error in e.errors()}
            # Deepest and highest list index first, so earlier deletions never shift later paths.
            for path in sorted(paths, key=_path_sort_key, reverse=True):
                if path and _drop_path(data, path):
                    dropped.append(".".join(str(p) for p in path))
            if not dropped:
                break
            logger.warning(f"DISPATCH: Dropped malformed envelope field(s): {', '.join(dropped)}")

    tag = payload.get("event")
    return CallEnvelope(event=tag if isinstance(tag, str) else None)


@dataclass
class DispatchResult:
    event: Optional[str]
    kind: EventKind
    record: Optional[ConsultationRecord] = None
    notification: Optional[NotificationDecision] = None
    store_result: Optional[Result] = None
    send_result: Optional[Result] = None
    errors: List[str] = field(default_factory=list)


class EventDispatcher:
    """Builds consultation records from analyzed calls and hands them downstream."""

    def __init__(
        self,
        store: RecordStore,
        sender: MessageSender,
        settings: Settings,
        duration_units=DEFAULT_DURATION_UNITS,
    ):
        self.store = store
        self.sender = sender
        self.settings = settings
        self.duration_units = tuple(duration_units)

    def build_record(self, call: CallPayload) -> ConsultationRecord:
        call_id = (call.call_id or "").strip()
        if not call_id:
            call_id = f"unknown-{uuid4().hex[:12]}"
            logger.warning(f"DISPATCH: Envelope has no call_id; using generated id '{call_id}'.")

        record = ConsultationRecord(
            call_meta=CallMeta(
                call_id=call_id,
                start_timestamp=call.start_timestamp,
                duration_ms=call.duration_ms,
            )
        )
        analysis = call.call_analysis
        map_custom_data(record, analysis.custom_analysis_data if analysis else None, call.from_number)
        map_call_analysis(record, analysis)
        extract_symptoms(record, patient_lines(call), self.duration_units)
        return record

    def dispatch(self, envelope: CallEnvelope) -> DispatchResult:
        kind = classify(envelope.event)
        call_id = envelope.call.call_id
        result = DispatchResult(event=envelope.event, kind=kind)

        if kind is EventKind.UNRECOGNIZED:
            logger.info(f"DISPATCH: Ignoring unrecognized event {envelope.event!r} for call '{call_id}'.")
            return result
        if kind is not EventKind.ANALYZED:
            logger.info(f"DISPATCH: Call '{call_id}' {kind.value}.")
            return result

        record = self.build_record(envelope.call)
        result.record = record
        result.notification = decide_notification(record, self.settings)
        logger.info(
            f"DISPATCH: Call '{record.call_id}' analyzed; primary condition "
            f"{record.symptoms.primary_condition!r}, notify={result.notification.send}."
        )

        result.store_result = self._store(record, result.errors)
        if result.notification.send and result.notification.message is not None:
            message = result.notification.message
            result.send_result = self._send(record.call_id, message.destination_phone, message.body, result.errors)
        return result

    def _store(self, record: ConsultationRecord, errors: List[str]) -> Result:
        try:
            outcome = self.store.store(record)
        except Exception as e:
            logger.error(f"DISPATCH: Record store raised for call '{record.call_id}': {e}", exc_info=True)
            outcome = Result(ok=False, detail=str(e))
        if not outcome.ok:
            errors.append(f"store: {outcome.detail}")
        return outcome

    def _send(self, call_id: str, phone: str, body: str, errors: List[str]) -> Result:
        try:
            outcome = self.sender.send(phone, body)
        except Exception as e:
            logger.error(f"DISPATCH: Message sender raised for call '{call_id}': {e}", exc_info=True)
            outcome = Result(ok=False, detail=str(e))
        if not outcome.ok:
            errors.append(f"send: {outcome.detail}")
        return outcome
