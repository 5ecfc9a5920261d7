# backend/consult_bridge/services/transcript.py

from typing import List

from consult_bridge.models.events import CallPayload

CALLER_ROLE = "user"


def patient_lines(call: CallPayload) -> List[str]:
    """
    Lowercase lines spoken by the caller, in call order.

    The structured ``transcript_object`` is preferred when present; otherwise
    the plain ``transcript`` is split into lines and only ``user:`` lines are
    kept, with the speaker prefix removed. Agent turns never reach extraction.
    """
    if call.transcript_object:
        return [
            turn.content.strip().lower()
            for turn in call.transcript_object
            if (turn.role or "").strip().lower() == CALLER_ROLE and turn.content and turn.content.strip()
        ]

    lines = []
    prefix = f"{CALLER_ROLE}:"
    for raw_line in (call.transcript or "").splitlines():
        line = raw_line.strip().lower()
        if line.startswith(prefix):
            content = line[len(prefix):].strip()
            if content:
                lines.append(content)
    return lines
