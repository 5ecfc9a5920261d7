"""Pydantic models for the call-analysis webhook bridge."""

from .consultation import (
    Analysis,
    Appointment,
    CallMeta,
    Contact,
    ConsultationInfo,
    ConsultationRecord,
    Symptoms,
)
from .events import (
    AgentTurnRequest,
    AgentTurnResponse,
    CallAnalysis,
    CallEnvelope,
    CallPayload,
    OutboundMessage,
    TranscriptTurn,
)

__all__ = [
    "Analysis",
    "Appointment",
    "CallMeta",
    "Contact",
    "ConsultationInfo",
    "ConsultationRecord",
    "Symptoms",
    "AgentTurnRequest",
    "AgentTurnResponse",
    "CallAnalysis",
    "CallEnvelope",
    "CallPayload",
    "OutboundMessage",
    "TranscriptTurn",
]
