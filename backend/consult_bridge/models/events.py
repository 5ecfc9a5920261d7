# backend/consult_bridge/models/events.py

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)


class TranscriptTurn(_Lenient):
    role: Optional[str] = None
    content: Optional[str] = None


class CallAnalysis(_Lenient):
    call_summary: Optional[str] = None
    user_sentiment: Optional[str] = None
    call_successful: Optional[bool] = None
    custom_analysis_data: Optional[Dict[str, Any]] = None
    agent_task_completion_rating: Optional[str] = None


class CallPayload(_Lenient):
    call_id: Optional[str] = None
    start_timestamp: Optional[int] = None
    duration_ms: Optional[int] = None
    from_number: Optional[str] = None
    transcript: Optional[str] = None
    transcript_object: List[TranscriptTurn] = Field(default_factory=list)
    call_analysis: Optional[CallAnalysis] = None


class CallEnvelope(_Lenient):
    """Lifecycle event shape: ``{event, call}``."""

    event: Optional[str] = None
    call: CallPayload = Field(default_factory=CallPayload)


class AgentTurnRequest(_Lenient):
    """Interactive-turn shape: ``{intent, user_input, call_id}``."""

    intent: Optional[str] = None
    user_input: Optional[str] = None
    call_id: Optional[str] = None


class AgentTurnResponse(BaseModel):
    response: str
    metadata: Dict[str, Any] = Field(default_factory=dict)


class OutboundMessage(BaseModel):
    destination_phone: str
    body: str
