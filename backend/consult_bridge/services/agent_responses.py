# backend/consult_bridge/services/agent_responses.py

from typing import Dict, Tuple

from consult_bridge.core.logging import get_logger
from consult_bridge.models.events import AgentTurnRequest, AgentTurnResponse

logger = get_logger(__name__)

# intent -> (spoken response, conversation stage)
INTENT_RESPONSES: Dict[str, Tuple[str, str]] = {
    "ASSESS_SYMPTOMS": (
        "I understand you're not feeling well. Let me ask you a few questions to better understand "
        "your symptoms. What symptoms are you experiencing?",
        "initial_assessment",
    ),
    "BOOK_PHARMACY": (
        "I'll help you book an appointment at the pharmacy. What time would work best for you?",
        "booking",
    ),
    "MEDICATION_REMINDER": (
        "I can help you set up medication reminders. How often do you need to take your medication?",
        "reminder_setup",
    ),
    "FOLLOW_UP": (
        "How have you been feeling since your last pharmacy visit?",
        "follow_up",
    ),
}

DEFAULT_RESPONSE: Tuple[str, str] = (
    "I'm here to help with your healthcare needs. Would you like to book an appointment, "
    "set up medication reminders, or discuss your symptoms?",
    "initial",
)


def respond_to_turn(request: AgentTurnRequest) -> AgentTurnResponse:
    intent = (request.intent or "").strip().upper()
    text, stage = INTENT_RESPONSES.get(intent, DEFAULT_RESPONSE)
    logger.info(f"AGENT: Processed intent '{intent or 'NONE'}' for call '{request.call_id}'.")
    return AgentTurnResponse(response=text, metadata={"stage": stage})
