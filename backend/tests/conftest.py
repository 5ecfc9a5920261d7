from typing import List, Tuple

import pytest
from fastapi.testclient import TestClient

from consult_bridge.core.config import Settings
from consult_bridge.main import create_app
from consult_bridge.models.consultation import CallMeta, ConsultationRecord
from consult_bridge.services.collaborators import Result
from consult_bridge.services.event_dispatcher import EventDispatcher


class FakeStore:
    def __init__(self, result: Result = None, raises: Exception = None):
        self.records: List[ConsultationRecord] = []
        self.result = result or Result(ok=True)
        self.raises = raises

    def store(self, record):
        self.records.append(record)
        if self.raises:
            raise self.raises
        return self.result


class FakeSender:
    def __init__(self, result: Result = None, raises: Exception = None):
        self.sent: List[Tuple[str, str]] = []
        self.result = result or Result(ok=True)
        self.raises = raises

    def send(self, phone, body):
        self.sent.append((phone, body))
        if self.raises:
            raise self.raises
        return self.result


@pytest.fixture
def settings():
    return Settings(
        WEBHOOK_SECRET="test-secret",
        VERIFY_WEBHOOK_SIGNATURE=False,
        ENABLE_DATA_STORAGE=False,
        SMS_ENABLED=False,
        PHARMACY_NAME="Maple Pharmacy",
        PHARMACY_LOCATION="123 Main St, Vancouver",
        PHARMACY_PHONE="604-555-0100",
    )


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def dispatcher(store, sender, settings):
    return EventDispatcher(store=store, sender=sender, settings=settings)


@pytest.fixture
def client(settings, dispatcher):
    return TestClient(create_app(settings, dispatcher=dispatcher))


@pytest.fixture
def record():
    return ConsultationRecord(call_meta=CallMeta(call_id="call-123", start_timestamp=1700000000000, duration_ms=95000))


@pytest.fixture
def analyzed_payload():
    return {
        "event": "call_analyzed",
        "call": {
            "call_id": "call-abc",
            "start_timestamp": 1700000000000,
            "duration_ms": 120000,
            "from_number": "+17785551234",
            "transcript": (
                "Agent: Hi, how can I help you today?\n"
                "User: I have had a pimple breakout on my face for 3 weeks\n"
                "Agent: How bad is it?\n"
                "User: maybe 6 out of 10, i tried benzoyl peroxide"
            ),
            "call_analysis": {
                "call_summary": "Caller booked an acne consultation.",
                "user_sentiment": "Positive",
                "call_successful": True,
                "agent_task_completion_rating": "Complete",
                "custom_analysis_data": {
                    "first_name": "Jordan",
                    "last_name": "Lee",
                    "health_card_number": "9876543210",
                    "appointment_date_time": "2024-11-20 10:30",
                    "appointment_booked": "true",
                    "minor_ailment": "acne",
                },
            },
        },
    }
