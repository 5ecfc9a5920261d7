import pytest

from consult_bridge.services.notification import (
    HEALTH_CARD_PLACEHOLDER,
    decide_notification,
    format_phone_number,
)


def booked(record, phone="+17785551234"):
    record.appointment.booked = True
    record.appointment.date_time = "2024-11-20 10:30"
    record.contact.first_name = "Jordan"
    record.contact.last_name = "Lee"
    record.contact.phone = phone
    return record


def test_booked_with_phone_renders_message(record, settings):
    decision = decide_notification(booked(record), settings)
    assert decision.send is True
    message = decision.message
    assert message.destination_phone == "+17785551234"
    assert "call-123" in message.body
    assert "Jordan Lee" in message.body
    assert "2024-11-20 10:30" in message.body
    assert settings.PHARMACY_LOCATION in message.body
    assert settings.PHARMACY_PHONE in message.body


def test_health_card_placeholder(record, settings):
    body = decide_notification(booked(record), settings).message.body
    assert HEALTH_CARD_PLACEHOLDER in body

    record.contact.health_card_number = "9876543210"
    body = decide_notification(record, settings).message.body
    assert "9876543210" in body
    assert HEALTH_CARD_PLACEHOLDER not in body


@pytest.mark.parametrize("flag", [False, None])
def test_not_booked_produces_nothing(record, settings, flag):
    booked(record)
    record.appointment.booked = flag
    decision = decide_notification(record, settings)
    assert decision.send is False
    assert decision.message is None


@pytest.mark.parametrize("phone", [None, "", "12345"])
def test_booked_without_usable_phone_is_skipped(record, settings, phone):
    decision = decide_notification(booked(record, phone=phone), settings)
    assert decision.send is False
    assert decision.message is None
    assert "phone" in decision.reason


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("778-555-1234", "+17785551234"),
        ("(778) 555 1234", "+17785551234"),
        ("+1 778 555 1234", "+17785551234"),
        ("447700900123", "+447700900123"),
        ("555-1234", None),
        (None, None),
    ],
)
def test_format_phone_number(raw, expected):
    assert format_phone_number(raw) == expected
