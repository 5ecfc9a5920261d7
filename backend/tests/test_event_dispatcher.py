import pytest

from consult_bridge.services.collaborators import Result
from consult_bridge.services.event_dispatcher import (
    EventDispatcher,
    EventKind,
    classify,
    parse_envelope,
)

from conftest import FakeSender, FakeStore


@pytest.mark.parametrize(
    "tag,kind",
    [
        ("call_started", EventKind.STARTED),
        ("call_ended", EventKind.ENDED),
        ("call_analyzed", EventKind.ANALYZED),
        ("call_transferred", EventKind.UNRECOGNIZED),
        (None, EventKind.UNRECOGNIZED),
        ("", EventKind.UNRECOGNIZED),
    ],
)
def test_classify(tag, kind):
    assert classify(tag) is kind


@pytest.mark.parametrize("tag", ["call_started", "call_ended", "something_new", None])
def test_non_analyzed_events_build_nothing(dispatcher, store, sender, tag):
    result = dispatcher.dispatch(parse_envelope({"event": tag, "call": {"call_id": "c1"}}))
    assert result.record is None
    assert store.records == []
    assert sender.sent == []


def test_end_to_end_headache_scenario(dispatcher, store):
    envelope = parse_envelope(
        {
            "event": "call_analyzed",
            "call": {
                "call_id": "c1",
                "from_number": "+17785551234",
                "transcript": "user: i have a headache about 8 out of 10 for 2 days",
                "call_analysis": {"custom_analysis_data": {}},
            },
        }
    )
    result = dispatcher.dispatch(envelope)
    symptoms = result.record.symptoms
    assert symptoms.primary_condition == "Headache"
    assert symptoms.severity == 8
    assert symptoms.duration == "2 days"
    assert symptoms.additional_symptoms == ["Headache"]
    assert result.record.contact.phone == "+17785551234"
    assert store.records == [result.record]


def test_analyzed_with_booking_stores_and_texts(dispatcher, store, sender, analyzed_payload):
    result = dispatcher.dispatch(parse_envelope(analyzed_payload))
    record = result.record

    assert record.call_id == "call-abc"
    assert record.contact.first_name == "Jordan"
    assert record.consultation.minor_ailment == "acne"
    assert record.appointment.booked is True
    assert record.symptoms.primary_condition == "Acne"
    assert record.symptoms.severity == 6
    assert record.symptoms.duration == "3 weeks"
    assert record.symptoms.location == "facial"
    assert record.symptoms.medications_taken == ["Benzoyl Peroxide"]
    assert record.analysis.summary == "Caller booked an acne consultation."
    assert record.analysis.raw_custom_data["appointment_booked"] == "true"

    assert store.records == [record]
    assert len(sender.sent) == 1
    phone, body = sender.sent[0]
    assert phone == "+17785551234"
    assert "call-abc" in body
    assert "9876543210" in body
    assert result.errors == []


def test_mapper_primary_symptom_wins_over_transcript(dispatcher, analyzed_payload):
    analyzed_payload["call"]["call_analysis"]["custom_analysis_data"]["primary_symptom"] = "Rash"
    record = dispatcher.dispatch(parse_envelope(analyzed_payload)).record
    assert record.symptoms.primary_condition == "Rash"
    assert record.symptoms.additional_symptoms == ["Acne"]


def test_store_failure_does_not_block_sms(settings):
    store = FakeStore(raises=RuntimeError("sheets down"))
    sender = FakeSender()
    dispatcher = EventDispatcher(store=store, sender=sender, settings=settings)
    payload = {
        "event": "call_analyzed",
        "call": {
            "call_id": "c2",
            "from_number": "7785551234",
            "call_analysis": {"custom_analysis_data": {"appointment_booked": True}},
        },
    }
    result = dispatcher.dispatch(parse_envelope(payload))
    assert result.store_result.ok is False
    assert len(sender.sent) == 1
    assert result.send_result.ok is True
    assert any("sheets down" in e for e in result.errors)


def test_sms_failure_is_recorded_not_raised(settings):
    store = FakeStore()
    sender = FakeSender(result=Result(ok=False, detail="throttled"))
    dispatcher = EventDispatcher(store=store, sender=sender, settings=settings)
    payload = {
        "event": "call_analyzed",
        "call": {
            "call_id": "c3",
            "from_number": "7785551234",
            "call_analysis": {"custom_analysis_data": {"Appointment Booked": "True"}},
        },
    }
    result = dispatcher.dispatch(parse_envelope(payload))
    assert len(store.records) == 1
    assert result.errors == ["send: throttled"]


def test_booked_without_phone_skips_sms(dispatcher, store, sender):
    payload = {
        "event": "call_analyzed",
        "call": {"call_id": "c4", "call_analysis": {"custom_analysis_data": {"appointment_booked": True}}},
    }
    result = dispatcher.dispatch(parse_envelope(payload))
    assert result.notification.send is False
    assert sender.sent == []
    assert len(store.records) == 1


def test_missing_call_analysis_is_fine(dispatcher, store):
    result = dispatcher.dispatch(parse_envelope({"event": "call_analyzed", "call": {"call_id": "c5"}}))
    assert result.record.analysis.raw_custom_data == {}
    assert result.record.symptoms.primary_condition is None
    assert len(store.records) == 1


def test_missing_call_id_gets_generated_id(dispatcher):
    result = dispatcher.dispatch(parse_envelope({"event": "call_analyzed"}))
    assert result.record.call_id.startswith("unknown-")


def test_malformed_fields_are_dropped_not_fatal():
    envelope = parse_envelope(
        {
            "event": "call_analyzed",
            "call": {
                "call_id": "c6",
                "start_timestamp": "yesterday",
                "transcript_object": [{"role": "user", "content": {"text": "hi"}}, {"role": "user", "content": "acne"}],
                "call_analysis": {"call_successful": "maybe", "custom_analysis_data": ["not", "a", "map"]},
            },
        }
    )
    assert envelope.call.call_id == "c6"
    assert envelope.call.start_timestamp is None
    assert envelope.call.call_analysis.call_successful is None
    assert envelope.call.call_analysis.custom_analysis_data is None
    assert [turn.content for turn in envelope.call.transcript_object] == [None, "acne"]


def test_non_object_call_block_falls_back_to_defaults():
    envelope = parse_envelope({"event": "call_analyzed", "call": "garbage"})
    assert envelope.event == "call_analyzed"
    assert envelope.call.call_id is None


def test_numeric_call_id_is_accepted(dispatcher):
    result = dispatcher.dispatch(parse_envelope({"event": "call_analyzed", "call": {"call_id": 42}}))
    assert result.record.call_id == "42"


def test_bad_turns_before_a_good_one_do_not_shift_it_out():
    envelope = parse_envelope(
        {
            "event": "call_analyzed",
            "call": {
                "call_id": "c7",
                "transcript_object": ["garbage", "garbage", {"role": "user", "content": "i have a headache"}],
            },
        }
    )
    assert [turn.content for turn in envelope.call.transcript_object] == ["i have a headache"]


def test_bad_turns_between_good_ones_keep_every_good_turn(dispatcher):
    envelope = parse_envelope(
        {
            "event": "call_analyzed",
            "call": {
                "call_id": "c8",
                "transcript_object": [
                    {"role": "user", "content": "i feel dizzy"},
                    7,
                    {"role": "user", "content": "and nauseous"},
                    "garbage",
                    {"role": "user", "content": "for 2 days"},
                ],
            },
        }
    )
    record = dispatcher.dispatch(envelope).record
    assert record.symptoms.additional_symptoms == ["Dizziness", "Nausea"]
    assert record.symptoms.duration == "2 days"
