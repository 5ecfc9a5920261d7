# backend/consult_bridge/models/consultation.py

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


def _add_unique(items: List[str], value: str) -> bool:
    """Append ``value`` unless an entry with the same casefolded text exists."""
    key = value.casefold()
    if any(existing.casefold() == key for existing in items):
        return False
    items.append(value)
    return True


class CallMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    call_id: str
    start_timestamp: Optional[int] = None
    duration_ms: Optional[int] = None


class Contact(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    date_of_birth: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    health_card_number: Optional[str] = None

    @property
    def full_name(self) -> Optional[str]:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) if parts else None


class ConsultationInfo(BaseModel):
    reason_for_call: Optional[str] = None
    minor_ailment: Optional[str] = None


class Appointment(BaseModel):
    date_time: Optional[str] = None
    booked: Optional[bool] = None
    consent_given: Optional[bool] = None


class Symptoms(BaseModel):
    """Symptom findings. The setters are first-write-wins and report whether they wrote."""

    primary_condition: Optional[str] = None
    severity: Optional[int] = None
    duration: Optional[str] = None
    location: Optional[str] = None
    additional_symptoms: List[str] = Field(default_factory=list)
    medications_taken: List[str] = Field(default_factory=list)

    def set_primary_condition(self, value: str) -> bool:
        if self.primary_condition is not None:
            return False
        self.primary_condition = value
        return True

    def set_severity(self, value: int) -> bool:
        if self.severity is not None:
            return False
        self.severity = value
        return True

    def set_duration(self, value: str) -> bool:
        if self.duration is not None:
            return False
        self.duration = value
        return True

    def set_location(self, value: str) -> bool:
        if self.location is not None:
            return False
        self.location = value
        return True

    def add_symptom(self, label: str) -> bool:
        return _add_unique(self.additional_symptoms, label)

    def add_medication(self, name: str) -> bool:
        return _add_unique(self.medications_taken, name)


class Analysis(BaseModel):
    summary: Optional[str] = None
    sentiment: Optional[str] = None
    successful: Optional[bool] = None
    task_completion: Optional[str] = None
    raw_custom_data: Dict[str, Any] = Field(default_factory=dict)


class ConsultationRecord(BaseModel):
    """One normalized consultation, built per analyzed call and handed off once."""

    call_meta: CallMeta
    contact: Contact = Field(default_factory=Contact)
    consultation: ConsultationInfo = Field(default_factory=ConsultationInfo)
    appointment: Appointment = Field(default_factory=Appointment)
    symptoms: Symptoms = Field(default_factory=Symptoms)
    analysis: Analysis = Field(default_factory=Analysis)

    @property
    def call_id(self) -> str:
        return self.call_meta.call_id
