"""
Accepted raw key spellings for each canonical field of the custom analysis data.

The voice platform's post-call analysis keys are defined per agent, and their
spelling has drifted between agent releases (``first_name``, ``First Name``,
``firstName``...). Each canonical field lists every spelling seen so far, in
priority order; the mapper takes the first one present. Add new spellings at
the end of a tuple and bump ``ALIAS_TABLE_VERSION``.
"""

from typing import Dict, Mapping, Tuple

ALIAS_TABLE_VERSION = 3

FieldAliases = Mapping[str, Tuple[str, ...]]

FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "firstName": ("first_name", "First Name", "firstName", "first name", "patient_first_name"),
    "lastName": ("last_name", "Last Name", "lastName", "last name", "patient_last_name"),
    "phone": ("phone_number", "Phone Number", "phone", "phoneNumber", "Phone", "callback_number"),
    "email": ("email", "Email", "email_address", "Email Address", "emailAddress"),
    "address": ("address", "Address", "street_address", "Street Address", "home_address"),
    "city": ("city", "City"),
    "postalCode": ("postal_code", "Postal Code", "postalCode", "zip_code", "zip", "Zip Code"),
    "dateOfBirth": ("date_of_birth", "Date of Birth", "dateOfBirth", "dob", "DOB", "birth_date"),
    "emergencyContactName": (
        "emergency_contact_name",
        "Emergency Contact Name",
        "emergencyContactName",
        "emergency_contact",
    ),
    "emergencyContactPhone": (
        "emergency_contact_phone",
        "Emergency Contact Phone",
        "emergencyContactPhone",
        "emergency_contact_number",
    ),
    "healthCardNumber": (
        "health_card_number",
        "Health Card Number",
        "healthCardNumber",
        "phn",
        "PHN",
        "msp_number",
        "MSP Number",
    ),
    "appointmentDateTime": (
        "appointment_date_time",
        "Appointment Date/Time",
        "Appointment Date Time",
        "appointmentDateTime",
        "appointment_time",
        "appointment_date",
    ),
    "consentGiven": ("consent_given", "Consent Given", "consentGiven", "consent"),
    "appointmentBooked": (
        "appointment_booked",
        "Appointment Booked",
        "appointmentBooked",
        "booked",
    ),
    "reasonForCall": ("reason_for_call", "Reason for Call", "reasonForCall", "call_reason"),
    "minorAilment": ("minor_ailment", "Minor Ailment", "minorAilment", "ailment"),
    "primarySymptom": (
        "primary_symptom",
        "Primary Symptom",
        "primarySymptom",
        "main_symptom",
        "chief_complaint",
    ),
}

CANONICAL_FIELDS: Tuple[str, ...] = tuple(FIELD_ALIASES)
