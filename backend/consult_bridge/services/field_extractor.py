"""
Keyword and pattern extraction over the caller's transcript lines.

This is a best-effort normalizer, not a parser: each rule looks for a fixed
pattern or vocabulary entry and fills one field of ``record.symptoms``. Rules
run per line in a fixed order (severity, duration, symptoms, location,
medications) and never block one another. Scalar fields are first-write-wins
across the whole transcript, so the earliest mention is the one recorded.
"""

import re
from typing import Iterable, Pattern, Sequence, Tuple

from consult_bridge.core.logging import get_logger
from consult_bridge.models.consultation import ConsultationRecord, Symptoms

logger = get_logger(__name__)

SEVERITY_PATTERN = re.compile(r"\b(\d{1,2})\s*(?:out\s+of|/)\s*10\b")

ACUTE_DURATION_UNITS: Tuple[str, ...] = ("hour", "day", "week")
CHRONIC_DURATION_UNITS: Tuple[str, ...] = ("day", "week", "month")
DEFAULT_DURATION_UNITS: Tuple[str, ...] = ("hour", "day", "week", "month")

# keyword -> canonical label; order decides which label is appended first
SYMPTOM_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("headache", "Headache"),
    ("migraine", "Migraine"),
    ("acne", "Acne"),
    ("pimple", "Acne"),
    ("breakout", "Acne"),
    ("nausea", "Nausea"),
    ("nauseous", "Nausea"),
    ("dizzy", "Dizziness"),
    ("dizziness", "Dizziness"),
    ("vomiting", "Vomiting"),
    ("throwing up", "Vomiting"),
    ("fever", "Fever"),
    ("cough", "Cough"),
    ("sore throat", "Sore Throat"),
    ("rash", "Rash"),
    ("pain", "Pain"),
)

# phrase -> canonical location
LOCATION_PHRASES: Tuple[Tuple[str, str], ...] = (
    ("back of head", "posterior head"),
    ("back of my head", "posterior head"),
    ("front of head", "anterior head"),
    ("front of my head", "anterior head"),
    ("side of head", "lateral head"),
    ("side of my head", "lateral head"),
    ("forehead", "anterior head"),
    ("temple", "lateral head"),
    ("face", "facial"),
    ("chest", "chest"),
    ("back", "back"),
    ("stomach", "abdomen"),
    ("throat", "throat"),
)

# phrase -> medication name as recorded
MEDICATION_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("ibuprofen", "Ibuprofen"),
    ("advil", "Ibuprofen"),
    ("motrin", "Ibuprofen"),
    ("acetaminophen", "Acetaminophen"),
    ("tylenol", "Acetaminophen"),
    ("aspirin", "Aspirin"),
    ("naproxen", "Naproxen"),
    ("aleve", "Naproxen"),
    ("benzoyl peroxide", "Benzoyl Peroxide"),
    ("antihistamine", "Antihistamine"),
)


def _compile_duration(units: Sequence[str]) -> Pattern[str]:
    alternatives = "|".join(re.escape(unit) for unit in sorted(set(units), key=len, reverse=True))
    return re.compile(rf"\b(\d+)\s+((?:{alternatives})s?)\b")


def _compile_locations() -> Tuple[Tuple[Pattern[str], str], ...]:
    # Longest phrase first so "back of head" is tried before "back".
    ordered = sorted(LOCATION_PHRASES, key=lambda item: len(item[0]), reverse=True)
    return tuple((re.compile(rf"\b{re.escape(phrase)}\b"), label) for phrase, label in ordered)


_DEFAULT_DURATION_PATTERN = _compile_duration(DEFAULT_DURATION_UNITS)
_LOCATION_PATTERNS = _compile_locations()


def extract_severity(line: str, symptoms: Symptoms) -> None:
    if symptoms.severity is not None:
        return
    match = SEVERITY_PATTERN.search(line)
    if match:
        symptoms.set_severity(int(match.group(1)))


def extract_duration(line: str, symptoms: Symptoms, pattern: Pattern[str] = _DEFAULT_DURATION_PATTERN) -> None:
    if symptoms.duration is not None:
        return
    match = pattern.search(line)
    if match:
        symptoms.set_duration(f"{int(match.group(1))} {match.group(2)}")


def extract_symptom_keywords(line: str, symptoms: Symptoms) -> None:
    for keyword, label in SYMPTOM_KEYWORDS:
        if keyword in line and symptoms.add_symptom(label):
            symptoms.set_primary_condition(label)


def extract_location(line: str, symptoms: Symptoms) -> None:
    if symptoms.location is not None:
        return
    for pattern, label in _LOCATION_PATTERNS:
        if pattern.search(line):
            symptoms.set_location(label)
            return


def extract_medications(line: str, symptoms: Symptoms) -> None:
    for keyword, name in MEDICATION_KEYWORDS:
        if keyword in line:
            symptoms.add_medication(name)


def extract_symptoms(
    record: ConsultationRecord,
    lines: Iterable[str],
    duration_units: Sequence[str] = DEFAULT_DURATION_UNITS,
) -> ConsultationRecord:
    """Fill ``record.symptoms`` from the caller's lowercase transcript lines."""
    duration_pattern = (
        _DEFAULT_DURATION_PATTERN
        if tuple(duration_units) == DEFAULT_DURATION_UNITS
        else _compile_duration(duration_units)
    )
    symptoms = record.symptoms
    for line in lines:
        extract_severity(line, symptoms)
        extract_duration(line, symptoms, duration_pattern)
        extract_symptom_keywords(line, symptoms)
        extract_location(line, symptoms)
        extract_medications(line, symptoms)

    logger.debug(
        f"EXTRACTOR: Call '{record.call_id}' -> primary={symptoms.primary_condition!r} "
        f"severity={symptoms.severity} duration={symptoms.duration!r} location={symptoms.location!r}"
    )
    return record
