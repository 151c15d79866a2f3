"""
Pure field transforms: dates, subject labels, categories and bill status.

None of these functions raise on bad input; normalization is best-effort.
"""
import re
import logging
from typing import Dict, Mapping, Optional, Sequence, Tuple

from dateutil import parser as date_parser

from shared.models.bill import BillStatus
from shared.models.subject import SubjectCategory

logger = logging.getLogger(__name__)

_DATE_PREFIX = re.compile(r"^(\d{4}-\d{2}-\d{2})")
_LOWER_UPPER = re.compile(r"([a-z])([A-Z])")
_UPPER_UPPER_LOWER = re.compile(r"([A-Z])([A-Z][a-z])")


def normalize_date(value: Optional[str]) -> Optional[str]:
    """
    Reduce a date or timestamp to its YYYY-MM-DD calendar date.

    "2025-02-19T05:00:00+00:00" -> "2025-02-19". Unparseable input is
    returned unchanged.
    """
    if not value:
        return None
    if not isinstance(value, str):
        return value

    match = _DATE_PREFIX.match(value)
    if match:
        return match.group(1)

    try:
        return date_parser.parse(value).date().isoformat()
    except (ValueError, OverflowError, TypeError) as e:
        logger.debug(f"Could not normalize date {value!r}: {e}")
        return value


# Compound labels that carry no casing cues for the heuristic formatter
SUBJECT_NAME_OVERRIDES: Dict[str, str] = {
    "lawenforcement": "Law Enforcement",
    "publicsafety": "Public Safety",
    "racialandidentityprofiling": "Racial And Identity Profiling",
    "foodvendorsandfacilities": "Food Vendors And Facilities",
    "enforcementactivities": "Enforcement Activities",
    "preapprenticeshipprathway": "Pre-Apprenticeship Pathway",
    "peaceofficers": "Peace Officers",
    "confidentialityofrecords": "Confidentiality Of Records",
    "sexualassaultforensicevid": "Sexual Assault Forensic Evidence",
    "californiascienceandhealth": "California Science And Health",
    "economicdevelopment": "Economic Development",
    "industrystrategies": "Industry Strategies",
    "equitablecleanenergysup": "Equitable Clean Energy Supply",
}


class SubjectNameFormatter:
    """
    Two-stage subject label canonicalizer: heuristic casing, then an
    override lookup on the lower-cased result.

    "PUBLIC_SAFETY" -> "Public Safety"
    "lawEnforcement" -> "Law Enforcement"
    "Lawenforcement" -> "Law Enforcement" (override)
    """

    def __init__(self, overrides: Optional[Mapping[str, str]] = None):
        self.overrides = dict(SUBJECT_NAME_OVERRIDES if overrides is None else overrides)

    @staticmethod
    def apply_casing(label: str) -> str:
        if "_" in label:
            return " ".join(
                word[:1].upper() + word[1:].lower() for word in label.split("_")
            )
        spaced = _LOWER_UPPER.sub(r"\1 \2", label)
        spaced = _UPPER_UPPER_LOWER.sub(r"\1 \2", spaced)
        return spaced[:1].upper() + spaced[1:]

    def __call__(self, label: str) -> str:
        formatted = self.apply_casing(label.strip())
        return self.overrides.get(formatted.lower(), formatted)


_default_formatter = SubjectNameFormatter()


def format_subject_name(label: str) -> str:
    """Canonical display name for a raw subject label"""
    return _default_formatter(label)


SUBJECT_CATEGORY_KEYWORDS: Sequence[Tuple[SubjectCategory, Sequence[str]]] = (
    (SubjectCategory.HEALTH, ("health", "healthcare", "medical", "hospital", "medicare", "medicaid")),
    (SubjectCategory.EDUCATION, ("education", "school", "university", "teacher", "student")),
    (SubjectCategory.ENVIRONMENT, ("environment", "climate", "energy", "pollution", "conservation")),
    (SubjectCategory.ECONOMY, ("tax", "budget", "finance", "economy", "business", "commerce")),
    (SubjectCategory.JUSTICE, ("crime", "criminal", "justice", "court", "police", "prison")),
    (SubjectCategory.TRANSPORTATION, ("transportation", "highway", "road", "transit", "vehicle")),
)


def categorize_subject(label: str) -> SubjectCategory:
    """First category whose keyword appears in the raw label, else Other"""
    label_lower = (label or "").lower()
    for category, keywords in SUBJECT_CATEGORY_KEYWORDS:
        if any(keyword in label_lower for keyword in keywords):
            return category
    return SubjectCategory.OTHER


def determine_status(description: Optional[str]) -> BillStatus:
    """
    Infer bill status from the latest action description.

    Rules are checked in order and the first match wins, so "signed ...
    committee" is Enacted.
    """
    if not description:
        return BillStatus.INTRODUCED

    action = description.lower()

    if "signed" in action or "enacted" in action:
        return BillStatus.ENACTED
    if "vetoed" in action:
        return BillStatus.VETOED
    if "failed" in action or "died" in action:
        return BillStatus.FAILED
    if "passed" in action and "senate" in action:
        return BillStatus.PASSED_SENATE
    if "passed" in action and "house" in action:
        return BillStatus.PASSED_HOUSE
    if "committee" in action:
        return BillStatus.IN_COMMITTEE

    return BillStatus.INTRODUCED
