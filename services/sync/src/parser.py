"""
Parse Open States API records into our store models.
"""
import re
import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from shared.models.bill import Bill, MAX_LINKED_RECORDS
from shared.models.jurisdiction import Jurisdiction
from shared.models.legislator import Legislator
from shared.models.subject import Subject

from .normalization import (
    categorize_subject,
    determine_status,
    format_subject_name,
    normalize_date,
)

logger = logging.getLogger(__name__)

_STATE_IN_OCD_ID = re.compile(r"/state:([a-z]{2})/", re.IGNORECASE)


def parse_bill_data(
    openstates_bill: Dict[str, Any],
    state: str,
    sponsor_ids: Sequence[Optional[str]] = (),
    subject_ids: Sequence[Optional[str]] = (),
) -> Bill:
    """
    Parse an Open States bill into our Bill model.

    Args:
        openstates_bill: Raw bill data from the /bills endpoint
        state: Jurisdiction code the bill was fetched for
        sponsor_ids: Linked legislator record IDs
        subject_ids: Linked subject record IDs

    Returns:
        Bill model instance
    """
    identifier = openstates_bill.get("identifier") or ""
    abstracts = openstates_bill.get("abstracts") or []
    classification = openstates_bill.get("classification") or []
    from_org = openstates_bill.get("from_organization") or {}
    latest_action = openstates_bill.get("latest_action_description") or ""

    return Bill(
        openstates_id=openstates_bill.get("id") or "",
        bill_number=identifier,
        slug=re.sub(r"\s+", "", identifier) or None,
        title=openstates_bill.get("title") or "",
        summary=(abstracts[0].get("abstract") if abstracts else None) or "",
        latest_action=latest_action,
        status=determine_status(latest_action),
        state=state.upper(),
        classification=classification[0] if classification else None,
        introduction_date=normalize_date(openstates_bill.get("first_action_date")),
        latest_action_date=normalize_date(openstates_bill.get("latest_action_date")),
        chamber=from_org.get("classification") or None,
        source_url=openstates_bill.get("openstates_url") or "",
        sponsor_ids=_cap_links(sponsor_ids),
        subject_ids=_cap_links(subject_ids),
    )


def _cap_links(record_ids: Sequence[Optional[str]]) -> List[str]:
    """Drop empty IDs and keep the first MAX_LINKED_RECORDS"""
    return [rid for rid in record_ids if rid][:MAX_LINKED_RECORDS]


def extract_sponsor_people(openstates_bill: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Person stubs from a bill's sponsorships (organization sponsors are skipped)"""
    return [
        s["person"]
        for s in openstates_bill.get("sponsorships") or []
        if s.get("person")
    ]


def extract_office_info(person: Dict[str, Any]) -> Dict[str, Any]:
    """Phone and address from the first office, plus every link URL"""
    info: Dict[str, Any] = {"phone": None, "address": None, "links": []}

    offices = person.get("offices")
    if isinstance(offices, list) and offices:
        office = offices[0] or {}
        info["phone"] = office.get("voice") or None
        info["address"] = office.get("address") or None

    links = person.get("links")
    if isinstance(links, list):
        info["links"] = [link.get("url") for link in links if link and link.get("url")]

    return info


def parse_legislator(person: Dict[str, Any]) -> Legislator:
    """
    Parse an Open States person into a Legislator. Attributes absent
    upstream stay None so the stored field set is sparse.
    """
    current_role = person.get("current_role") or {}
    jurisdiction = person.get("jurisdiction") or {}
    office_info = extract_office_info(person)

    # District can be numeric or textual upstream
    district = current_role.get("district")

    return Legislator(
        openstates_id=person.get("id") or "",
        full_name=person.get("name") or "",
        first_name=person.get("given_name") or None,
        last_name=person.get("family_name") or None,
        party=person.get("party") or None,
        chamber=current_role.get("org_classification") or None,
        district=str(district) if district not in (None, "") else None,
        state=jurisdiction.get("name") or None,
        title=current_role.get("title") or None,
        phone=office_info["phone"],
        office_address=office_info["address"],
        links="\n".join(office_info["links"]) or None,
        photo_url=person.get("image") or None,
        biography=person.get("biography") or None,
        email=person.get("email") or None,
    )


def minimal_legislator(person: Dict[str, Any]) -> Legislator:
    """Degraded Legislator built only from a sponsorship stub's identity fields"""
    return Legislator(
        openstates_id=person.get("id") or "",
        full_name=person.get("name") or "",
        first_name=person.get("given_name") or None,
        last_name=person.get("family_name") or None,
    )


def parse_subject(label: str) -> Subject:
    """Canonical Subject for a raw upstream label"""
    return Subject(name=format_subject_name(label), category=categorize_subject(label))


def extract_state_abbreviation(ocd_id: Optional[str]) -> Optional[str]:
    """
    "ocd-jurisdiction/country:us/state:nc/government" -> "NC"
    """
    if not ocd_id:
        return None
    match = _STATE_IN_OCD_ID.search(ocd_id)
    return match.group(1).upper() if match else None


def parse_jurisdiction(openstates_jurisdiction: Dict[str, Any]) -> Jurisdiction:
    """Parse an Open States jurisdiction into our Jurisdiction model"""
    sessions = openstates_jurisdiction.get("legislative_sessions") or []
    return Jurisdiction(
        name=openstates_jurisdiction.get("name") or "",
        abbreviation=extract_state_abbreviation(openstates_jurisdiction.get("id")),
        legislature_type=openstates_jurisdiction.get("legislature_name") or None,
        session_info=json.dumps(sessions[0]) if sessions else None,
    )
