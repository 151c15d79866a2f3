from typing import List, Optional
from enum import Enum
from pydantic import BaseModel, Field

MAX_LINKED_RECORDS = 10

class BillStatus(str, Enum):
    """Bill status inferred from the latest action description"""
    INTRODUCED = "Introduced"
    IN_COMMITTEE = "In Committee"
    PASSED_HOUSE = "Passed House"
    PASSED_SENATE = "Passed Senate"
    ENACTED = "Enacted"
    VETOED = "Vetoed"
    FAILED = "Failed"

class Bill(BaseModel):
    """Legislative bill record as stored in the bills table"""
    id: Optional[str] = None
    openstates_id: str = Field(..., description="Open States bill ID (reconciliation key)")
    bill_number: str = Field("", description="Human-readable identifier, e.g. 'HB 123'")
    slug: Optional[str] = None
    title: str = ""
    summary: str = ""
    latest_action: str = ""
    status: BillStatus = BillStatus.INTRODUCED
    state: str
    classification: Optional[str] = None
    introduction_date: Optional[str] = None
    latest_action_date: Optional[str] = None
    chamber: Optional[str] = None
    source_url: str = ""
    sponsor_ids: List[str] = Field(default_factory=list, max_length=MAX_LINKED_RECORDS)
    subject_ids: List[str] = Field(default_factory=list, max_length=MAX_LINKED_RECORDS)

    class Config:
        from_attributes = True
        use_enum_values = True
