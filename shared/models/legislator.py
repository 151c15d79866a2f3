from typing import Optional
from pydantic import BaseModel, Field

class Legislator(BaseModel):
    """Legislator record; optional fields stay None when upstream omits them"""
    id: Optional[str] = None
    openstates_id: str = Field(..., description="Open States person ID (reconciliation key)")
    full_name: str = ""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    party: Optional[str] = None
    chamber: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    title: Optional[str] = None
    phone: Optional[str] = None
    office_address: Optional[str] = None
    links: Optional[str] = None
    photo_url: Optional[str] = None
    biography: Optional[str] = None
    email: Optional[str] = None

    class Config:
        from_attributes = True
