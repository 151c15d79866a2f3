from typing import Optional
from pydantic import BaseModel

class Jurisdiction(BaseModel):
    """State/jurisdiction record as stored in the states table"""
    id: Optional[str] = None
    name: str = ""
    abbreviation: Optional[str] = None
    legislature_type: Optional[str] = None
    session_info: Optional[str] = None

    @property
    def reconciliation_key(self) -> str:
        return self.abbreviation or self.name

    class Config:
        from_attributes = True
