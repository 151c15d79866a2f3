from typing import Optional
from enum import Enum
from pydantic import BaseModel, Field

class SubjectCategory(str, Enum):
    """Coarse subject category"""
    HEALTH = "Health"
    EDUCATION = "Education"
    ENVIRONMENT = "Environment"
    ECONOMY = "Economy"
    JUSTICE = "Justice"
    TRANSPORTATION = "Transportation"
    OTHER = "Other"

class Subject(BaseModel):
    """Subject area record, keyed by its canonical display name"""
    id: Optional[str] = None
    name: str = Field(..., description="Canonicalized display name (reconciliation key)")
    category: SubjectCategory = SubjectCategory.OTHER

    class Config:
        from_attributes = True
        use_enum_values = True
