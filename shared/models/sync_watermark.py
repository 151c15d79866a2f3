from typing import List
from pydantic import BaseModel, Field

class SyncWatermark(BaseModel):
    """Incremental sync position for one state, as stored in sync_watermarks"""
    state: str
    last_updated_at: str = Field(..., description="Newest upstream updated_at fully synced")
    # Bills already synced whose updated_at equals last_updated_at
    boundary_ids: List[str] = Field(default_factory=list)
