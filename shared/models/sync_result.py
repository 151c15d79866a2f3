from typing import List, Optional
from pydantic import BaseModel, Field

class BillSyncResult(BaseModel):
    """Outcome of syncing one jurisdiction's bills"""
    synced: int = 0
    total: int = 0
    failed_bill_ids: List[str] = Field(default_factory=list)

class StateSyncResult(BaseModel):
    """Per-jurisdiction entry in a sync summary"""
    state: str
    success: bool
    synced: Optional[int] = None
    total: Optional[int] = None
    error: Optional[str] = None

class SyncSummary(BaseModel):
    """Response of a manual sync across one or more jurisdictions"""
    success: bool = True
    message: str
    total_states: int = Field(0, alias="totalStates")
    total_synced: int = Field(0, alias="totalSynced")
    total_bills: int = Field(0, alias="totalBills")
    results: List[StateSyncResult] = Field(default_factory=list)

    class Config:
        populate_by_name = True

class FailedState(BaseModel):
    state: str
    error: str

class ScheduledResults(BaseModel):
    success: List[str] = Field(default_factory=list)
    failed: List[FailedState] = Field(default_factory=list)
    total: int = 0

class ScheduledSyncSummary(BaseModel):
    """Response of the scheduled all-jurisdiction sync"""
    message: str = "Scheduled sync completed"
    success_count: int = Field(0, alias="successCount")
    failed_count: int = Field(0, alias="failedCount")
    results: ScheduledResults = Field(default_factory=ScheduledResults)

    class Config:
        populate_by_name = True
