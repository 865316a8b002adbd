from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from fasttrack.schemas.fast import FastResponse
from fasttrack.schemas.weight import WeightResponse
from fasttrack.schemas.profile import ProfileResponse


class SyncRequest(BaseModel):
    """Items are validated one by one so a bad record doesn't fail the batch."""
    fasts: Optional[List[Dict[str, Any]]] = None
    weights: Optional[List[Dict[str, Any]]] = None
    profile: Optional[Dict[str, Any]] = None


class SyncCounts(BaseModel):
    synced: int = 0
    skipped: int = 0
    errors: int = 0


class SyncResults(BaseModel):
    fasts: SyncCounts = SyncCounts()
    weights: SyncCounts = SyncCounts()
    profile_synced: bool = False


class SyncData(BaseModel):
    fasts: List[FastResponse]
    weights: List[WeightResponse]
    profile: Optional[ProfileResponse] = None


class SyncResponse(BaseModel):
    success: bool = True
    results: SyncResults
    data: SyncData
