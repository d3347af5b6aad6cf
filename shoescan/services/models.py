from dataclasses import asdict
from pydantic import BaseModel
from typing import Literal, Optional
from shoescan.orchestrator.contracts import ScanResult

class CandidateOut(BaseModel):
    value: Optional[str] = None
    confidence: float
    bbox: Optional[list[float]] = None

class SideOut(BaseModel):
    roi: list[float]
    candidates: list[CandidateOut]
    chosen: Optional[str] = None
    confidence: float

class ScanResultOut(BaseModel):
    timestamp: str
    left: SideOut
    right: SideOut
    match: bool
    processing_time_ms: int
    device: str
    notes: str
    status: Literal["OK", "ERROR", "WARNING"]
    image_id: Optional[str] = None

    @classmethod
    def from_result(cls, r: ScanResult) -> "ScanResultOut":
        return cls.model_validate(asdict(r))

class ScanResponse(BaseModel):
    ok: bool
    result: Optional[ScanResultOut] = None
    error_code: Optional[str] = None   # BUSY | BAD_IMAGE; scan failures come back as status=ERROR results

class ScanFrameRequest(BaseModel):
    image: str  # base64 JPEG, optionally a data: URL

class StatusResponse(BaseModel):
    busy: bool
    current: Optional[ScanResultOut] = None
    history: list[ScanResultOut]
    camera_error: Optional[str] = None   # persistent banner for the kiosk UI
    last_error: Optional[str] = None
    logs: list[str]

class HistoryResponse(BaseModel):
    limit: int
    history: list[ScanResultOut]
