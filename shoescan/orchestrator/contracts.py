from dataclasses import dataclass, field
from typing import Optional, Literal, Tuple

ScanStatus = Literal["OK", "ERROR", "WARNING"]

STATUS_OK = "OK"
STATUS_ERROR = "ERROR"
STATUS_WARNING = "WARNING"

Box = Tuple[float, float, float, float]

# recognizer does not localize, ROI is a placeholder
NO_ROI: Box = (0, 0, 0, 0)

@dataclass(frozen=True)
class ShoeCandidate:
    value: Optional[str]              # digits as read, e.g. "34"
    confidence: float                 # 0.0-1.0
    bbox: Optional[Box] = None        # normalized [ymin, xmin, ymax, xmax]

@dataclass(frozen=True)
class SideReading:
    candidates: Tuple[ShoeCandidate, ...] = ()
    chosen: Optional[str] = None      # what was read, not what was accepted
    confidence: float = 0.0
    roi: Box = NO_ROI

@dataclass(frozen=True)
class ScanResult:
    timestamp: str                    # ISO-8601, UTC
    left: SideReading
    right: SideReading
    match: bool
    processing_time_ms: int
    device: str
    notes: str
    status: ScanStatus
    image_id: Optional[str] = None    # short reference only, never image bytes

@dataclass(frozen=True)
class RawRecognition:
    left_raw: Optional[str] = None
    left_confidence: float = 0.0
    right_raw: Optional[str] = None
    right_confidence: float = 0.0
    notes: str = ""
    left_bbox: Optional[Box] = field(default=None)
    right_bbox: Optional[Box] = field(default=None)
