"""
Verdict classifier: raw per-shoe readings -> ScanResult.

Rules (first match wins):
  match (both valid BR sizes, raw strings equal) -> OK
  same legible number on both sides, not BR      -> ERROR  (out of range)
  both sides invalid                             -> WARNING (reposition)
  otherwise (raw strings differ)                 -> ERROR  (mismatch)

Equality is on the raw strings, not the parsed numbers: "023" vs "23" is a
mismatch. Keep it that way until product says otherwise.
"""
import re
from datetime import datetime, timezone
from typing import Optional

from shoescan.orchestrator.contracts import (
    Box, NO_ROI, RawRecognition, ScanResult, ShoeCandidate, SideReading,
    STATUS_ERROR, STATUS_OK, STATUS_WARNING,
)

# Brazilian size numbering
BR_SIZE_MIN = 13
BR_SIZE_MAX = 39

DEFAULT_DEVICE = "shoescan-kiosk"

NOTE_NO_SIZE = "no valid size detected on either side; reposition."
NOTE_MISMATCH = "mismatch: different sizes detected."
NOTE_OUT_OF_RANGE = "sizes outside valid range."

_DIGITS = re.compile(r"\s*([0-9]+)\s*")


def parse_size(raw: Optional[str]) -> Optional[int]:
    """Digits -> int. None means "invalid", which is not the same as 0."""
    if raw is None:
        return None
    m = _DIGITS.fullmatch(raw)
    return int(m.group(1)) if m else None


def valid_range(n: Optional[int]) -> bool:
    return n is not None and BR_SIZE_MIN <= n <= BR_SIZE_MAX


def _clamp(conf: Optional[float]) -> float:
    if conf is None:
        return 0.0
    return min(1.0, max(0.0, float(conf)))


def _side(raw: Optional[str], conf: Optional[float], bbox: Optional[Box] = None) -> SideReading:
    conf = _clamp(conf)
    candidates = (ShoeCandidate(value=raw, confidence=conf, bbox=bbox),) if raw is not None else ()
    return SideReading(candidates=candidates, chosen=raw, confidence=conf if raw is not None else 0.0, roi=NO_ROI)


def _now_iso(now: Optional[datetime]) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


def verdict(left_raw: Optional[str], right_raw: Optional[str], upstream_notes: str = "") -> tuple[bool, str, str]:
    """Return (match, status, notes) for a pair of raw readings."""
    left_num = parse_size(left_raw)
    left_valid = valid_range(left_num)
    right_valid = valid_range(parse_size(right_raw))
    match = left_valid and right_valid and left_raw == right_raw

    if match:
        return True, STATUS_OK, upstream_notes or ""
    # same legible reading on both soles, just not a BR size
    if left_raw == right_raw and left_num is not None:
        return False, STATUS_ERROR, NOTE_OUT_OF_RANGE
    if not left_valid and not right_valid:
        return False, STATUS_WARNING, NOTE_NO_SIZE
    return False, STATUS_ERROR, NOTE_MISMATCH


def classify(
    left_raw: Optional[str],
    right_raw: Optional[str],
    left_confidence: Optional[float] = 0.0,
    right_confidence: Optional[float] = 0.0,
    elapsed_ms: int = 0,
    device: str = DEFAULT_DEVICE,
    notes: str = "",
    left_bbox: Optional[Box] = None,
    right_bbox: Optional[Box] = None,
    image_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ScanResult:
    match, status, notes = verdict(left_raw, right_raw, notes)
    return ScanResult(
        timestamp=_now_iso(now),
        left=_side(left_raw, left_confidence, left_bbox),
        right=_side(right_raw, right_confidence, right_bbox),
        match=match,
        processing_time_ms=max(0, int(elapsed_ms)),
        device=device,
        notes=notes,
        status=status,
        image_id=image_id,
    )


def classify_recognition(raw: RawRecognition, elapsed_ms: int, device: str = DEFAULT_DEVICE,
                         image_id: Optional[str] = None, now: Optional[datetime] = None) -> ScanResult:
    return classify(
        raw.left_raw, raw.right_raw,
        raw.left_confidence, raw.right_confidence,
        elapsed_ms,
        device=device,
        notes=raw.notes,
        left_bbox=raw.left_bbox,
        right_bbox=raw.right_bbox,
        image_id=image_id,
        now=now,
    )


def fallback_result(elapsed_ms: int, device: str, notes: str,
                    image_id: Optional[str] = None, now: Optional[datetime] = None) -> ScanResult:
    """Canonical ERROR result for a scan whose capture or recognition step failed."""
    return ScanResult(
        timestamp=_now_iso(now),
        left=SideReading(),
        right=SideReading(),
        match=False,
        processing_time_ms=max(0, int(elapsed_ms)),
        device=device,
        notes=notes,
        status=STATUS_ERROR,
        image_id=image_id,
    )
