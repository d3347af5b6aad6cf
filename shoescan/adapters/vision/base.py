"""
Recognition client contract + the shared JSON payload mapping.

Every adapter asks its model for the same JSON shape:

    {"leftShoe":  {"detectedNumber": "34" | null, "confidence": 0.9, "bbox": [..4]},
     "rightShoe": {"detectedNumber": "34" | null, "confidence": 0.9, "bbox": [..4]},
     "notes": "short explanation of issues, if any"}
"""
import json
from typing import Any, Optional
from shoescan.orchestrator.contracts import Box, RawRecognition
from shoescan.orchestrator.errors import RecognitionServiceFailure

SIZE_PROMPT = (
    "Analyze this image of a pair of shoes.\n"
    "Task:\n"
    "1. Identify the left shoe and the right shoe.\n"
    "2. Read the numeric size printed on the sole of each shoe.\n"
    "3. Prioritize Brazilian (BR) sizes, which are integers between 13 and 39.\n"
    "4. Ignore EU or US labels if a standalone number in the 13-39 range is present.\n"
    "5. Return null for detectedNumber if no clear number is visible or if it is out of the 13-39 range.\n"
)


class VisionAdapter:
    def recognize(self, image_bytes: bytes, timeout: float) -> RawRecognition:
        """Read both shoe sizes from a JPEG. Raises RecognitionServiceFailure."""
        raise NotImplementedError


def _raw_value(v: Any) -> Optional[str]:
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        return str(int(v)) if float(v).is_integer() else str(v)
    if isinstance(v, str):
        return v or None
    raise RecognitionServiceFailure(f"detectedNumber has unexpected type {type(v).__name__}")


def _confidence(v: Any) -> float:
    try:
        c = float(v)
    except (TypeError, ValueError):
        return 0.0
    if c != c:  # NaN
        return 0.0
    return min(1.0, max(0.0, c))


def _bbox(v: Any) -> Optional[Box]:
    if isinstance(v, (list, tuple)) and len(v) == 4:
        try:
            return tuple(float(x) for x in v)  # type: ignore[return-value]
        except (TypeError, ValueError):
            return None
    return None


def load_json_text(text: Optional[str]) -> Any:
    """Model text -> JSON. Tolerates ```json fences and chatter around the object."""
    if not text or not text.strip():
        raise RecognitionServiceFailure("empty response from recognizer")
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end < start:
        raise RecognitionServiceFailure(f"no JSON object in response: {text[:120]!r}")
    try:
        return json.loads(text[start:end + 1])
    except json.JSONDecodeError as e:
        raise RecognitionServiceFailure(f"malformed JSON from recognizer: {e}") from e


def recognition_from_payload(data: Any) -> RawRecognition:
    """Map the model's JSON object to RawRecognition; malformed input raises."""
    if not isinstance(data, dict):
        raise RecognitionServiceFailure(f"expected a JSON object, got {type(data).__name__}")
    left = data.get("leftShoe") or {}
    right = data.get("rightShoe") or {}
    if not isinstance(left, dict) or not isinstance(right, dict):
        raise RecognitionServiceFailure("leftShoe/rightShoe must be objects")
    notes = data.get("notes") or ""
    return RawRecognition(
        left_raw=_raw_value(left.get("detectedNumber")),
        left_confidence=_confidence(left.get("confidence")),
        right_raw=_raw_value(right.get("detectedNumber")),
        right_confidence=_confidence(right.get("confidence")),
        notes=notes if isinstance(notes, str) else str(notes),
        left_bbox=_bbox(left.get("bbox")),
        right_bbox=_bbox(right.get("bbox")),
    )
