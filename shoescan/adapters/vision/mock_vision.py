import random
from shoescan.adapters.vision.base import VisionAdapter
from shoescan.orchestrator.contracts import RawRecognition

# (left, right) pairs the mock picks from: mostly matches, some of each failure
_READINGS = [
    ("34", "34"), ("27", "27"), ("38", "38"), ("21", "21"),
    ("34", "35"),
    (None, None),
    ("41", "41"),
    ("30", None),
]

class MockVision(VisionAdapter):
    def __init__(self, status_store, readings: list | None = None):
        self.status = status_store
        self.readings = readings or _READINGS

    def recognize(self, image_bytes: bytes, timeout: float) -> RawRecognition:
        # Mock: ignore image, return a random pair
        left, right = random.choice(self.readings)
        self.status.log(f"mock_vision: L={left} R={right}")
        return RawRecognition(
            left_raw=left,
            left_confidence=0.9 if left else 0.0,
            right_raw=right,
            right_confidence=0.9 if right else 0.0,
        )
