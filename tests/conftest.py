from __future__ import annotations

import os

# adapters are chosen at import time of shoescan.services.api
os.environ["VISION_ADAPTER"] = "mock"
os.environ["CAMERA_ADAPTER"] = "mock"
os.environ["HISTORY_LIMIT"] = "5"

import pytest

from shoescan.orchestrator.contracts import RawRecognition
from shoescan.orchestrator.errors import CaptureUnavailable, RecognitionServiceFailure
from shoescan.services.status_store import StatusStore


class StaticCamera:
    def __init__(self, frame: bytes = b"\xff\xd8jpeg\xff\xd9"):
        self.frame = frame
        self.calls = 0

    def capture_frame(self) -> bytes:
        self.calls += 1
        return self.frame

    def is_open(self) -> bool:
        return True


class BrokenCamera:
    def capture_frame(self) -> bytes:
        raise CaptureUnavailable("camera 0 not available")

    def is_open(self) -> bool:
        return False


class ScriptedVision:
    """Returns queued readings in order; an exception in the queue is raised."""

    def __init__(self, *items):
        self.items = list(items)
        self.frames: list[bytes] = []
        self.timeouts: list[float] = []

    def recognize(self, image_bytes: bytes, timeout: float) -> RawRecognition:
        self.frames.append(image_bytes)
        self.timeouts.append(timeout)
        item = self.items.pop(0) if len(self.items) > 1 else self.items[0]
        if isinstance(item, BaseException):
            raise item
        return item


def reading(left: str | None, right: str | None, conf: float = 0.9, notes: str = "") -> RawRecognition:
    return RawRecognition(
        left_raw=left,
        left_confidence=conf if left is not None else 0.0,
        right_raw=right,
        right_confidence=conf if right is not None else 0.0,
        notes=notes,
    )


@pytest.fixture
def store() -> StatusStore:
    return StatusStore()


@pytest.fixture
def static_camera() -> StaticCamera:
    return StaticCamera()


@pytest.fixture
def broken_camera() -> BrokenCamera:
    return BrokenCamera()


@pytest.fixture
def scripted_vision():
    return ScriptedVision


@pytest.fixture
def make_reading():
    return reading


@pytest.fixture
def service_failure() -> RecognitionServiceFailure:
    return RecognitionServiceFailure("gemini HTTP 503")
