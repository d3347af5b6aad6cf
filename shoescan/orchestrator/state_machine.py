import os
import time
import uuid
from typing import Optional
from shoescan.orchestrator.contracts import ScanResult
from shoescan.orchestrator.classifier import DEFAULT_DEVICE, classify_recognition, fallback_result
from shoescan.orchestrator.errors import (
    CaptureUnavailable, RecognitionServiceFailure, ERR_TIMEOUT, ERR_UNKNOWN,
)

RECOGNITION_TIMEOUT_S = float(os.getenv("RECOGNITION_TIMEOUT_S", "15"))

NOTE_CAMERA = "camera unavailable; check the camera connection."
NOTE_CONNECTION = "connection or timeout error; try again."


class Orchestrator:
    def __init__(self, camera, vision, status_store, device: str = DEFAULT_DEVICE,
                 timeout: float = RECOGNITION_TIMEOUT_S):
        self.camera = camera
        self.vision = vision
        self.status = status_store
        self.device = device
        self.timeout = timeout

    def perform_scan(self, frame: Optional[bytes] = None) -> Optional[ScanResult]:
        """
        One scan end to end: capture -> recognize -> classify -> record.

        `frame` skips the camera when the browser already captured one.
        Returns None (and records nothing) if a scan is already in flight.
        Every accepted call records exactly one result, ERROR on any failure.
        """
        if self.status.busy:
            self.status.log("scan rejected: busy")
            return None

        self.status.set_busy(True)
        try:
            self.status.current = None
            image_id = uuid.uuid4().hex[:8]
            result = self._scan(frame, image_id)
            self.status.history.record(result)
            self.status.current = result
            self.status.log(f"scan {image_id} done status={result.status} dt={result.processing_time_ms}ms")
            return result
        finally:
            self.status.set_busy(False)

    def _scan(self, frame: Optional[bytes], image_id: str) -> ScanResult:
        # frame bytes live only inside this call
        t0 = time.time()
        try:
            if frame is None:
                self.status.log("camera.capture_frame")
                frame = self.camera.capture_frame()
                self.status.camera_error = None
            self.status.log(f"scan {image_id}: frame {len(frame)} bytes")

            t0 = time.time()
            raw = self.vision.recognize(frame, timeout=self.timeout)
            dt = int((time.time() - t0) * 1000)
            self.status.log(
                f"vision.result L={raw.left_raw!r} ({raw.left_confidence:.2f}) "
                f"R={raw.right_raw!r} ({raw.right_confidence:.2f}) dt={dt}ms"
            )
            self.status.last_error = None
            return classify_recognition(raw, dt, device=self.device, image_id=image_id)

        except CaptureUnavailable as e:
            self.status.log(f"error capture: {e}")
            self.status.camera_error = str(e) or NOTE_CAMERA
            self.status.last_error = e.code
            return fallback_result(0, self.device, NOTE_CAMERA, image_id=image_id)
        except RecognitionServiceFailure as e:
            dt = int((time.time() - t0) * 1000)
            self.status.log(f"error recognition: {e}")
            self.status.last_error = e.code
            return fallback_result(dt, self.device, NOTE_CONNECTION, image_id=image_id)
        except TimeoutError:
            dt = int((time.time() - t0) * 1000)
            self.status.log("error timeout")
            self.status.last_error = ERR_TIMEOUT
            return fallback_result(dt, self.device, NOTE_CONNECTION, image_id=image_id)
        except Exception as e:
            dt = int((time.time() - t0) * 1000)
            self.status.log(f"error {type(e).__name__}: {e}")
            self.status.last_error = ERR_UNKNOWN
            return fallback_result(dt, self.device, NOTE_CONNECTION, image_id=image_id)

    def reset(self):
        """Clear the result card; history is untouched."""
        self.status.current = None
        self.status.log("reset")
