"""
OpenCV webcam capture adapter.
CAMERA_INDEX env var (default 0) selects the webcam device.
Frames are downscaled to MAX_FRAME_WIDTH and re-encoded as JPEG before upload.
"""
import os
import cv2
from shoescan.adapters.camera.base import CameraAdapter, MAX_FRAME_WIDTH, JPEG_QUALITY
from shoescan.orchestrator.errors import CaptureUnavailable


def encode_frame(frame, max_width: int = MAX_FRAME_WIDTH, quality: int = JPEG_QUALITY) -> bytes:
    """BGR ndarray -> JPEG bytes, no wider than max_width."""
    h, w = frame.shape[:2]
    if w > max_width:
        scale = max_width / w
        frame = cv2.resize(frame, (max_width, max(1, round(h * scale))), interpolation=cv2.INTER_AREA)
    ok, buf = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, quality])
    if not ok:
        raise CaptureUnavailable("jpeg encode failed")
    return buf.tobytes()


class CV2Camera(CameraAdapter):
    def __init__(self, status_store, index: int | None = None):
        self.status = status_store
        self._index = index if index is not None else int(os.getenv("CAMERA_INDEX", "0"))
        self._cap = None

    def _open(self):
        if self._cap is None or not self._cap.isOpened():
            self._cap = cv2.VideoCapture(self._index)
            if not self._cap.isOpened():
                self.status.log(f"cv2_camera: failed to open device {self._index}")

    def is_open(self) -> bool:
        self._open()
        return self._cap is not None and self._cap.isOpened()

    def capture_frame(self) -> bytes:
        if not self.is_open():
            raise CaptureUnavailable(f"camera {self._index} not available")
        ret, frame = self._cap.read()
        if not ret or frame is None:
            self.status.log("cv2_camera: frame capture failed")
            raise CaptureUnavailable(f"camera {self._index} returned no frame")
        return encode_frame(frame)

    def release(self):
        if self._cap and self._cap.isOpened():
            self._cap.release()
            self._cap = None
