import base64
import binascii
import os
from fastapi import FastAPI
from dotenv import load_dotenv

# before shoescan imports: history/state_machine read env at import time
load_dotenv(dotenv_path="shoescan/.env", override=False)

from shoescan.services.models import (
    ScanResponse, ScanResultOut, ScanFrameRequest, StatusResponse, HistoryResponse,
)
from shoescan.services.status_store import StatusStore
from shoescan.orchestrator.classifier import DEFAULT_DEVICE
from shoescan.orchestrator.errors import ERR_BUSY
from shoescan.orchestrator.state_machine import Orchestrator

ERR_BAD_IMAGE = "BAD_IMAGE"

app = FastAPI(title="shoescan checkpoint")

status = StatusStore()

# Vision adapter: controlled by VISION_ADAPTER env var
# Values: gemini | claude | mock  (default: gemini)
_vision_adapter = os.getenv("VISION_ADAPTER", "gemini").lower()

if _vision_adapter == "gemini":
    from shoescan.adapters.vision.gemini_vision import GeminiVision
    vision = GeminiVision(status)
elif _vision_adapter == "claude":
    from shoescan.adapters.vision.claude_vision import ClaudeVision
    vision = ClaudeVision(status)
else:
    vision = None

if vision is None or not vision._ready:
    if vision is not None:
        status.log(f"vision: {type(vision).__name__} not ready, falling back to mock")
    from shoescan.adapters.vision.mock_vision import MockVision
    vision = MockVision(status)

status.log(f"vision adapter: {type(vision).__name__}")

# Camera: CAMERA_ADAPTER=cv2 (default) | mock
_camera_adapter = os.getenv("CAMERA_ADAPTER", "cv2").lower()
if _camera_adapter == "mock":
    from shoescan.adapters.camera.mock_camera import MockCamera
    camera = MockCamera(status)
else:
    from shoescan.adapters.camera.cv2_camera import CV2Camera
    camera = CV2Camera(status)
status.log(f"camera adapter: {type(camera).__name__}")

DEVICE_TAG = os.getenv("DEVICE_TAG", f"{DEFAULT_DEVICE}-{type(vision).__name__.removesuffix('Vision').lower()}")

orch = Orchestrator(camera=camera, vision=vision, status_store=status, device=DEVICE_TAG)


def _scan_response(result) -> ScanResponse:
    if result is None:
        return ScanResponse(ok=False, error_code=ERR_BUSY)
    return ScanResponse(ok=True, result=ScanResultOut.from_result(result))


@app.get("/status", response_model=StatusResponse)
def get_status():
    cur = status.current
    return StatusResponse(
        busy=status.busy,
        current=ScanResultOut.from_result(cur) if cur else None,
        history=[ScanResultOut.from_result(r) for r in status.history.snapshot()],
        camera_error=status.camera_error,
        last_error=status.last_error,
        logs=status.logs,
    )


@app.post("/scan", response_model=ScanResponse)
def scan():
    """Server-side capture -> recognize -> classify. Always records one result unless busy."""
    return _scan_response(orch.perform_scan())


@app.post("/scan_frame", response_model=ScanResponse)
def scan_frame(req: ScanFrameRequest):
    """Same as /scan but with a frame the browser captured (base64 JPEG)."""
    data = req.image.split(",", 1)[1] if req.image.startswith("data:") else req.image
    try:
        image_bytes = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        status.log(f"SCAN_FRAME decode error: {e}")
        return ScanResponse(ok=False, error_code=ERR_BAD_IMAGE)
    if not image_bytes:
        status.log("SCAN_FRAME empty image")
        return ScanResponse(ok=False, error_code=ERR_BAD_IMAGE)

    status.log(f"SCAN_FRAME received {len(image_bytes)} bytes")
    return _scan_response(orch.perform_scan(frame=image_bytes))


@app.post("/reset")
def reset():
    orch.reset()
    return {"ok": True}


@app.get("/history", response_model=HistoryResponse)
def history():
    return HistoryResponse(
        limit=status.history.limit,
        history=[ScanResultOut.from_result(r) for r in status.history.snapshot()],
    )


@app.get("/health")
def health():
    """Check connectivity to all subsystems."""
    checks = {"api": True, "device": orch.device}

    checks["vision_adapter"] = type(orch.vision).__name__
    checks["camera_adapter"] = type(orch.camera).__name__
    try:
        checks["camera_ok"] = orch.camera.is_open()
    except Exception as e:
        checks["camera_ok"] = False
        checks["camera_error"] = str(e)

    checks["history_limit"] = status.history.limit
    checks["all_ok"] = checks["api"] and checks["camera_ok"]
    return checks
