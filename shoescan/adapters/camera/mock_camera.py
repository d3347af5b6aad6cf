"""Mock camera: serves a random sample JPEG from CAMERA_SAMPLES_DIR for testing."""
import os
import random
from pathlib import Path
from shoescan.adapters.camera.base import CameraAdapter
from shoescan.orchestrator.errors import CaptureUnavailable

SAMPLES_DIR = Path(os.getenv("CAMERA_SAMPLES_DIR", str(Path(__file__).parent / "samples")))

class MockCamera(CameraAdapter):
    def __init__(self, status_store, samples_dir: Path | None = None):
        self.status = status_store
        self.samples_dir = Path(samples_dir) if samples_dir is not None else SAMPLES_DIR

    def is_open(self) -> bool:
        return any(self.samples_dir.glob("*.jpg"))

    def capture_frame(self) -> bytes:
        jpegs = sorted(self.samples_dir.glob("*.jpg"))
        if not jpegs:
            self.status.log(f"mock_camera: no sample images in {self.samples_dir}")
            raise CaptureUnavailable(f"no sample images in {self.samples_dir}")
        chosen = random.choice(jpegs)
        self.status.log(f"mock_camera: serving {chosen.name}")
        return chosen.read_bytes()
