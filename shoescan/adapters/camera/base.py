from abc import ABC, abstractmethod

# frames sent to the recognizer: width capped, aspect kept
MAX_FRAME_WIDTH = 800
JPEG_QUALITY = 80

class CameraAdapter(ABC):
    @abstractmethod
    def capture_frame(self) -> bytes:
        """Capture one frame as JPEG bytes. Raises CaptureUnavailable on failure."""
        ...

    def is_open(self) -> bool:
        return True
