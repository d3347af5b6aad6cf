ERR_BUSY = "BUSY"
ERR_CAPTURE = "CAPTURE_UNAVAILABLE"
ERR_TIMEOUT = "TIMEOUT"
ERR_RECOGNITION = "RECOGNITION_FAILED"
ERR_UNKNOWN = "UNKNOWN"


class ScanError(Exception):
    code = ERR_UNKNOWN


class CaptureUnavailable(ScanError):
    """Camera / frame source cannot deliver a frame."""
    code = ERR_CAPTURE


class RecognitionServiceFailure(ScanError):
    """Recognizer unreachable, timed out, or returned an unusable payload."""
    code = ERR_RECOGNITION

    def __init__(self, message: str, timeout: bool = False):
        super().__init__(message)
        self.timeout = timeout
        if timeout:
            self.code = ERR_TIMEOUT
