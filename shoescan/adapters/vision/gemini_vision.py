"""
Gemini shoe-size reader over the Generative Language REST API.
Requires GEMINI_API_KEY in shoescan/.env (or system env).

No SDK needed: plain httpx POST to :generateContent with a JSON response schema.
GEMINI_API_URL can point at scripts/fake_recognizer_server.py for offline runs.
"""
import base64
import os
import httpx
from shoescan.adapters.vision.base import VisionAdapter, SIZE_PROMPT, load_json_text, recognition_from_payload
from shoescan.orchestrator.contracts import RawRecognition
from shoescan.orchestrator.errors import RecognitionServiceFailure

GEMINI_API_URL = os.getenv("GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta")
GEMINI_MODEL   = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

_SHOE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "detectedNumber": {"type": "STRING", "description": "The numeric size found on the shoe sole."},
        "confidence": {"type": "NUMBER", "description": "Confidence score between 0 and 1."},
        "bbox": {
            "type": "ARRAY",
            "items": {"type": "NUMBER"},
            "description": "Normalized bounding box [ymin, xmin, ymax, xmax]",
        },
    },
    "required": ["confidence"],
}

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "leftShoe": _SHOE_SCHEMA,
        "rightShoe": _SHOE_SCHEMA,
        "notes": {"type": "STRING", "description": "Short explanation of issues if any."},
    },
}


class GeminiVision(VisionAdapter):
    def __init__(self, status_store, api_key: str | None = None, base_url: str = GEMINI_API_URL,
                 model: str = GEMINI_MODEL):
        self.status = status_store
        self._api_key = api_key or os.getenv("GEMINI_API_KEY")
        self.base_url = base_url.rstrip("/")
        self.model = model
        self._ready = bool(self._api_key)
        if self._ready:
            self.status.log(f"gemini_vision: ready (model={self.model})")
        else:
            self.status.log("gemini_vision: GEMINI_API_KEY not set")

    def _payload(self, image_bytes: bytes) -> dict:
        b64 = base64.standard_b64encode(image_bytes).decode("utf-8")
        return {
            "contents": [
                {
                    "parts": [
                        {"inline_data": {"mime_type": "image/jpeg", "data": b64}},
                        {"text": SIZE_PROMPT},
                    ]
                }
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
                "temperature": 0.2,  # low temperature: OCR should be deterministic
            },
        }

    def recognize(self, image_bytes: bytes, timeout: float) -> RawRecognition:
        if not self._ready:
            raise RecognitionServiceFailure("gemini_vision: GEMINI_API_KEY not set")

        url = f"{self.base_url}/models/{self.model}:generateContent"
        headers = {"x-goog-api-key": self._api_key, "Content-Type": "application/json"}
        try:
            resp = httpx.post(url, json=self._payload(image_bytes), headers=headers, timeout=timeout)
        except httpx.TimeoutException as e:
            self.status.log(f"gemini_vision: timeout after {timeout}s")
            raise RecognitionServiceFailure(f"gemini timeout: {e}", timeout=True) from e
        except httpx.HTTPError as e:
            self.status.log(f"gemini_vision: transport error: {e}")
            raise RecognitionServiceFailure(f"gemini transport error: {e}") from e

        if not resp.is_success:
            self.status.log(f"gemini_vision: HTTP {resp.status_code} — {resp.text[:300]}")
            raise RecognitionServiceFailure(f"gemini HTTP {resp.status_code}")

        try:
            text = resp.json()["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            self.status.log(f"gemini_vision: unexpected envelope: {resp.text[:300]}")
            raise RecognitionServiceFailure("gemini returned no candidate text") from e

        self.status.log(f"gemini_vision: raw='{(text or '').strip()[:200]}'")
        return recognition_from_payload(load_json_text(text))
