"""
Claude Vision shoe-size reader (zero-shot, no calibration needed).

Sends the frame to Claude via the Anthropic API and asks for the same JSON
shape the Gemini adapter gets from its response schema.

Requires ANTHROPIC_API_KEY in environment (shoescan/.env or system env).
"""
import base64
import os
import anthropic
from shoescan.adapters.vision.base import VisionAdapter, SIZE_PROMPT, load_json_text, recognition_from_payload
from shoescan.orchestrator.contracts import RawRecognition
from shoescan.orchestrator.errors import RecognitionServiceFailure

CLAUDE_MODEL = os.getenv("CLAUDE_MODEL", "claude-haiku-4-5-20251001")

_JSON_INSTRUCTIONS = (
    "\nReply with ONLY a JSON object, no prose, in exactly this shape:\n"
    '{"leftShoe": {"detectedNumber": "<digits or null>", "confidence": <0-1>}, '
    '"rightShoe": {"detectedNumber": "<digits or null>", "confidence": <0-1>}, '
    '"notes": "<short explanation of issues, or empty>"}'
)


class ClaudeVision(VisionAdapter):
    def __init__(self, status_store, api_key: str | None = None, model: str = CLAUDE_MODEL):
        self.status = status_store
        self.model = model
        self._client = None
        self._ready = False
        api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            self.status.log("claude_vision: ANTHROPIC_API_KEY not set")
            return
        self._client = anthropic.Anthropic(api_key=api_key)
        self._ready = True
        self.status.log(f"claude_vision: ready ({self.model})")

    def recognize(self, image_bytes: bytes, timeout: float) -> RawRecognition:
        if not self._ready or self._client is None:
            raise RecognitionServiceFailure("claude_vision: ANTHROPIC_API_KEY not set")

        b64 = base64.standard_b64encode(image_bytes).decode("utf-8")
        try:
            message = self._client.with_options(timeout=timeout).messages.create(
                model=self.model,
                max_tokens=256,
                temperature=0.2,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "image",
                                "source": {
                                    "type": "base64",
                                    "media_type": "image/jpeg",
                                    "data": b64,
                                },
                            },
                            {"type": "text", "text": SIZE_PROMPT + _JSON_INSTRUCTIONS},
                        ],
                    }
                ],
            )
        except anthropic.APITimeoutError as e:
            self.status.log(f"claude_vision: timeout after {timeout}s")
            raise RecognitionServiceFailure(f"claude timeout: {e}", timeout=True) from e
        except anthropic.APIError as e:
            self.status.log(f"claude_vision: API error: {e}")
            raise RecognitionServiceFailure(f"claude API error: {e}") from e

        text = "".join(block.text for block in message.content if getattr(block, "type", None) == "text")
        self.status.log(f"claude_vision: raw response = '{text.strip()[:200]}'")
        return recognition_from_payload(load_json_text(text))
