"""
Fake recognizer server for testing GeminiVision without an API key.

Speaks just enough of the Gemini generateContent envelope on port 9100.
Each call sleeps briefly (simulating model latency) and returns a canned
shoe-size reading. FAKE_MODE picks the behaviour:
  random (default) | match | mismatch | none | slow | broken

Usage:
    python shoescan/scripts/fake_recognizer_server.py              (terminal 1)
    GEMINI_API_KEY=fake GEMINI_API_URL=http://localhost:9100/v1beta \\
        uvicorn shoescan.web.app:app --port 8000                    (terminal 2)
"""

import asyncio
import json
import os
import random
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

app = FastAPI(title="fake-recognizer-server")

MODE = os.getenv("FAKE_MODE", "random")
LATENCY_S = 0.3
SLOW_S = 30

_READINGS = {
    "match": ("34", "34"),
    "mismatch": ("34", "35"),
    "none": (None, None),
}


def _envelope(left, right, notes: str = "") -> dict:
    body = {
        "leftShoe": {"detectedNumber": left, "confidence": 0.93 if left else 0.0},
        "rightShoe": {"detectedNumber": right, "confidence": 0.91 if right else 0.0},
        "notes": notes,
    }
    return {"candidates": [{"content": {"parts": [{"text": json.dumps(body)}]}}]}


@app.post("/v1beta/models/{model}:generateContent")
async def generate_content(model: str, request: Request):
    payload = await request.json()
    parts = payload["contents"][0]["parts"]
    size = len(parts[0].get("inline_data", {}).get("data", ""))
    mode = random.choice(list(_READINGS)) if MODE == "random" else MODE
    print(f"[recognizer] {model}: image b64 len={size} mode={mode}")

    if mode == "broken":
        return JSONResponse({"candidates": [{"content": {"parts": [{"text": "not json"}]}}]})
    if mode == "slow":
        await asyncio.sleep(SLOW_S)
        mode = "match"

    await asyncio.sleep(LATENCY_S)
    left, right = _READINGS[mode]
    return _envelope(left, right)


if __name__ == "__main__":
    print(f"Fake recognizer server starting on http://localhost:9100 (mode={MODE})")
    uvicorn.run(app, host="0.0.0.0", port=9100)
