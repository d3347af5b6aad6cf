"""
Kiosk front end: one page (result card + session log) on top of the scan API.

The browser captures frames itself when it has the camera, so it needs the
same width cap / JPEG quality the server-side camera uses -> /kiosk_config.
"""
from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from pathlib import Path

from shoescan.adapters.camera.base import MAX_FRAME_WIDTH, JPEG_QUALITY
from shoescan.orchestrator.classifier import BR_SIZE_MIN, BR_SIZE_MAX
from shoescan.services import api

root = Path(__file__).resolve().parent

app = FastAPI(title="shoescan checkpoint web")

# "/" must be registered BEFORE the catch-all mount("") or it gets intercepted
@app.get("/", response_class=HTMLResponse)
def index():
    return (root / "templates" / "index.html").read_text(encoding="utf-8")


@app.get("/kiosk_config")
def kiosk_config():
    return {
        "max_frame_width": MAX_FRAME_WIDTH,
        "jpeg_quality": JPEG_QUALITY / 100,
        "size_range": [BR_SIZE_MIN, BR_SIZE_MAX],
        "history_limit": api.status.history.limit,
        "poll_ms": 800,
    }

app.mount("/static", StaticFiles(directory=str(root / "static")), name="static")

# mount API sub-app last: the catch-all prefix "" would shadow routes above it
app.mount("", api.app)
