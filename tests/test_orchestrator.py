from __future__ import annotations

from shoescan.orchestrator.errors import ERR_CAPTURE, ERR_RECOGNITION, ERR_TIMEOUT, ERR_UNKNOWN, RecognitionServiceFailure
from shoescan.orchestrator.state_machine import NOTE_CAMERA, NOTE_CONNECTION, Orchestrator


def _orch(store, camera, vision) -> Orchestrator:
    return Orchestrator(camera=camera, vision=vision, status_store=store, device="test-kiosk", timeout=2.5)


def test_successful_scan_records_one_ok_result(store, static_camera, scripted_vision, make_reading) -> None:
    vision = scripted_vision(make_reading("34", "34"))
    orch = _orch(store, static_camera, vision)

    result = orch.perform_scan()

    assert result is not None
    assert result.status == "OK"
    assert result.device == "test-kiosk"
    assert result.image_id and len(result.image_id) == 8
    assert store.history.snapshot() == [result]
    assert store.current is result
    assert store.busy is False
    assert store.last_error is None
    assert vision.frames == [static_camera.frame]
    assert vision.timeouts == [2.5]


def test_recognition_failure_still_records_one_error(store, static_camera, scripted_vision, service_failure, make_reading) -> None:
    vision = scripted_vision(service_failure, make_reading("30", "30"))
    orch = _orch(store, static_camera, vision)

    result = orch.perform_scan()

    assert result.status == "ERROR"
    assert result.match is False
    assert result.notes == NOTE_CONNECTION
    assert result.left.candidates == () and result.right.candidates == ()
    assert len(store.history) == 1
    assert store.busy is False
    assert store.last_error == ERR_RECOGNITION

    # guard released: the very next call is accepted
    again = orch.perform_scan()
    assert again is not None and again.status == "OK"
    assert len(store.history) == 2
    assert store.history.snapshot()[0] is again


def test_timeout_is_recorded_with_timeout_code(store, static_camera, scripted_vision) -> None:
    vision = scripted_vision(RecognitionServiceFailure("gemini timeout", timeout=True))
    orch = _orch(store, static_camera, vision)

    result = orch.perform_scan()

    assert result.status == "ERROR"
    assert result.notes == NOTE_CONNECTION
    assert store.last_error == ERR_TIMEOUT


def test_unexpected_exception_never_escapes(store, static_camera, scripted_vision) -> None:
    orch = _orch(store, static_camera, scripted_vision(KeyError("candidates")))

    result = orch.perform_scan()

    assert result.status == "ERROR"
    assert store.last_error == ERR_UNKNOWN
    assert len(store.history) == 1
    assert store.busy is False


def test_capture_failure_records_error_and_raises_banner(store, broken_camera, scripted_vision, make_reading) -> None:
    vision = scripted_vision(make_reading("34", "34"))
    orch = _orch(store, broken_camera, vision)

    result = orch.perform_scan()

    assert result.status == "ERROR"
    assert result.notes == NOTE_CAMERA
    assert result.processing_time_ms == 0
    assert vision.frames == []
    assert store.camera_error == "camera 0 not available"
    assert store.last_error == ERR_CAPTURE
    assert len(store.history) == 1


def test_camera_banner_clears_after_a_good_capture(store, broken_camera, static_camera, scripted_vision, make_reading) -> None:
    orch = _orch(store, broken_camera, scripted_vision(make_reading("34", "34")))
    orch.perform_scan()
    assert store.camera_error is not None

    orch.camera = static_camera
    orch.perform_scan()

    assert store.camera_error is None


def test_busy_orchestrator_rejects_without_recording(store, static_camera, scripted_vision, make_reading) -> None:
    vision = scripted_vision(make_reading("34", "34"))
    orch = _orch(store, static_camera, vision)
    store.set_busy(True)

    assert orch.perform_scan() is None
    assert len(store.history) == 0
    assert static_camera.calls == 0
    assert vision.frames == []
    assert store.busy is True


def test_reentrant_scan_during_recognition_is_rejected(store, static_camera, make_reading) -> None:
    inner = []

    class ReentrantVision:
        def recognize(self, image_bytes: bytes, timeout: float):
            inner.append(orch.perform_scan())
            return make_reading("25", "25")

    orch = _orch(store, static_camera, ReentrantVision())

    result = orch.perform_scan()

    assert inner == [None]
    assert result.status == "OK"
    assert len(store.history) == 1


def test_supplied_frame_skips_the_camera(store, static_camera, scripted_vision, make_reading) -> None:
    vision = scripted_vision(make_reading("22", "22"))
    orch = _orch(store, static_camera, vision)

    orch.perform_scan(frame=b"browser-frame")

    assert static_camera.calls == 0
    assert vision.frames == [b"browser-frame"]


def test_result_never_holds_image_bytes(store, static_camera, scripted_vision, make_reading) -> None:
    orch = _orch(store, static_camera, scripted_vision(make_reading("22", "22")))

    result = orch.perform_scan()

    assert static_camera.frame not in vars(result).values()
    assert result.image_id != static_camera.frame


def test_history_is_capped_across_many_scans(store, static_camera, scripted_vision, service_failure, make_reading) -> None:
    vision = scripted_vision(make_reading("30", "31"), service_failure, make_reading(None, None), make_reading("30", "30"))
    orch = _orch(store, static_camera, vision)

    results = [orch.perform_scan() for _ in range(7)]

    snap = store.history.snapshot()
    assert len(snap) == 5
    assert snap == list(reversed(results))[:5]
    assert [r.status for r in results[:4]] == ["ERROR", "ERROR", "WARNING", "OK"]


def test_reset_clears_only_the_current_result(store, static_camera, scripted_vision, make_reading) -> None:
    orch = _orch(store, static_camera, scripted_vision(make_reading("30", "30")))
    orch.perform_scan()

    orch.reset()

    assert store.current is None
    assert len(store.history) == 1
