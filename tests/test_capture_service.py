import io

import numpy as np
import pytest
from PIL import Image

from bitebyte.application.ports.capture_source import FACING_ENVIRONMENT, FACING_USER
from bitebyte.application.services.capture_service import CameraSession, encode_jpeg, validate_upload
from bitebyte.exceptions import CameraError, CameraUnavailable, InvalidInput


class FakeStream:
    def __init__(self, device, facing_mode):
        self.device = device
        self.facing_mode = facing_mode
        self.released = False

    def read_frame(self):
        if self.device.fail_read:
            raise CameraError("sensor timeout")
        return np.full((8, 12, 3), 200, dtype=np.uint8)

    def release(self):
        assert not self.released, "stream released twice"
        self.released = True
        self.device.events.append("release")
        self.device.live -= 1


class FakeDevice:
    def __init__(self, fail_on=None, fail_read=False):
        self.events = []
        self.live = 0
        self.max_live = 0
        self.fail_on = fail_on or set()
        self.fail_read = fail_read

    def acquire(self, facing_mode):
        self.events.append(f"acquire:{facing_mode}")
        if facing_mode in self.fail_on:
            raise CameraError("Permission denied")
        self.live += 1
        self.max_live = max(self.max_live, self.live)
        return FakeStream(self, facing_mode)


# File picker

def test_validate_upload_accepts_any_image_type():
    image = validate_upload(b"heic-bytes", "image/heic", "dinner.heic")
    assert image.mime_type == "image/heic"
    assert image.filename == "dinner.heic"
    assert image.size == 10


def test_validate_upload_guesses_type_for_generic_content_type():
    image = validate_upload(b"png", "application/octet-stream", "plate.png")
    assert image.mime_type == "image/png"


def test_validate_upload_rejects_non_image():
    with pytest.raises(InvalidInput) as exc_info:
        validate_upload(b"hello", "text/plain", "notes.txt")
    assert exc_info.value.message == "Please upload an image file"
    assert exc_info.value.status_code == 415


def test_validate_upload_rejects_oversize():
    with pytest.raises(InvalidInput) as exc_info:
        validate_upload(b"x" * (10 * 1024 * 1024 + 1), "image/jpeg", "big.jpg")
    assert exc_info.value.message == "File size exceeds 10MB limit"
    assert exc_info.value.status_code == 413


def test_validate_upload_accepts_exactly_limit():
    image = validate_upload(b"x" * (10 * 1024 * 1024), "image/jpeg", "edge.jpg")
    assert image.size == 10 * 1024 * 1024


def test_validate_upload_rejects_empty():
    with pytest.raises(InvalidInput):
        validate_upload(b"", "image/jpeg", "empty.jpg")


def test_encode_jpeg_produces_jpeg():
    data = encode_jpeg(np.zeros((4, 6, 3), dtype=np.uint8), quality=92)
    assert data[:2] == b"\xff\xd8"
    with Image.open(io.BytesIO(data)) as img:
        assert img.format == "JPEG"
        assert img.size == (6, 4)


# Camera

def test_capture_confirm_emits_single_jpeg_and_releases():
    device = FakeDevice()
    session = CameraSession(device, clock=lambda: 1700000000000)
    assert session.start() is True
    assert session.facing_mode == FACING_ENVIRONMENT

    still = session.capture()
    assert still[:2] == b"\xff\xd8"
    assert session.is_active is False

    image = session.confirm()
    assert image.mime_type == "image/jpeg"
    assert image.filename == "bitebyte-capture-1700000000000.jpg"
    assert image.data == still
    assert device.live == 0
    with pytest.raises(CameraUnavailable):
        session.confirm()


def test_switch_releases_before_reacquiring():
    device = FakeDevice()
    session = CameraSession(device)
    session.start()

    session.switch_facing()

    assert device.events == [f"acquire:{FACING_ENVIRONMENT}", "release", f"acquire:{FACING_USER}"]
    assert device.max_live == 1
    assert session.facing_mode == FACING_USER
    session.close()
    assert device.live == 0


def test_switch_not_allowed_with_pending_still():
    session = CameraSession(FakeDevice())
    session.start()
    session.capture()
    with pytest.raises(CameraUnavailable):
        session.switch_facing()


def test_retake_discards_still_and_resumes_live_view():
    device = FakeDevice()
    session = CameraSession(device)
    session.start()
    session.capture()

    assert session.retake() is True
    assert session.captured is None
    assert session.is_active is True
    assert device.max_live == 1


def test_acquisition_failure_leaves_closable_inactive_session():
    device = FakeDevice(fail_on={FACING_ENVIRONMENT})
    session = CameraSession(device)

    assert session.start() is False
    assert session.is_active is False
    assert session.error == "Camera access error: Permission denied"
    with pytest.raises(CameraUnavailable):
        session.capture()
    session.close()
    assert device.live == 0


def test_failed_switch_releases_previous_stream():
    device = FakeDevice(fail_on={FACING_USER})
    session = CameraSession(device)
    session.start()

    assert session.switch_facing() is False
    assert device.live == 0
    assert session.error.startswith("Camera access error")


def test_read_failure_releases_stream():
    device = FakeDevice(fail_read=True)
    session = CameraSession(device)
    session.start()

    assert session.capture() is None
    assert session.error == "Camera access error: sensor timeout"
    assert device.live == 0


def test_context_manager_releases_on_exit():
    device = FakeDevice()
    with CameraSession(device) as session:
        session.start()
        assert device.live == 1
    assert device.live == 0


def test_encode_failure_still_releases_stream(monkeypatch):
    from bitebyte.application.services import capture_service

    def broken_encode(frame, quality):
        raise OSError("cannot write mode RGBA as JPEG")

    monkeypatch.setattr(capture_service, "encode_jpeg", broken_encode)
    device = FakeDevice()
    session = CameraSession(device)
    session.start()

    with pytest.raises(OSError):
        session.capture()
    assert device.live == 0
    assert session.captured is None
    session.close()
    assert device.live == 0
