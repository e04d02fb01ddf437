import re

import httpx
import pytest

from blobcheck.client.blobs import blob_from_path, filename_from_url
from blobcheck.client.config import ClientSettings
from blobcheck.client.errors import ErrorCategory, UploadError, classify
from blobcheck.client.harness import UploadHarness
from blobcheck.client.state import Failed, Idle, Selecting, Succeeded

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24


def _mock_client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _harness_with(handler) -> UploadHarness:
    return UploadHarness(http=_mock_client(handler), server_url="http://blobcheck.test")


# -------------------------
# Round-trip tegen de echte app
# -------------------------
def test_select_file_then_upload(harness, tmp_path):
    path = tmp_path / "a.txt"
    path.write_bytes(b"0123456789")

    seen = []
    harness.subscribe(lambda s: seen.append(s.name))

    assert isinstance(harness.state, Idle)
    assert isinstance(harness.select_file(path), Selecting)

    state = harness.upload()
    assert isinstance(state, Succeeded)
    assert re.match(r"^\d+-a\.txt$", state.file.filename)
    assert state.file.size == 10
    assert state.file.mimetype == "text/plain"
    assert seen == ["selecting", "uploading", "succeeded"]


def test_url_blob_keeps_declared_type(client, tmp_path):
    def remote(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/200/300.png"
        return httpx.Response(200, content=PNG_BYTES, headers={"Content-Type": "image/png"})

    harness = UploadHarness(http=client, server_url="http://testserver", fetcher=_mock_client(remote))

    state = harness.select_url("https://images.example/200/300.png")
    assert isinstance(state, Selecting)
    assert state.blob.mimetype == "image/png"
    assert state.blob.filename == "300.png"

    done = harness.upload()
    assert isinstance(done, Succeeded)
    assert done.file.mimetype == "image/png"
    assert done.file.size == len(PNG_BYTES)
    assert done.file.filename.endswith("-300.png")


def test_recorded_failure_is_cleared_by_next_upload(harness, tmp_path):
    assert isinstance(harness.upload(), Failed)

    path = tmp_path / "b.bin"
    path.write_bytes(b"\x01\x02")
    harness.select_file(path)
    assert isinstance(harness.upload(), Succeeded)


def test_health_against_app(harness):
    health = harness.check_health()
    assert health.status == "ok"
    assert harness.poll_health(interval=0, attempts=1).status == "ok"


# -------------------------
# Foutclassificatie
# -------------------------
def test_upload_without_selection_fails_as_request_error():
    harness = _harness_with(lambda r: httpx.Response(200, json={}))
    state = harness.upload()
    assert isinstance(state, Failed)
    assert state.category is ErrorCategory.REQUEST
    assert state.message == "No file selected"


def test_missing_local_file_fails_as_request_error(tmp_path):
    harness = _harness_with(lambda r: httpx.Response(200, json={}))
    state = harness.select_file(tmp_path / "nope.txt")
    assert isinstance(state, Failed)
    assert state.category is ErrorCategory.REQUEST
    assert state.message.startswith("Request setup error:")


def test_server_error_uses_body_message(tmp_path):
    def handler(request):
        return httpx.Response(500, json={"error": "Upload failed", "message": "disk full"})

    harness = _harness_with(handler)
    harness.select_blob(blob_from_path(_write(tmp_path, "c.txt", b"c")))
    state = harness.upload()
    assert isinstance(state, Failed)
    assert state.category is ErrorCategory.SERVER
    assert state.message == "Server Error (500): disk full"


def test_server_error_falls_back_to_error_field(tmp_path):
    harness = _harness_with(lambda r: httpx.Response(400, json={"error": "No file provided"}))
    harness.select_file(_write(tmp_path, "d.txt", b"d"))
    state = harness.upload()
    assert state.message == "Server Error (400): No file provided"


def test_server_error_without_json_uses_reason_phrase(tmp_path):
    harness = _harness_with(lambda r: httpx.Response(413, text="too big"))
    harness.select_file(_write(tmp_path, "e.txt", b"e"))
    state = harness.upload()
    assert state.category is ErrorCategory.SERVER
    assert state.message == "Server Error (413): Request Entity Too Large"


def test_unreachable_server_is_network_error(tmp_path):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    harness = _harness_with(handler)
    harness.select_file(_write(tmp_path, "f.txt", b"f"))
    state = harness.upload()
    assert state.category is ErrorCategory.NETWORK
    assert state.message.startswith("Network Error")


def test_timeout_is_no_response(tmp_path):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    harness = _harness_with(handler)
    harness.select_file(_write(tmp_path, "g.txt", b"g"))
    state = harness.upload()
    assert state.category is ErrorCategory.NO_RESPONSE
    assert state.message == "No response from server - Check if server is running"


def test_url_fetch_failure_is_prefixed():
    def remote(request):
        raise httpx.ConnectError("dns failure", request=request)

    harness = UploadHarness(http=_mock_client(lambda r: httpx.Response(200)), fetcher=_mock_client(remote))
    state = harness.select_url("https://images.example/x.png")
    assert isinstance(state, Failed)
    assert state.category is ErrorCategory.NETWORK
    assert state.message.startswith("Failed to create blob from URL: Network Error")
    assert harness.blob is None


def test_poll_health_gives_up_after_attempts():
    calls = {"n": 0}

    def handler(request):
        calls["n"] += 1
        raise httpx.ConnectError("refused", request=request)

    harness = _harness_with(handler)
    with pytest.raises(UploadError) as exc:
        harness.poll_health(interval=0, attempts=3)
    assert exc.value.category is ErrorCategory.NETWORK
    assert calls["n"] == 3


@pytest.mark.parametrize(
    "exc, category",
    [
        (httpx.ConnectTimeout("t"), ErrorCategory.NETWORK),
        (httpx.WriteTimeout("t"), ErrorCategory.NO_RESPONSE),
        (httpx.RemoteProtocolError("closed"), ErrorCategory.NO_RESPONSE),
        (httpx.UnsupportedProtocol("ftp"), ErrorCategory.REQUEST),
        (httpx.InvalidURL("bad"), ErrorCategory.REQUEST),
        (RuntimeError("weird"), ErrorCategory.REQUEST),
    ],
)
def test_classify(exc, category):
    assert classify(exc).category is category


# -------------------------
# Config / helpers
# -------------------------
def test_client_settings_from_env(monkeypatch):
    monkeypatch.setenv("BLOBCHECK_SERVER_HOST", "192.168.1.20")
    monkeypatch.setenv("BLOBCHECK_SERVER_PORT", "4000")
    s = ClientSettings()
    assert s.server_url == "http://192.168.1.20:4000"
    assert s.TIMEOUT_SECONDS == 30.0


def test_filename_from_url():
    assert filename_from_url("https://picsum.photos/200/300") == "300"
    assert filename_from_url("https://example.com/") == "blob-file"


def _write(tmp_path, name, data):
    p = tmp_path / name
    p.write_bytes(data)
    return p


def test_poll_health_rejects_zero_attempts():
    harness = _harness_with(lambda r: httpx.Response(200, json={}))
    with pytest.raises(ValueError):
        harness.poll_health(interval=0, attempts=0)
