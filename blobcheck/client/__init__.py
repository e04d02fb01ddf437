from blobcheck.client.blobs import Blob, blob_from_path, fetch_blob
from blobcheck.client.config import ClientSettings
from blobcheck.client.errors import ErrorCategory, UploadError, classify
from blobcheck.client.harness import UploadHarness
from blobcheck.client.recorder import CapturePermissionError, CommandCapture, Recorder, RecorderState
from blobcheck.client.state import Failed, Idle, Selecting, Succeeded, UploadState, Uploading

__all__ = [
    "Blob",
    "blob_from_path",
    "fetch_blob",
    "ClientSettings",
    "ErrorCategory",
    "UploadError",
    "classify",
    "UploadHarness",
    "CapturePermissionError",
    "CommandCapture",
    "Recorder",
    "RecorderState",
    "Failed",
    "Idle",
    "Selecting",
    "Succeeded",
    "UploadState",
    "Uploading",
]
