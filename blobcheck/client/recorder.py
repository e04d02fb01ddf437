# blobcheck/client/recorder.py
import mimetypes
import shlex
import subprocess
import time
from enum import Enum
from typing import Callable, List, Optional, Protocol, Sequence

from blobcheck.client.blobs import Blob
from blobcheck.client.errors import ErrorCategory, UploadError
from blobcheck.client.harness import UploadHarness
from blobcheck.client.state import UploadState
from blobcheck.core.logging_config import logger
from blobcheck.services.storage import epoch_millis

CHUNK_SIZE = 64 * 1024


class CapturePermissionError(Exception):
    """Capture-device niet beschikbaar of toegang geweigerd."""


class RecorderState(str, Enum):
    IDLE = "idle"
    PERMISSION_REQUESTED = "permission_requested"
    RECORDING = "recording"
    STOPPED = "stopped"


class CaptureSource(Protocol):
    mimetype: str

    def open(self) -> None: ...
    def read_chunk(self) -> bytes: ...
    def close(self) -> None: ...


class CommandCapture:
    """
    Capture via een extern commando dat media naar stdout schrijft, bv.
    `ffmpeg -f v4l2 -i /dev/video0 -t 5 -f webm pipe:1`.
    """

    def __init__(self, command: Sequence[str] | str, mimetype: str = "video/webm"):
        self.command = shlex.split(command) if isinstance(command, str) else list(command)
        self.mimetype = mimetype
        self._proc: Optional[subprocess.Popen] = None

    def open(self) -> None:
        try:
            self._proc = subprocess.Popen(
                self.command, stdout=subprocess.PIPE, stderr=subprocess.DEVNULL
            )
        except (FileNotFoundError, PermissionError) as e:
            raise CapturePermissionError(f"Capture command unavailable: {e}") from e

    def read_chunk(self) -> bytes:
        assert self._proc is not None and self._proc.stdout is not None
        return self._proc.stdout.read1(CHUNK_SIZE)

    def close(self) -> None:
        if self._proc is None:
            return
        if self._proc.poll() is None:
            self._proc.terminate()
        try:
            self._proc.wait(timeout=5)
        except subprocess.TimeoutExpired:
            self._proc.kill()
            self._proc.wait()
        if self._proc.stdout is not None:
            self._proc.stdout.close()
        self._proc = None


def recording_filename(mimetype: str, now_ms: Optional[int] = None) -> str:
    base = mimetype.split(";", 1)[0].strip()
    ext = mimetypes.guess_extension(base) or ".webm"
    return f"recording-{epoch_millis() if now_ms is None else now_ms}{ext}"


class Recorder:
    """
    Opname-subflow: idle -> permission_requested -> recording -> stopped.
    stop() levert de blob direct aan de harness en start de upload zonder
    verdere actie.
    """

    def __init__(
        self,
        harness: UploadHarness,
        source: CaptureSource,
        on_preview: Optional[Callable[[bytes], None]] = None,
    ):
        self.harness = harness
        self.source = source
        self.on_preview = on_preview
        self.state = RecorderState.IDLE
        self._chunks: List[bytes] = []

    def request_permission(self) -> bool:
        self.state = RecorderState.PERMISSION_REQUESTED
        try:
            self.source.open()
        except CapturePermissionError as e:
            logger.warning("capture_permission_denied", error=str(e))
            self.state = RecorderState.IDLE
            self.harness.fail(UploadError(ErrorCategory.PERMISSION, f"Permission denied: {e}"))
            return False
        return True

    def start(self) -> None:
        if self.state is not RecorderState.PERMISSION_REQUESTED:
            raise RuntimeError(f"Cannot start recording from state {self.state.value}")
        self._chunks = []
        self.state = RecorderState.RECORDING
        logger.info("recording_started", mimetype=self.source.mimetype)

    def pump(self) -> bool:
        """Lees één chunk; False als de bron klaar is."""
        if self.state is not RecorderState.RECORDING:
            return False
        chunk = self.source.read_chunk()
        if not chunk:
            return False
        self._chunks.append(chunk)
        # preview alleen tijdens opname
        if self.on_preview is not None:
            self.on_preview(chunk)
        return True

    def stop(self) -> UploadState:
        if self.state is not RecorderState.RECORDING:
            raise RuntimeError(f"Cannot stop recording from state {self.state.value}")
        self.state = RecorderState.STOPPED
        self.source.close()

        blob = Blob(
            data=b"".join(self._chunks),
            mimetype=self.source.mimetype,
            filename=recording_filename(self.source.mimetype),
        )
        logger.info("recording_stopped", size=blob.size, filename=blob.filename)
        self.harness.select_blob(blob)
        return self.harness.upload()

    def record(self, seconds: Optional[float] = None) -> UploadState:
        """Volledige flow: permission, opnemen tot EOF of `seconds`, stop + upload."""
        if not self.request_permission():
            return self.harness.state
        self.start()
        deadline = None if seconds is None else time.monotonic() + seconds
        while self.pump():
            if deadline is not None and time.monotonic() >= deadline:
                break
        return self.stop()
