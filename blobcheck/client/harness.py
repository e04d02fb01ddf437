# blobcheck/client/harness.py
import time
from pathlib import Path
from typing import Callable, List, Optional

import httpx

from blobcheck.client.blobs import Blob, blob_from_path, fetch_blob
from blobcheck.client.config import ClientSettings
from blobcheck.client.errors import ErrorCategory, UploadError, classify, server_error
from blobcheck.client.state import Failed, Idle, Selecting, Succeeded, UploadState, Uploading
from blobcheck.core.logging_config import logger
from blobcheck.schemas.uploads import HealthOut, UploadedFileOut

UPLOAD_FIELD = "file"

StateListener = Callable[[UploadState], None]


class UploadHarness:
    """
    Client-kant van de round-trip: blob kiezen (file / URL / opname), uploaden,
    resultaat of geclassificeerde fout tonen.

    De state is altijd precies één van Idle | Selecting | Uploading | Succeeded | Failed.
    Methodes geven de nieuwe state terug en gooien geen UploadError.
    """

    def __init__(
        self,
        http: Optional[httpx.Client] = None,
        settings: Optional[ClientSettings] = None,
        server_url: Optional[str] = None,
        fetcher: Optional[httpx.Client] = None,
    ):
        self.settings = settings or ClientSettings()
        self.server_url = (server_url or self.settings.server_url).rstrip("/")
        self.timeout = self.settings.TIMEOUT_SECONDS
        self.http = http or httpx.Client(timeout=self.timeout)
        self.fetcher = fetcher or self.http
        self._blob: Optional[Blob] = None
        self._state: UploadState = Idle()
        self._listeners: List[StateListener] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def state(self) -> UploadState:
        return self._state

    @property
    def blob(self) -> Optional[Blob]:
        return self._blob

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def _transition(self, state: UploadState) -> UploadState:
        logger.debug("upload_state", state=state.name)
        self._state = state
        for listener in self._listeners:
            listener(state)
        return state

    def fail(self, error: UploadError) -> UploadState:
        logger.warning("upload_failed", category=error.category.value, message=error.message)
        return self._transition(Failed(category=error.category, message=error.message))

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------
    def check_health(self) -> HealthOut:
        """GET /health; gooit UploadError bij elke fout."""
        try:
            response = self.http.get(f"{self.server_url}/health", timeout=self.timeout)
        except Exception as e:
            raise classify(e) from e
        if not response.is_success:
            raise server_error(response)
        return HealthOut.model_validate(response.json())

    def poll_health(self, interval: float = 2.0, attempts: int = 5) -> HealthOut:
        """Herhaal de health check tot hij slaagt of de pogingen op zijn."""
        if attempts < 1:
            raise ValueError(f"attempts must be >= 1, got {attempts}")
        for i in range(attempts):
            try:
                return self.check_health()
            except UploadError as e:
                logger.info("health_check_failed", attempt=i + 1, error=e.message)
                if i == attempts - 1:
                    raise
                time.sleep(interval)

    # ------------------------------------------------------------------
    # Selecteren
    # ------------------------------------------------------------------
    def select_blob(self, blob: Blob) -> UploadState:
        self._blob = blob
        return self._transition(Selecting(blob=blob))

    def select_file(self, path: str | Path, mimetype: Optional[str] = None) -> UploadState:
        try:
            blob = blob_from_path(path, mimetype=mimetype)
        except OSError as e:
            return self.fail(classify(e))
        return self.select_blob(blob)

    def select_url(self, url: str, filename: Optional[str] = None) -> UploadState:
        try:
            blob = fetch_blob(self.fetcher, url, filename=filename)
        except Exception as e:
            err = classify(e)
            return self.fail(
                UploadError(err.category, f"Failed to create blob from URL: {err.message}", err.status_code)
            )
        return self.select_blob(blob)

    # ------------------------------------------------------------------
    # Upload
    # ------------------------------------------------------------------
    def upload(self) -> UploadState:
        blob = self._blob
        if blob is None:
            return self.fail(UploadError(ErrorCategory.REQUEST, "No file selected"))

        # vorig resultaat/fout wordt gewist door de overgang naar Uploading
        self._transition(Uploading(blob=blob))
        url = f"{self.server_url}/upload"
        logger.info("upload_started", url=url, name=blob.filename, size=blob.size)

        try:
            response = self.http.post(
                url,
                files={UPLOAD_FIELD: (blob.filename, blob.data, blob.mimetype)},
                timeout=self.timeout,
            )
        except Exception as e:
            return self.fail(classify(e))

        if not response.is_success:
            return self.fail(server_error(response))

        try:
            uploaded = UploadedFileOut.model_validate(response.json()["file"])
        except (ValueError, KeyError, TypeError) as e:
            return self.fail(
                UploadError(ErrorCategory.SERVER, f"Unexpected response body: {e}", response.status_code)
            )

        logger.info("upload_succeeded", filename=uploaded.filename, size=uploaded.size)
        return self._transition(Succeeded(blob=blob, file=uploaded))

    def close(self) -> None:
        if self.fetcher is not self.http:
            self.fetcher.close()
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
