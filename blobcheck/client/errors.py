# blobcheck/client/errors.py
from enum import Enum
from typing import Optional

import httpx


class ErrorCategory(str, Enum):
    NETWORK = "network"          # server niet bereikbaar
    SERVER = "server"            # response met non-2xx status
    NO_RESPONSE = "no_response"  # request verstuurd, geen (volledige) response
    REQUEST = "request"          # request kon niet opgebouwd worden
    PERMISSION = "permission"    # capture-device geweigerd


class UploadError(Exception):
    def __init__(self, category: ErrorCategory, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.category = category
        self.message = message
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"UploadError({self.category.value}, {self.message!r})"


def _server_message(response: httpx.Response) -> str:
    """message > error > reason phrase, zoals de server ze teruggeeft."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error"):
            if body.get(key):
                return str(body[key])
    return response.reason_phrase or f"HTTP {response.status_code}"


def server_error(response: httpx.Response) -> UploadError:
    return UploadError(
        ErrorCategory.SERVER,
        f"Server Error ({response.status_code}): {_server_message(response)}",
        status_code=response.status_code,
    )


def classify(exc: BaseException) -> UploadError:
    """Map een exceptie uit httpx / IO naar een categorie + leesbare melding."""
    if isinstance(exc, UploadError):
        return exc
    if isinstance(exc, httpx.HTTPStatusError):
        return server_error(exc.response)
    # ConnectTimeout is ook een TimeoutException: eerst afvangen
    if isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout)):
        return UploadError(ErrorCategory.NETWORK, f"Network Error - server unreachable: {exc}")
    if isinstance(exc, (httpx.TimeoutException, httpx.RemoteProtocolError, httpx.ReadError, httpx.WriteError)):
        return UploadError(ErrorCategory.NO_RESPONSE, "No response from server - Check if server is running")
    if isinstance(exc, httpx.NetworkError):
        return UploadError(ErrorCategory.NETWORK, f"Network Error: {exc}")
    if isinstance(exc, (httpx.RequestError, httpx.InvalidURL, OSError, ValueError)):
        return UploadError(ErrorCategory.REQUEST, f"Request setup error: {exc}")
    return UploadError(ErrorCategory.REQUEST, f"Upload failed: {exc}")
