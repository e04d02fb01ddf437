# blobcheck/client/state.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from blobcheck.client.blobs import Blob
from blobcheck.client.errors import ErrorCategory
from blobcheck.schemas.uploads import UploadedFileOut


@dataclass(frozen=True)
class Idle:
    name = "idle"


@dataclass(frozen=True)
class Selecting:
    blob: Blob
    name = "selecting"


@dataclass(frozen=True)
class Uploading:
    blob: Blob
    name = "uploading"


@dataclass(frozen=True)
class Succeeded:
    blob: Blob
    file: UploadedFileOut
    name = "succeeded"


@dataclass(frozen=True)
class Failed:
    category: ErrorCategory
    message: str
    name = "failed"


UploadState = Union[Idle, Selecting, Uploading, Succeeded, Failed]
