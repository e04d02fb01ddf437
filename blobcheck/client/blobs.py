# blobcheck/client/blobs.py
import mimetypes
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional

import httpx

from blobcheck.core.logging_config import logger

DEFAULT_MIMETYPE = "application/octet-stream"
DEFAULT_BLOB_NAME = "blob-file"


@dataclass(frozen=True)
class Blob:
    """In-memory payload met een gedeclareerd type en de naam waaronder hij geüpload wordt."""

    data: bytes
    mimetype: str
    filename: str

    @property
    def size(self) -> int:
        return len(self.data)

    def describe(self) -> str:
        return f"{self.filename} ({self.size / 1024:.2f} KB, {self.mimetype})"


def guess_mimetype(filename: str) -> str:
    ctype, _ = mimetypes.guess_type(filename)
    return ctype or DEFAULT_MIMETYPE


def blob_from_path(path: str | Path, mimetype: Optional[str] = None) -> Blob:
    """Lokale file 'kiezen': leest de inhoud in en bepaalt het type op basis van de extensie."""
    p = Path(path)
    data = p.read_bytes()
    blob = Blob(data=data, mimetype=mimetype or guess_mimetype(p.name), filename=p.name)
    logger.info("file_selected", name=blob.filename, size=blob.size, type=blob.mimetype)
    return blob


def filename_from_url(url: str) -> str:
    name = PurePosixPath(httpx.URL(url).path).name
    return name or DEFAULT_BLOB_NAME


def fetch_blob(client: httpx.Client, url: str, filename: Optional[str] = None) -> Blob:
    """
    Haal een remote resource op in geheugen. Het type van de blob is de
    Content-Type van de response; de naam komt uit het URL-pad tenzij opgegeven.
    """
    response = client.get(url, follow_redirects=True)
    response.raise_for_status()
    mimetype = response.headers.get("content-type") or DEFAULT_MIMETYPE
    blob = Blob(data=response.content, mimetype=mimetype, filename=filename or filename_from_url(url))
    logger.info("blob_created_from_url", url=url, size=blob.size, type=blob.mimetype)
    return blob
