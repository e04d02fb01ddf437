# blobcheck/services/storage.py
import secrets
import time
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import BinaryIO, Optional, Tuple

from blobcheck.core.logging_config import logger

# =========================
# Config / Policies
# =========================
DEFAULT_FILENAME = "blob-file"
CHUNK_SIZE = 1024 * 1024  # 1 MiB per read
MAX_NAME_ATTEMPTS = 5


class StorageWriteError(Exception):
    """Schrijven naar de upload-directory is mislukt (mkdir, open, write of stat)."""

    def __init__(self, message: str, kind: str = "io_error"):
        super().__init__(message)
        self.kind = kind


class FileTooLarge(StorageWriteError):
    """File-part is groter dan de ingestelde bovengrens."""

    def __init__(self, message: str):
        super().__init__(message, kind="too_large")


@dataclass(frozen=True)
class StoredFile:
    filename: str
    path: Path
    size: int


def safe_filename(name: Optional[str]) -> str:
    """Maak bestandsnaam FS-safe; lege namen worden 'blob-file'."""
    name = PurePath((name or "").replace("\\", "/")).name  # strip pad
    cleaned = "".join(ch if ch.isalnum() or ch in (".", "-", "_") else "_" for ch in name)
    if not cleaned.strip("."):
        return DEFAULT_FILENAME
    return cleaned


def epoch_millis() -> int:
    return time.time_ns() // 1_000_000


def with_suffix(filename: str, suffix: str) -> str:
    """'1700-a.txt' + 'ab12' -> '1700-a-ab12.txt'"""
    p = PurePath(filename)
    return f"{p.stem}-{suffix}{p.suffix}"


# =========================
# Local upload store
# =========================
class LocalUploadStore:
    """Platte directory met één bestand per upload: '<epoch-millis>-<naam>'."""

    def __init__(self, base_path: str = "uploads"):
        self.base_path = Path(base_path)

    def ensure_dir(self) -> None:
        # idempotent; geen mkdir bij import of constructie
        self.base_path.mkdir(parents=True, exist_ok=True)

    def stored_filename(self, original: Optional[str], now_ms: Optional[int] = None) -> str:
        millis = epoch_millis() if now_ms is None else now_ms
        return f"{millis}-{safe_filename(original)}"

    def _create_exclusive(self, filename: str) -> Tuple[str, Path, BinaryIO]:
        """
        Open het doelbestand exclusief ('xb'). Bestaat de naam al (zelfde
        milliseconde + zelfde originele naam), dan komt er een random suffix bij.
        """
        candidate = filename
        for _ in range(MAX_NAME_ATTEMPTS):
            path = self.base_path / candidate
            try:
                return candidate, path, open(path, "xb")
            except FileExistsError:
                logger.warning("upload_name_collision", filename=candidate)
                candidate = with_suffix(filename, secrets.token_hex(4))
        raise StorageWriteError(f"Could not allocate a unique name for {filename}", kind="collision")

    def save_stream(self, src: BinaryIO, original: Optional[str], max_bytes: Optional[int] = None) -> StoredFile:
        """
        Stream src naar schijf en tel de bytes mee; boven max_bytes wordt
        afgebroken met FileTooLarge. De doel-handle is op elk pad gesloten;
        bij een fout wordt het half geschreven bestand verwijderd.
        """
        path: Optional[Path] = None
        try:
            self.ensure_dir()
            filename, path, dst = self._create_exclusive(self.stored_filename(original))
            written = 0
            with dst:
                while True:
                    chunk = src.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if max_bytes is not None and written > max_bytes:
                        raise FileTooLarge(f"File part exceeds {max_bytes} bytes")
                    dst.write(chunk)
            size = path.stat().st_size
        except StorageWriteError:
            if path is not None:
                path.unlink(missing_ok=True)
            raise
        except OSError as e:
            if path is not None:
                path.unlink(missing_ok=True)
            raise StorageWriteError(str(e)) from e

        logger.info("upload_saved", filename=filename, size=size, path=str(path))
        return StoredFile(filename=filename, path=path, size=size)
