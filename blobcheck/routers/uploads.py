# blobcheck/routers/uploads.py
import traceback
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import FormData, UploadFile

from blobcheck.core.logging_config import logger
from blobcheck.core.timeutil import iso_timestamp
from blobcheck.middleware.body_limit import PayloadTooLarge, too_large_response
from blobcheck.observability.metrics import upload_counter, upload_size_hist
from blobcheck.schemas.uploads import ErrorOut, UploadOut
from blobcheck.services.storage import LocalUploadStore, StorageWriteError

router = APIRouter(tags=["uploads"])

# multipart zonder Content-Type header per part
DEFAULT_MIMETYPE = "text/plain"


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _is_multipart(request: Request) -> bool:
    ctype = request.headers.get("content-type", "")
    return ctype.lower().startswith("multipart/form-data")


def first_file(form: FormData) -> Optional[UploadFile]:
    """Eerste file-part in volgorde van de body; veldnaam maakt niet uit."""
    for _, value in form.multi_items():
        if isinstance(value, UploadFile):
            return value
    return None


def _store(request: Request) -> LocalUploadStore:
    return request.app.state.store


def _max_bytes(request: Request) -> int:
    return request.app.state.settings.MAX_UPLOAD_BYTES


# -----------------------------------------------------------------------------
# UPLOAD: eerste file-part -> <uploads>/<epoch-millis>-<naam>
# -----------------------------------------------------------------------------
@router.post(
    "/upload",
    response_model=UploadOut,
    responses={400: {"model": ErrorOut}, 413: {"model": ErrorOut}, 500: {"model": ErrorOut}},
)
async def upload(request: Request):
    logger.info("upload_request_received")
    max_bytes = _max_bytes(request)

    if not _is_multipart(request):
        upload_counter.labels(result="no_file").inc()
        return JSONResponse({"error": "No file provided"}, status_code=400)

    try:
        form = await request.form()
    except PayloadTooLarge as e:
        # body afgekapt tijdens het parsen: de parser-frames houden de half
        # gevulde SpooledTemporaryFiles vast, vrijgeven zodat ze nu sluiten
        traceback.clear_frames(e.__traceback__)
        logger.warning("upload_rejected_too_large", stage="form_parse")
        return too_large_response(max_bytes)

    try:
        part = first_file(form)
        if part is None:
            upload_counter.labels(result="no_file").inc()
            return JSONResponse({"error": "No file provided"}, status_code=400)

        mimetype = part.content_type or DEFAULT_MIMETYPE
        logger.info("upload_received", filename=part.filename, mimetype=mimetype, size=part.size)

        if part.size is not None and part.size > max_bytes:
            logger.warning("upload_rejected_too_large", part_size=part.size)
            return too_large_response(max_bytes)

        try:
            stored = await run_in_threadpool(
                _store(request).save_stream, part.file, part.filename, max_bytes
            )
        except StorageWriteError as e:
            if e.kind == "too_large":
                logger.warning("upload_rejected_too_large", error=str(e))
                return too_large_response(max_bytes)
            logger.error("upload_failed", error=str(e), kind=e.kind)
            upload_counter.labels(result="error").inc()
            return JSONResponse(
                {"error": "Upload failed", "message": str(e)},
                status_code=500,
            )
    finally:
        await form.close()

    upload_counter.labels(result="success").inc()
    upload_size_hist.observe(stored.size)

    return {
        "success": True,
        "message": "File uploaded successfully",
        "file": {
            "filename": stored.filename,
            "size": stored.size,
            "mimetype": mimetype,
            "uploadedAt": iso_timestamp(),
        },
    }
