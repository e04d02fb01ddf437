# blobcheck/observability/metrics.py
from fastapi import APIRouter
from starlette.responses import Response

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

router = APIRouter(tags=["observability"])

upload_counter = Counter(
    "blobcheck_upload_total",
    "Aantal upload requests",
    ["result"],  # success|no_file|error|too_large
)

upload_size_hist = Histogram(
    "blobcheck_upload_size_bytes",
    "Bestandsgroottes van opgeslagen uploads",
    buckets=(1e3, 1e4, 1e5, 1e6, 1e7, 3e7, 1e8),
)

latency_hist = Histogram(
    "blobcheck_api_latency_seconds",
    "API latency per route",
    ["route"],  # e.g. /upload, /health
)


@router.get("/metrics", include_in_schema=True)
def metrics() -> Response:
    # Prometheus expects text/plain; version=0.0.4
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
