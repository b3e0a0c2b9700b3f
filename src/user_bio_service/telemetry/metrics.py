"""Prometheus metrics for bio generation."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

router = APIRouter(tags=["metrics"])

NAMESPACE = "user_bio_service"

provider_attempts = Counter(
    f"{NAMESPACE}_bio_provider_attempts_total",
    "Bio generation calls per provider",
    ["provider", "outcome"],
)

fallbacks = Counter(
    f"{NAMESPACE}_bio_fallbacks_total",
    "Times the fallback provider was invoked after the primary failed",
)

generation_duration = Histogram(
    f"{NAMESPACE}_bio_generation_seconds",
    "End-to-end bio generation latency",
    ["outcome"],
    buckets=(0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)


@router.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
