from datetime import datetime, timezone

from fastapi import APIRouter

from resumeiq.core.errors import envelope
from resumeiq.core.rate_limit import limiter

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
@limiter.exempt
async def health_check():
    return envelope({"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()})
