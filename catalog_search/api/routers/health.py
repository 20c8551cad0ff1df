"""
Health Check Endpoints
Endpoints for health checks and status monitoring.
"""

import logging
from datetime import datetime
from typing import Any, Dict
from fastapi import APIRouter, Depends, status

from ...config import SearchSettings, get_settings
from ...search import get_search_monitor
from ..middleware.timing import get_latency_tracker

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """
    Basic health check.

    Returns:
        Simple health status
    """
    return {"status": "healthy", "timestamp": datetime.utcnow().isoformat()}


@router.get("/metrics", status_code=status.HTTP_200_OK)
async def get_metrics(settings: SearchSettings = Depends(get_settings)) -> Dict[str, Any]:
    """
    Search outcome counts and request latency.
    """
    latency = get_latency_tracker().get_stats()

    return {
        "version": settings.version,
        "search": get_search_monitor().get_stats(),
        "requests": {
            "count": latency["count"],
            "latency_p50_ms": round(latency["p50"], 2),
            "latency_p95_ms": round(latency["p95"], 2),
            "latency_p99_ms": round(latency["p99"], 2),
        },
    }
