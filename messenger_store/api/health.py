"""
Health check API routes
"""
from fastapi import APIRouter, HTTPException, Request
from typing import Dict, Any
import asyncio
import time
from datetime import datetime

from messenger_store.configs.settings import settings
from messenger_store.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()

@router.get("/health")
async def health_check():
    """Basic health check"""
    return {
        "status": "healthy", 
        "service": settings.app_name,
        "version": settings.app_version,
        "timestamp": datetime.now().isoformat()
    }

@router.get("/health/detailed")
async def detailed_health_check(req: Request):
    """Detailed health check"""
    start_time = time.time()
    health_details = {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "timestamp": datetime.now().isoformat(),
        "checks": {}
    }
    
    health_details["checks"]["document_store"] = await _check_document_store(req)
    
    all_healthy = all(
        check.get("status") == "healthy" 
        for check in health_details["checks"].values()
    )
    if not all_healthy:
        health_details["status"] = "degraded"
    
    health_details["response_time_ms"] = round((time.time() - start_time) * 1000, 2)
    return health_details

@router.get("/health/readiness")
async def readiness_check(req: Request):
    """Readiness check - for K8s readiness probe"""
    check = await _check_document_store(req)
    if check["status"] != "healthy":
        raise HTTPException(
            status_code=503,
            detail={
                "status": "not_ready",
                "service": settings.app_name,
                "checks": {"document_store": check}
            }
        )
    return {
        "status": "ready",
        "service": settings.app_name,
        "checks": {"document_store": check}
    }

async def _check_document_store(req: Request) -> Dict[str, Any]:
    """Check document store reachability"""
    data = getattr(req.app.state, "data", None)
    if data is None:
        return {"status": "unhealthy", "error": "Data layer not initialized"}
    try:
        await asyncio.wait_for(data.store.ping(), timeout=3.0)
        return {
            "status": "healthy",
            "details": {"backend": type(data.store).__name__}
        }
    except Exception as e:
        logger.warning("Document store health check failed", error=str(e))
        return {"status": "unhealthy", "error": str(e)}
