"""
Operational endpoints used by load balancers and monitoring
"""

import time
from datetime import datetime, timezone

from fastapi import Request
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from storefront.core.config import config
from storefront.core.errors import ErrorResponse
from storefront.core.logger import logger
from storefront.db.mongodb import db, get_database

start_time = time.time()


def _base(status: str) -> dict:
    return {
        "status": status,
        "service": config.service_name,
        "version": config.service_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def health(request: Request):
    """Basic health check endpoint"""
    return _base("healthy")


async def readiness(request: Request):
    """Ready once cart storage answers a ping"""
    try:
        await get_database()
        await db.client.admin.command("ping")
    except (ErrorResponse, PyMongoError) as e:
        logger.error("Readiness check failed", error=e, metadata={"event": "readiness_failed"})
        return JSONResponse(status_code=503, content={**_base("not ready"), "checks": {"database": "unreachable"}})
    return {**_base("ready"), "checks": {"database": "connected"}}


def liveness(request: Request):
    """Liveness check - the process is running"""
    return {**_base("alive"), "uptime_seconds": round(time.time() - start_time, 2)}
