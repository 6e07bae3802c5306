"""
GymCMS Backend — Health Check & Upload Serving
================================================

What:  GET /api/health for container probes and load balancers, and
       GET /uploads/{path} for files in the media library.

Health status:
    healthy    the database answers SELECT 1             → 200
    unhealthy  the database is closed or unreachable     → 503
"""

import logging
import time

from fastapi import APIRouter, Depends, Response
from fastapi.responses import FileResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from gymcms import __version__
from gymcms.database import Database
from gymcms.routes.deps import PUBLIC_ERRORS, get_database, get_storage
from gymcms.schemas.common import HealthResponse
from gymcms.services.storage_service import StorageService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/api/health", response_model=HealthResponse, summary="Service health check")
async def health_check(response: Response, db: Database = Depends(get_database)) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"
    try:
        async with db.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, RuntimeError, OSError) as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )


@router.get("/uploads/{file_path:path}", responses=PUBLIC_ERRORS, include_in_schema=False)
async def serve_upload(file_path: str, storage: StorageService = Depends(get_storage)):
    # Uploads never change after being written under a fresh UUID name
    return FileResponse(
        storage.resolve_public(file_path),
        headers={"Cache-Control": "public, max-age=86400"},
    )
