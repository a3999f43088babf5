"""FastAPI app: EcoLearn gamification and moderation service."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.common.deps import get_store
from app.common.errors import EcoError
from app.common.middleware import RequestContextMiddleware
from app.common.schemas import ClientConfigResponse
from app.core.config import get_settings
from app.db.storage import Storage, get_storage
from app.features.accounts.endpoints import admin_router, router as auth_router
from app.features.content.endpoints import router as content_router
from app.features.progress.endpoints import router as progress_router
from app.features.submissions.endpoints import router as submissions_router

_settings = get_settings()
logging.basicConfig(level=logging.DEBUG if _settings.debug else logging.INFO)
logger = logging.getLogger("app")

app = FastAPI(title=_settings.app_name, version=_settings.app_version)
_START_TIME = datetime.now(timezone.utc)


# local dev servers on any port
_CORS_ORIGIN_REGEX = re.compile(r"https?://(localhost|127\.0\.0\.1)(:\d+)?", re.I)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.allow_origins,
    allow_origin_regex=_CORS_ORIGIN_REGEX.pattern,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestContextMiddleware)


# ------------------------
# Errors
# ------------------------
@app.exception_handler(EcoError)
async def _eco_error_handler(request: Request, exc: EcoError) -> JSONResponse:
    log = logger.warning if exc.status_code >= 500 else logger.info
    log(
        "eco_error code=%s status=%d path=%s request_id=%s",
        exc.code,
        exc.status_code,
        request.url.path,
        getattr(request.state, "request_id", None),
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_detail()})


# ------------------------
# Routers
# ------------------------
app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(content_router)
app.include_router(progress_router)
app.include_router(submissions_router)


# ------------------------
# Meta endpoints
# ------------------------
@app.get("/", tags=["meta"], summary="API Root")
async def root():
    return {
        "name": _settings.app_name,
        "status": "ok",
        "docs": "/docs",
        "health": "/healthz",
    }


@app.get("/healthz", tags=["meta"], summary="Liveness / readiness probe")
async def healthz(storage: Storage = Depends(get_store)) -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    pending = storage.pending_sync_count()
    return {
        "status": "ok" if pending == 0 else "degraded",
        "time_utc": now.isoformat(),
        "uptime_seconds": round((now - _START_TIME).total_seconds(), 2),
        "version": _settings.app_version,
        "environment": "debug" if _settings.debug else "prod",
        "components": {
            "remote_store": "configured" if storage.remote_enabled else "not-configured",
            "local_store": "file" if storage.local.root else "memory",
            "pending_sync": pending,
        },
        "counts": {"routes": len(app.routes)},
    }


@app.get("/config", tags=["meta"], response_model=ClientConfigResponse)
async def client_config() -> ClientConfigResponse:
    return ClientConfigResponse(
        remote_configured=_settings.remote_configured,
        poll_interval_seconds=_settings.poll_interval_seconds,
    )


# ------------------------
# Startup
# ------------------------
@app.on_event("startup")
async def _bootstrap_storage():
    result = await get_storage().initialize()
    logger.info("bootstrap migrated=%d seeded=%d", result["migrated"], result["seeded"])
