import time
from datetime import datetime

import pytz
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from camp_events.db.database import check_database_connection

router = APIRouter()


def probe_database(request: Request):
    started = time.perf_counter()
    ok = check_database_connection(request.app.state.engine)
    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
    return ok, elapsed_ms


@router.get("/health")
def health(request: Request):
    ok, elapsed_ms = probe_database(request)
    settings = request.app.state.settings
    body = {
        "status": "healthy" if ok else "unhealthy",
        "timestamp": datetime.now(pytz.utc).isoformat(),
        "uptime": round(time.monotonic() - request.app.state.started_at, 1),
        "environment": settings.APP_ENV,
        "database": {
            "status": "connected" if ok else "disconnected",
            "responseTime": elapsed_ms,
        },
    }
    return JSONResponse(status_code=200 if ok else 503, content=body)


@router.get("/health/live")
def liveness():
    return {"status": "alive", "timestamp": datetime.now(pytz.utc).isoformat()}


@router.get("/health/ready")
def readiness(request: Request):
    ok, _ = probe_database(request)
    if not ok:
        return JSONResponse(status_code=503, content={"status": "not ready", "reason": "database unavailable"})
    return {"status": "ready"}
