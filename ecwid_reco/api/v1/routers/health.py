# ecwid_reco/api/v1/routers/health.py
import time
import subprocess
from typing import Awaitable, Callable, Tuple

from fastapi import APIRouter, Response
from ecwid_reco.core.config import get_settings
from ecwid_reco.db import mongo
from ecwid_reco.db.redis import get_redis  # Redis instance or None

router = APIRouter(tags=["health"])
START_TIME = time.time()


def _git_sha() -> str:
    try:
        return subprocess.check_output(["git", "rev-parse", "--short", "HEAD"], stderr=subprocess.DEVNULL).decode().strip()
    except Exception:
        return "unknown"


async def _timed(probe: Callable[[], Awaitable[object]]) -> Tuple[str, float]:
    t0 = time.perf_counter()
    try:
        await probe()
        status = "ok"
    except Exception as e:
        status = f"error: {e}"
    return status, round((time.perf_counter() - t0) * 1000, 1)


@router.get("/health")
async def health(response: Response):
    """
    Mongo must answer a ping; Redis only when REDIS_URL is set.
    503 when a required backend is down, so the load balancer drains the instance.
    """
    settings = get_settings()

    async def ping_mongo():
        await mongo.get_db().command("ping")

    mongodb, mongodb_ms = await _timed(ping_mongo)

    r = get_redis()
    if r is None:
        redis_status, redis_ms = ("skipped" if not settings.REDIS_URL else "error: not connected"), 0.0
    else:
        redis_status, redis_ms = await _timed(r.ping)

    ok = mongodb == "ok" and redis_status in ("ok", "skipped")
    if not ok:
        response.status_code = 503

    return {
        "status": "ok" if ok else "error",
        "app_name": settings.APP_NAME,
        "env": settings.APP_ENV,
        "version": settings.GIT_SHA if settings.GIT_SHA != "unknown" else _git_sha(),
        "uptime_seconds": int(time.time() - START_TIME),
        "checks": {
            "mongodb": {"status": mongodb, "latency_ms": mongodb_ms},
            "redis": {"status": redis_status, "latency_ms": redis_ms},
        },
        "timestamp": int(time.time()),
    }
