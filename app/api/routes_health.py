from __future__ import annotations

import logging
import time
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.cache_service import get_cache_store

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


def _check_db(db: Session) -> bool:
    db.execute(text("SELECT 1"))
    return True


def _check_cache() -> bool:
    try:
        return bool(get_cache_store().ping())
    except Exception as exc:  # noqa: BLE001
        logger.warning("Cache readiness check failed: %s", exc)
        return False


@router.get("/healthz")
def healthz(db: Annotated[Session, Depends(get_db)]) -> dict[str, str]:
    """Basic liveness probe (cheap)."""
    try:
        _check_db(db)
    except Exception as exc:  # noqa: BLE001
        raise HTTPException(status_code=503, detail="Database connectivity check failed") from exc
    return {"status": "ok"}


@router.get("/live")
def live() -> dict[str, str]:
    """Kubernetes-style liveness endpoint (no dependencies)."""
    return {"status": "alive"}


@router.get("/ready")
def ready(db: Annotated[Session, Depends(get_db)]) -> dict[str, object]:
    """Readiness probe aggregating the database and the cache store."""
    start = time.time()
    try:
        db_ok = _check_db(db)
    except Exception:  # noqa: BLE001
        db_ok = False
    cache_ok = _check_cache()
    duration_ms = int((time.time() - start) * 1000)
    if not (db_ok and cache_ok):
        raise HTTPException(status_code=503, detail={
            "db": db_ok,
            "cache": cache_ok,
            "latency_ms": duration_ms,
        })
    return {
        "status": "ready",
        "db": db_ok,
        "cache": cache_ok,
        "latency_ms": duration_ms,
    }
