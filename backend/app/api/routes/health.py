from __future__ import annotations

from datetime import datetime, timezone
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_settings
from app.db.bootstrap import inspect_schema
from app.db.session import engine

logger = logging.getLogger(__name__)

router = APIRouter()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/health/live")
def health_live() -> dict:
    return {"status": "ok", "timestamp": _now()}


@router.get("/health/ready")
def health_ready() -> JSONResponse:
    settings = get_settings()
    scheduling = {
        "max_template_weeks": settings.max_template_weeks,
        "notifications_enabled": settings.notifications_enabled,
    }
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
            report = inspect_schema(connection)
    except SQLAlchemyError as exc:
        logger.warning("Readiness check could not reach the database: %s", exc)
        return JSONResponse(
            status_code=503,
            content={
                "status": "unavailable",
                "timestamp": _now(),
                "database": {"ok": False, "error": str(exc)},
                "scheduling": scheduling,
            },
        )

    return JSONResponse(
        status_code=200 if report.ok else 503,
        content={
            "status": "ok" if report.ok else "degraded",
            "timestamp": _now(),
            "database": {
                "ok": True,
                "schema_ok": report.ok,
                "missing_tables": report.missing_tables,
                "missing_columns": report.missing_columns,
            },
            "scheduling": scheduling,
        },
    )
