"""FastAPI application entry point: wires everything together.

Usage:
    python -m src.main

Serves the dashboard API (templates, builder, fill-up, records, entities).
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI

from src.api import builder, entities, fill, notifications, records, templates
from src.config import settings
from src.db.engine import db_lifespan
from src.notifications.audit import audit_on_event
from src.notifications.events import bus, emit
from src.notifications.toasts import remember_toast
from src.schemas.events import EventType, SystemEvent

# ── Logging setup ────────────────────────────────────────────────────

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
    stream=sys.stdout,
)
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = logging.getLogger(__name__)

# ── FastAPI lifespan ─────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle."""
    logger.info("Starting ops dashboard (env=%s)", settings.environment)

    # 1. Database + Redis
    async with db_lifespan():
        logger.info("Database initialized")

        # 2. Notification bus: audit trail and operator toast feeds
        bus.subscribe(audit_on_event)
        bus.subscribe(remember_toast)
        await bus.start()

        await emit(SystemEvent(
            event_type=EventType.SYSTEM_STARTUP,
            data={"environment": settings.environment},
            source_module="main",
        ))

        try:
            yield
        finally:
            logger.info("Shutting down ops dashboard...")
            await emit(SystemEvent(event_type=EventType.SYSTEM_SHUTDOWN, source_module="main"))
            await bus.stop()

    logger.info("Ops dashboard shutdown complete")


# ── FastAPI app ──────────────────────────────────────────────────────

app = FastAPI(
    title="Ops Dashboard API",
    description="Service forms, records and customer/engine lookups for power-systems field work",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(templates.router)
app.include_router(records.router)
app.include_router(builder.router)
app.include_router(fill.router)
app.include_router(entities.router)
app.include_router(notifications.router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "ok",
        "environment": settings.environment,
    }


# ── Entry point ──────────────────────────────────────────────────────

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )
