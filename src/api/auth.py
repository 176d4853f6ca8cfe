"""HTTP Basic Auth for the dashboard API.

Single shared password from DASHBOARD_PASSWORD. Real sign-in lives with the
hosted auth provider; this only keeps the API from being open.
"""

from __future__ import annotations

import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from src.config import settings
from src.notifications.events import emit
from src.schemas.events import EventType, SystemEvent

security = HTTPBasic()


async def verify_operator(
    credentials: HTTPBasicCredentials = Depends(security),  # noqa: B008
) -> str:
    """FastAPI dependency: verify HTTP Basic credentials.

    Returns the username on success, raises 401 on failure.
    """
    expected = settings.security.dashboard_password
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="DASHBOARD_PASSWORD not configured",
        )

    password_ok = secrets.compare_digest(
        credentials.password.encode("utf-8"),
        expected.encode("utf-8"),
    )
    if not password_ok:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


async def emit_access(operator: str, view: str) -> None:
    """Emit OPERATOR_ACCESS audit event for each dashboard view."""
    await emit(SystemEvent(
        event_type=EventType.OPERATOR_ACCESS,
        actor_id=operator,
        actor_role="operator",
        data={"view": view, "interface": "api"},
        source_module="api",
    ))
