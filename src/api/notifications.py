"""The signed-in operator's notification feed."""
# ruff: noqa: B008

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from src.api.auth import verify_operator
from src.api.errors import http_error
from src.forms.errors import FormError
from src.notifications.toasts import recent_toasts
from src.schemas.events import Toast

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=list[Toast])
async def notifications(
    limit: int | None = Query(None, ge=1),
    operator: str = Depends(verify_operator),
) -> list[Toast]:
    try:
        return await recent_toasts(operator, limit)
    except FormError as exc:
        raise http_error(exc) from exc
