"""Shared FastAPI dependencies."""

from fastapi import Query

from vortex.core.config import get_settings
from vortex.core.security import check_webhook_secret


async def require_webhook_secret(secret: str | None = Query(None)) -> None:
    """Dependency: reject webhook calls whose ?secret= does not match WHATSAPP_WEBHOOK_SECRET."""
    check_webhook_secret(secret, get_settings())
