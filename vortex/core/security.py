import hmac

from vortex.core.config import Settings
from vortex.core.exceptions import ConfigurationError, UnauthorizedError
from vortex.core.logging import get_logger

log = get_logger(__name__)


def secrets_match(provided: str | None, expected: str) -> bool:
    if provided is None:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def check_webhook_secret(provided: str | None, settings: Settings) -> None:
    """
    Validate the ?secret= query parameter of the WhatsApp callback URL.
    Without a configured secret the webhook is refused in production and left open elsewhere.
    """
    expected = settings.whatsapp_webhook_secret
    if not expected:
        if settings.is_production:
            log.error("whatsapp_webhook_secret_missing")
            raise ConfigurationError("WHATSAPP_WEBHOOK_SECRET is not set")
        log.warning("whatsapp_webhook_unprotected", env=settings.env)
        return
    if not secrets_match(provided, expected):
        raise UnauthorizedError("Unauthorized")
