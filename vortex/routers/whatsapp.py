from typing import Any

import orjson
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import ORJSONResponse

from vortex.core.logging import get_logger
from vortex.deps import require_webhook_secret
from vortex.services import purchase_verification as purchase_verification_service

router = APIRouter()
log = get_logger(__name__)


def extract_message_text(body: Any) -> str | None:
    """
    Text of the inbound message: {"message": "..."} or the WhatsApp Cloud API envelope
    (entry[0].changes[0].value.messages[0].text.body).
    """
    if not isinstance(body, dict):
        return None
    message = body.get("message")
    if isinstance(message, str) and message:
        return message
    try:
        text = body["entry"][0]["changes"][0]["value"]["messages"][0]["text"]["body"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) and text else None


@router.post("/whatsapp", dependencies=[Depends(require_webhook_secret)])
async def whatsapp_webhook(request: Request):
    """
    Admin approval replies. Always 200 once a message is present: the provider
    disables or retries webhooks that answer with errors.
    """
    try:
        body = orjson.loads(await request.body())
        message = extract_message_text(body)
        if not message:
            return ORJSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"success": False, "message": 'Invalid payload, expected { "message": "..." }'},
            )
        result = await purchase_verification_service.process_approval_message(message)
        if not result.success:
            log.error("whatsapp_webhook_not_processed", details=result.message)
            return {"processed": True, "details": result.message}
        return {"success": True}
    except Exception as e:
        log.exception("whatsapp_webhook_error")
        return {"processed": False, "message": str(e) or "Internal Server Error"}
