"""Approve coin purchases from admin WhatsApp replies ("ok <verificationId>").

A verification moves pending -> completed or pending -> rejected exactly once.
Every transition is a conditional update on status == pending, so two
concurrent approvals of the same id cannot both credit the user.
"""

import re
from datetime import datetime

from beanie import UpdateResponse
from beanie.operators import Inc, Set
from pydantic import BaseModel

from vortex.core.logging import bind_verification_id, get_logger, unbind_verification_id
from vortex.models.purchase_verification import COMPLETED, PENDING, REJECTED, PurchaseVerification
from vortex.models.user import User
from vortex.services.coin_packages import get_package

log = get_logger(__name__)

APPROVAL_RE = re.compile(r"\bok\s+([a-zA-Z0-9]+)", re.IGNORECASE)

USER_NOT_FOUND = "User not found"
PACKAGE_NOT_FOUND = "Package not found"


class ProcessResult(BaseModel):
    success: bool
    message: str


def extract_verification_id(message: str | None) -> str | None:
    """Return the id from the first "ok <id>" in message, or None."""
    if not message:
        return None
    match = APPROVAL_RE.search(message)
    return match.group(1) if match else None


async def process_approval_message(message: str) -> ProcessResult:
    """
    Parse an approval reply and settle the referenced purchase.
    Never raises: faults are logged and returned as success=False so the webhook can always answer 200.
    """
    verification_id = extract_verification_id(message)
    if not verification_id:
        return ProcessResult(
            success=False,
            message='Message does not contain "ok" followed by a verification ID.',
        )
    bind_verification_id(verification_id)
    try:
        return await approve_verification(verification_id)
    except Exception as e:
        log.exception("purchase_verification_error")
        return ProcessResult(success=False, message=str(e) or "An unknown error occurred.")
    finally:
        unbind_verification_id()


async def approve_verification(verification_id: str) -> ProcessResult:
    verification = await PurchaseVerification.get(verification_id)
    if not verification:
        return ProcessResult(success=False, message=f'Verification ID "{verification_id}" not found.')
    if verification.status == COMPLETED:
        return ProcessResult(success=False, message=f"Purchase {verification_id} has already been completed.")
    if verification.status == REJECTED:
        return ProcessResult(
            success=False,
            message=f"Purchase {verification_id} was already rejected ({verification.reason or 'no reason'}).",
        )

    user = await User.get(verification.user_id)
    if not user:
        await _reject(verification_id, USER_NOT_FOUND)
        return ProcessResult(success=False, message=f"User {verification.user_id} not found.")

    package = get_package(verification.package_id)
    if not package:
        await _reject(verification_id, PACKAGE_NOT_FOUND)
        return ProcessResult(success=False, message=f"Package {verification.package_id} not found.")

    if not await _claim(verification_id, package.coins):
        log.warning("purchase_verification_claim_lost")
        return ProcessResult(success=False, message=f"Purchase {verification_id} has already been completed.")

    try:
        await _credit(user.id, package.coins)
    except Exception:
        await _release_claim(verification_id)
        raise

    log.info(
        "purchase_verification_completed",
        user_id=user.id,
        package_id=package.id,
        coins=package.coins,
    )
    return ProcessResult(
        success=True,
        message=(
            f"Successfully processed purchase {verification_id}. "
            f"Added {package.coins} coins to user {user.id}."
        ),
    )


async def _claim(verification_id: str, coins: int) -> bool:
    """pending -> completed. False if another caller got there first."""
    result = await PurchaseVerification.find_one(
        PurchaseVerification.id == verification_id,
        PurchaseVerification.status == PENDING,
    ).update(
        Set({
            PurchaseVerification.status: COMPLETED,
            PurchaseVerification.coins_credited: coins,
            PurchaseVerification.completed_at: datetime.utcnow(),
        }),
        response_type=UpdateResponse.UPDATE_RESULT,
    )
    return result.modified_count == 1


async def _release_claim(verification_id: str) -> None:
    """Undo _claim after a failed credit so the purchase can be approved again."""
    await PurchaseVerification.find_one(
        PurchaseVerification.id == verification_id,
        PurchaseVerification.status == COMPLETED,
    ).update(
        Set({
            PurchaseVerification.status: PENDING,
            PurchaseVerification.coins_credited: None,
            PurchaseVerification.completed_at: None,
        }),
        response_type=UpdateResponse.UPDATE_RESULT,
    )
    log.warning("purchase_verification_claim_released")


async def _credit(user_id: str, coins: int) -> None:
    result = await User.find_one(User.id == user_id).update(
        Inc({User.coin_balance: coins}),
        response_type=UpdateResponse.UPDATE_RESULT,
    )
    if result.matched_count != 1:
        raise RuntimeError(f"User {user_id} could not be credited.")


async def _reject(verification_id: str, reason: str) -> bool:
    result = await PurchaseVerification.find_one(
        PurchaseVerification.id == verification_id,
        PurchaseVerification.status == PENDING,
    ).update(
        Set({
            PurchaseVerification.status: REJECTED,
            PurchaseVerification.reason: reason,
            PurchaseVerification.rejected_at: datetime.utcnow(),
        }),
        response_type=UpdateResponse.UPDATE_RESULT,
    )
    rejected = result.modified_count == 1
    log.info("purchase_verification_rejected", reason=reason, applied=rejected)
    return rejected
