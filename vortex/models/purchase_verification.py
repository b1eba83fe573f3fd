from datetime import datetime
from typing import Literal
from uuid import uuid4

from beanie import Document
from pydantic import Field

PENDING = "pending"
COMPLETED = "completed"
REJECTED = "rejected"

VerificationStatus = Literal["pending", "completed", "rejected"]


def _new_verification_id() -> str:
    # Must stay alphanumeric: the admin replies "ok <id>" over WhatsApp.
    return uuid4().hex


class PurchaseVerification(Document):
    """One coin purchase awaiting admin approval over WhatsApp."""
    id: str = Field(default_factory=_new_verification_id)
    user_id: str
    package_id: str
    status: VerificationStatus = PENDING
    reason: str | None = None  # set when rejected
    coins_credited: int | None = None  # set when completed
    completed_at: datetime | None = None
    rejected_at: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "purchase_verifications"
        indexes = [
            [("user_id", 1), ("created_at", -1)],
            [("status", 1)],
        ]
