from vortex.models.purchase_verification import PurchaseVerification
from vortex.models.user import User

__all__ = [
    "PurchaseVerification",
    "User",
]
