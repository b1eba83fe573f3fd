from datetime import datetime

from beanie import Document
from pydantic import Field


class User(Document):
    """Profile keyed by the auth provider's uid. coin_balance only ever moves via $inc."""
    id: str
    display_name: str = ""
    email: str | None = None
    coin_balance: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "users"
