import uuid
import datetime as dt
from typing import Optional
from sqlmodel import SQLModel, Field

class Subscription(SQLModel, table=True):
    """
    Local mirror of a Stripe subscription, keyed by the Stripe subscription id.
    """

    id: str = Field(primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="user.id", index=True)
    status: str
    price_id: Optional[str] = None
    updated_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc)
    )
