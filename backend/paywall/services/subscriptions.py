"""
Persists Stripe subscription state for local users.

The local row is always rebuilt from the subscription as Stripe reports it
now, so the event payload only has to carry the ids.
"""
import logging
import datetime as dt

from sqlmodel import Session, select

from paywall.db import engine
from paywall.models.subscription import Subscription
from paywall.models.user import User
from paywall.services import stripe_client

LOGGER = logging.getLogger("paywall.subscriptions")


class SubscriptionUpdateError(Exception):
    """Raised when a subscription cannot be attached to a local user."""


def _first_price_id(subscription) -> str | None:
    items = subscription["items"]["data"]
    if not items:
        return None
    return items[0]["price"]["id"]


def save_subscription(
    subscription_id: str, customer_id: str, activate: bool = False
) -> Subscription:
    """
    Upsert the local copy of a subscription.

    `activate` is True when the subscription comes from a completed checkout
    and False for later state changes (updates, cancellations). It is only
    reported in the log line and has no effect on the stored record: both
    values perform the same upsert, and replaying an event rewrites it again.
    """
    with Session(engine) as db:
        user = db.exec(select(User).where(User.customer_id == customer_id)).first()
        if not user:
            raise SubscriptionUpdateError(
                f"No user with Stripe customer {customer_id}"
            )

        remote = stripe_client.retrieve_subscription(subscription_id)

        sub = db.get(Subscription, remote["id"])
        created = sub is None
        if created:
            sub = Subscription(id=remote["id"], user_id=user.id, status=remote["status"])
        sub.user_id = user.id
        sub.status = remote["status"]
        sub.price_id = _first_price_id(remote)
        sub.updated_at = dt.datetime.now(dt.timezone.utc)

        db.add(sub)
        db.commit()
        db.refresh(sub)

    LOGGER.info(
        "%s subscription %s for customer %s (status=%s, activate=%s)",
        "Created" if created else "Updated",
        sub.id,
        customer_id,
        sub.status,
        activate,
    )
    return sub
