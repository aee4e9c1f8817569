import logging
from typing import Callable

import stripe
from fastapi import APIRouter, Depends, Header, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse

from paywall.config import settings
from paywall.services import stripe_client
from paywall.services.subscriptions import save_subscription

LOGGER = logging.getLogger("paywall.webhooks")

router = APIRouter()

RELEVANT_EVENTS = frozenset(
    {
        "checkout.session.completed",
        "customer.subscription.updated",
        "customer.subscription.deleted",
    }
)

SubscriptionUpdater = Callable[[str, str, bool], object]


class WebhookDispatchError(Exception):
    """Raised for a relevant event kind that has no dispatch branch."""


def get_subscription_updater() -> SubscriptionUpdater:
    return save_subscription


def _field(obj, key):
    # stripe.Event supports item access but none of the dict methods.
    try:
        return obj[key]
    except KeyError:
        return None


def _stripe_id(value) -> str:
    # Stripe sends either a bare id or an expanded object.
    if isinstance(value, str):
        return value
    return value["id"]


async def _dispatch(event: stripe.Event, update: SubscriptionUpdater) -> None:
    obj = event["data"]["object"]
    kind = event["type"]

    if kind in ("customer.subscription.updated", "customer.subscription.deleted"):
        await run_in_threadpool(
            update, obj["id"], _stripe_id(obj["customer"]), False
        )
    elif kind == "checkout.session.completed":
        await run_in_threadpool(
            update, _stripe_id(obj["subscription"]), _stripe_id(obj["customer"]), True
        )
    else:
        raise WebhookDispatchError("Unhandled event.")


@router.post("/webhooks")
async def webhook(
    request: Request,
    stripe_signature: str | None = Header(None),
    update: SubscriptionUpdater = Depends(get_subscription_updater),
):
    # Signature covers the exact bytes; never parse before verifying.
    payload = await request.body()
    try:
        event = stripe_client.construct_event(
            payload, stripe_signature, settings.stripe_webhook_secret
        )
    except Exception as e:
        # Bad signature, undecodable bytes or a body that is not an event.
        LOGGER.warning("Rejected webhook: %s", e)
        return PlainTextResponse(f"Webhook error: {e}", status_code=400)

    kind = _field(event, "type")
    event_id = _field(event, "id")
    LOGGER.info("Received %s (%s)", kind, event_id)

    if kind not in RELEVANT_EVENTS:
        LOGGER.debug("Ignoring event kind %s", kind)
        return {"received": True}

    try:
        await _dispatch(event, update)
    except Exception as e:
        # Answer 200 so Stripe does not redeliver an event we cannot process.
        LOGGER.error("Webhook handler failed for %s: %s", event_id, e, exc_info=True)
        return {"error": "Webhook handler failed."}

    return {"received": True}
