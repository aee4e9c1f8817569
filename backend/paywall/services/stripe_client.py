import stripe
from paywall.config import settings

stripe.api_key = settings.stripe_api_key

def construct_event(payload: bytes, sig_header: str | None, secret: str) -> stripe.Event:
    # Raises stripe.SignatureVerificationError or ValueError.
    return stripe.Webhook.construct_event(payload, sig_header or "", secret)

def retrieve_subscription(subscription_id: str) -> stripe.Subscription:
    return stripe.Subscription.retrieve(subscription_id)
