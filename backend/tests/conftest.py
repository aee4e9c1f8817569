import hashlib
import hmac
import json
import os
import tempfile
import time
from pathlib import Path

import pytest

# Settings are read at import time, so the environment must be ready first.
TEST_DIR = Path(tempfile.mkdtemp(prefix="paywall-tests-"))
os.environ["STRIPE_API_KEY"] = "sk_test_dummy"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_secret"
os.environ["DB_PATH"] = str(TEST_DIR / "db.sqlite3")

from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from paywall.api.webhooks import get_subscription_updater  # noqa: E402
from paywall.db import engine  # noqa: E402
from paywall.main import app  # noqa: E402

WEBHOOK_SECRET = os.environ["STRIPE_WEBHOOK_SECRET"]


def sign(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """Build a Stripe-Signature header the same way Stripe does."""
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.{payload}".encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def make_event(kind: str, obj: dict, event_id: str = "evt_test_1") -> str:
    return json.dumps(
        {
            "id": event_id,
            "object": "event",
            "type": kind,
            "data": {"object": obj},
        }
    )


class RecordingUpdater:
    def __init__(self, fail: bool = False):
        self.calls = []
        self.fail = fail

    def __call__(self, subscription_id, customer_id, activate):
        self.calls.append((subscription_id, customer_id, activate))
        if self.fail:
            raise RuntimeError("database unavailable")


@pytest.fixture
def db():
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def updater():
    recorder = RecordingUpdater()
    app.dependency_overrides[get_subscription_updater] = lambda: recorder
    yield recorder
    app.dependency_overrides.pop(get_subscription_updater, None)


@pytest.fixture
def failing_updater():
    recorder = RecordingUpdater(fail=True)
    app.dependency_overrides[get_subscription_updater] = lambda: recorder
    yield recorder
    app.dependency_overrides.pop(get_subscription_updater, None)
