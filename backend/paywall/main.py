from __future__ import annotations

import logging

from fastapi import FastAPI

from .api import webhooks
from .config import settings
from .db import init_db

LOGGER = logging.getLogger("paywall")
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

init_db()

app = FastAPI(title="Paywall")

app.include_router(webhooks.router, prefix="/api", tags=["webhooks"])

LOGGER.info("Stripe webhook endpoint mounted at /api/webhooks")
