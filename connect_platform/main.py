"""
Connect Platform - payment orchestration over Stripe Connect.

Creates and onboards connected accounts, creates split and platform
payment intents, and moves platform fees to a designated treasury account
behind capability and balance pre-checks. Every failure is reported with
a stable error code.

Start the server:
    uvicorn connect_platform.main:app --reload

Offline, against the in-memory processor:
    PROCESSOR=mock uvicorn connect_platform.main:app --reload
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from connect_platform.api.accounts import router as accounts_router
from connect_platform.api.errors import register_error_handlers
from connect_platform.api.health import router as health_router
from connect_platform.api.payments import router as payments_router
from connect_platform.api.state import router as state_router
from connect_platform.api.transfers import router as transfers_router
from connect_platform.config import Settings, settings
from connect_platform.providers import build_gateway
from connect_platform.providers.base import ProcessorGateway
from connect_platform.registry import AccountRegistry, InMemoryAccountRegistry

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger("connect_platform")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the processor gateway on startup unless one was injected."""
    if app.state.gateway is None:
        app.state.gateway = build_gateway(app.state.settings)
    logger.info(
        "Connect platform started (processor=%s, root_url=%s)",
        app.state.gateway.name,
        app.state.settings.root_url,
    )
    yield


def create_app(
    config: Optional[Settings] = None,
    gateway: Optional[ProcessorGateway] = None,
    registry: Optional[AccountRegistry] = None,
) -> FastAPI:
    app = FastAPI(
        title="Connect Platform",
        description=(
            "Multi-party payment orchestration on Stripe Connect: connected account "
            "onboarding, split payments with application fees, and treasury transfers "
            "guarded by capability and balance checks."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = config or settings
    app.state.gateway = gateway
    # Lives as long as the process
    app.state.registry = registry or InMemoryAccountRegistry()
    app.state.treasury_lock = asyncio.Lock()

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(state_router)
    app.include_router(accounts_router)
    app.include_router(payments_router)
    app.include_router(transfers_router)
    return app


app = create_app()
