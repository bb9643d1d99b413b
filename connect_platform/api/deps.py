"""FastAPI dependencies resolving shared state from ``app.state``."""

import asyncio

from fastapi import Depends, Request

from connect_platform.config import Settings
from connect_platform.engine.accounts import AccountOrchestrator
from connect_platform.engine.payments import PaymentOrchestrator
from connect_platform.engine.state import StateAggregator
from connect_platform.engine.transfers import TransferGuard
from connect_platform.providers.base import ProcessorGateway
from connect_platform.registry import AccountRegistry


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_gateway(request: Request) -> ProcessorGateway:
    return request.app.state.gateway


def get_registry(request: Request) -> AccountRegistry:
    return request.app.state.registry


def get_treasury_lock(request: Request) -> asyncio.Lock:
    return request.app.state.treasury_lock


def get_account_orchestrator(
    gateway: ProcessorGateway = Depends(get_gateway),
    registry: AccountRegistry = Depends(get_registry),
    config: Settings = Depends(get_settings),
    treasury_lock: asyncio.Lock = Depends(get_treasury_lock),
) -> AccountOrchestrator:
    return AccountOrchestrator(
        gateway,
        registry,
        root_url=config.root_url,
        dashboard_type=config.account_dashboard_type,
        request_transfers=config.request_transfers_capability,
        treasury_lock=treasury_lock,
    )


def get_payment_orchestrator(gateway: ProcessorGateway = Depends(get_gateway)) -> PaymentOrchestrator:
    return PaymentOrchestrator(gateway)


def get_transfer_guard(
    gateway: ProcessorGateway = Depends(get_gateway),
    registry: AccountRegistry = Depends(get_registry),
) -> TransferGuard:
    return TransferGuard(gateway, registry)


def get_state_aggregator(
    gateway: ProcessorGateway = Depends(get_gateway),
    registry: AccountRegistry = Depends(get_registry),
    config: Settings = Depends(get_settings),
) -> StateAggregator:
    return StateAggregator(gateway, registry, root_url=config.root_url)
