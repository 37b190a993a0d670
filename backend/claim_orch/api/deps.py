"""
API dependencies
"""
from typing import AsyncIterator

from fastapi import Depends

from claim_orch.core.config import Settings, get_settings
from claim_orch.services.upstream.client import (
    UpstreamClient,
    build_claims_client,
    build_notification_client,
)


def get_app_settings() -> Settings:
    return get_settings()


async def get_claims_client(
    settings: Settings = Depends(get_app_settings),
) -> AsyncIterator[UpstreamClient]:
    """Claims platform client scoped to one request."""
    async with build_claims_client(settings) as client:
        yield client


async def get_notification_client(
    settings: Settings = Depends(get_app_settings),
) -> AsyncIterator[UpstreamClient]:
    """iHub notification client scoped to one request."""
    async with build_notification_client(settings) as client:
        yield client


__all__ = [
    "get_app_settings",
    "get_claims_client",
    "get_notification_client",
]
