"""
Claims platform HTTP client.

Thin wrapper over httpx that authenticates every call with a bearer token,
logs intent and failure, and turns transport, status and in-band
``Status != "OK"`` failures into the typed errors in ``errors``. No retries:
the first failure propagates to the workflow.
"""
from __future__ import annotations

import json
from typing import Any, Optional

import httpx

from claim_orch.core.config import Settings
from claim_orch.core.logging import get_logger
from claim_orch.services.upstream.errors import UpstreamHttpError, UpstreamLogicalError

logger = get_logger(__name__)


class UpstreamClient:
    """Authenticated JSON client for one upstream base URL."""

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        name: str = "claims",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.name = name
        self._client = httpx.AsyncClient(
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "UpstreamClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def url_for(self, path: str) -> str:
        if not path:
            return self.base_url
        return f"{self.base_url}/{path.lstrip('/')}"

    async def request(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        *,
        params: Optional[dict] = None,
        decode: bool = True,
    ) -> Any:
        """
        Issue one call and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to the base URL ("" for the base URL itself)
            json_body: Optional JSON request body
            params: Optional query parameters
            decode: Whether to decode the body; when False the raw
                response text is returned

        Returns:
            Decoded JSON body (or text when ``decode`` is False)

        Raises:
            UpstreamHttpError: transport failure or non-2xx status
            UpstreamLogicalError: undecodable body or ``Status`` other than "OK"
        """
        url = self.url_for(path)
        logger.info(f"[{self.name}] {method} {url}")

        try:
            response = await self._client.request(method, url, json=json_body, params=params)
        except httpx.HTTPError as exc:
            logger.error(f"[{self.name}] {method} {url} transport failure: {exc!r}")
            raise UpstreamHttpError(None, str(exc) or type(exc).__name__, method=method, url=url) from exc

        if not response.is_success:
            logger.error(
                f"[{self.name}] {method} {url} failed: {response.status_code} {response.reason_phrase} "
                f"body={response.text[:500]}"
            )
            raise UpstreamHttpError(
                response.status_code, response.reason_phrase, method=method, url=url
            )

        if not decode:
            return response.text

        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.error(f"[{self.name}] {method} {url} returned a non-JSON body: {response.text[:500]}")
            raise UpstreamLogicalError(
                f"{method} {url} returned a non-JSON body", response=response.text
            ) from exc

        if isinstance(data, dict) and "Status" in data and data["Status"] != "OK":
            logger.error(f"[{self.name}] {method} {url} reported Status={data['Status']}: {data}")
            raise UpstreamLogicalError(
                f"{method} {url} reported Status={data['Status']}", response=data
            )

        return data

    async def get(self, path: str, **kwargs) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, json_body: Any = None, **kwargs) -> Any:
        return await self.request("POST", path, json_body, **kwargs)


def build_claims_client(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> UpstreamClient:
    """Client for the claims platform, using the configured bearer token."""
    return UpstreamClient(
        settings.TRAVELERS_CLAIM_SERVER_URL,
        settings.TRAVELERS_CLAIM_SERVER_TOKEN,
        name="claims",
        timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
        transport=transport,
    )


def build_notification_client(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> UpstreamClient:
    """Client for the iHub payment notification endpoint."""
    return UpstreamClient(
        settings.TRAVELERS_IHUB_NOTIFICATION_URL,
        settings.TRAVELERS_IHUB_TOKEN,
        name="ihub",
        timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
        transport=transport,
    )
