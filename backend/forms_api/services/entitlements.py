"""Entitlement lookup: which scopes a service may use."""

import logging

import httpx

logger = logging.getLogger(__name__)

DEFAULT_SCOPES = ("form-delete", "form-edit", "form-read", "form-publish")


class EntitlementError(Exception):
    """Raised when scopes cannot be resolved from the entitlement API."""


def get_default_scopes() -> tuple[str, ...]:
    return DEFAULT_SCOPES


class EntitlementClient:
    """Client for the entitlement API.

    ``GET {base_url}/users/{service_id}`` is expected to answer with
    ``{"entity": {"scopes": [...]}}``. The caller's bearer token is forwarded.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def get_scopes(self, service_id: str, token: str) -> tuple[str, ...]:
        url = f"{self.base_url}/users/{service_id}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, headers={"Authorization": f"Bearer {token}"})
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("Entitlement API returned %d for %s", exc.response.status_code, service_id)
            raise EntitlementError(f"Entitlement API error: {exc.response.status_code}") from exc
        except httpx.RequestError as exc:
            logger.error("Entitlement API request failed: %s", exc)
            raise EntitlementError(f"Entitlement API request failed: {exc}") from exc

        try:
            scopes = response.json()["entity"]["scopes"]
        except (KeyError, TypeError, ValueError) as exc:
            raise EntitlementError(f"Malformed entitlement response: {exc}") from exc

        if not isinstance(scopes, list) or not all(isinstance(s, str) for s in scopes):
            raise EntitlementError("Entitlement scopes must be a list of strings")
        return tuple(scopes)
