"""HTTP client for the WordPress/WooCommerce REST API."""

from typing import Any

import httpx
from loguru import logger

from src.price_editor.core.errors import (
    HostUnavailableError,
    ProductNotFoundError,
    ProductSaveError,
)
from src.price_editor.runtime.config.config_data import HostConfig

WC_NAMESPACE = "wc/v3"


class HostResponse:
    """Decoded JSON body plus the pagination headers the host sends."""

    def __init__(self, data: Any, headers: httpx.Headers) -> None:
        self.data = data
        self.total = int(headers.get("X-WP-Total", 0) or 0)
        self.total_pages = int(headers.get("X-WP-TotalPages", 0) or 0)


class WooCommerceClient:
    """Thin async wrapper around the host REST API.

    Transport failures and 5xx answers surface as HostUnavailableError so
    callers never see raw httpx exceptions.
    """

    def __init__(
        self,
        config: HostConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        auth = None
        if config.consumer_key and config.consumer_secret:
            auth = httpx.BasicAuth(config.consumer_key, config.consumer_secret)

        self.site_url = config.site_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=config.api_base_url,
            auth=auth,
            timeout=config.timeout_seconds,
            verify=config.verify_ssl,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        use_api_keys: bool = True,
    ) -> httpx.Response:
        """Send a request, translating transport failures."""
        kwargs: dict[str, Any] = {"params": params, "json": json, "headers": headers}
        if not use_api_keys:
            # Caller credentials travel in headers; API keys must not override them.
            kwargs["auth"] = None
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.bind(method=method, path=path, error_type=type(exc).__name__).error(
                "host.request_failed"
            )
            raise HostUnavailableError() from exc

        if response.status_code >= 500:
            logger.bind(
                method=method, path=path, status_code=response.status_code
            ).error("host.server_error")
            raise HostUnavailableError()
        return response

    async def get_json(
        self, path: str, params: dict[str, Any] | None = None
    ) -> HostResponse:
        response = await self.request("GET", f"{WC_NAMESPACE}/{path}", params=params)
        if response.status_code >= 400:
            logger.bind(path=path, status_code=response.status_code).warning(
                "host.read_rejected"
            )
            raise HostUnavailableError(_error_message(response))
        return HostResponse(response.json(), response.headers)

    async def get_product(self, product_id: int) -> dict[str, Any]:
        response = await self.request("GET", f"{WC_NAMESPACE}/products/{product_id}")
        if response.status_code in (400, 404):
            raise ProductNotFoundError(product_id)
        if response.status_code >= 400:
            raise HostUnavailableError(_error_message(response))
        return response.json()

    async def update_product(
        self, product_id: int, changes: dict[str, Any]
    ) -> dict[str, Any]:
        response = await self.request(
            "PUT", f"{WC_NAMESPACE}/products/{product_id}", json=changes
        )
        if response.status_code == 404:
            raise ProductNotFoundError(product_id)
        if response.status_code >= 400:
            message = _error_message(response)
            logger.bind(
                product_id=product_id,
                status_code=response.status_code,
                host_message=message,
            ).warning("host.save_rejected")
            raise ProductSaveError(product_id=product_id, host_message=message)
        return response.json()

    async def current_user(self, headers: dict[str, str]) -> dict[str, Any] | None:
        """Resolve the caller through WordPress using their own credentials.

        Returns None when the host does not recognise the credentials.
        """
        response = await self.request(
            "GET",
            "wp/v2/users/me",
            params={"context": "edit"},
            headers=headers,
            use_api_keys=False,
        )
        if response.status_code in (401, 403):
            return None
        if response.status_code >= 400:
            raise HostUnavailableError(_error_message(response))
        return response.json()

    async def ping(self) -> bool:
        """Reachability check used by the readiness probe."""
        try:
            response = await self._client.get("")
        except httpx.HTTPError:
            return False
        return response.status_code < 500


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return str(body.get("message") or body.get("code") or "")
    return ""
