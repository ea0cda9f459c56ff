"""Caller identity resolved by the host platform."""

import hashlib
from abc import ABC, abstractmethod
from typing import Any

from cachetools import TTLCache
from loguru import logger
from pydantic import BaseModel, Field

from src.price_editor.core.services.host.client import WooCommerceClient

# Request headers that carry WordPress credentials.
CREDENTIAL_HEADERS = ("authorization", "cookie", "x-wp-nonce")


class HostUser(BaseModel):
    """A logged-in host user and the capabilities granted to them."""

    id: int
    name: str = ""
    capabilities: set[str] = Field(default_factory=set)

    def can(self, capability: str) -> bool:
        return capability in self.capabilities

    @classmethod
    def from_host(cls, data: dict[str, Any]) -> "HostUser":
        caps = data.get("capabilities") or {}
        if isinstance(caps, dict):
            granted = {name for name, allowed in caps.items() if allowed}
        else:
            granted = set(caps)
        return cls(id=int(data["id"]), name=data.get("name", ""), capabilities=granted)


def credential_headers(headers: Any) -> dict[str, str]:
    """Pick the credential headers out of an incoming request's headers."""
    return {name: headers[name] for name in CREDENTIAL_HEADERS if headers.get(name)}


class IdentityProvider(ABC):
    @abstractmethod
    async def resolve(self, credentials: dict[str, str]) -> HostUser | None:
        """Return the user behind the credentials, or None if anonymous."""
        raise NotImplementedError


class WordPressIdentityProvider(IdentityProvider):
    """Asks WordPress who the caller is, caching answers briefly."""

    def __init__(self, client: WooCommerceClient, ttl_seconds: int = 60) -> None:
        self._client = client
        self._cache: TTLCache[str, HostUser] = TTLCache(maxsize=1024, ttl=ttl_seconds)

    @staticmethod
    def _cache_key(credentials: dict[str, str]) -> str:
        material = "|".join(f"{k}={credentials[k]}" for k in sorted(credentials))
        return hashlib.sha256(material.encode("utf-8")).hexdigest()

    async def resolve(self, credentials: dict[str, str]) -> HostUser | None:
        if not credentials:
            return None

        key = self._cache_key(credentials)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        data = await self._client.current_user(credentials)
        if not data or not data.get("id"):
            logger.debug("Host did not recognise caller credentials")
            return None

        user = HostUser.from_host(data)
        self._cache[key] = user
        return user

    def clear(self) -> None:
        self._cache.clear()
