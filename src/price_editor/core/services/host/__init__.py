"""Host platform facade: catalog access and caller identity."""

from .client import HostResponse, WooCommerceClient
from .identity import (
    HostUser,
    IdentityProvider,
    WordPressIdentityProvider,
    credential_headers,
)
from .product_store import ProductStore, WooCommerceProductStore

__all__ = [
    "HostResponse",
    "HostUser",
    "IdentityProvider",
    "ProductStore",
    "WooCommerceClient",
    "WooCommerceProductStore",
    "WordPressIdentityProvider",
    "credential_headers",
]
