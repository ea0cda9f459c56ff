from .database import DbManageService, DbSessionService
from .host import (
    HostUser,
    IdentityProvider,
    ProductStore,
    WooCommerceClient,
    WooCommerceProductStore,
    WordPressIdentityProvider,
)
from .product_service import ProductService
from .redis_service import RedisService

__all__ = [
    "DbManageService",
    "DbSessionService",
    "HostUser",
    "IdentityProvider",
    "ProductService",
    "ProductStore",
    "RedisService",
    "WooCommerceClient",
    "WooCommerceProductStore",
    "WordPressIdentityProvider",
]
