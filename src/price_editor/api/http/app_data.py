from dataclasses import dataclass

from src.price_editor.core.services import (
    DbSessionService,
    IdentityProvider,
    ProductService,
    ProductStore,
    RedisService,
    WooCommerceClient,
)


@dataclass
class ApplicationDependencies:
    product_store: ProductStore
    product_service: ProductService
    identity_provider: IdentityProvider
    database_service: DbSessionService
    redis_service: RedisService | None = None
    woo_client: WooCommerceClient | None = None
