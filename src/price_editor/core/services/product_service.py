"""Product repository facade used by the HTTP layer."""

from typing import Any

from cachetools import TTLCache
from loguru import logger

from src.price_editor.core.errors import (
    PermissionDeniedError,
    PriceEditorError,
)
from src.price_editor.core.fields import clean_field_value, get_field
from src.price_editor.core.security import log_event
from src.price_editor.core.services.host import HostUser, ProductStore
from src.price_editor.entities.product import (
    BulkUpdateResult,
    Category,
    ProductPage,
    ProductQuery,
    ProductRecord,
    TaxClass,
    UpdateResult,
)

_CATEGORIES_KEY = "wpe_product_categories"
_TAX_CLASSES_KEY = "wpe_tax_classes"
EMPTY_DISPLAY = "—"


class ProductService:
    """Lists and edits host products through the field allow-list."""

    def __init__(
        self,
        store: ProductStore,
        cache_duration: int = 3600,
        edit_capability: str = "edit_products",
    ) -> None:
        self._store = store
        self._edit_capability = edit_capability
        self._cache: TTLCache[str, Any] = TTLCache(
            maxsize=8, ttl=max(1, cache_duration)
        )

    def _record(self, product) -> ProductRecord:
        return ProductRecord.from_host(product, self._store.site_url)

    async def list_products(self, query: ProductQuery) -> ProductPage:
        products, total = await self._store.find_products(query)
        return ProductPage.build([self._record(p) for p in products], total, query)

    async def get_categories(self) -> list[Category]:
        categories = self._cache.get(_CATEGORIES_KEY)
        if categories is None:
            categories = await self._store.list_categories()
            self._cache[_CATEGORIES_KEY] = categories
        return categories

    async def get_tax_classes(self) -> list[TaxClass]:
        tax_classes = self._cache.get(_TAX_CLASSES_KEY)
        if tax_classes is None:
            tax_classes = await self._store.list_tax_classes()
            self._cache[_TAX_CLASSES_KEY] = tax_classes
        return tax_classes

    def clear_caches(self) -> None:
        self._cache.clear()

    async def ensure_can_edit(self, product_id: int, user: HostUser) -> None:
        """Require the edit capability and an existing product."""
        if not user.can(self._edit_capability):
            raise PermissionDeniedError(
                f"You do not have permission to edit product #{product_id}.",
                product_id=product_id,
            )
        await self._store.get_product(product_id)

    async def update_field(
        self,
        product_id: int,
        field: str,
        value: Any,
        user: HostUser | None = None,
        client_ip: str | None = None,
    ) -> UpdateResult:
        """Validate, sanitize and write one field of one product."""
        spec = get_field(field)
        new_value = clean_field_value(field, value)

        product = await self._store.get_product(product_id)
        old_value = product.get(spec.attribute)

        saved = await self._store.save_product(product_id, {spec.attribute: new_value})
        log_event(
            "product_updated",
            user_id=user.id if user else None,
            ip=client_ip,
            product_id=product_id,
            field=field,
            old_value=old_value,
            new_value=new_value,
        )

        message = (
            f"{spec.label} for product #{product_id} changed: "
            f"{old_value if old_value not in ('', None) else EMPTY_DISPLAY} → "
            f"{new_value if new_value != '' else EMPTY_DISPLAY}"
        )
        return UpdateResult(
            message=message,
            old_value=old_value,
            new_value=new_value,
            product=self._record(saved),
        )

    async def bulk_update(
        self,
        product_ids: list[int],
        field: str,
        value: Any,
        user: HostUser | None = None,
        client_ip: str | None = None,
    ) -> BulkUpdateResult:
        """Apply one field change to many products, each independently."""
        get_field(field)
        result = BulkUpdateResult()

        for product_id in product_ids:
            try:
                await self.update_field(product_id, field, value, user, client_ip)
            except PriceEditorError as exc:
                result.failed += 1
                result.errors[product_id] = exc.message
            else:
                result.updated += 1

        logger.bind(
            field=field, updated=result.updated, failed=result.failed
        ).info("product.bulk_update")
        return result
