"""Product store facade over the host catalog."""

from abc import ABC, abstractmethod
from typing import Any

from loguru import logger

from src.price_editor.core.services.host.client import WooCommerceClient
from src.price_editor.entities.product import (
    Category,
    HostProduct,
    ProductQuery,
    TaxClass,
)

HOST_PAGE_SIZE = 100

# Grid orderby keys -> WooCommerce REST orderby values.
_ORDERBY_MAP = {
    "ID": "id",
    "title": "title",
    "date": "date",
    "modified": "modified",
    "menu_order": "menu_order",
    "price": "price",
}


class ProductStore(ABC):
    """What the editor needs from the host catalog."""

    site_url: str = ""

    @abstractmethod
    async def get_product(self, product_id: int) -> HostProduct:
        """Return one product or raise ProductNotFoundError."""
        raise NotImplementedError

    @abstractmethod
    async def find_products(self, query: ProductQuery) -> tuple[list[HostProduct], int]:
        """Return one page of matching products and the total match count."""
        raise NotImplementedError

    @abstractmethod
    async def save_product(self, product_id: int, changes: dict[str, Any]) -> HostProduct:
        """Persist attribute changes and return the saved product."""
        raise NotImplementedError

    @abstractmethod
    async def list_categories(self) -> list[Category]:
        raise NotImplementedError

    @abstractmethod
    async def list_tax_classes(self) -> list[TaxClass]:
        raise NotImplementedError


class WooCommerceProductStore(ProductStore):
    """ProductStore backed by the WooCommerce REST API (v3)."""

    def __init__(self, client: WooCommerceClient) -> None:
        self._client = client
        self.site_url = client.site_url

    async def get_product(self, product_id: int) -> HostProduct:
        return HostProduct.model_validate(await self._client.get_product(product_id))

    async def save_product(self, product_id: int, changes: dict[str, Any]) -> HostProduct:
        data = await self._client.update_product(product_id, changes)
        return HostProduct.model_validate(data)

    async def _base_params(self, query: ProductQuery) -> dict[str, Any] | None:
        """Translate the grid query; None means nothing can match."""
        params: dict[str, Any] = {
            "status": query.status or "any",
            "orderby": _ORDERBY_MAP[query.orderby],
            "order": query.order.lower(),
        }

        if query.category:
            category_id = await self._category_id(query.category)
            if category_id is None:
                return None
            params["category"] = category_id

        if query.stock_status:
            params["stock_status"] = query.stock_status

        if query.search:
            if query.numeric_search is not None:
                params["include"] = [query.numeric_search]
            else:
                params["search"] = query.search
        return params

    async def find_products(self, query: ProductQuery) -> tuple[list[HostProduct], int]:
        params = await self._base_params(query)
        if params is None:
            return [], 0

        if query.status and not query.tax_status:
            response = await self._client.get_json(
                "products", {**params, "page": query.page, "per_page": query.per_page}
            )
            products = [HostProduct.model_validate(item) for item in response.data]
            return products, response.total

        return await self._find_filtered(query, params)

    async def _find_filtered(
        self, query: ProductQuery, params: dict[str, Any]
    ) -> tuple[list[HostProduct], int]:
        # "any" also matches scheduled posts and the host cannot filter on tax
        # status; scan every match and page locally so totals count visible rows.
        statuses = query.statuses
        matches: list[HostProduct] = []
        page = 1
        while True:
            response = await self._client.get_json(
                "products", {**params, "page": page, "per_page": HOST_PAGE_SIZE}
            )
            for item in response.data:
                product = HostProduct.model_validate(item)
                if product.status not in statuses:
                    continue
                if query.tax_status and product.tax_status != query.tax_status:
                    continue
                matches.append(product)
            if page >= response.total_pages or not response.data:
                break
            page += 1

        logger.debug(
            "Filtered {} products locally (status={!r}, tax_status={!r})",
            len(matches),
            query.status,
            query.tax_status,
        )
        start = (query.page - 1) * query.per_page
        return matches[start : start + query.per_page], len(matches)

    async def _category_id(self, slug: str) -> int | None:
        for category in await self.list_categories():
            if category.slug == slug:
                return category.id
        return None

    async def list_categories(self) -> list[Category]:
        categories: list[Category] = []
        page = 1
        while True:
            response = await self._client.get_json(
                "products/categories",
                {
                    "page": page,
                    "per_page": HOST_PAGE_SIZE,
                    "orderby": "name",
                    "order": "asc",
                    "hide_empty": "false",
                },
            )
            categories.extend(
                Category(
                    id=item["id"],
                    name=item.get("name", ""),
                    slug=item.get("slug", ""),
                    count=item.get("count", 0),
                )
                for item in response.data
            )
            if page >= response.total_pages or not response.data:
                break
            page += 1
        return categories

    async def list_tax_classes(self) -> list[TaxClass]:
        response = await self._client.get_json("taxes/classes")
        classes = [TaxClass(slug="", name="Standard")]
        for item in response.data:
            slug = item.get("slug", "")
            # The host lists the standard rate itself; it is always first here.
            if slug in ("", "standard"):
                continue
            classes.append(TaxClass(slug=slug, name=item.get("name", slug)))
        return classes
