"""Entity: product views exchanged with the host store and the editor grid."""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.price_editor.core.fields import PRODUCT_STATUSES, sanitize_text

ORDERBY_FIELDS = ("ID", "title", "date", "modified", "menu_order", "price")
MIN_PER_PAGE = 10
MAX_PER_PAGE = 100


class HostCategoryRef(BaseModel):
    """Category reference embedded in a host product payload."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str = ""
    slug: str = ""


class HostProduct(BaseModel):
    """Product payload as returned by the WooCommerce REST API.

    Only the attributes the editor reads or writes are kept; the host owns
    everything else about the product.
    """

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str = ""
    sku: str = ""
    status: str = ""
    regular_price: str = ""
    sale_price: str = ""
    price: str = ""
    tax_status: str = "taxable"
    tax_class: str = ""
    stock_status: str = "instock"
    stock_quantity: int | None = None
    categories: list[HostCategoryRef] = Field(default_factory=list)
    permalink: str = ""

    def get(self, attribute: str) -> Any:
        """Read one attribute by name, the getter half of a field mapping."""
        return getattr(self, attribute)


class ProductRecord(BaseModel):
    """Flat row shown in the editor grid."""

    id: int
    title: str
    sku: str
    status: str
    regular_price: str
    sale_price: str
    price: str
    tax_status: str
    tax_class: str
    stock_status: str
    stock_quantity: int | None = None
    categories: str = Field(description="Comma separated category names")
    edit_link: str
    view_link: str

    @classmethod
    def from_host(cls, product: HostProduct, site_url: str) -> "ProductRecord":
        return cls(
            id=product.id,
            title=product.name,
            sku=product.sku,
            status=product.status,
            regular_price=product.regular_price,
            sale_price=product.sale_price,
            price=product.price,
            tax_status=product.tax_status,
            tax_class=product.tax_class,
            stock_status=product.stock_status,
            stock_quantity=product.stock_quantity,
            categories=", ".join(c.name for c in product.categories if c.name),
            edit_link=f"{site_url.rstrip('/')}/wp-admin/post.php?post={product.id}&action=edit",
            view_link=product.permalink,
        )


class Category(BaseModel):
    id: int
    name: str
    slug: str
    count: int = 0


class TaxClass(BaseModel):
    slug: str
    name: str


class ProductQuery(BaseModel):
    """Grid filter and pagination parameters.

    Out-of-range or unknown values fall back to defaults instead of failing,
    so a stale client never breaks the grid.
    """

    page: int = 1
    per_page: int = 50
    status: str = ""
    category: str = ""
    search: str = ""
    tax_status: str = ""
    stock_status: str = ""
    orderby: str = "ID"
    order: str = "DESC"

    @field_validator("page", mode="before")
    @classmethod
    def _clamp_page(cls, value: Any) -> int:
        try:
            page = abs(int(value))
        except (TypeError, ValueError):
            return 1
        return max(1, page)

    @field_validator("per_page", mode="before")
    @classmethod
    def _clamp_per_page(cls, value: Any) -> int:
        try:
            per_page = abs(int(value))
        except (TypeError, ValueError):
            return 50
        return min(MAX_PER_PAGE, max(MIN_PER_PAGE, per_page))

    @field_validator(
        "status", "category", "search", "tax_status", "stock_status", mode="before"
    )
    @classmethod
    def _clean_text(cls, value: Any) -> str:
        return sanitize_text(value)

    @field_validator("status")
    @classmethod
    def _known_status(cls, value: str) -> str:
        return value if value in PRODUCT_STATUSES else ""

    @field_validator("orderby", mode="before")
    @classmethod
    def _known_orderby(cls, value: Any) -> str:
        value = sanitize_text(value)
        return value if value in ORDERBY_FIELDS else "ID"

    @field_validator("order", mode="before")
    @classmethod
    def _known_order(cls, value: Any) -> str:
        value = sanitize_text(value).upper()
        return value if value in ("ASC", "DESC") else "DESC"

    @property
    def statuses(self) -> list[str]:
        """Statuses to query; an empty filter means every editable status."""
        return [self.status] if self.status else list(PRODUCT_STATUSES)

    @property
    def numeric_search(self) -> int | None:
        return int(self.search) if self.search.isdecimal() else None


class ProductPage(BaseModel):
    products: list[ProductRecord]
    total: int
    page: int
    per_page: int
    pages: int

    @classmethod
    def build(
        cls, products: list[ProductRecord], total: int, query: ProductQuery
    ) -> "ProductPage":
        return cls(
            products=products,
            total=total,
            page=query.page,
            per_page=query.per_page,
            pages=math.ceil(total / query.per_page),
        )


class UpdateResult(BaseModel):
    message: str
    old_value: Any = None
    new_value: Any = None
    product: ProductRecord


class BulkUpdateResult(BaseModel):
    updated: int = 0
    failed: int = 0
    errors: dict[int, str] = Field(default_factory=dict)
