"""Entity package: Product."""

from .entity import (
    BulkUpdateResult,
    Category,
    HostCategoryRef,
    HostProduct,
    ProductPage,
    ProductQuery,
    ProductRecord,
    TaxClass,
    UpdateResult,
)

__all__ = [
    "BulkUpdateResult",
    "Category",
    "HostCategoryRef",
    "HostProduct",
    "ProductPage",
    "ProductQuery",
    "ProductRecord",
    "TaxClass",
    "UpdateResult",
]
