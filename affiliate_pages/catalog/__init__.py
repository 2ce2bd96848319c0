"""Product catalog records, render projections, and loaders."""

from .models import (
    AffiliateLinkRecord,
    Benchmark,
    CatalogDocument,
    CatalogError,
    CategoryRecord,
    CategoryReference,
    Ingredient,
    ProductCardData,
    ProductMetadata,
    ProductRecord,
    UsageStep,
)
from .source import Catalog, load_catalog

__all__ = [
    "AffiliateLinkRecord",
    "Benchmark",
    "Catalog",
    "CatalogDocument",
    "CatalogError",
    "CategoryRecord",
    "CategoryReference",
    "Ingredient",
    "ProductCardData",
    "ProductMetadata",
    "ProductRecord",
    "UsageStep",
    "load_catalog",
]
