"""Load a site's product catalog and answer the renderer's batch fetches.

The content pipeline only needs two lookups before it renders an article:
products by slug and products by category slug. :class:`Catalog` serves both
from an in-memory snapshot decoded from JSON, preserving catalog order so grids
render products in the order editors arranged them.

Example
-------
>>> from pathlib import Path
>>> from affiliate_pages.catalog import load_catalog
>>> catalog = load_catalog(Path("catalog/techflow.json"))  # doctest: +SKIP
>>> sorted(catalog.get_products_by_slugs(["acme-widget"]))  # doctest: +SKIP
['acme-widget']
"""

from __future__ import annotations

import logging
import typing as typ

import msgspec

from affiliate_pages.fetch import read_source

from .models import (
    CatalogDocument,
    CatalogError,
    CategoryReference,
    ProductCardData,
    ProductRecord,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

logger = logging.getLogger(__name__)

_DECODER = msgspec.json.Decoder(CatalogDocument)


class Catalog:
    """In-memory catalog for a single site."""

    def __init__(self, document: CatalogDocument) -> None:
        self.document = document
        self._products: dict[str, ProductRecord] = {}
        for record in document.products:
            self._products.setdefault(record.slug, record)
        self._categories = {record.slug: record for record in document.categories}

    @classmethod
    def from_json(cls, payload: bytes | str) -> Catalog:
        """Decode ``payload`` into a catalog.

        Raises
        ------
        CatalogError
            If the payload is not valid catalog JSON.
        """
        try:
            document = _DECODER.decode(payload)
        except msgspec.DecodeError as exc:
            msg = f"Invalid catalog document: {exc}"
            raise CatalogError(msg) from exc
        return cls(document)

    @property
    def category_slugs(self) -> frozenset[str]:
        """Return the slugs of every category in the catalog."""
        return frozenset(self._categories)

    def get_product(self, slug: str) -> ProductRecord | None:
        """Return the full product record for ``slug``, if present."""
        return self._products.get(slug)

    def products(self) -> tuple[ProductRecord, ...]:
        """Return every product record in catalog order."""
        return tuple(self._products.values())

    def get_products_by_slugs(
        self, slugs: cabc.Iterable[str]
    ) -> dict[str, ProductCardData]:
        """Return card data for the requested slugs that exist in the catalog."""
        found: dict[str, ProductCardData] = {}
        for slug in slugs:
            record = self._products.get(slug)
            if record is not None:
                found[slug] = ProductCardData.from_record(record)
        return found

    def get_products_by_category(
        self, category_slug: str, limit: int | None = None
    ) -> list[ProductCardData]:
        """Return products assigned to ``category_slug`` in catalog order."""
        matches = [
            ProductCardData.from_record(record)
            for record in self._products.values()
            if category_slug in record.categories
        ]
        return matches if limit is None else matches[:limit]

    def get_category_products(
        self, category_slugs: cabc.Iterable[str], limit: int | None = None
    ) -> dict[str, list[ProductCardData]]:
        """Return category product lists keyed by slug for known categories."""
        return {
            slug: self.get_products_by_category(slug, limit)
            for slug in category_slugs
            if slug in self._categories
        }

    def get_category(self, slug: str) -> CategoryReference | None:
        """Return the category reference for ``slug``, if present."""
        record = self._categories.get(slug)
        if record is None:
            return None
        return CategoryReference(
            slug=record.slug, name=record.name, description=record.description
        )

    def primary_category(self, product_slug: str) -> CategoryReference | None:
        """Return the first known category of ``product_slug``."""
        record = self._products.get(product_slug)
        if record is None:
            return None
        for slug in record.categories:
            category = self.get_category(slug)
            if category is not None:
                return category
        return None

    def related_products(self, slug: str, limit: int = 4) -> list[ProductCardData]:
        """Return other products sharing a category with ``slug``."""
        record = self._products.get(slug)
        if record is None:
            return []
        shared = set(record.categories)
        related = [
            ProductCardData.from_record(candidate)
            for candidate in self._products.values()
            if candidate.slug != slug and shared.intersection(candidate.categories)
        ]
        return related[:limit]

    def linkable_products(self) -> list[ProductCardData]:
        """Return every product as card data, for auto-linking."""
        return [ProductCardData.from_record(record) for record in self._products.values()]

    def linkable_categories(self) -> list[CategoryReference]:
        """Return every category reference, for auto-linking."""
        return [
            CategoryReference(slug=record.slug, name=record.name, description=record.description)
            for record in self._categories.values()
        ]


def load_catalog(source: str | Path) -> Catalog:
    """Load a catalog from a local JSON file or an ``http(s)`` URL.

    Parameters
    ----------
    source : str or Path
        Filesystem path or URL of the catalog JSON document.

    Returns
    -------
    Catalog
        Decoded catalog ready for batch lookups.

    Raises
    ------
    FileNotFoundError
        If a local catalog file does not exist.
    CatalogError
        If the document cannot be decoded.
    requests.HTTPError
        If a remote catalog responds with an error status.
    """
    logger.debug("loading catalog from %s", source)
    return Catalog.from_json(read_source(source))


__all__ = ["Catalog", "load_catalog"]
