"""Catalog records decoded at the data boundary and their render projections.

Catalog JSON is decoded straight into msgspec structs, so untyped product
metadata (pros, cons, specifications, …) is validated once when the catalog is
loaded and never trusted as already-typed inside the rendering core.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import msgspec


class CatalogError(ValueError):
    """Raised when a catalog document is missing or malformed."""


class Benchmark(msgspec.Struct, frozen=True, rename="camel"):
    """Performance benchmark shown by gaming and tech layouts."""

    name: str
    score: float
    max_score: float
    unit: str | None = None


class Ingredient(msgspec.Struct, frozen=True, rename="camel"):
    """Ingredient entry shown by beauty layouts."""

    name: str
    description: str | None = None
    is_key: bool = False


class UsageStep(msgspec.Struct, frozen=True, rename="camel"):
    """One how-to-use instruction."""

    step: int
    instruction: str
    timing: str | None = None


class ProductMetadata(msgspec.Struct, frozen=True, rename="camel"):
    """Typed view of a product's free-form metadata JSON.

    Unknown keys are ignored during decoding. Layout sections gate on these
    fields through :meth:`has_field`.
    """

    pros: tuple[str, ...] = ()
    cons: tuple[str, ...] = ()
    features: tuple[str, ...] = ()
    specifications: dict[str, str] = msgspec.field(default_factory=dict)
    benchmarks: tuple[Benchmark, ...] = ()
    ingredients: tuple[Ingredient, ...] = ()
    how_to_use: tuple[UsageStep, ...] = ()
    skin_types: tuple[str, ...] = ()

    def has_field(self, name: str) -> bool:
        """Return ``True`` when ``name`` holds a non-empty value.

        ``name`` may be the wire name (``"howToUse"``) or the attribute name
        (``"how_to_use"``). Unknown names are treated as absent.
        """
        for field in msgspec.structs.fields(self):
            if name in (field.encode_name, field.name):
                return bool(getattr(self, field.name))
        return False


class AffiliateLinkRecord(msgspec.Struct, frozen=True, rename="camel"):
    """Outbound partner link for a product."""

    partner: str
    url: str
    is_primary: bool = False


class ProductRecord(msgspec.Struct, frozen=True, rename="camel"):
    """Product as stored in a catalog document."""

    id: str
    slug: str
    title: str
    excerpt: str | None = None
    content: str | None = None
    featured_image: str | None = None
    price_from: float | None = None
    price_currency: str | None = None
    rating: float | None = None
    product_type: str | None = None
    is_featured: bool = False
    categories: tuple[str, ...] = ()
    affiliate_links: tuple[AffiliateLinkRecord, ...] = ()
    metadata: ProductMetadata = msgspec.field(default_factory=ProductMetadata)

    @property
    def primary_affiliate_url(self) -> str | None:
        """Return the primary partner URL, else the first one, else ``None``."""
        for link in self.affiliate_links:
            if link.is_primary:
                return link.url
        return self.affiliate_links[0].url if self.affiliate_links else None


class CategoryRecord(msgspec.Struct, frozen=True, rename="camel"):
    """Product category as stored in a catalog document."""

    slug: str
    name: str
    description: str | None = None


class CatalogDocument(msgspec.Struct, frozen=True, rename="camel"):
    """Top-level catalog JSON for one site."""

    products: tuple[ProductRecord, ...] = ()
    categories: tuple[CategoryRecord, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class ProductCardData:
    """Read-only projection of a product used by inline widgets.

    Attributes
    ----------
    id : str
        Catalog identifier.
    slug : str
        URL-safe identifier within the site.
    title : str
        Display title.
    excerpt : str or None
        Short summary shown on cards.
    featured_image : str or None
        Image URL.
    price_from : float or None
        Starting price.
    price_currency : str or None
        ISO currency code.
    rating : float or None
        Average rating out of five.
    product_type : str or None
        Niche product type slug.
    is_featured : bool
        Editorial highlight flag.
    primary_affiliate_url : str or None
        Outbound partner link for the call to action.
    """

    id: str
    slug: str
    title: str
    excerpt: str | None = None
    featured_image: str | None = None
    price_from: float | None = None
    price_currency: str | None = None
    rating: float | None = None
    product_type: str | None = None
    is_featured: bool = False
    primary_affiliate_url: str | None = None

    @classmethod
    def from_record(cls, record: ProductRecord) -> typ.Self:
        """Project a catalog record onto the card fields."""
        return cls(
            id=record.id,
            slug=record.slug,
            title=record.title,
            excerpt=record.excerpt,
            featured_image=record.featured_image,
            price_from=record.price_from,
            price_currency=record.price_currency,
            rating=record.rating,
            product_type=record.product_type,
            is_featured=record.is_featured,
            primary_affiliate_url=record.primary_affiliate_url,
        )


@dc.dataclass(frozen=True, slots=True)
class CategoryReference:
    """Minimal category data used for links and breadcrumbs."""

    slug: str
    name: str
    description: str | None = None


__all__ = [
    "AffiliateLinkRecord",
    "Benchmark",
    "CatalogDocument",
    "CatalogError",
    "CategoryRecord",
    "CategoryReference",
    "Ingredient",
    "ProductCardData",
    "ProductMetadata",
    "ProductRecord",
    "UsageStep",
]
