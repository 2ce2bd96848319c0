"""Shared dataclasses used by the page generation pipeline."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from affiliate_pages.catalog import (
        CategoryReference,
        ProductCardData,
        ProductMetadata,
        ProductRecord,
    )
    from affiliate_pages.config import SiteConfig
    from affiliate_pages.content import RenderedContent


@dc.dataclass(frozen=True, slots=True)
class BreadcrumbItem:
    """One breadcrumb trail entry; the current page has no ``url``."""

    name: str
    url: str | None = None


@dc.dataclass(frozen=True, slots=True)
class ProductLink:
    """Product card paired with its site-relative page URL."""

    product: ProductCardData
    url: str


@dc.dataclass(frozen=True, slots=True)
class ArticleLink:
    """Article teaser used by the featured-articles section."""

    title: str
    url: str
    excerpt: str | None = None


@dc.dataclass(slots=True)
class ProductPageContext:
    """Everything a product-page section template may read.

    Attributes
    ----------
    site : SiteConfig
        Site the page belongs to.
    product : ProductRecord
        Full catalog record.
    card : ProductCardData
        Card projection of ``product`` used by shared widget macros.
    product_url : str
        Site-relative URL of the page.
    breadcrumb : list[BreadcrumbItem]
        Trail from the site root to the product.
    primary_category : CategoryReference or None
        First catalog category of the product.
    review : RenderedContent or None
        Product body rendered through the content pipeline.
    featured_articles : list[ArticleLink]
        Site articles whose content references the product.
    related_products : list[ProductLink]
        Other products sharing a category.
    """

    site: SiteConfig
    product: ProductRecord
    card: ProductCardData
    product_url: str
    breadcrumb: list[BreadcrumbItem] = dc.field(default_factory=list)
    primary_category: CategoryReference | None = None
    review: RenderedContent | None = None
    featured_articles: list[ArticleLink] = dc.field(default_factory=list)
    related_products: list[ProductLink] = dc.field(default_factory=list)

    @property
    def metadata(self) -> ProductMetadata:
        """Return the product's typed metadata."""
        return self.product.metadata


@dc.dataclass(frozen=True, slots=True)
class RenderedSection:
    """HTML for one section of a product page."""

    id: str
    html: str


@dc.dataclass(frozen=True, slots=True)
class RenderedZone:
    """Sections rendered into one layout zone."""

    id: str
    sections: list[RenderedSection]

    @property
    def html(self) -> str:
        """Return the zone's sections joined in order."""
        return "\n".join(section.html for section in self.sections if section.html)


__all__ = [
    "ArticleLink",
    "BreadcrumbItem",
    "ProductLink",
    "ProductPageContext",
    "RenderedSection",
    "RenderedZone",
]
