"""Render configured sites into static article and product pages."""

from .models import (
    ArticleLink,
    BreadcrumbItem,
    ProductLink,
    ProductPageContext,
    RenderedSection,
    RenderedZone,
)
from .page_generator import (
    ArticlePageGenerator,
    ProductPageGenerator,
    RenderedArticle,
    SiteMetadata,
    generate_site,
)
from .renderer import HtmlContentRenderer

__all__ = [
    "ArticleLink",
    "ArticlePageGenerator",
    "BreadcrumbItem",
    "HtmlContentRenderer",
    "ProductLink",
    "ProductPageContext",
    "ProductPageGenerator",
    "RenderedArticle",
    "RenderedSection",
    "RenderedZone",
    "SiteMetadata",
    "generate_site",
]
