"""Typed dataclasses describing multi-site affiliate page configuration."""

from __future__ import annotations

import dataclasses as dc
import datetime as dt  # noqa: TC003 - used for runtime type metadata
from pathlib import Path

from affiliate_pages.layouts import LayoutConfig  # noqa: TC001


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class ThemeConfig:
    """Visual theming applied to generated pages."""

    tagline: str = ""
    accent_color: str = "#2563eb"
    footer_note: str = ""


@dc.dataclass(slots=True)
class FAQEntry:
    """Question and answer pair rendered below an article."""

    question: str
    answer: str


@dc.dataclass(slots=True)
class NicheConfig:
    """Niche shared by sites, carrying the product-page layout."""

    slug: str
    name: str
    layout: LayoutConfig | None = None


@dc.dataclass(slots=True)
class ArticleConfig:
    """A single article page sourced from Markdown or HTML."""

    slug: str
    title: str
    source: str
    article_type: str = "article"
    excerpt: str | None = None
    author: str | None = None
    featured_image: str | None = None
    category: str | None = None
    published_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None
    faqs: list[FAQEntry] = dc.field(default_factory=list)
    enable_auto_link: bool = True


@dc.dataclass(slots=True)
class SiteConfig:
    """A fully resolved site definition sourced from YAML config."""

    slug: str
    name: str
    domain: str
    niche: NicheConfig
    catalog: str
    output_dir: Path
    content_slug: str
    pygments_style: str
    theme: ThemeConfig
    articles: dict[str, ArticleConfig] = dc.field(default_factory=dict)

    @property
    def site_dir(self) -> Path:
        """Return the directory receiving this site's pages."""
        return self.output_dir / self.slug

    def article_url(self, article_slug: str) -> str:
        """Return the site-relative URL of an article page."""
        return f"/{self.slug}/{self.content_slug}/{article_slug}"


@dc.dataclass(slots=True)
class PagesConfig:
    """Collection of site configs alongside shared niches."""

    sites: dict[str, SiteConfig]
    niches: dict[str, NicheConfig] = dc.field(default_factory=dict)
    default_site: str | None = None

    def get_site(self, site_slug: str | None) -> SiteConfig:
        """Return the requested site or fall back to the configured default."""
        if site_slug is None:
            return self._get_default_site()
        try:
            return self.sites[site_slug]
        except KeyError as exc:
            available = ", ".join(sorted(self.sites))
            msg = f"Unknown site '{site_slug}'. Known sites: {available}"
            raise SiteConfigError(msg) from exc

    def select_sites(self, site_slug: str | None) -> list[SiteConfig]:
        """Return the named site, or every site when ``site_slug`` is ``None``."""
        if site_slug is None:
            return list(self.sites.values())
        return [self.get_site(site_slug)]

    def get_niche(self, niche_slug: str) -> NicheConfig:
        """Return the named niche or raise :class:`SiteConfigError`."""
        try:
            return self.niches[niche_slug]
        except KeyError as exc:
            available = ", ".join(sorted(self.niches))
            msg = f"Unknown niche '{niche_slug}'. Known niches: {available}"
            raise SiteConfigError(msg) from exc

    def _get_default_site(self) -> SiteConfig:
        if self.default_site and self.default_site in self.sites:
            return self.sites[self.default_site]
        if not self.sites:  # pragma: no cover - loader rejects empty configs
            msg = "No sites configured."
            raise SiteConfigError(msg)
        return next(iter(self.sites.values()))


__all__ = [
    "ArticleConfig",
    "FAQEntry",
    "NicheConfig",
    "PagesConfig",
    "SiteConfig",
    "SiteConfigError",
    "ThemeConfig",
]
