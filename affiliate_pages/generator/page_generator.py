"""High-level orchestration for affiliate site page generation.

This module turns one configured site into static HTML. Article pages read
their Markdown or HTML source, batch-fetch the catalog data their shortcodes
reference, and render through :class:`~affiliate_pages.content.ContentRenderer`.
Product pages resolve the niche layout, drop sections the product cannot fill,
and render the rest through the section registry. :func:`generate_site` runs
both and records the written files in a metadata JSON file.

Example
-------
>>> from pathlib import Path
>>> from affiliate_pages.config import load_pages_config
>>> from affiliate_pages.generator import generate_site
>>> config = load_pages_config(Path("config/pages.yaml"))  # doctest: +SKIP
>>> generate_site(config.get_site("techflow"))  # doctest: +SKIP
[PosixPath('public/techflow/articles/best-mice.html'), ...]
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import logging
import typing as typ

import msgspec

from affiliate_pages._constants import (
    CATEGORY_URL_TEMPLATE,
    PRODUCT_URL_TEMPLATE,
    SITE_META_TEMPLATE,
)
from affiliate_pages.catalog import Catalog, ProductCardData, load_catalog
from affiliate_pages.content import (
    ContentRenderer,
    RenderedContent,
    ShortcodeReferences,
    WidgetRenderer,
    extract_shortcode_references,
)
from affiliate_pages.fetch import read_text_source
from affiliate_pages.generator.models import (
    ArticleLink,
    BreadcrumbItem,
    ProductLink,
    ProductPageContext,
    RenderedSection,
    RenderedZone,
)
from affiliate_pages.generator.renderer import HtmlContentRenderer
from affiliate_pages.layouts import (
    SectionRegistry,
    build_default_registry,
    plan_sections,
    resolve_layout_config,
)
from affiliate_pages.seo import (
    ListedItem,
    article_json_ld,
    breadcrumb_json_ld,
    build_canonical_url,
    dump_json_ld,
    faq_json_ld,
    product_json_ld,
    schema_type_for,
)
from affiliate_pages.templating import build_environment

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from jinja2 import Environment

    from affiliate_pages.config import ArticleConfig, SiteConfig
    from affiliate_pages.seo import JsonLd

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class RenderedArticle:
    """An article page ready to be written to disk."""

    article: ArticleConfig
    content: RenderedContent
    html: str
    path: Path

    @property
    def references(self) -> ShortcodeReferences:
        """Return the shortcode references found in the article source."""
        return self.content.references


class ArticlePageGenerator:
    """Render configured article sources into themed HTML pages."""

    def __init__(
        self,
        site: SiteConfig,
        catalog: Catalog,
        *,
        env: Environment | None = None,
        content_renderer: ContentRenderer | None = None,
        output_dir: Path | None = None,
    ) -> None:
        """Initialize the generator with site configuration and catalog data.

        Parameters
        ----------
        site : SiteConfig
            Site whose articles are rendered.
        catalog : Catalog
            Catalog the article shortcodes resolve against.
        env : Environment, optional
            Jinja environment; defaults to the package templates.
        content_renderer : ContentRenderer, optional
            Shortcode and auto-link renderer sharing ``env``.
        output_dir : Path, optional
            Override for the site output root; defaults to the site config.
        """
        self.site = site
        self.catalog = catalog
        self.env = env or build_environment()
        self.content_renderer = content_renderer or ContentRenderer(
            WidgetRenderer(env=self.env)
        )
        self.markdown = HtmlContentRenderer(site.pygments_style)
        self.output_dir = output_dir or site.output_dir
        self.template = self.env.get_template("article_page.jinja")

    def render(self, article: ArticleConfig, source_text: str | None = None) -> RenderedArticle:
        """Render a single article; ``source_text`` skips reading the source."""
        text = source_text if source_text is not None else read_text_source(article.source)
        body = self.markdown.render_source(text, article.source)

        references = extract_shortcode_references(body)
        products = self.catalog.get_products_by_slugs(references.product_slugs)
        category_products = self.catalog.get_category_products(references.category_slugs)
        content = self.content_renderer.render(
            body,
            self.site.slug,
            products,
            category_products,
            self.catalog.linkable_products(),
            self.catalog.linkable_categories(),
            enable_auto_link=article.enable_auto_link,
        )
        for unresolved in content.unresolved:
            logger.debug(
                "article %s: %s shortcode references missing %s",
                article.slug,
                unresolved.token.type.value,
                ", ".join(unresolved.missing),
            )

        page_url = self.site.article_url(article.slug)
        breadcrumb = [
            BreadcrumbItem(self.site.name, f"/{self.site.slug}"),
            BreadcrumbItem(article.title),
        ]
        json_ld = self._json_ld(article, page_url, breadcrumb, products)
        html = self.template.render(
            site=self.site,
            article=article,
            content=content,
            breadcrumb=breadcrumb,
            canonical_url=build_canonical_url(self.site.domain, page_url),
            json_ld=json_ld,
            stylesheet=self.markdown.stylesheet,
            generated_at=dt.datetime.now(dt.UTC),
        )
        path = self.output_dir / self.site.slug / self.site.content_slug / f"{article.slug}.html"
        return RenderedArticle(article=article, content=content, html=html, path=path)

    def run(self) -> list[RenderedArticle]:
        """Render and write every configured article.

        Returns
        -------
        list[RenderedArticle]
            Rendered articles in configuration order.
        """
        rendered: list[RenderedArticle] = []
        for article in self.site.articles.values():
            page = self.render(article)
            _write(page.path, page.html)
            rendered.append(page)
        return rendered

    def _json_ld(
        self,
        article: ArticleConfig,
        page_url: str,
        breadcrumb: cabc.Sequence[BreadcrumbItem],
        products: cabc.Mapping[str, ProductCardData],
    ) -> list[str]:
        schema_type = schema_type_for(article.article_type)
        cards = list(products.values())
        payloads: list[JsonLd | None] = [
            article_json_ld(
                schema_type=schema_type,
                headline=article.title,
                url=build_canonical_url(self.site.domain, page_url),
                publisher=self.site.name,
                description=article.excerpt,
                image=article.featured_image,
                author=article.author,
                date_published=article.published_at,
                date_modified=article.updated_at,
                reviewed_item=cards[0] if cards else None,
                items=[
                    ListedItem(
                        name=card.title,
                        url=self._absolute(PRODUCT_URL_TEMPLATE, card.slug),
                        image=card.featured_image,
                        description=card.excerpt,
                    )
                    for card in cards
                ],
            ),
            _breadcrumb_payload(self.site.domain, breadcrumb, page_url),
            faq_json_ld([(faq.question, faq.answer) for faq in article.faqs]),
        ]
        return [dump_json_ld(payload) for payload in payloads if payload]

    def _absolute(self, template: str, slug: str) -> str:
        return build_canonical_url(
            self.site.domain, template.format(site=self.site.slug, slug=slug)
        )


class ProductPageGenerator:
    """Render one page per catalog product using the niche layout."""

    def __init__(  # noqa: PLR0913 - collaborators are injected for testing
        self,
        site: SiteConfig,
        catalog: Catalog,
        registry: SectionRegistry,
        *,
        articles: cabc.Sequence[RenderedArticle] = (),
        env: Environment | None = None,
        content_renderer: ContentRenderer | None = None,
        output_dir: Path | None = None,
    ) -> None:
        """Initialize the generator.

        Parameters
        ----------
        site : SiteConfig
            Site whose niche layout is used.
        catalog : Catalog
            Products to render.
        registry : SectionRegistry
            Section renderers available to the layout.
        articles : Sequence[RenderedArticle], optional
            Rendered articles used for the featured-articles section.
        env : Environment, optional
            Jinja environment; defaults to the package templates.
        content_renderer : ContentRenderer, optional
            Renderer used for product review bodies.
        output_dir : Path, optional
            Override for the site output root; defaults to the site config.
        """
        self.site = site
        self.catalog = catalog
        self.registry = registry
        self.articles = list(articles)
        self.env = env or build_environment()
        self.content_renderer = content_renderer or ContentRenderer(
            WidgetRenderer(env=self.env)
        )
        self.layout = resolve_layout_config(site.niche.layout)
        self.output_dir = output_dir or site.output_dir
        self.template = self.env.get_template("product_page.jinja")

    def build_context(self, slug: str) -> ProductPageContext:
        """Assemble the data every section template reads for ``slug``.

        Raises
        ------
        KeyError
            If ``slug`` is not in the catalog.
        """
        record = self.catalog.get_product(slug)
        if record is None:
            msg = f"Unknown product '{slug}'."
            raise KeyError(msg)
        product_url = PRODUCT_URL_TEMPLATE.format(site=self.site.slug, slug=slug)
        category = self.catalog.primary_category(slug)

        breadcrumb = [BreadcrumbItem(self.site.name, f"/{self.site.slug}")]
        if category is not None:
            breadcrumb.append(
                BreadcrumbItem(
                    category.name,
                    CATEGORY_URL_TEMPLATE.format(site=self.site.slug, slug=category.slug),
                )
            )
        breadcrumb.append(BreadcrumbItem(record.title))

        return ProductPageContext(
            site=self.site,
            product=record,
            card=ProductCardData.from_record(record),
            product_url=product_url,
            breadcrumb=breadcrumb,
            primary_category=category,
            review=self._render_review(record.content),
            featured_articles=self._featured_articles(slug),
            related_products=[
                ProductLink(
                    product=card,
                    url=PRODUCT_URL_TEMPLATE.format(site=self.site.slug, slug=card.slug),
                )
                for card in self.catalog.related_products(slug)
            ],
        )

    def render_zones(self, context: ProductPageContext) -> list[RenderedZone]:
        """Render the sections that apply to ``context.product``."""
        zones: list[RenderedZone] = []
        for zone in plan_sections(self.layout, self.registry, context.metadata):
            sections = [
                RenderedSection(section.id, section.renderer(context, section.props))
                for section in zone.sections
            ]
            zones.append(RenderedZone(zone.id, sections))
        return zones

    def render(self, slug: str) -> tuple[Path, str]:
        """Return the output path and HTML for the product ``slug``."""
        context = self.build_context(slug)
        zones = self.render_zones(context)
        canonical_url = build_canonical_url(self.site.domain, context.product_url)
        json_ld = [
            dump_json_ld(payload)
            for payload in (
                product_json_ld(context.product, canonical_url),
                _breadcrumb_payload(self.site.domain, context.breadcrumb, context.product_url),
            )
            if payload
        ]
        html = self.template.render(
            site=self.site,
            ctx=context,
            zones={zone.id: zone for zone in zones},
            options=self.layout.options,
            canonical_url=canonical_url,
            json_ld=json_ld,
            generated_at=dt.datetime.now(dt.UTC),
        )
        return self.output_dir / self.site.slug / "products" / f"{slug}.html", html

    def run(self) -> list[Path]:
        """Render and write a page for every catalog product."""
        written: list[Path] = []
        for record in self.catalog.products():
            path, html = self.render(record.slug)
            _write(path, html)
            written.append(path)
        return written

    def _render_review(self, body: str | None) -> RenderedContent | None:
        if not body:
            return None
        references = extract_shortcode_references(body)
        return self.content_renderer.render(
            body,
            self.site.slug,
            self.catalog.get_products_by_slugs(references.product_slugs),
            self.catalog.get_category_products(references.category_slugs),
            self.catalog.linkable_products(),
            self.catalog.linkable_categories(),
        )

    def _featured_articles(self, slug: str) -> list[ArticleLink]:
        return [
            ArticleLink(
                title=page.article.title,
                url=self.site.article_url(page.article.slug),
                excerpt=page.article.excerpt,
            )
            for page in self.articles
            if slug in page.references.product_slugs
        ]


class SiteMetadata(msgspec.Struct, frozen=True, rename="camel"):
    """Summary of one generation run, written beside the site output."""

    site: str
    generated_at: dt.datetime
    articles: list[str]
    products: list[str]


def generate_site(
    site: SiteConfig,
    *,
    catalog: Catalog | None = None,
    registry: SectionRegistry | None = None,
    output_dir: Path | None = None,
) -> list[Path]:
    """Write every article and product page for ``site``.

    Parameters
    ----------
    site : SiteConfig
        Site to generate.
    catalog : Catalog, optional
        Pre-loaded catalog; loaded from ``site.catalog`` when omitted.
    registry : SectionRegistry, optional
        Section registry; :func:`build_default_registry` when omitted.
    output_dir : Path, optional
        Override for the output root.

    Returns
    -------
    list[Path]
        Written pages, articles first.
    """
    env = build_environment()
    catalog = catalog or load_catalog(site.catalog)
    if registry is None:
        registry = build_default_registry(env=env)
    content_renderer = ContentRenderer(WidgetRenderer(env=env))
    root = output_dir or site.output_dir

    articles = ArticlePageGenerator(
        site, catalog, env=env, content_renderer=content_renderer, output_dir=root
    ).run()
    product_paths = ProductPageGenerator(
        site,
        catalog,
        registry,
        articles=articles,
        env=env,
        content_renderer=content_renderer,
        output_dir=root,
    ).run()

    article_paths = [page.path for page in articles]
    site_dir = root / site.slug
    metadata = SiteMetadata(
        site=site.slug,
        generated_at=dt.datetime.now(dt.UTC),
        articles=[path.relative_to(site_dir).as_posix() for path in article_paths],
        products=[path.relative_to(site_dir).as_posix() for path in product_paths],
    )
    site_dir.mkdir(parents=True, exist_ok=True)
    meta_path = site_dir / SITE_META_TEMPLATE.format(site=site.slug)
    meta_path.write_bytes(msgspec.json.encode(metadata))
    logger.info(
        "generated %d article and %d product pages for %s",
        len(article_paths),
        len(product_paths),
        site.slug,
    )
    return [*article_paths, *product_paths]


def _breadcrumb_payload(
    domain: str, breadcrumb: cabc.Sequence[BreadcrumbItem], page_url: str
) -> JsonLd | None:
    return breadcrumb_json_ld(
        [
            (item.name, build_canonical_url(domain, item.url or page_url))
            for item in breadcrumb
        ]
    )


def _write(path: Path, html: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html, encoding="utf-8")
    logger.debug("wrote %s", path)


__all__ = [
    "ArticlePageGenerator",
    "ProductPageGenerator",
    "RenderedArticle",
    "SiteMetadata",
    "generate_site",
]
