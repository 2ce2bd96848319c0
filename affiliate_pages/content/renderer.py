"""Resolve shortcodes and auto-links in article content.

:class:`ContentRenderer` is the orchestrator of the content pipeline. Given the
raw article HTML and catalog data that the caller fetched up front (see
:func:`~affiliate_pages.content.shortcodes.extract_shortcode_references`), it
replaces every shortcode with its widget and links the first plain-text
mention of each known product or category, in one left-to-right splice over
the source.

The stored content is never modified; rendering happens at read time, so new
widget styles need no data migration. Content problems (unknown slugs,
malformed directives, degenerate comparisons) never raise: the affected
shortcode renders less, and the rest of the article renders around it.

Example
-------
>>> from affiliate_pages.catalog import ProductCardData
>>> from affiliate_pages.content import ContentRenderer
>>> widget = ProductCardData(id="1", slug="acme-widget", title="Acme Widget")
>>> rendered = ContentRenderer().render(
...     "[product:acme-widget,featured] Buy it at Acme.",
...     "techflow",
...     products={"acme-widget": widget},
...     category_products={},
... )  # doctest: +SKIP
>>> "inline-product-featured" in rendered.html  # doctest: +SKIP
True
"""

from __future__ import annotations

import dataclasses as dc
import logging
import re
import typing as typ

from .autolink import AutoLinker, Region, category_to_linkable, product_to_linkable
from .headings import add_heading_ids, extract_headings
from .models import RenderedContent, UnresolvedShortcode
from .shortcodes import (
    ComparisonParams,
    ProductParams,
    ProductsParams,
    ShortcodeReferences,
    ShortcodeToken,
    extract_shortcode_references,
    find_shortcodes,
)
from .widgets import WidgetRenderer

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from affiliate_pages.catalog import ProductCardData

logger = logging.getLogger(__name__)

PARAGRAPH_OPEN_PATTERN = re.compile(r"<p(?:\s[^>]*)?>\s*$", re.IGNORECASE)
PARAGRAPH_CLOSE_PATTERN = re.compile(r"\s*</p\s*>", re.IGNORECASE)
_PARAGRAPH_LOOKBEHIND = 256


@dc.dataclass(frozen=True, slots=True)
class _Splice:
    start: int
    end: int
    replacement: str


class ContentRenderer:
    """Render article content against pre-fetched catalog data."""

    def __init__(self, widgets: WidgetRenderer | None = None) -> None:
        """Initialize the renderer.

        Parameters
        ----------
        widgets : WidgetRenderer, optional
            Widget renderer used for shortcode output; a default instance using
            the package templates is created when omitted.
        """
        self.widgets = widgets or WidgetRenderer()

    def render(
        self,
        content: str,
        site_slug: str,
        products: cabc.Mapping[str, ProductCardData],
        category_products: cabc.Mapping[str, cabc.Sequence[ProductCardData]],
        all_products: cabc.Iterable[typ.Any] = (),
        all_categories: cabc.Iterable[typ.Any] = (),
        *,
        enable_auto_link: bool = True,
        anchor_headings: bool = True,
    ) -> RenderedContent:
        """Render ``content`` into HTML with shortcodes and auto-links resolved.

        Parameters
        ----------
        content : str
            Raw article HTML containing ``[type:params]`` shortcodes.
        site_slug : str
            Site whose product and category URLs are generated.
        products : Mapping[str, ProductCardData]
            Products fetched for the content's shortcodes, keyed by slug.
        category_products : Mapping[str, Sequence[ProductCardData]]
            Products per referenced category slug, in catalog order.
        all_products : Iterable, optional
            Objects with ``slug`` and ``title`` whose names are auto-linked.
        all_categories : Iterable, optional
            Objects with ``slug`` and ``name`` whose names are auto-linked.
        enable_auto_link : bool, optional
            Link the first mention of each product/category name. Defaults to
            ``True``.
        anchor_headings : bool, optional
            Inject generated ids into headings that lack one. Defaults to
            ``True``.

        Returns
        -------
        RenderedContent
            Rendered HTML, table of contents, references, and the shortcodes
            that degraded because their targets were missing.
        """
        if not content:
            return RenderedContent(html="", headings=[], references=ShortcodeReferences())

        source = add_heading_ids(content) if anchor_headings else content
        tokens = find_shortcodes(source)
        spans = [self._block_span(source, token) for token in tokens]

        splices: list[_Splice] = []
        unresolved: list[UnresolvedShortcode] = []
        for token, (start, end) in zip(tokens, spans, strict=True):
            html, missing = self._render_token(
                token, site_slug, products, category_products
            )
            if missing:
                logger.debug(
                    "%s shortcode at %d could not resolve %s",
                    token.type.value,
                    token.start,
                    ", ".join(missing),
                )
                unresolved.append(UnresolvedShortcode(token=token, missing=missing))
            splices.append(_Splice(start, end, html))

        if enable_auto_link:
            items = [
                *(product_to_linkable(product) for product in all_products),
                *(category_to_linkable(category) for category in all_categories),
            ]
            if items:
                linker = AutoLinker(site_slug, items)
                shortcode_regions = [Region(start, end) for start, end in spans]
                splices.extend(
                    _Splice(link.start, link.end, link.markup(source[link.start : link.end]))
                    for link in linker.plan(source, shortcode_regions)
                )

        return RenderedContent(
            html=_apply_splices(source, splices),
            headings=extract_headings(source),
            references=extract_shortcode_references(source),
            unresolved=unresolved,
        )

    def _render_token(
        self,
        token: ShortcodeToken,
        site_slug: str,
        products: cabc.Mapping[str, ProductCardData],
        category_products: cabc.Mapping[str, cabc.Sequence[ProductCardData]],
    ) -> tuple[str, tuple[str, ...]]:
        """Return the widget HTML for ``token`` and any slugs it failed to resolve."""
        match token.params:
            case ProductParams(slug=slug, variant=variant):
                product = products.get(slug)
                if product is None:
                    return "", (slug,)
                return self.widgets.product_card(product, site_slug, variant), ()
            case ProductsParams(category_slug=slug, limit=limit):
                listed = list(category_products.get(slug) or ())
                if not listed:
                    return "", (slug,)
                return self.widgets.product_grid(listed[:limit], site_slug), ()
            case ComparisonParams(slugs=slugs):
                resolved = [products[slug] for slug in slugs if slug in products]
                missing = tuple(slug for slug in slugs if slug and slug not in products)
                return self.widgets.comparison(resolved, site_slug), missing
            case _:  # pragma: no cover - closed set of parameter types
                return "", ()

    @staticmethod
    def _block_span(source: str, token: ShortcodeToken) -> tuple[int, int]:
        """Widen ``token`` to its enclosing ``<p>`` when it is the paragraph's only content."""
        window = max(0, token.start - _PARAGRAPH_LOOKBEHIND)
        opening = PARAGRAPH_OPEN_PATTERN.search(source, window, token.start)
        closing = PARAGRAPH_CLOSE_PATTERN.match(source, token.end)
        if opening and closing:
            return opening.start(), closing.end()
        return token.start, token.end


def _apply_splices(source: str, splices: cabc.Iterable[_Splice]) -> str:
    pieces: list[str] = []
    cursor = 0
    for splice in sorted(splices, key=lambda item: item.start):
        pieces.append(source[cursor : splice.start])
        pieces.append(splice.replacement)
        cursor = splice.end
    pieces.append(source[cursor:])
    return "".join(pieces)


__all__ = ["ContentRenderer"]
