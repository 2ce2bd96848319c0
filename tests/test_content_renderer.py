"""Tests for shortcode resolution and auto-linking in ``ContentRenderer``."""

from __future__ import annotations

import logging
import typing as typ

import pytest
from bs4 import BeautifulSoup

from affiliate_pages.catalog import Catalog, ProductCardData
from affiliate_pages.content import ContentRenderer, extract_shortcode_references

if typ.TYPE_CHECKING:
    from affiliate_pages.content import RenderedContent

SITE = "techflow"


@pytest.fixture(scope="module")
def renderer() -> ContentRenderer:
    """Return a renderer using the packaged widget templates."""
    return ContentRenderer()


def _render(
    renderer: ContentRenderer,
    catalog: Catalog,
    content: str,
    *,
    enable_auto_link: bool = True,
) -> RenderedContent:
    refs = extract_shortcode_references(content)
    return renderer.render(
        content,
        SITE,
        catalog.get_products_by_slugs(refs.product_slugs),
        catalog.get_category_products(refs.category_slugs),
        catalog.linkable_products(),
        catalog.linkable_categories(),
        enable_auto_link=enable_auto_link,
    )


def test_content_without_shortcodes_is_unchanged(
    renderer: ContentRenderer, catalog: Catalog
) -> None:
    """Plain content passes through when nothing is linkable."""
    content = "<p>Nothing to see here.</p><ul><li>One</li></ul>"
    rendered = _render(renderer, catalog, content)
    assert rendered.html == content
    assert rendered.unresolved == []
    assert renderer.render("", SITE, {}, {}).html == ""


def test_featured_product_card_with_literal_text(
    renderer: ContentRenderer,
) -> None:
    """The card renders and its own title is never auto-linked."""
    widget = ProductCardData(id="1", slug="acme-widget", title="Acme Widget")
    rendered = renderer.render(
        "[product:acme-widget,featured] Buy it at Acme.",
        SITE,
        {"acme-widget": widget},
        {},
        [widget],
    )
    soup = BeautifulSoup(rendered.html, "html.parser")
    cards = soup.select(".inline-product-featured")
    assert len(cards) == 1, "expected exactly one featured card"
    assert cards[0]["data-product-slug"] == "acme-widget"
    assert soup.select("a.auto-link") == [], "card title must not be auto-linked"
    assert rendered.html.endswith(" Buy it at Acme.")


def test_missing_product_renders_nothing(
    renderer: ContentRenderer, catalog: Catalog, caplog: pytest.LogCaptureFixture
) -> None:
    """Dangling product shortcodes vanish and are reported."""
    with caplog.at_level(logging.DEBUG, logger="affiliate_pages.content.renderer"):
        rendered = _render(renderer, catalog, "<p>Before</p>[product:ghost]<p>After</p>")
    assert rendered.html == "<p>Before</p><p>After</p>"
    assert [item.missing for item in rendered.unresolved] == [("ghost",)]
    assert "ghost" in caplog.text


def test_comparison_drops_unknown_slugs(
    renderer: ContentRenderer, catalog: Catalog
) -> None:
    """A comparison renders only the products that resolve, in order."""
    rendered = _render(
        renderer, catalog, "[comparison:acme-widget,ghost,orbit-mouse]"
    )
    soup = BeautifulSoup(rendered.html, "html.parser")
    headers = soup.select("thead th[data-product-slug]")
    assert [th["data-product-slug"] for th in headers] == ["acme-widget", "orbit-mouse"]
    winner = soup.select_one(".badge-winner")
    assert winner is not None
    assert winner.find_parent("th")["data-product-slug"] == "acme-widget"
    assert rendered.unresolved[0].missing == ("ghost",)


def test_comparison_without_survivors_renders_nothing(
    renderer: ContentRenderer, catalog: Catalog
) -> None:
    """Zero resolvable products produce no widget."""
    rendered = _render(renderer, catalog, "<p>x</p>[comparison:ghost,phantom]")
    assert rendered.html == "<p>x</p>"


def test_products_grid_respects_limit_and_order(
    renderer: ContentRenderer, catalog: Catalog
) -> None:
    """Category grids keep catalog order and stop at the limit."""
    rendered = _render(renderer, catalog, "[products:mice,2]")
    soup = BeautifulSoup(rendered.html, "html.parser")
    grid = soup.select_one(".inline-product-grid")
    assert grid is not None
    assert grid["data-product-count"] == "2"
    slugs = [card["data-product-slug"] for card in grid.select(".inline-product")]
    assert slugs == ["acme-widget", "orbit-mouse"]


def test_unknown_category_renders_nothing(
    renderer: ContentRenderer, catalog: Catalog
) -> None:
    """Grids for unknown categories are omitted."""
    rendered = _render(renderer, catalog, "A [products:ghosts] B")
    assert rendered.html == "A  B"
    assert rendered.unresolved[0].missing == ("ghosts",)


def test_lone_shortcode_replaces_its_paragraph(
    renderer: ContentRenderer, catalog: Catalog
) -> None:
    """Block widgets never end up nested inside ``<p>``."""
    rendered = _render(renderer, catalog, "<p>\n[product:orbit-mouse]\n</p><p>Tail</p>")
    assert rendered.html.startswith('<div class="not-prose inline-product')
    assert rendered.html.endswith("</div><p>Tail</p>")


def test_auto_links_skip_shortcodes_and_link_first_mention(
    renderer: ContentRenderer, catalog: Catalog
) -> None:
    """Names inside shortcodes are untouched and prose mentions link once."""
    content = (
        "<h2>Orbit Mouse review</h2>"
        "<p>The Orbit Mouse is fine. Orbit Mouse again. See Gaming Mice.</p>"
        "[product:orbit-mouse]"
    )
    rendered = _render(renderer, catalog, content)
    soup = BeautifulSoup(rendered.html, "html.parser")
    links = soup.select("a.auto-link")
    assert [link["href"] for link in links] == [
        "/techflow/products/orbit-mouse",
        "/techflow/categories/mice",
    ]
    assert soup.h2.get_text() == "Orbit Mouse review"
    assert soup.h2["id"] == "orbit-mouse-review"


def test_auto_link_can_be_disabled(
    renderer: ContentRenderer, catalog: Catalog
) -> None:
    """Disabling auto-linking leaves prose untouched."""
    rendered = _render(
        renderer, catalog, "<p>The Orbit Mouse is fine.</p>", enable_auto_link=False
    )
    assert rendered.html == "<p>The Orbit Mouse is fine.</p>"


def test_headings_and_references_are_reported(
    renderer: ContentRenderer, catalog: Catalog
) -> None:
    """The result carries the table of contents and source references."""
    rendered = _render(
        renderer, catalog, "<h2>Top</h2><h3>Top</h3>[comparison:acme-widget,zen-board]"
    )
    assert [(h.id, h.level) for h in rendered.headings] == [("top", 2), ("top-1", 3)]
    assert rendered.references.product_slugs == ("acme-widget", "zen-board")
