"""Unit tests for first-mention auto-linking."""

from __future__ import annotations

from affiliate_pages.content.autolink import (
    AutoLinker,
    LinkableItem,
    Region,
    count_auto_links,
    find_protected_regions,
    remove_auto_links,
)

ACME = LinkableItem(slug="acme-widget", name="Acme Widget", kind="product")
MICE = LinkableItem(slug="mice", name="Gaming Mice", kind="category")


def test_links_only_the_first_mention() -> None:
    """A name repeated five times is linked exactly once."""
    source = "<p>" + " ".join(["Acme Widget"] * 5) + "</p>"
    linked = AutoLinker("techflow", [ACME]).link(source)
    assert count_auto_links(linked) == 1
    assert linked.startswith(
        '<p><a href="/techflow/products/acme-widget" class="auto-link '
        'auto-link-product">Acme Widget</a> Acme Widget'
    )


def test_categories_link_to_category_pages() -> None:
    """Category links use the category URL and class."""
    linked = AutoLinker("techflow", [MICE]).link("<p>Best Gaming Mice today</p>")
    assert (
        '<a href="/techflow/categories/mice" class="auto-link auto-link-category">'
        "Gaming Mice</a>"
    ) in linked


def test_markup_and_skipped_elements_are_never_linked() -> None:
    """Attributes, existing links, headings, and code stay untouched."""
    source = (
        '<img alt="Acme Widget">'
        '<a href="/x">Acme Widget</a>'
        "<h2>Acme Widget</h2>"
        "<code>Acme Widget</code>"
        "<!-- Acme Widget -->"
    )
    assert AutoLinker("techflow", [ACME]).link(source) == source


def test_first_plain_text_mention_after_protected_ones_is_linked() -> None:
    """Protected mentions do not use up the term's link budget."""
    source = "<h2>Acme Widget</h2><p>Try the Acme Widget.</p>"
    linked = AutoLinker("techflow", [ACME]).link(source)
    assert linked.startswith("<h2>Acme Widget</h2><p>Try the <a ")


def test_matches_respect_word_boundaries_and_case() -> None:
    """Partial words and different casing are not matched."""
    source = "<p>Acme Widgets and acme widget</p>"
    assert AutoLinker("techflow", [ACME]).link(source) == source


def test_longer_names_win_over_contained_names() -> None:
    """A short name never links inside a longer linked name."""
    pro = LinkableItem(slug="acme-widget-pro", name="Acme Widget Pro", kind="product")
    linked = AutoLinker("techflow", [ACME, pro]).link("<p>Acme Widget Pro beats Acme Widget</p>")
    assert linked.count("auto-link-product") == 2
    assert "/products/acme-widget-pro" in linked
    assert '">Acme Widget Pro</a>' in linked
    assert '">Acme Widget</a></p>' in linked


def test_extra_protected_regions_are_respected() -> None:
    """Caller-supplied spans are skipped."""
    source = "<p>Acme Widget, Acme Widget</p>"
    plan = AutoLinker("techflow", [ACME]).plan(source, [Region(3, 14)])
    assert [(link.start, link.end) for link in plan] == [(16, 27)]


def test_names_with_entities_match_escaped_text() -> None:
    """Names containing ``&`` match their escaped form in HTML."""
    item = LinkableItem(slug="b-and-q", name="B&Q Drill", kind="product")
    linked = AutoLinker("techflow", [item]).link("<p>The B&amp;Q Drill rocks</p>")
    assert ">B&amp;Q Drill</a>" in linked


def test_protected_regions_merge_overlaps() -> None:
    """Tags nested inside skipped elements merge into one region."""
    regions = find_protected_regions("<pre><b>x</b></pre> text")
    assert regions == [Region(0, 19)]


def test_remove_auto_links_round_trip() -> None:
    """Removing auto-links restores the original text."""
    source = "<p>Acme Widget rocks. <a href='/x'>Other</a></p>"
    linked = AutoLinker("techflow", [ACME]).link(source)
    assert count_auto_links(linked) == 1
    assert remove_auto_links(linked) == source


def test_character_references_are_never_split() -> None:
    """Names that spell an entity body leave the reference intact."""
    item = LinkableItem(slug="amp", name="amp", kind="product")
    source = "<p>Tom &amp; Jerry&nbsp;and amp</p>"
    linked = AutoLinker("s", [item]).link(source)
    assert linked.startswith("<p>Tom &amp; Jerry&nbsp;and <a ")
    assert linked.count("auto-link-product") == 1
    assert linked.endswith(">amp</a></p>")
