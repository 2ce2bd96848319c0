"""Tests for canonical URLs and JSON-LD payloads."""

from __future__ import annotations

import datetime as dt

import msgspec

from affiliate_pages.catalog import Catalog, ProductCardData
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


def test_canonical_url_normalises_slashes() -> None:
    """Trailing and missing slashes are normalised."""
    assert build_canonical_url("shop.example.com/", "/p/x") == "https://shop.example.com/p/x"
    assert build_canonical_url("shop.example.com", "p/x") == "https://shop.example.com/p/x"


def test_schema_type_mapping() -> None:
    """Article types map onto their schema types."""
    assert schema_type_for("review") == "Review"
    assert schema_type_for("HOW-TO") == "HowTo"
    assert schema_type_for("roundup") == "ItemList"
    assert schema_type_for("comparison") == "ItemList"
    assert schema_type_for("buying_guide") == "Article"
    assert schema_type_for(None) == "Article"


def test_review_payload_includes_item_and_rating() -> None:
    """Reviews describe the reviewed product and its rating."""
    item = ProductCardData(id="1", slug="x", title="X Phone", rating=4.5)
    payload = article_json_ld(
        schema_type="Review",
        headline="X Phone review",
        url="https://t.example.com/a/x",
        publisher="TechFlow",
        author="Sam",
        date_published=dt.datetime(2024, 1, 15, tzinfo=dt.UTC),
        reviewed_item=item,
    )
    assert payload["@type"] == "Review"
    assert payload["itemReviewed"] == {"@type": "Product", "name": "X Phone"}
    assert payload["reviewRating"]["ratingValue"] == 4.5
    assert payload["author"] == {"@type": "Person", "name": "Sam"}
    assert payload["datePublished"] == "2024-01-15T00:00:00+00:00"
    assert "description" not in payload


def test_item_list_numbers_entries() -> None:
    """Roundups list their products with positions."""
    payload = article_json_ld(
        schema_type="ItemList",
        headline="Best mice",
        url="https://t.example.com/a/best",
        publisher="TechFlow",
        items=[ListedItem("A", "https://t/a"), ListedItem("B", "https://t/b")],
    )
    assert payload["numberOfItems"] == 2
    assert [entry["position"] for entry in payload["itemListElement"]] == [1, 2]


def test_item_list_without_items_falls_back_to_article() -> None:
    """An empty roundup is described as a plain article."""
    payload = article_json_ld(
        schema_type="ItemList", headline="Empty", url="https://t/e", publisher="T"
    )
    assert payload["@type"] == "Article"


def test_breadcrumb_and_faq_payloads() -> None:
    """Breadcrumbs and FAQs are emitted only when non-empty."""
    crumbs = breadcrumb_json_ld([("Home", "https://t/"), ("Mice", "https://t/mice")])
    assert crumbs is not None
    assert crumbs["itemListElement"][1] == {
        "@type": "ListItem",
        "position": 2,
        "name": "Mice",
        "item": "https://t/mice",
    }
    assert breadcrumb_json_ld([]) is None
    faq = faq_json_ld([("Why?", "Because.")])
    assert faq is not None
    assert faq["mainEntity"][0]["acceptedAnswer"]["text"] == "Because."
    assert faq_json_ld([]) is None


def test_product_payload(catalog: Catalog) -> None:
    """Products carry offers and aggregate ratings when known."""
    record = catalog.get_product("acme-widget")
    assert record is not None
    payload = product_json_ld(record, "https://t/p/acme-widget")
    assert payload["offers"]["price"] == 49.5
    assert payload["offers"]["url"] == "https://amazon.example.com/acme"
    assert payload["aggregateRating"]["ratingValue"] == 4.6
    bare = catalog.get_product("zen-board")
    assert bare is not None
    assert "offers" not in product_json_ld(bare, "https://t/p/zen-board")


def test_dump_json_ld_escapes_script_terminators() -> None:
    """Serialised payloads cannot close their ``<script>`` element."""
    dumped = dump_json_ld({"name": "</script><b>"})
    assert "</" not in dumped
    assert msgspec.json.decode(dumped) == {"name": "</script><b>"}
