"""Canonical URLs and Schema.org JSON-LD payloads for generated pages."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import msgspec

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from affiliate_pages.catalog import ProductCardData, ProductRecord

SCHEMA_CONTEXT = "https://schema.org"

SchemaType = typ.Literal["Article", "Review", "HowTo", "ItemList"]
JsonLd = dict[str, typ.Any]

_JSON_ENCODER = msgspec.json.Encoder()


@dc.dataclass(frozen=True, slots=True)
class ListedItem:
    """Product entry in an ``ItemList`` payload."""

    name: str
    url: str
    image: str | None = None
    description: str | None = None


def build_canonical_url(domain: str | None, path: str = "") -> str:
    """Return the ``https`` URL for ``path`` on ``domain``.

    Examples
    --------
    >>> build_canonical_url("techflow.com/", "products/sony")
    'https://techflow.com/products/sony'
    >>> build_canonical_url(None)
    'https://example.com/'
    """
    host = (domain or "example.com").rstrip("/")
    normalized = path if path.startswith("/") else f"/{path}"
    return f"https://{host}{normalized}"


def schema_type_for(article_type: str | None) -> SchemaType:
    """Map an article type onto the JSON-LD schema used to describe it."""
    match (article_type or "").strip().lower().replace("-", "_"):
        case "review":
            return "Review"
        case "how_to" | "howto":
            return "HowTo"
        case "roundup" | "comparison":
            return "ItemList"
        case _:
            return "Article"


def _isoformat(value: dt.date | dt.datetime | str | None) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return value.isoformat()


def _compact(payload: JsonLd) -> JsonLd:
    """Drop keys whose value is ``None`` or empty."""
    return {key: value for key, value in payload.items() if value not in (None, "", [], {})}


def _rating(value: float, *, kind: str) -> JsonLd:
    return {"@type": kind, "ratingValue": value, "bestRating": 5, "worstRating": 1}


def article_json_ld(  # noqa: PLR0913 - mirrors the schema's optional properties
    *,
    headline: str,
    url: str,
    publisher: str,
    schema_type: SchemaType = "Article",
    description: str | None = None,
    image: str | None = None,
    author: str | None = None,
    date_published: dt.date | dt.datetime | str | None = None,
    date_modified: dt.date | dt.datetime | str | None = None,
    reviewed_item: ProductCardData | None = None,
    items: cabc.Sequence[ListedItem] = (),
) -> JsonLd:
    """Return the JSON-LD payload describing an article page.

    ``ItemList`` falls back to ``Article`` when ``items`` is empty; reviews
    carry ``itemReviewed`` and a ``reviewRating`` from ``reviewed_item``.
    """
    author_obj = {"@type": "Person", "name": author} if author else None
    publisher_obj = {"@type": "Organization", "name": publisher}
    published = _isoformat(date_published)
    modified = _isoformat(date_modified)

    if schema_type == "ItemList" and items:
        return _compact(
            {
                "@context": SCHEMA_CONTEXT,
                "@type": "ItemList",
                "name": headline,
                "description": description,
                "numberOfItems": len(items),
                "itemListElement": [
                    _compact(
                        {
                            "@type": "ListItem",
                            "position": position,
                            "name": item.name,
                            "url": item.url,
                            "image": item.image,
                            "description": item.description,
                        }
                    )
                    for position, item in enumerate(items, start=1)
                ],
            }
        )

    if schema_type == "HowTo":
        return _compact(
            {
                "@context": SCHEMA_CONTEXT,
                "@type": "HowTo",
                "name": headline,
                "description": description,
                "image": image,
                "author": author_obj,
                "datePublished": published,
                "dateModified": modified,
            }
        )

    payload: JsonLd = {
        "@context": SCHEMA_CONTEXT,
        "@type": "Review" if schema_type == "Review" else "Article",
        "headline": headline,
        "url": url,
        "description": description,
        "image": image,
        "author": author_obj,
        "publisher": publisher_obj,
        "datePublished": published,
        "dateModified": modified,
    }
    if schema_type == "Review" and reviewed_item is not None:
        payload["itemReviewed"] = _compact(
            {
                "@type": "Product",
                "name": reviewed_item.title,
                "description": reviewed_item.excerpt,
                "image": reviewed_item.featured_image,
            }
        )
        if reviewed_item.rating is not None:
            payload["reviewRating"] = _rating(reviewed_item.rating, kind="Rating")
    return _compact(payload)


def breadcrumb_json_ld(items: cabc.Sequence[tuple[str, str]]) -> JsonLd | None:
    """Return a ``BreadcrumbList`` for ``(name, url)`` pairs, or ``None`` if empty."""
    if not items:
        return None
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "BreadcrumbList",
        "itemListElement": [
            {"@type": "ListItem", "position": position, "name": name, "item": url}
            for position, (name, url) in enumerate(items, start=1)
        ],
    }


def faq_json_ld(faqs: cabc.Sequence[tuple[str, str]]) -> JsonLd | None:
    """Return an ``FAQPage`` for ``(question, answer)`` pairs, or ``None`` if empty."""
    if not faqs:
        return None
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "FAQPage",
        "mainEntity": [
            {
                "@type": "Question",
                "name": question,
                "acceptedAnswer": {"@type": "Answer", "text": answer},
            }
            for question, answer in faqs
        ],
    }


def product_json_ld(product: ProductRecord, url: str) -> JsonLd:
    """Return the ``Product`` payload with offers and rating when known."""
    offers = None
    if product.price_from is not None:
        offers = _compact(
            {
                "@type": "Offer",
                "price": product.price_from,
                "priceCurrency": product.price_currency or "USD",
                "availability": "https://schema.org/InStock",
                "itemCondition": "https://schema.org/NewCondition",
                "url": product.primary_affiliate_url,
            }
        )
    rating = None
    if product.rating is not None:
        rating = _rating(product.rating, kind="AggregateRating")
    return _compact(
        {
            "@context": SCHEMA_CONTEXT,
            "@type": "Product",
            "name": product.title,
            "url": url,
            "description": product.excerpt,
            "image": [product.featured_image] if product.featured_image else None,
            "sku": product.id,
            "aggregateRating": rating,
            "offers": offers,
        }
    )


def dump_json_ld(payload: JsonLd) -> str:
    """Serialise ``payload`` for embedding in a ``<script>`` element.

    Examples
    --------
    >>> dump_json_ld({"name": "</script>"})
    '{"name":"<\\\\/script>"}'
    """
    return _JSON_ENCODER.encode(payload).decode("utf-8").replace("</", "<\\/")


__all__ = [
    "SCHEMA_CONTEXT",
    "ListedItem",
    "SchemaType",
    "article_json_ld",
    "breadcrumb_json_ld",
    "build_canonical_url",
    "dump_json_ld",
    "faq_json_ld",
    "product_json_ld",
    "schema_type_for",
]
