r"""Parse, build, and locate bracketed product shortcodes in article content.

Articles embed catalog widgets inline as ``[type:params]`` directives. Three
shapes exist and previously authored content depends on all of them:

* ``[product:<slug>]`` / ``[product:<slug>,<variant>]``
* ``[products:<category-slug>]`` / ``[products:<category-slug>,<limit>]``
* ``[comparison:<slug>,<slug>[,<slug>[,<slug>]]]``

This module owns the grammar. The editor uses :func:`build_shortcode_value`
and :func:`get_shortcode_label` to insert shortcodes, and the renderer uses
:func:`find_shortcodes` and :func:`extract_shortcode_references` to resolve
them against the catalog.

Example
-------
>>> from affiliate_pages.content.shortcodes import (
...     extract_shortcode_references,
...     parse_shortcode_value,
... )
>>> parsed = parse_shortcode_value("product:wireless-mouse,featured")
>>> parsed.params
ProductParams(slug='wireless-mouse', variant='featured')
>>> extract_shortcode_references("[products:mice] [comparison:a,b]")
ShortcodeReferences(product_slugs=('a', 'b'), category_slugs=('mice',))
"""

from __future__ import annotations

import dataclasses as dc
import enum
import html
import re
import typing as typ

from affiliate_pages._constants import (
    DEFAULT_PRODUCT_VARIANT,
    DEFAULT_PRODUCTS_LIMIT,
    PRODUCT_VARIANTS,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

SHORTCODE_PATTERN = re.compile(
    r"\[(product|products|comparison):([\w\s.,-]*)\]", re.IGNORECASE
)


class ShortcodeType(enum.StrEnum):
    """Closed set of shortcode kinds understood by the renderer."""

    PRODUCT = "product"
    PRODUCTS = "products"
    COMPARISON = "comparison"


@dc.dataclass(frozen=True, slots=True)
class ProductParams:
    """Single product card reference."""

    slug: str
    variant: str = DEFAULT_PRODUCT_VARIANT


@dc.dataclass(frozen=True, slots=True)
class ProductsParams:
    """Grid of products drawn from one category."""

    category_slug: str
    limit: int = DEFAULT_PRODUCTS_LIMIT


@dc.dataclass(frozen=True, slots=True)
class ComparisonParams:
    """Ordered product slugs compared side by side."""

    slugs: tuple[str, ...]


ShortcodeParams = ProductParams | ProductsParams | ComparisonParams


@dc.dataclass(frozen=True, slots=True)
class ParsedShortcode:
    """Shortcode kind paired with its typed parameters."""

    type: ShortcodeType
    params: ShortcodeParams


@dc.dataclass(frozen=True, slots=True)
class ShortcodeToken:
    """One shortcode occurrence located in a content string.

    Attributes
    ----------
    type : ShortcodeType
        Kind of shortcode.
    raw_params : str
        Parameter text exactly as authored (after the colon).
    start : int
        Index of the opening bracket.
    end : int
        Index one past the closing bracket.
    params : ShortcodeParams
        Parameters parsed from ``raw_params``.
    """

    type: ShortcodeType
    raw_params: str
    start: int
    end: int
    params: ShortcodeParams


@dc.dataclass(frozen=True, slots=True)
class ShortcodeReferences:
    """De-duplicated slugs referenced by a piece of content, in first-seen order."""

    product_slugs: tuple[str, ...] = ()
    category_slugs: tuple[str, ...] = ()

    def is_empty(self) -> bool:
        """Return ``True`` when the content references nothing."""
        return not (self.product_slugs or self.category_slugs)


@dc.dataclass(frozen=True, slots=True)
class MissingReferences:
    """Referenced slugs that the fetched catalog maps could not satisfy."""

    product_slugs: tuple[str, ...] = ()
    category_slugs: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.product_slugs or self.category_slugs)


def _parse_limit(value: str | None) -> int:
    """Return a positive base-10 limit or the default when ``value`` is unusable."""
    if not value:
        return DEFAULT_PRODUCTS_LIMIT
    try:
        limit = int(value, 10)
    except ValueError:
        return DEFAULT_PRODUCTS_LIMIT
    return limit if limit >= 1 else DEFAULT_PRODUCTS_LIMIT


def _parse_variant(value: str | None) -> str:
    variant = (value or "").lower()
    return variant if variant in PRODUCT_VARIANTS else DEFAULT_PRODUCT_VARIANT


def parse_shortcode_value(value: str) -> ParsedShortcode | None:
    """Parse a ``type:params`` value into a typed shortcode.

    Parameters
    ----------
    value : str
        Shortcode text without the surrounding brackets, for example
        ``"products:mice,5"``.

    Returns
    -------
    ParsedShortcode or None
        The parsed shortcode, or ``None`` when the colon is missing or the
        type is unknown. Callers treat ``None`` as literal text.

    Notes
    -----
    A missing product slug parses to ``""`` ("no product selected"). A
    non-numeric or non-positive ``products`` limit falls back to the default
    of 3. Comparison slugs are kept verbatim, including empty entries.
    """
    kind, sep, params_text = value.partition(":")
    if not sep:
        return None
    try:
        shortcode_type = ShortcodeType(kind)
    except ValueError:
        return None

    parts = [part.strip() for part in params_text.split(",")]
    first = parts[0]
    second = parts[1] if len(parts) > 1 else None

    params: ShortcodeParams
    match shortcode_type:
        case ShortcodeType.PRODUCT:
            params = ProductParams(slug=first, variant=_parse_variant(second))
        case ShortcodeType.PRODUCTS:
            params = ProductsParams(category_slug=first, limit=_parse_limit(second))
        case ShortcodeType.COMPARISON:
            params = ComparisonParams(slugs=tuple(parts))
    return ParsedShortcode(type=shortcode_type, params=params)


def _mismatch(kind: ShortcodeType, params: ShortcodeParams) -> TypeError:
    msg = f"{kind.value!r} shortcodes cannot take {type(params).__name__}"
    return TypeError(msg)


def build_shortcode_value(
    shortcode_type: ShortcodeType | str, params: ShortcodeParams
) -> str:
    """Return the canonical ``type:params`` value for ``params``.

    Default parameters (the ``"default"`` variant and a limit of 3) are
    omitted, so the result is the shortest value that parses back to the
    same parameters.

    Raises
    ------
    TypeError
        If ``params`` does not belong to ``shortcode_type``.
    """
    kind = ShortcodeType(shortcode_type)
    match kind, params:
        case ShortcodeType.PRODUCT, ProductParams(slug=slug, variant=variant):
            if variant and variant != DEFAULT_PRODUCT_VARIANT:
                return f"product:{slug},{variant}"
            return f"product:{slug}"
        case ShortcodeType.PRODUCTS, ProductsParams(category_slug=slug, limit=limit):
            if limit and limit != DEFAULT_PRODUCTS_LIMIT:
                return f"products:{slug},{limit}"
            return f"products:{slug}"
        case ShortcodeType.COMPARISON, ComparisonParams(slugs=slugs):
            return f"comparison:{','.join(slugs)}"
        case _:
            raise _mismatch(kind, params)


def format_shortcode(
    shortcode_type: ShortcodeType | str, params: ShortcodeParams
) -> str:
    """Return the bracketed form stored inline in article content."""
    return f"[{build_shortcode_value(shortcode_type, params)}]"


def get_shortcode_label(
    shortcode_type: ShortcodeType | str, params: ShortcodeParams
) -> str:
    """Return a short human-readable description used by the editor preview."""
    kind = ShortcodeType(shortcode_type)
    match kind, params:
        case ShortcodeType.PRODUCT, ProductParams(slug=slug, variant=variant):
            if variant and variant != DEFAULT_PRODUCT_VARIANT:
                return f"Product: {slug} ({variant})"
            return f"Product: {slug}"
        case ShortcodeType.PRODUCTS, ProductsParams(category_slug=slug, limit=limit):
            return f"Products: {slug} (limit: {limit})"
        case ShortcodeType.COMPARISON, ComparisonParams(slugs=slugs):
            return f"Comparison: {len(slugs)} products"
        case _:
            raise _mismatch(kind, params)


def build_shortcode_node(
    shortcode_type: ShortcodeType | str, params: ShortcodeParams
) -> str:
    """Return the editor's atomic block markup wrapping the bracketed shortcode."""
    kind = ShortcodeType(shortcode_type)
    value = build_shortcode_value(kind, params)
    label = get_shortcode_label(kind, params)
    attrs = {
        "data-shortcode": "true",
        "data-shortcode-type": kind.value,
        "data-shortcode-value": value,
        "data-shortcode-label": label,
        "class": "shortcode-node",
    }
    rendered = " ".join(
        f'{name}="{html.escape(text, quote=True)}"' for name, text in attrs.items()
    )
    return f"<div {rendered}>[{html.escape(value, quote=False)}]</div>"


def find_shortcodes(content: str) -> list[ShortcodeToken]:
    """Return every recognised shortcode in ``content`` in document order.

    Bracketed spans whose type is unknown or whose value fails to parse are
    skipped and remain literal text.
    """
    if not content:
        return []
    tokens: list[ShortcodeToken] = []
    for match in SHORTCODE_PATTERN.finditer(content):
        kind = match.group(1).lower()
        raw_params = match.group(2)
        parsed = parse_shortcode_value(f"{kind}:{raw_params}")
        if parsed is None:  # pragma: no cover - pattern admits known types only
            continue
        tokens.append(
            ShortcodeToken(
                type=parsed.type,
                raw_params=raw_params,
                start=match.start(),
                end=match.end(),
                params=parsed.params,
            )
        )
    return tokens


def extract_shortcode_references(content: str) -> ShortcodeReferences:
    """Collect the product and category slugs that ``content`` refers to.

    The result feeds a single batched catalog fetch per entity type before
    rendering. Slugs repeated across shortcodes collapse to one entry and
    empty slugs are never requested.
    """
    product_slugs: dict[str, None] = {}
    category_slugs: dict[str, None] = {}
    for token in find_shortcodes(content):
        match token.params:
            case ProductParams(slug=slug) if slug:
                product_slugs.setdefault(slug)
            case ProductsParams(category_slug=slug) if slug:
                category_slugs.setdefault(slug)
            case ComparisonParams(slugs=slugs):
                for slug in slugs:
                    if slug:
                        product_slugs.setdefault(slug)
            case _:
                continue
    return ShortcodeReferences(
        product_slugs=tuple(product_slugs), category_slugs=tuple(category_slugs)
    )


def find_missing_references(
    content: str,
    products: cabc.Mapping[str, object],
    categories: cabc.Container[str],
) -> MissingReferences:
    """Return referenced slugs that are absent from the fetched catalog data.

    Parameters
    ----------
    content : str
        Article content containing shortcodes.
    products : Mapping[str, object]
        Products fetched for the content, keyed by slug.
    categories : Container[str]
        Category slugs known to the catalog.
    """
    refs = extract_shortcode_references(content)
    return MissingReferences(
        product_slugs=tuple(slug for slug in refs.product_slugs if slug not in products),
        category_slugs=tuple(
            slug for slug in refs.category_slugs if slug not in categories
        ),
    )


__all__ = [
    "SHORTCODE_PATTERN",
    "ComparisonParams",
    "MissingReferences",
    "ParsedShortcode",
    "ProductParams",
    "ProductsParams",
    "ShortcodeParams",
    "ShortcodeReferences",
    "ShortcodeToken",
    "ShortcodeType",
    "build_shortcode_node",
    "build_shortcode_value",
    "extract_shortcode_references",
    "find_missing_references",
    "find_shortcodes",
    "format_shortcode",
    "get_shortcode_label",
    "parse_shortcode_value",
]
