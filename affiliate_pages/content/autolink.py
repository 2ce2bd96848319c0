"""Link the first plain-text mention of known products and categories.

The auto-linker scans article HTML for the names of catalog entities and wraps
the first occurrence of each distinct name in a link to that entity's page. It
never touches markup: tag attributes, comments, existing links, headings, and
code or script blocks are protected regions, and callers can add their own
(the content renderer protects every shortcode span). A name never matches
part of a character reference such as ``&amp;``.

Linking is planned rather than applied in place. :meth:`AutoLinker.plan`
returns non-overlapping :class:`PlannedLink` spans over the original string so
the caller can splice links and shortcode output in a single pass.
"""

from __future__ import annotations

import dataclasses as dc
import html
import re
import typing as typ

from affiliate_pages._constants import CATEGORY_URL_TEMPLATE, PRODUCT_URL_TEMPLATE

if typ.TYPE_CHECKING:
    import collections.abc as cabc

SKIP_TAGS = ("a", "h1", "h2", "h3", "h4", "h5", "h6", "code", "pre", "script", "style")
SKIP_ELEMENT_PATTERN = re.compile(
    rf"<({'|'.join(SKIP_TAGS)})\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL
)
COMMENT_PATTERN = re.compile(r"<!--.*?-->", re.DOTALL)
TAG_PATTERN = re.compile(r"<[^>]+>")
ENTITY_PATTERN = re.compile(r"&(?:#\d+|#x[0-9a-fA-F]+|\w+);")
AUTO_LINK_PATTERN = re.compile(
    r"""<a\s[^>]*class=["'][^"']*\bauto-link\b[^"']*["'][^>]*>(.*?)</a\s*>""",
    re.IGNORECASE | re.DOTALL,
)
AUTO_LINK_OPEN_PATTERN = re.compile(
    r"""<a\s[^>]*class=["'][^"']*\bauto-link\b[^"']*["'][^>]*>""", re.IGNORECASE
)

LinkKind = typ.Literal["product", "category"]


@dc.dataclass(frozen=True, slots=True)
class LinkableItem:
    """Catalog entity whose name may be linked in article text."""

    slug: str
    name: str
    kind: LinkKind


@dc.dataclass(frozen=True, slots=True)
class Region:
    """Half-open ``[start, end)`` character span."""

    start: int
    end: int


@dc.dataclass(frozen=True, slots=True)
class PlannedLink:
    """A link to insert over ``content[start:end]``."""

    start: int
    end: int
    item: LinkableItem
    href: str

    def markup(self, text: str) -> str:
        """Return the anchor markup wrapping ``text`` (already HTML)."""
        href = html.escape(self.href, quote=True)
        return (
            f'<a href="{href}" class="auto-link auto-link-{self.item.kind}">'
            f"{text}</a>"
        )


def product_to_linkable(product: typ.Any) -> LinkableItem:  # noqa: ANN401 - duck-typed projection
    """Return a product ``LinkableItem`` from anything with ``slug``/``title``."""
    return LinkableItem(slug=product.slug, name=product.title, kind="product")


def category_to_linkable(category: typ.Any) -> LinkableItem:  # noqa: ANN401 - duck-typed projection
    """Return a category ``LinkableItem`` from anything with ``slug``/``name``."""
    return LinkableItem(slug=category.slug, name=category.name, kind="category")


def merge_regions(regions: cabc.Iterable[Region]) -> list[Region]:
    """Sort ``regions`` and merge any that overlap or touch."""
    ordered = sorted(regions, key=lambda region: (region.start, region.end))
    merged: list[Region] = []
    for region in ordered:
        if merged and region.start <= merged[-1].end:
            last = merged[-1]
            merged[-1] = Region(last.start, max(last.end, region.end))
        else:
            merged.append(region)
    return merged


def find_protected_regions(source: str) -> list[Region]:
    """Return merged spans of ``source`` that must never be auto-linked."""
    regions: list[Region] = []
    for pattern in (SKIP_ELEMENT_PATTERN, COMMENT_PATTERN, TAG_PATTERN):
        regions.extend(
            Region(match.start(), match.end()) for match in pattern.finditer(source)
        )
    return merge_regions(regions)


def _overlaps(start: int, end: int, regions: cabc.Sequence[Region]) -> bool:
    return any(start < region.end and end > region.start for region in regions)


def _splits_entity(start: int, end: int, entities: cabc.Sequence[Region]) -> bool:
    """Return whether a match boundary falls inside a character reference."""
    return any(
        region.start < start < region.end or region.start < end < region.end
        for region in entities
    )


class AutoLinker:
    """Plan first-occurrence links for a fixed set of catalog names."""

    def __init__(
        self,
        site_slug: str,
        items: cabc.Iterable[LinkableItem],
        *,
        max_links_per_term: int = 1,
    ) -> None:
        """Initialize the linker.

        Parameters
        ----------
        site_slug : str
            Site whose product and category pages the links point at.
        items : Iterable[LinkableItem]
            Linkable products and categories. Items with blank names are
            ignored.
        max_links_per_term : int, optional
            How many occurrences of each distinct name to link. Defaults to 1.
        """
        self.site_slug = site_slug
        self.max_links_per_term = max_links_per_term
        unique: dict[str, LinkableItem] = {}
        for item in items:
            if item.name.strip():
                unique.setdefault(item.name, item)
        # Longest names first so "Acme Widget Pro" wins over "Acme Widget".
        self.items = sorted(unique.values(), key=lambda item: -len(item.name))

    def href_for(self, item: LinkableItem) -> str:
        """Return the site-relative URL of ``item``'s page."""
        template = PRODUCT_URL_TEMPLATE if item.kind == "product" else CATEGORY_URL_TEMPLATE
        return template.format(site=self.site_slug, slug=item.slug)

    def plan(
        self, source: str, extra_protected: cabc.Iterable[Region] = ()
    ) -> list[PlannedLink]:
        """Return the links to insert into ``source``, ordered by position.

        Parameters
        ----------
        source : str
            HTML to scan.
        extra_protected : Iterable[Region], optional
            Additional spans to leave alone, such as shortcode directives.
        """
        if not source or not self.items:
            return []
        protected = merge_regions([*find_protected_regions(source), *extra_protected])
        entities = [
            Region(match.start(), match.end())
            for match in ENTITY_PATTERN.finditer(source)
        ]
        planned: list[PlannedLink] = []
        for item in self.items:
            needle = html.escape(item.name, quote=False)
            pattern = re.compile(rf"(?<!\w){re.escape(needle)}(?!\w)")
            linked = 0
            for match in pattern.finditer(source):
                if linked >= self.max_links_per_term:
                    break
                if _overlaps(match.start(), match.end(), protected):
                    continue
                if _splits_entity(match.start(), match.end(), entities):
                    continue
                if any(
                    match.start() < link.end and match.end() > link.start
                    for link in planned
                ):
                    continue
                planned.append(
                    PlannedLink(
                        start=match.start(),
                        end=match.end(),
                        item=item,
                        href=self.href_for(item),
                    )
                )
                linked += 1
        planned.sort(key=lambda link: link.start)
        return planned

    def link(self, source: str, extra_protected: cabc.Iterable[Region] = ()) -> str:
        """Return ``source`` with the planned links applied."""
        pieces: list[str] = []
        cursor = 0
        for link in self.plan(source, extra_protected):
            pieces.append(source[cursor : link.start])
            pieces.append(link.markup(source[link.start : link.end]))
            cursor = link.end
        pieces.append(source[cursor:])
        return "".join(pieces)


def remove_auto_links(source: str) -> str:
    """Strip auto-link anchors from ``source``, keeping their text."""
    if not source:
        return source
    return AUTO_LINK_PATTERN.sub(r"\1", source)


def count_auto_links(source: str) -> int:
    """Return how many auto-link anchors ``source`` contains."""
    if not source:
        return 0
    return len(AUTO_LINK_OPEN_PATTERN.findall(source))


__all__ = [
    "AutoLinker",
    "LinkKind",
    "LinkableItem",
    "PlannedLink",
    "Region",
    "category_to_linkable",
    "count_auto_links",
    "find_protected_regions",
    "merge_regions",
    "product_to_linkable",
    "remove_auto_links",
]
