r"""Extract table-of-contents entries from rendered article HTML.

Only ``h2``–``h4`` headings are collected; ``h1`` belongs to the page title.
Anchor ids are derived from heading text so the same heading always yields the
same fragment, and repeated headings are disambiguated with numeric suffixes in
document order.

Example
-------
>>> from affiliate_pages.content.headings import extract_headings
>>> [entry.id for entry in extract_headings("<h2>A</h2><h2>A</h2>")]
['a', 'a-1']
"""

from __future__ import annotations

import dataclasses as dc
import html
import re
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

HEADING_PATTERN = re.compile(
    r"<h([2-4])((?:\s[^>]*)?)>(.*?)</h\1\s*>", re.IGNORECASE | re.DOTALL
)
ID_ATTRIBUTE_PATTERN = re.compile(
    r"""(?<![\w-])id\s*=\s*(["'])(.*?)\1""", re.IGNORECASE
)
TAG_PATTERN = re.compile(r"<[^>]*>")
WHITESPACE_PATTERN = re.compile(r"\s+")


@dc.dataclass(frozen=True, slots=True)
class HeadingEntry:
    """Table-of-contents entry derived from one heading.

    Attributes
    ----------
    id : str
        Anchor id, either authored on the tag or generated from the text.
    text : str
        Plain heading text with markup stripped.
    level : int
        Heading level: 2, 3, or 4.
    """

    id: str
    text: str
    level: int


@dc.dataclass(frozen=True, slots=True)
class _HeadingMatch:
    entry: HeadingEntry
    match: re.Match[str]
    authored_id: bool


def slugify_heading(text: str) -> str:
    """Return a lowercase hyphen-separated anchor for ``text``."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or "section"


def _unique_id(base: str, used: set[str]) -> str:
    """Generate a unique id, appending ``-1``, ``-2``… when ``base`` is taken."""
    candidate = base
    suffix = 1
    while candidate in used:
        candidate = f"{base}-{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate


def _heading_text(inner_html: str) -> str:
    stripped = TAG_PATTERN.sub("", inner_html)
    return WHITESPACE_PATTERN.sub(" ", html.unescape(stripped)).strip()


def _scan_headings(source: str) -> cabc.Iterator[_HeadingMatch]:
    matches = list(HEADING_PATTERN.finditer(source))
    # Authored ids are reserved up front so generated ids never shadow them.
    used: set[str] = set()
    for match in matches:
        authored = ID_ATTRIBUTE_PATTERN.search(match.group(2))
        if authored and authored.group(2):
            used.add(authored.group(2))

    for match in matches:
        text = _heading_text(match.group(3))
        if not text:
            continue
        authored = ID_ATTRIBUTE_PATTERN.search(match.group(2))
        if authored and authored.group(2):
            heading_id = authored.group(2)
            has_id = True
        else:
            heading_id = _unique_id(slugify_heading(text), used)
            has_id = False
        yield _HeadingMatch(
            entry=HeadingEntry(id=heading_id, text=text, level=int(match.group(1))),
            match=match,
            authored_id=has_id,
        )


def iter_headings(source: str) -> cabc.Iterator[HeadingEntry]:
    """Yield heading entries for ``source`` in document order.

    Each call rescans the content, so the sequence can be restarted simply by
    calling the function again.
    """
    if not source:
        return
    for found in _scan_headings(source):
        yield found.entry


def extract_headings(source: str) -> list[HeadingEntry]:
    """Return the table of contents for ``source`` as a list."""
    return list(iter_headings(source))


def add_heading_ids(source: str) -> str:
    """Insert generated ids into ``h2``–``h4`` tags that do not carry one.

    The ids match those reported by :func:`extract_headings`, so TOC links
    resolve against the returned markup. Headings that already have an id are
    left untouched; an empty ``id=""`` is filled in place.
    """
    if not source:
        return source
    pieces: list[str] = []
    cursor = 0
    for found in _scan_headings(source):
        if found.authored_id:
            continue
        match = found.match
        level = match.group(1)
        attrs = match.group(2)
        pieces.append(source[cursor : match.start()])
        id_attr = f'id="{html.escape(found.entry.id, quote=True)}"'
        empty = ID_ATTRIBUTE_PATTERN.search(attrs)
        if empty is not None:
            attrs = f"{attrs[: empty.start()]}{id_attr}{attrs[empty.end() :]}"
        else:
            attrs = f"{attrs} {id_attr}"
        pieces.append(f"<h{level}{attrs}>")
        cursor = match.start(3)
    pieces.append(source[cursor:])
    return "".join(pieces)


__all__ = [
    "HeadingEntry",
    "add_heading_ids",
    "extract_headings",
    "iter_headings",
    "slugify_heading",
]
