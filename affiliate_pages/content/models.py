"""Result types produced by the content rendering pipeline."""

from __future__ import annotations

import dataclasses as dc

from .headings import HeadingEntry  # noqa: TC001 - used for runtime type metadata
from .shortcodes import ShortcodeReferences, ShortcodeToken  # noqa: TC001


@dc.dataclass(frozen=True, slots=True)
class UnresolvedShortcode:
    """A shortcode that rendered less than it asked for.

    Attributes
    ----------
    token : ShortcodeToken
        The shortcode occurrence.
    missing : tuple[str, ...]
        Product or category slugs that could not be resolved.
    """

    token: ShortcodeToken
    missing: tuple[str, ...]


@dc.dataclass(frozen=True, slots=True)
class RenderedContent:
    """Rendered article body with its derived table of contents.

    Attributes
    ----------
    html : str
        Content with shortcodes replaced and auto-links applied.
    headings : list[HeadingEntry]
        Table-of-contents entries for ``html``.
    references : ShortcodeReferences
        Slugs referenced by the source content.
    unresolved : list[UnresolvedShortcode]
        Shortcodes that degraded because referenced entities were missing.
    """

    html: str
    headings: list[HeadingEntry]
    references: ShortcodeReferences
    unresolved: list[UnresolvedShortcode] = dc.field(default_factory=list)


__all__ = ["RenderedContent", "UnresolvedShortcode"]
