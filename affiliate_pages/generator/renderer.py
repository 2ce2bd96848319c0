"""Convert Markdown article sources into HTML ahead of shortcode rendering."""

from __future__ import annotations

import re
from html import escape
from pathlib import PurePosixPath

from markdown import Markdown
from pygments.formatters.html import HtmlFormatter

CODE_FENCE_PATTERN = re.compile(r"^[ ]{0,3}(?:```|~~~)([A-Za-z0-9_+#.-]+)?", re.MULTILINE)
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')
HTML_SUFFIXES = frozenset({".html", ".htm"})


class HtmlContentRenderer:
    """Render Markdown with highlighted code blocks and tables."""

    def __init__(self, pygments_style: str = "monokai") -> None:
        """Initialize the renderer.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for code blocks. Defaults to
            ``"monokai"``.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def markdown(self, text: str) -> str:
        """Render Markdown into HTML.

        Shortcodes such as ``[product:slug]`` are not Markdown links and pass
        through as text inside their paragraph.
        """
        if not text.strip():
            return ""
        md = Markdown(
            extensions=["fenced_code", "codehilite", "tables", "sane_lists"],
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        return self._annotate_languages(md.convert(text), text)

    def render_source(self, text: str, source: str) -> str:
        """Return HTML for ``text``, converting it unless ``source`` is HTML.

        Examples
        --------
        >>> HtmlContentRenderer().render_source("<p>Hi</p>", "intro.html")
        '<p>Hi</p>'
        """
        suffix = PurePosixPath(source.split("?", 1)[0]).suffix.lower()
        if suffix in HTML_SUFFIXES:
            return text
        return self.markdown(text)

    @staticmethod
    def _annotate_languages(html: str, source_markdown: str) -> str:
        """Tag each highlighted block with the language named on its fence."""
        languages = [
            match.group(1) or "text"
            for index, match in enumerate(CODE_FENCE_PATTERN.finditer(source_markdown))
            if index % 2 == 0
        ]
        if not languages:
            return html
        remaining = iter(languages)

        def _repl(_match: re.Match[str]) -> str:
            lang = escape(next(remaining, "text"), quote=True)
            return f'<div class="codehilite" data-language="{lang}">'

        return CODEHILITE_OPEN_TAG.sub(_repl, html, len(languages))


__all__ = ["HtmlContentRenderer"]
