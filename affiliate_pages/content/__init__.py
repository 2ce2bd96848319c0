"""Shortcode parsing, heading extraction, auto-linking, and content rendering."""

from .autolink import AutoLinker, LinkableItem
from .headings import HeadingEntry, add_heading_ids, extract_headings, iter_headings
from .models import RenderedContent, UnresolvedShortcode
from .renderer import ContentRenderer
from .shortcodes import (
    ComparisonParams,
    MissingReferences,
    ParsedShortcode,
    ProductParams,
    ProductsParams,
    ShortcodeReferences,
    ShortcodeToken,
    ShortcodeType,
    build_shortcode_node,
    build_shortcode_value,
    extract_shortcode_references,
    find_missing_references,
    find_shortcodes,
    format_shortcode,
    get_shortcode_label,
    parse_shortcode_value,
)
from .widgets import WidgetRenderer

__all__ = [
    "AutoLinker",
    "ComparisonParams",
    "ContentRenderer",
    "HeadingEntry",
    "LinkableItem",
    "MissingReferences",
    "ParsedShortcode",
    "ProductParams",
    "ProductsParams",
    "RenderedContent",
    "ShortcodeReferences",
    "ShortcodeToken",
    "ShortcodeType",
    "UnresolvedShortcode",
    "WidgetRenderer",
    "add_heading_ids",
    "build_shortcode_node",
    "build_shortcode_value",
    "extract_headings",
    "extract_shortcode_references",
    "find_missing_references",
    "find_shortcodes",
    "format_shortcode",
    "get_shortcode_label",
    "iter_headings",
    "parse_shortcode_value",
]
