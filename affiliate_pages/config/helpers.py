"""Utility helpers shared by the configuration loader."""

from __future__ import annotations

import datetime as dt
import typing as typ
from pathlib import Path

from affiliate_pages.fetch import is_remote

from .models import FAQEntry, SiteConfigError, ThemeConfig

DEFAULT_CONFIG_PATH = Path("config/pages.yaml")
DEFAULT_OUTPUT_DIR = Path("public")
DEFAULT_CONTENT_SLUG = "articles"
DEFAULT_PYGMENTS_STYLE = "monokai"
ARTICLE_TYPES = frozenset(
    {"article", "review", "how_to", "roundup", "comparison", "buying_guide"}
)


def _resolve_source(base_dir: Path, value: object, *, field: str) -> str:
    """Return a URL unchanged or a path resolved against ``base_dir``."""
    text = _optional_str(value)
    if text is None:
        msg = f"Missing required '{field}'."
        raise SiteConfigError(msg)
    if is_remote(text):
        return text
    path = Path(text)
    return str(path if path.is_absolute() else base_dir / path)


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _require_mapping(value: object, *, where: str) -> typ.Mapping[str, typ.Any]:
    match value:
        case None:
            return {}
        case dict():
            return value
        case _:
            msg = f"'{where}' must be a mapping."
            raise SiteConfigError(msg)


def _merge_theme(
    base: ThemeConfig, override: typ.Mapping[str, typ.Any] | None
) -> ThemeConfig:
    """Merge an override theme mapping into the base ThemeConfig."""
    if not override:
        return base
    return ThemeConfig(
        tagline=override.get("tagline", base.tagline),
        accent_color=override.get("accent_color", base.accent_color),
        footer_note=override.get("footer_note", base.footer_note),
    )


def _build_faqs(payload: object) -> list[FAQEntry]:
    """Build FAQ entries, skipping items without a question or answer."""
    if not isinstance(payload, list):
        return []
    entries: list[FAQEntry] = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        question = _optional_str(item.get("question"))
        answer = _optional_str(item.get("answer"))
        if question and answer:
            entries.append(FAQEntry(question=question, answer=answer))
    return entries


def _normalize_article_type(value: object | None) -> str:
    text = (_optional_str(value) or "article").lower().replace("-", "_")
    if text not in ARTICLE_TYPES:
        allowed = ", ".join(sorted(ARTICLE_TYPES))
        msg = f"Unknown article_type '{text}'. Expected one of: {allowed}"
        raise SiteConfigError(msg)
    return text


def _parse_timestamp(value: dt.datetime | dt.date | str | None) -> dt.datetime | None:
    """Return a timezone-aware UTC datetime parsed from ``value``, or None."""
    match value:
        case dt.datetime():
            parsed = value
        case dt.date():
            parsed = dt.datetime.combine(value, dt.time())
        case str() as text:
            sanitized = text.strip()
            if not sanitized:
                return None
            if sanitized.endswith("Z"):
                sanitized = sanitized[:-1] + "+00:00"
            try:
                parsed = dt.datetime.fromisoformat(sanitized)
            except ValueError:
                return None
        case _:
            return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=dt.UTC)
    return parsed.astimezone(dt.UTC)


__all__ = [
    "ARTICLE_TYPES",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_CONTENT_SLUG",
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_PYGMENTS_STYLE",
    "_build_faqs",
    "_merge_theme",
    "_normalize_article_type",
    "_optional_str",
    "_parse_timestamp",
    "_require_mapping",
    "_resolve_source",
]
