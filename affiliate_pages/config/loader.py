"""Load multi-site configuration YAML into typed dataclasses."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from affiliate_pages.layouts import (
    LAYOUT_PRESETS,
    LayoutConfigError,
    parse_layout_config,
)

from .helpers import (
    DEFAULT_CONTENT_SLUG,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PYGMENTS_STYLE,
    _build_faqs,
    _merge_theme,
    _normalize_article_type,
    _optional_str,
    _parse_timestamp,
    _require_mapping,
    _resolve_source,
)
from .models import (
    ArticleConfig,
    NicheConfig,
    PagesConfig,
    SiteConfig,
    SiteConfigError,
    ThemeConfig,
)


def load_pages_config(path: Path) -> PagesConfig:
    """Load the YAML configuration describing niches, sites, and articles.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration (for example,
        ``config/pages.yaml``). Relative catalog and article sources resolve
        against its directory.

    Returns
    -------
    PagesConfig
        Parsed configuration with every site's defaults applied.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    SiteConfigError
        If the document is not a mapping, defines no sites, or a site refers
        to an unknown niche, layout preset, or invalid layout.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from affiliate_pages.config import load_pages_config
    >>> config = load_pages_config(Path("config/pages.yaml"))  # doctest: +SKIP
    >>> sorted(config.sites)  # doctest: +SKIP
    ['glowguide', 'techflow']
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise SiteConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    defaults = _require_mapping(raw.get("defaults"), where="defaults")

    site_defaults = _SiteDefaults(
        base_dir=path.parent,
        output_dir=Path(defaults.get("output_dir", DEFAULT_OUTPUT_DIR)),
        content_slug=defaults.get("content_slug", DEFAULT_CONTENT_SLUG),
        pygments_style=defaults.get("pygments_style", DEFAULT_PYGMENTS_STYLE),
        enable_auto_link=bool(defaults.get("enable_auto_link", True)),
        theme=_merge_theme(ThemeConfig(), defaults.get("theme")),
    )

    niches = {
        key: _build_niche_config(key, _require_mapping(payload, where=f"niches.{key}"))
        for key, payload in _require_mapping(raw.get("niches"), where="niches").items()
    }

    sites_raw = _require_mapping(raw.get("sites"), where="sites")
    if not sites_raw:
        msg = "No sites defined in configuration."
        raise SiteConfigError(msg)

    sites: dict[str, SiteConfig] = {}
    for key, payload in sites_raw.items():
        match payload:
            case dict():
                sites[key] = _build_site_config(
                    key=key, payload=payload, niches=niches, defaults=site_defaults
                )
            case _:
                continue

    return PagesConfig(
        sites=sites, niches=niches, default_site=_optional_str(defaults.get("site"))
    )


@dc.dataclass(slots=True)
class _SiteDefaults:
    """Internal container for site default configuration values."""

    base_dir: Path
    output_dir: Path
    content_slug: str
    pygments_style: str
    enable_auto_link: bool
    theme: ThemeConfig


def _build_niche_config(key: str, payload: typ.Mapping[str, typ.Any]) -> NicheConfig:
    """Build a NicheConfig, validating an explicit layout or a named preset."""
    name = _optional_str(payload.get("name")) or key.replace("-", " ").title()
    if "layout" in payload:
        try:
            layout = parse_layout_config(payload["layout"])
        except LayoutConfigError as exc:
            msg = f"Niche '{key}' has an invalid layout: {exc}"
            raise SiteConfigError(msg) from exc
        return NicheConfig(slug=key, name=name, layout=layout)

    preset = _optional_str(payload.get("layout_preset"))
    if preset is None:
        return NicheConfig(slug=key, name=name)
    if preset not in LAYOUT_PRESETS:
        available = ", ".join(sorted(LAYOUT_PRESETS))
        msg = f"Niche '{key}' uses unknown layout_preset '{preset}'. Known: {available}"
        raise SiteConfigError(msg)
    return NicheConfig(slug=key, name=name, layout=LAYOUT_PRESETS[preset])


def _build_site_config(
    *,
    key: str,
    payload: typ.Mapping[str, typ.Any],
    niches: typ.Mapping[str, NicheConfig],
    defaults: _SiteDefaults,
) -> SiteConfig:
    """Build a SiteConfig for a single site entry using defaults and overrides."""
    niche_key = _optional_str(payload.get("niche"))
    if niche_key is None:
        niche = NicheConfig(slug="default", name="Default")
    elif niche_key in niches:
        niche = niches[niche_key]
    else:
        msg = f"Site '{key}' refers to unknown niche '{niche_key}'."
        raise SiteConfigError(msg)

    domain = _optional_str(payload.get("domain"))
    if domain is None:
        msg = f"Site '{key}' is missing 'domain'."
        raise SiteConfigError(msg)

    enable_auto_link = bool(payload.get("enable_auto_link", defaults.enable_auto_link))
    articles_raw = _require_mapping(payload.get("articles"), where=f"sites.{key}.articles")
    articles = {
        slug: _build_article_config(
            slug=slug,
            payload=_require_mapping(article, where=f"sites.{key}.articles.{slug}"),
            base_dir=defaults.base_dir,
            enable_auto_link=enable_auto_link,
        )
        for slug, article in articles_raw.items()
    }

    return SiteConfig(
        slug=key,
        name=_optional_str(payload.get("name")) or key.replace("-", " ").title(),
        domain=domain,
        niche=niche,
        catalog=_resolve_source(
            defaults.base_dir, payload.get("catalog"), field=f"sites.{key}.catalog"
        ),
        output_dir=Path(payload.get("output_dir", defaults.output_dir)),
        content_slug=payload.get("content_slug", defaults.content_slug),
        pygments_style=payload.get("pygments_style", defaults.pygments_style),
        theme=_merge_theme(defaults.theme, payload.get("theme")),
        articles=articles,
    )


def _build_article_config(
    *,
    slug: str,
    payload: typ.Mapping[str, typ.Any],
    base_dir: Path,
    enable_auto_link: bool,
) -> ArticleConfig:
    """Build an ArticleConfig, resolving its source against ``base_dir``."""
    return ArticleConfig(
        slug=slug,
        title=_optional_str(payload.get("title")) or slug.replace("-", " ").title(),
        source=_resolve_source(base_dir, payload.get("source"), field=f"{slug}.source"),
        article_type=_normalize_article_type(payload.get("article_type")),
        excerpt=_optional_str(payload.get("excerpt")),
        author=_optional_str(payload.get("author")),
        featured_image=_optional_str(payload.get("featured_image")),
        category=_optional_str(payload.get("category")),
        published_at=_parse_timestamp(payload.get("published_at")),
        updated_at=_parse_timestamp(payload.get("updated_at")),
        faqs=_build_faqs(payload.get("faqs")),
        enable_auto_link=bool(payload.get("enable_auto_link", enable_auto_link)),
    )


__all__ = ["load_pages_config"]
