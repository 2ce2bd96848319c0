"""Load and validate multi-site configuration YAML for affiliate page builds.

This subpackage parses the project's ``pages.yaml`` file, validates niche
layouts, merges global defaults with per-site overrides, resolves catalog and
article sources, and produces typed dataclasses (:class:`PagesConfig`,
:class:`SiteConfig`, etc.) that the generators consume.

Examples
--------
>>> from pathlib import Path
>>> from affiliate_pages.config import load_pages_config
>>> config = load_pages_config(Path("config/pages.yaml"))  # doctest: +SKIP
>>> config.get_site("techflow").niche.name  # doctest: +SKIP
'Tech'
"""

from .helpers import DEFAULT_CONFIG_PATH
from .loader import load_pages_config
from .models import (
    ArticleConfig,
    FAQEntry,
    NicheConfig,
    PagesConfig,
    SiteConfig,
    SiteConfigError,
    ThemeConfig,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ArticleConfig",
    "FAQEntry",
    "NicheConfig",
    "PagesConfig",
    "SiteConfig",
    "SiteConfigError",
    "ThemeConfig",
    "load_pages_config",
]
