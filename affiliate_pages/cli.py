"""Cyclopts CLI entrypoint for generating affiliate site pages.

The ``pages`` console script renders every configured site's article and
product pages, audits article shortcodes against the catalog, and exposes the
shortcode and layout helpers for editors. Typical usage involves running
``pages check`` in CI to catch dangling product references and
``pages generate`` to publish the static output.

Examples
--------
Generate every configured site:

>>> from affiliate_pages.cli import main
>>> main()  # doctest: +SKIP

Generate one site into a custom directory:

>>> from affiliate_pages.cli import app
>>> app(["generate", "--site", "techflow", "--output-dir", "dist"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
import msgspec
from cyclopts import App, Parameter

from .catalog import load_catalog
from .config import DEFAULT_CONFIG_PATH, load_pages_config
from .content import (
    extract_shortcode_references,
    find_missing_references,
    format_shortcode,
    get_shortcode_label,
    parse_shortcode_value,
)
from .fetch import read_text_source
from .generator import generate_site
from .layouts import build_default_registry, layout_to_builtins, resolve_layout_config
from .logging_config import setup_logging

logger = logging.getLogger(__name__)

app = App(name="pages", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]

ConfigOption = typ.Annotated[
    Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
]
SiteOption = typ.Annotated[
    str | None, Parameter(help="Site identifier", env_var="INPUT_SITE")
]
LogLevelOption = typ.Annotated[
    str | None,
    Parameter(
        help="Log level (falls back to AFFILIATE_PAGES_LOG_LEVEL)",
        env_var="INPUT_LOG_LEVEL",
    ),
]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _print_json(payload: object) -> None:
    print(msgspec.json.format(msgspec.json.encode(payload), indent=2).decode("utf-8"))


@app.command(help="Generate static article and product pages for configured sites.")
def generate(
    *,
    config: ConfigOption = DEFAULT_CONFIG_PATH,
    site: SiteOption = None,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="INPUT_OUTPUT_DIR"),
    ] = None,
    log_level: LogLevelOption = None,
) -> None:
    """Generate pages for one site or every configured site.

    Parameters
    ----------
    config : Path, optional
        Path to the ``pages.yaml`` configuration file (overridable via
        ``INPUT_CONFIG``).
    site : str or None, optional
        Site key to render; when ``None`` (default) all sites are rendered.
    output_dir : Path or None, optional
        Override the output root for every selected site.
    log_level : str or None, optional
        Logging level name.

    Returns
    -------
    None
        Writes rendered pages and prints each generated path.
    """
    setup_logging(log_level)
    pages_config = load_pages_config(config)
    registry = build_default_registry()
    for site_config in pages_config.select_sites(site):
        logger.info("generating site %s", site_config.slug)
        for path in generate_site(site_config, registry=registry, output_dir=output_dir):
            print(f"wrote {_format_path(path)}")


@app.command(help="Report article shortcodes that reference missing catalog entries.")
def check(
    *,
    config: ConfigOption = DEFAULT_CONFIG_PATH,
    site: SiteOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Audit every article's shortcodes against its site's catalog.

    Parameters
    ----------
    config : Path, optional
        Path to the ``pages.yaml`` configuration file.
    site : str or None, optional
        Site key to audit; all sites when ``None``.
    log_level : str or None, optional
        Logging level name.

    Raises
    ------
    SystemExit
        With status ``1`` when any article has dangling references.
    """
    setup_logging(log_level)
    pages_config = load_pages_config(config)
    problems = 0
    for site_config in pages_config.select_sites(site):
        catalog = load_catalog(site_config.catalog)
        logger.info(
            "checking %d article(s) for %s", len(site_config.articles), site_config.slug
        )
        for article in site_config.articles.values():
            text = read_text_source(article.source)
            references = extract_shortcode_references(text)
            missing = find_missing_references(
                text,
                catalog.get_products_by_slugs(references.product_slugs),
                catalog.category_slugs,
            )
            if not missing:
                continue
            problems += 1
            for slug in missing.product_slugs:
                print(f"{site_config.slug}/{article.slug}: missing product '{slug}'")
            for slug in missing.category_slugs:
                print(f"{site_config.slug}/{article.slug}: missing category '{slug}'")
    if problems:
        print(f"{problems} article(s) with dangling references", file=sys.stderr)
        raise SystemExit(1)
    print("all shortcode references resolve")


@app.command(help="Print the product and category slugs a content file references.")
def refs(
    source: typ.Annotated[str, Parameter(help="Content file path or URL")],
) -> None:
    """Print the shortcode references found in ``source`` as JSON."""
    references = extract_shortcode_references(read_text_source(source))
    _print_json(
        {
            "productSlugs": list(references.product_slugs),
            "categorySlugs": list(references.category_slugs),
        }
    )


@app.command(help="Normalise a shortcode value and print its editor label.")
def shortcode(
    value: typ.Annotated[
        str, Parameter(help="Shortcode value such as 'product:slug,featured'")
    ],
) -> None:
    """Print the canonical bracketed shortcode for ``value`` and its label.

    Raises
    ------
    SystemExit
        With status ``2`` when ``value`` is not a valid shortcode.
    """
    parsed = parse_shortcode_value(value.strip().removeprefix("[").removesuffix("]"))
    if parsed is None:
        print(f"not a shortcode: {value!r}", file=sys.stderr)
        raise SystemExit(2)
    print(format_shortcode(parsed.type, parsed.params))
    print(get_shortcode_label(parsed.type, parsed.params))


@app.command(help="Print the resolved product-page layout for a niche as JSON.")
def layout(
    niche: typ.Annotated[str, Parameter(help="Niche identifier")],
    *,
    config: ConfigOption = DEFAULT_CONFIG_PATH,
) -> None:
    """Print the layout used for ``niche`` product pages."""
    pages_config = load_pages_config(config)
    resolved = resolve_layout_config(pages_config.get_niche(niche).layout)
    _print_json(layout_to_builtins(resolved))


def main() -> None:
    """Invoke the Cyclopts application that powers the ``pages`` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
