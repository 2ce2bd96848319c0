"""Render multi-tenant affiliate sites from articles and a product catalog.

This package exposes the CLI entry points used by ``pages`` to generate
article and product pages, audit article shortcodes, and inspect layouts.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from affiliate_pages import main
>>> main()  # doctest: +SKIP
>>> from affiliate_pages import app
>>> "pages" in app.name
True
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
