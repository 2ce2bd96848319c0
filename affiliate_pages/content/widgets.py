"""Render inline catalog widgets that replace shortcodes in article content."""

from __future__ import annotations

import typing as typ

from affiliate_pages._constants import DEFAULT_PRODUCT_VARIANT, PRODUCT_URL_TEMPLATE
from affiliate_pages.templating import build_environment

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from jinja2 import Environment

    from affiliate_pages.catalog import ProductCardData


def _winner_id(products: cabc.Sequence[ProductCardData]) -> str | None:
    """Return the id of the highest-rated product, or ``None`` without ratings."""
    rated = [product for product in products if product.rating]
    if not rated:
        return None
    return max(rated, key=lambda product: product.rating or 0).id


class WidgetRenderer:
    """Render product cards, category grids, and comparison tables."""

    def __init__(
        self,
        *,
        env: Environment | None = None,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the renderer with a Jinja environment.

        Parameters
        ----------
        env : Environment, optional
            Pre-configured environment; built from ``templates_dir`` when
            omitted.
        templates_dir : Path, optional
            Directory containing the widget templates; defaults to the package
            templates.
        """
        self.env = env or build_environment(templates_dir)
        self._card = self.env.get_template("widgets/product_card.jinja")
        self._grid = self.env.get_template("widgets/product_grid.jinja")
        self._comparison = self.env.get_template("widgets/comparison.jinja")

    def product_url(self, site_slug: str, product: ProductCardData) -> str:
        """Return the site-relative product page URL."""
        return PRODUCT_URL_TEMPLATE.format(site=site_slug, slug=product.slug)

    def product_card(
        self,
        product: ProductCardData,
        site_slug: str,
        variant: str = DEFAULT_PRODUCT_VARIANT,
    ) -> str:
        """Render a single product card in the requested variant."""
        return self._card.render(
            product=product,
            variant=variant,
            product_url=self.product_url(site_slug, product),
        ).strip()

    def product_grid(
        self, products: cabc.Sequence[ProductCardData], site_slug: str
    ) -> str:
        """Render a grid of compact cards; empty input renders nothing."""
        if not products:
            return ""
        entries = [
            {"product": product, "url": self.product_url(site_slug, product)}
            for product in products
        ]
        return self._grid.render(entries=entries).strip()

    def comparison(
        self, products: cabc.Sequence[ProductCardData], site_slug: str
    ) -> str:
        """Render a side-by-side comparison; empty input renders nothing."""
        if not products:
            return ""
        entries = [
            {"product": product, "url": self.product_url(site_slug, product)}
            for product in products
        ]
        return self._comparison.render(
            entries=entries, winner_id=_winner_id(products)
        ).strip()


__all__ = ["WidgetRenderer"]
