"""Declarative product-page layouts and the section registry that renders them.

A niche describes its product detail page once as ordered *zones*, each holding
ordered *sections*. Building a page happens in two phases:

1. :func:`resolve_layout_config` picks the niche layout or the default one.
   It only assembles structure and never looks at a product.
2. :func:`plan_sections` adapts that structure to one product: disabled
   sections, sections whose ``conditionField`` is empty in the product's
   metadata, and ids without a registered renderer are dropped.

Section renderers live in an explicit :class:`SectionRegistry` created once at
start-up (:func:`build_default_registry`) and passed to whatever assembles a
page.

Example
-------
>>> from affiliate_pages.layouts import DEFAULT_LAYOUT, resolve_layout_config
>>> resolve_layout_config(None) is DEFAULT_LAYOUT
True
>>> [zone.id for zone in DEFAULT_LAYOUT.zones]
['header', 'hero', 'main', 'overlay']
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

import msgspec

from affiliate_pages.templating import build_environment

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from jinja2 import Environment

    from affiliate_pages.catalog import ProductMetadata

logger = logging.getLogger(__name__)

MaxWidth = typ.Literal["narrow", "default", "wide"]


class LayoutConfigError(ValueError):
    """Raised when a niche layout configuration has an invalid shape."""


class SectionConfig(msgspec.Struct, frozen=True, rename="camel", omit_defaults=True):
    """One renderable block within a zone."""

    id: str
    enabled: bool = True
    condition_field: str | None = None
    props: dict[str, typ.Any] = msgspec.field(default_factory=dict)


class LayoutZone(msgspec.Struct, frozen=True, rename="camel"):
    """Named page region with its ordered sections."""

    id: str
    sections: tuple[SectionConfig, ...] = ()


class LayoutOptions(msgspec.Struct, frozen=True, rename="camel"):
    """Page-level presentation options."""

    two_column_hero: bool = True
    max_width: MaxWidth = "default"
    container_class_name: str | None = None


class LayoutConfig(msgspec.Struct, frozen=True, rename="camel"):
    """Complete product-page layout for a niche."""

    zones: tuple[LayoutZone, ...] = ()
    options: LayoutOptions = msgspec.field(default_factory=LayoutOptions)

    def zone(self, zone_id: str) -> LayoutZone | None:
        """Return the zone named ``zone_id``, if present."""
        return next((zone for zone in self.zones if zone.id == zone_id), None)


def _zone(zone_id: str, *sections: SectionConfig) -> LayoutZone:
    return LayoutZone(id=zone_id, sections=sections)


def _section(section_id: str, condition_field: str | None = None) -> SectionConfig:
    return SectionConfig(id=section_id, condition_field=condition_field)


DEFAULT_LAYOUT = LayoutConfig(
    zones=(
        _zone("header", _section("breadcrumb")),
        _zone("hero", _section("hero"), _section("affiliate-partners")),
        _zone(
            "main",
            _section("pros-cons"),
            _section("full-review"),
            _section("featured-articles"),
            _section("related-products"),
        ),
        _zone("overlay", _section("sticky-bar")),
    )
)

GAMING_LAYOUT = LayoutConfig(
    zones=(
        _zone("header", _section("breadcrumb")),
        _zone("hero", _section("hero"), _section("affiliate-partners")),
        _zone(
            "main",
            _section("pros-cons"),
            _section("specifications", "specifications"),
            _section("performance-metrics", "benchmarks"),
            _section("full-review"),
            _section("featured-articles"),
            _section("related-products"),
        ),
        _zone("overlay", _section("sticky-bar")),
    )
)

BEAUTY_LAYOUT = LayoutConfig(
    zones=(
        _zone("header", _section("breadcrumb")),
        _zone(
            "hero",
            _section("hero"),
            _section("affiliate-partners"),
            _section("skin-compatibility", "skinTypes"),
        ),
        _zone(
            "main",
            _section("pros-cons"),
            _section("ingredients", "ingredients"),
            _section("how-to-use", "howToUse"),
            _section("full-review"),
            _section("featured-articles"),
            _section("related-products"),
        ),
        _zone("overlay", _section("sticky-bar")),
    )
)

LAYOUT_PRESETS: dict[str, LayoutConfig] = {
    "default": DEFAULT_LAYOUT,
    "gaming": GAMING_LAYOUT,
    "beauty": BEAUTY_LAYOUT,
}


def parse_layout_config(raw: typ.Any) -> LayoutConfig | None:  # noqa: ANN401 - untyped JSON input
    """Validate a niche's layout JSON into a :class:`LayoutConfig`.

    Parameters
    ----------
    raw : Any
        Mapping decoded from YAML or JSON (camelCase keys), an existing
        ``LayoutConfig``, or ``None``.

    Returns
    -------
    LayoutConfig or None
        The validated layout, or ``None`` when ``raw`` is ``None``.

    Raises
    ------
    LayoutConfigError
        If ``raw`` does not describe a layout.
    """
    if raw is None or isinstance(raw, LayoutConfig):
        return raw
    try:
        return msgspec.convert(raw, type=LayoutConfig)
    except msgspec.ValidationError as exc:
        msg = f"Invalid layout configuration: {exc}"
        raise LayoutConfigError(msg) from exc


def resolve_layout_config(niche_layout: LayoutConfig | None) -> LayoutConfig:
    """Return ``niche_layout`` when it has zones, otherwise the default layout.

    Section conditions are not evaluated here; see :func:`plan_sections`.
    """
    if niche_layout is not None and niche_layout.zones:
        return niche_layout
    return DEFAULT_LAYOUT


def layout_to_builtins(layout: LayoutConfig) -> dict[str, typ.Any]:
    """Return ``layout`` as plain JSON-compatible data with camelCase keys."""
    return msgspec.to_builtins(layout)


class SectionRenderer(typ.Protocol):
    """Callable that renders one section for a product page context."""

    def __call__(self, context: typ.Any, props: cabc.Mapping[str, typ.Any]) -> str: ...  # noqa: ANN401


class SectionRegistry:
    """Map section ids to the callables that render them."""

    def __init__(self) -> None:
        self._sections: dict[str, SectionRenderer] = {}

    def register(self, section_id: str, renderer: SectionRenderer) -> None:
        """Register ``renderer`` for ``section_id``, replacing any previous one."""
        if section_id in self._sections:
            logger.warning("section %r is already registered; overwriting", section_id)
        self._sections[section_id] = renderer

    def get(self, section_id: str) -> SectionRenderer | None:
        """Return the renderer for ``section_id``, or ``None``."""
        return self._sections.get(section_id)

    def __contains__(self, section_id: object) -> bool:
        return section_id in self._sections

    def __len__(self) -> int:
        return len(self._sections)

    def ids(self) -> list[str]:
        """Return registered section ids in registration order."""
        return list(self._sections)

    def clear(self) -> None:
        """Remove every registration."""
        self._sections.clear()


@dc.dataclass(frozen=True, slots=True)
class TemplateSection:
    """Section renderer backed by a Jinja template."""

    env: Environment
    template_name: str

    def __call__(self, context: typ.Any, props: cabc.Mapping[str, typ.Any]) -> str:  # noqa: ANN401
        template = self.env.get_template(self.template_name)
        return template.render(ctx=context, props=dict(props)).strip()


BASE_SECTION_IDS = (
    "breadcrumb",
    "hero",
    "affiliate-partners",
    "pros-cons",
    "full-review",
    "featured-articles",
    "related-products",
    "sticky-bar",
)
NICHE_SECTION_IDS = (
    "specifications",
    "performance-metrics",
    "ingredients",
    "how-to-use",
    "skin-compatibility",
)


def build_default_registry(
    *, env: Environment | None = None, templates_dir: Path | None = None
) -> SectionRegistry:
    """Return a registry holding the base and niche section templates.

    Each section id ``foo-bar`` renders ``sections/foo-bar.jinja``.
    """
    environment = env or build_environment(templates_dir)
    registry = SectionRegistry()
    for section_id in (*BASE_SECTION_IDS, *NICHE_SECTION_IDS):
        registry.register(
            section_id, TemplateSection(environment, f"sections/{section_id}.jinja")
        )
    return registry


@dc.dataclass(frozen=True, slots=True)
class ResolvedSection:
    """A section that will render for a specific product."""

    id: str
    renderer: SectionRenderer
    props: dict[str, typ.Any]


@dc.dataclass(frozen=True, slots=True)
class ResolvedZone:
    """A zone with the sections that survived per-product filtering."""

    id: str
    sections: list[ResolvedSection]


def section_is_visible(section: SectionConfig, metadata: ProductMetadata) -> bool:
    """Return whether ``section`` should render for a product with ``metadata``."""
    if not section.enabled:
        return False
    if section.condition_field:
        return metadata.has_field(section.condition_field)
    return True


def plan_sections(
    layout: LayoutConfig,
    registry: SectionRegistry,
    metadata: ProductMetadata,
) -> list[ResolvedZone]:
    """Return the zones and sections to render for one product.

    Disabled sections, sections whose ``conditionField`` is empty in
    ``metadata``, and ids missing from ``registry`` are skipped; zones left
    without sections are omitted.
    """
    zones: list[ResolvedZone] = []
    for zone in layout.zones:
        sections: list[ResolvedSection] = []
        for section in zone.sections:
            if not section_is_visible(section, metadata):
                continue
            renderer = registry.get(section.id)
            if renderer is None:
                logger.warning("section %r not found in registry; skipping", section.id)
                continue
            sections.append(
                ResolvedSection(id=section.id, renderer=renderer, props=dict(section.props))
            )
        if sections:
            zones.append(ResolvedZone(id=zone.id, sections=sections))
    return zones


__all__ = [
    "BASE_SECTION_IDS",
    "BEAUTY_LAYOUT",
    "DEFAULT_LAYOUT",
    "GAMING_LAYOUT",
    "LAYOUT_PRESETS",
    "NICHE_SECTION_IDS",
    "LayoutConfig",
    "LayoutConfigError",
    "LayoutOptions",
    "LayoutZone",
    "ResolvedSection",
    "ResolvedZone",
    "SectionConfig",
    "SectionRegistry",
    "SectionRenderer",
    "TemplateSection",
    "build_default_registry",
    "layout_to_builtins",
    "parse_layout_config",
    "plan_sections",
    "resolve_layout_config",
    "section_is_visible",
]
