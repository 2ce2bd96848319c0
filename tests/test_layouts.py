"""Tests for layout validation, resolution, and per-product section planning."""

from __future__ import annotations

import logging

import pytest

from affiliate_pages.catalog import ProductMetadata, UsageStep
from affiliate_pages.layouts import (
    BEAUTY_LAYOUT,
    DEFAULT_LAYOUT,
    GAMING_LAYOUT,
    LayoutConfig,
    LayoutConfigError,
    SectionRegistry,
    build_default_registry,
    layout_to_builtins,
    parse_layout_config,
    plan_sections,
    resolve_layout_config,
)


def _stub(section_id: str):  # noqa: ANN202 - test helper
    def render(context: object, props: object) -> str:
        return f"<{section_id}>"

    return render


def _registry(*ids: str) -> SectionRegistry:
    registry = SectionRegistry()
    for section_id in ids:
        registry.register(section_id, _stub(section_id))
    return registry


def _section_ids(zones: list) -> dict[str, list[str]]:  # type: ignore[type-arg]
    return {zone.id: [section.id for section in zone.sections] for zone in zones}


def test_default_layout_shape() -> None:
    """The fallback layout has the documented zones and sections."""
    assert _section_ids_from_layout(DEFAULT_LAYOUT) == {
        "header": ["breadcrumb"],
        "hero": ["hero", "affiliate-partners"],
        "main": ["pros-cons", "full-review", "featured-articles", "related-products"],
        "overlay": ["sticky-bar"],
    }


def _section_ids_from_layout(layout: LayoutConfig) -> dict[str, list[str]]:
    return {zone.id: [section.id for section in zone.sections] for zone in layout.zones}


@pytest.mark.parametrize("layout", [None, LayoutConfig()])
def test_resolve_falls_back_to_default(layout: LayoutConfig | None) -> None:
    """Missing or zone-less layouts resolve to the default layout."""
    assert resolve_layout_config(layout) is DEFAULT_LAYOUT


def test_resolve_keeps_niche_layout() -> None:
    """A niche layout with zones is used as-is."""
    assert resolve_layout_config(GAMING_LAYOUT) is GAMING_LAYOUT


def test_parse_layout_config_reads_camel_case() -> None:
    """Niche JSON is validated into typed structs."""
    layout = parse_layout_config(
        {
            "zones": [
                {
                    "id": "main",
                    "sections": [
                        {"id": "ingredients", "conditionField": "ingredients"},
                        {"id": "pros-cons", "enabled": False, "props": {"title": "Verdict"}},
                    ],
                }
            ],
            "options": {"twoColumnHero": False, "maxWidth": "wide"},
        }
    )
    assert layout is not None
    main = layout.zone("main")
    assert main is not None
    assert main.sections[0].condition_field == "ingredients"
    assert main.sections[1].enabled is False
    assert main.sections[1].props == {"title": "Verdict"}
    assert layout.options.max_width == "wide"
    assert layout.options.two_column_hero is False
    assert parse_layout_config(None) is None


@pytest.mark.parametrize(
    "raw",
    [
        {"zones": "main"},
        {"zones": [{"sections": []}]},
        {"options": {"maxWidth": "enormous"}},
        ["zones"],
    ],
)
def test_parse_layout_config_rejects_bad_shapes(raw: object) -> None:
    """Malformed layouts raise ``LayoutConfigError``."""
    with pytest.raises(LayoutConfigError, match="Invalid layout configuration"):
        parse_layout_config(raw)


def test_layout_to_builtins_uses_wire_names() -> None:
    """Serialised layouts use camelCase keys and omit default section fields."""
    data = layout_to_builtins(BEAUTY_LAYOUT)
    hero = next(zone for zone in data["zones"] if zone["id"] == "hero")
    assert hero["sections"][-1] == {
        "id": "skin-compatibility",
        "conditionField": "skinTypes",
    }
    assert data["options"]["twoColumnHero"] is True


def test_plan_sections_applies_conditions() -> None:
    """Sections whose condition field is empty are dropped for that product."""
    registry = _registry(
        "breadcrumb", "hero", "pros-cons", "ingredients", "how-to-use", "skin-compatibility"
    )
    metadata = ProductMetadata(
        how_to_use=(UsageStep(step=1, instruction="Apply"),), skin_types=()
    )
    zones = plan_sections(BEAUTY_LAYOUT, registry, metadata)
    assert _section_ids(zones) == {
        "header": ["breadcrumb"],
        "hero": ["hero"],
        "main": ["pros-cons", "how-to-use"],
    }


def test_plan_sections_skips_disabled_sections() -> None:
    """Disabled sections never render."""
    layout = parse_layout_config(
        {"zones": [{"id": "main", "sections": [{"id": "a", "enabled": False}, {"id": "b"}]}]}
    )
    assert layout is not None
    zones = plan_sections(layout, _registry("a", "b"), ProductMetadata())
    assert _section_ids(zones) == {"main": ["b"]}


def test_plan_sections_soft_fails_on_unregistered_ids(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Unknown section ids are logged and skipped."""
    layout = parse_layout_config(
        {"zones": [{"id": "main", "sections": [{"id": "mystery"}, {"id": "b"}]}]}
    )
    assert layout is not None
    with caplog.at_level(logging.WARNING, logger="affiliate_pages.layouts"):
        zones = plan_sections(layout, _registry("b"), ProductMetadata())
    assert _section_ids(zones) == {"main": ["b"]}
    assert "mystery" in caplog.text


def test_registry_overwrite_warns(caplog: pytest.LogCaptureFixture) -> None:
    """Re-registering an id replaces it and logs a warning."""
    registry = _registry("hero")
    replacement = _stub("new-hero")
    with caplog.at_level(logging.WARNING, logger="affiliate_pages.layouts"):
        registry.register("hero", replacement)
    assert registry.get("hero") is replacement
    assert "already registered" in caplog.text
    assert "hero" in registry
    assert registry.ids() == ["hero"]
    registry.clear()
    assert len(registry) == 0
    assert registry.get("hero") is None


def test_default_registry_covers_every_preset_section() -> None:
    """Every section named by a preset layout has a renderer."""
    registry = build_default_registry()
    for layout in (DEFAULT_LAYOUT, GAMING_LAYOUT, BEAUTY_LAYOUT):
        for zone in layout.zones:
            for section in zone.sections:
                assert section.id in registry, f"{section.id} is not registered"
