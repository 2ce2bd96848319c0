"""Behaviour tests for niche product layouts using pytest-bdd.

These scenarios plan product pages from the gaming preset against the shared
catalog fixture. They check that metadata-gated sections follow the product's
data and that unregistered sections are skipped rather than raising.

Usage
-----
Run ``pytest tests/bdd/test_product_layout.py -v`` to execute only these
scenarios.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from affiliate_pages.layouts import (
    GAMING_LAYOUT,
    ResolvedZone,
    SectionRegistry,
    build_default_registry,
    plan_sections,
)

if typ.TYPE_CHECKING:
    from affiliate_pages.catalog import Catalog

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "product_layout.feature"
scenarios(FEATURE_FILE)

ScenarioState = dict[str, typ.Any]


@pytest.fixture
def scenario_state() -> ScenarioState:
    """Share mutable scenario data across pytest-bdd steps."""
    return {}


@given("the gaming layout with the default section registry")
def given_default_registry(scenario_state: ScenarioState) -> None:
    """Use the packaged section templates."""
    scenario_state["registry"] = build_default_registry()


@given(parsers.parse('the gaming layout with a registry holding only "{section_id}"'))
def given_partial_registry(section_id: str, scenario_state: ScenarioState) -> None:
    """Register a single section copied from the default registry."""
    renderer = build_default_registry().get(section_id)
    assert renderer is not None
    registry = SectionRegistry()
    registry.register(section_id, renderer)
    scenario_state["registry"] = registry


@when(parsers.parse('the page for "{slug}" is planned'))
def when_planned(slug: str, scenario_state: ScenarioState, catalog: Catalog) -> None:
    """Plan the gaming layout for a catalog product."""
    record = catalog.get_product(slug)
    assert record is not None
    registry = typ.cast("SectionRegistry", scenario_state["registry"])
    zones = plan_sections(GAMING_LAYOUT, registry, record.metadata)
    scenario_state["zones"] = {zone.id: zone for zone in zones}


def _section_ids(scenario_state: ScenarioState, zone_id: str) -> list[str]:
    zones = typ.cast("dict[str, ResolvedZone]", scenario_state["zones"])
    return [section.id for section in zones[zone_id].sections]


@then(parsers.parse('the "{zone_id}" zone includes the "{section_id}" section'))
def then_zone_includes(zone_id: str, section_id: str, scenario_state: ScenarioState) -> None:
    """Assert ``section_id`` survived planning."""
    assert section_id in _section_ids(scenario_state, zone_id)


@then(parsers.parse('the "{zone_id}" zone excludes the "{section_id}" section'))
def then_zone_excludes(zone_id: str, section_id: str, scenario_state: ScenarioState) -> None:
    """Assert ``section_id`` was dropped during planning."""
    assert section_id not in _section_ids(scenario_state, zone_id)


@then(parsers.parse('only the "{zone_id}" zone is rendered'))
def then_only_zone(zone_id: str, scenario_state: ScenarioState) -> None:
    """Assert every other zone was omitted for being empty."""
    zones = typ.cast("dict[str, ResolvedZone]", scenario_state["zones"])
    assert list(zones) == [zone_id]
