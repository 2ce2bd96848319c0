"""Tests for the ``pages`` command-line interface."""

from __future__ import annotations

import logging
import typing as typ
from textwrap import dedent

import msgspec
import pytest

from affiliate_pages.cli import app

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


def _run(argv: list[str]) -> int:
    """Invoke the CLI and return its exit status."""
    try:
        app(argv)
    except SystemExit as exc:
        return int(exc.code or 0)
    return 0


@pytest.fixture(autouse=True)
def restore_root_logger() -> cabc.Iterator[None]:
    """Undo the root handler the CLI installs."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def config_path(tmp_path: Path, catalog_payload: dict[str, typ.Any]) -> Path:
    """Write a one-site configuration with a catalog and two articles."""
    (tmp_path / "catalog.json").write_bytes(msgspec.json.encode(catalog_payload))
    (tmp_path / "good.md").write_text("[product:acme-widget]\n", encoding="utf-8")
    (tmp_path / "bad.md").write_text(
        "[product:ghost]\n\n[products:boats]\n", encoding="utf-8"
    )
    path = tmp_path / "pages.yaml"
    path.write_text(
        dedent(
            f"""
            defaults:
              output_dir: {tmp_path / "public"}
            niches:
              gaming:
                layout_preset: gaming
            sites:
              techflow:
                domain: techflow.example.com
                niche: gaming
                catalog: catalog.json
                articles:
                  good:
                    source: good.md
                  bad:
                    source: bad.md
            """
        ),
        encoding="utf-8",
    )
    return path


def test_generate_writes_pages(config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """``generate`` prints each written page."""
    assert _run(["generate", "--config", str(config_path)]) == 0
    out = capsys.readouterr().out
    assert "articles/good.html" in out
    assert "products/acme-widget.html" in out
    assert (config_path.parent / "public" / "techflow" / "articles" / "bad.html").exists()


def test_check_reports_dangling_references(
    config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """``check`` lists each missing slug and exits non-zero."""
    assert _run(["check", "--config", str(config_path)]) == 1
    captured = capsys.readouterr()
    assert "techflow/bad: missing product 'ghost'" in captured.out
    assert "techflow/bad: missing category 'boats'" in captured.out
    assert "techflow/good" not in captured.out
    assert "1 article(s) with dangling references" in captured.err


def test_refs_prints_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """``refs`` prints deduplicated slugs in first-seen order."""
    source = tmp_path / "a.md"
    source.write_text(
        "[comparison:b,a] [product:a] [products:mice]", encoding="utf-8"
    )
    assert _run(["refs", str(source)]) == 0
    payload = msgspec.json.decode(capsys.readouterr().out)
    assert payload == {"productSlugs": ["b", "a"], "categorySlugs": ["mice"]}


def test_shortcode_normalises_value(capsys: pytest.CaptureFixture[str]) -> None:
    """``shortcode`` prints the canonical form and label."""
    assert _run(["shortcode", "[products:mice,5]"]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "[products:mice,5]",
        "Products: mice (limit: 5)",
    ]
    assert _run(["shortcode", "product:acme-widget,default"]) == 0
    assert capsys.readouterr().out.splitlines()[0] == "[product:acme-widget]"


def test_shortcode_rejects_invalid(capsys: pytest.CaptureFixture[str]) -> None:
    """Unknown shortcode types exit with status 2."""
    assert _run(["shortcode", "video:abc"]) == 2
    assert "not a shortcode" in capsys.readouterr().err


def test_layout_prints_resolved_preset(
    config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """``layout`` prints the niche layout using camelCase keys."""
    assert _run(["layout", "gaming", "--config", str(config_path)]) == 0
    payload = msgspec.json.decode(capsys.readouterr().out)
    main = next(zone for zone in payload["zones"] if zone["id"] == "main")
    assert {"id": "specifications", "conditionField": "specifications"} in main["sections"]
    assert payload["options"]["maxWidth"] == "default"
