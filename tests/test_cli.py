"""
Tests for the command-line interface (offline commands only).
"""

import json

import pytest
from click.testing import CliRunner

from webmap_harvester.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def tilejson_file(tmp_path):
    path = tmp_path / "tiles.json"
    path.write_text(json.dumps({
        "bounds": [-1, -1, 0, 0],
        "minzoom": 0,
        "maxzoom": 1,
        "tiles": ["https://x/{z}/{x}/{y}.pbf"],
    }))
    return path


def test_plan_lists_urls(runner, tilejson_file):
    """plan --list prints every tile URL in order."""
    result = runner.invoke(main, ["plan", str(tilejson_file), "--list"])

    assert result.exit_code == 0, result.output
    lines = [line for line in result.output.splitlines() if line.startswith("https://")]
    assert len(lines) == 8
    assert lines[0] == "https://x/0/0/0.pbf"


def test_plan_rejects_non_tileset(runner, tmp_path):
    """A style document is not a plan."""
    path = tmp_path / "style.json"
    path.write_text(json.dumps({"version": 8, "layers": []}))
    result = runner.invoke(main, ["plan", str(path)])

    assert result.exit_code == 1


def test_plan_rejects_bad_step(runner, tilejson_file):
    """Zero step is a usage error."""
    result = runner.invoke(main, ["plan", str(tilejson_file), "--step", "0"])
    assert result.exit_code == 2


def test_fonts_command(runner):
    """fonts groups URLs into families and lists all shards."""
    result = runner.invoke(main, [
        "fonts",
        "https://x/fonts/fontA/0-255.pbf",
        "https://x/fonts/fontA/256-511.pbf",
        "--list",
    ])

    assert result.exit_code == 0, result.output
    shards = [
        line for line in result.output.splitlines()
        if line.startswith("https://x/fonts/fontA/") and "{" not in line
    ]
    assert len(shards) == 256
    assert shards[-1] == "https://x/fonts/fontA/65280-65535.pbf"


def test_harvest_bad_bounds(runner):
    """Invalid bounds are rejected before any browser starts."""
    result = runner.invoke(main, ["harvest", "https://example.com", "--bounds", "1,2,3"])
    assert result.exit_code == 2
    assert "bounds" in result.output.lower()
