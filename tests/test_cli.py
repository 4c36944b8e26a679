from __future__ import annotations

import contextlib
import io
import json
from pathlib import Path

import pytest
from chartnav.cli import main
from chartnav.settings import default_settings, load_settings


def _run_cli(args: list[str]) -> str:
    buffer = io.StringIO()
    with contextlib.redirect_stdout(buffer):
        main(args)
    return buffer.getvalue()


def _write_spec(tmp_path: Path) -> Path:
    payload = {
        "type": "chart",
        "mark": "bar",
        "description": "Fruit sold last week",
        "axes": [
            {
                "type": "discrete",
                "axisType": "x",
                "field": "fruit",
                "title": "Fruit",
                "values": ["apple", "pear"],
            }
        ],
        "data": [
            {"fruit": "apple", "sold": 3},
            {"fruit": "pear", "sold": 5},
        ],
    }
    path = tmp_path / "spec.json"
    path.write_text(json.dumps(payload))
    return path


def test_cli_tree_prints_outline(tmp_path: Path) -> None:
    spec_path = _write_spec(tmp_path)

    output = _run_cli(["tree", "--spec", str(spec_path)])
    lines = output.splitlines()

    assert lines[0] == "Fruit sold last week."
    assert lines[1] == 'Bar chart. With axis Fruit.'
    assert lines[2].startswith('  X-axis titled "Fruit".')
    assert len(lines) == 1 + 6


def test_cli_tree_with_level_preset_and_settings(tmp_path: Path) -> None:
    spec_path = _write_spec(tmp_path)
    settings_path = tmp_path / "settings.yaml"
    _run_cli(["settings", "init", "--out", str(settings_path)])
    assert load_settings(settings_path) == default_settings()

    output = _run_cli(
        [
            "tree",
            "--spec",
            str(spec_path),
            "--settings",
            str(settings_path),
            "--level-preset",
            "axis=low",
        ]
    )

    assert '  X-axis titled "Fruit". 2 values.' in output.splitlines()


def test_cli_rejects_bad_level_preset(tmp_path: Path) -> None:
    spec_path = _write_spec(tmp_path)

    with pytest.raises(SystemExit):
        _run_cli(["tree", "--spec", str(spec_path), "--level-preset", "root=high"])
    with pytest.raises(SystemExit):
        _run_cli(["tree", "--spec", str(spec_path), "--level-preset", "axis=shouty"])


def test_cli_table_export(tmp_path: Path) -> None:
    spec_path = _write_spec(tmp_path)
    out_path = tmp_path / "table.csv"

    output = _run_cli(["table", "--spec", str(spec_path), "--out", str(out_path)])

    assert "Table written" in output
    assert out_path.read_text().splitlines()[0] == "fruit"


def test_cli_missing_spec_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        _run_cli(["tree", "--spec", str(tmp_path / "missing.json")])


def test_cli_settings_show() -> None:
    output = _run_cli(["settings", "show"])

    assert "axis:" in output
    assert "  low: name (short), size (short)" in output
