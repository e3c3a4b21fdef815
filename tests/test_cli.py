"""
Tests for the querysketch command line interface.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from querysketch import __version__
from querysketch.cli.main import app, load_source_description

runner = CliRunner()


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    """Two CSV files described by a relative-path source description."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    for i, n in enumerate((8, 40)):
        lines = ["id,city"] + [f"{j},c{j % 4}" for j in range(n)]
        (data_dir / f"part-{i}.csv").write_text("\n".join(lines) + "\n")

    description = tmp_path / "events.json"
    description.write_text(json.dumps({
        "format": "csv",
        "paths": ["data/part-0.csv", "data/part-1.csv"],
        "options": {"header": "true"},
    }))
    return description


class TestSourceDescription:

    def test_relative_paths_resolved(self, source_file: Path) -> None:
        source, relation = load_source_description(source_file)
        assert source.source_count == 2
        assert source.paths[0] == str(source_file.parent / "data" / "part-0.csv")
        assert relation.paths == source.paths
        assert relation.options == {"header": "true"}


class TestEstimateCommand:

    def test_file_skipping_json(self, source_file: Path) -> None:
        result = runner.invoke(
            app,
            ["estimate", str(source_file), "--kind", "file-skipping", "--sample-size", "100", "--json"],
        )
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        size_info = payload["candidate"]["size_info"]
        assert size_info["write_size"] == 2
        assert size_info["read_size_info"]["bytes"] == 1
        assert payload["metrics"]["rows_seen"] == 48

    def test_repartitioning_table(self, source_file: Path) -> None:
        result = runner.invoke(app, ["estimate", str(source_file), "--sample-size", "4"])
        assert result.exit_code == 0, result.output
        assert "Write size" in result.stdout
        assert "repartitioning" in result.stdout

    def test_sample_size_from_environment(self, source_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("QUERYSKETCH_SAMPLE_SIZE", "4")
        result = runner.invoke(app, ["estimate", str(source_file), "--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["sample_size"] == 4

    def test_unsupported_format_fails(self, tmp_path: Path) -> None:
        description = tmp_path / "bad.json"
        description.write_text(json.dumps({"format": "avro", "paths": ["x.avro"]}))
        result = runner.invoke(app, ["estimate", str(description)])
        assert result.exit_code == 1

    def test_invalid_description_fails(self, tmp_path: Path) -> None:
        description = tmp_path / "bad.json"
        description.write_text(json.dumps({"paths": ["x.csv"]}))
        result = runner.invoke(app, ["estimate", str(description)])
        assert result.exit_code == 1

    def test_unreadable_column_fails_cleanly(self, source_file: Path) -> None:
        data = json.loads(source_file.read_text())
        data["schema"] = {"no_such_column": "int"}
        source_file.write_text(json.dumps(data))

        result = runner.invoke(app, ["estimate", str(source_file)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)


class TestSketchCommand:

    def test_sketch_json(self, source_file: Path) -> None:
        result = runner.invoke(app, ["sketch", str(source_file), "-n", "10", "--json"])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["total_count"] == 48
        assert [p["sample_size"] for p in payload["partitions"]] == [8, 10]

    def test_sketch_table(self, source_file: Path) -> None:
        result = runner.invoke(app, ["sketch", str(source_file), "-n", "10"])
        assert result.exit_code == 0, result.output
        assert "Total rows" in result.stdout

    def test_unreadable_column_fails_cleanly(self, source_file: Path) -> None:
        data = json.loads(source_file.read_text())
        data["schema"] = {"no_such_column": "int"}
        source_file.write_text(json.dumps(data))

        result = runner.invoke(app, ["sketch", str(source_file), "--json"])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout
