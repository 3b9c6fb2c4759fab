"""
Tests for the command-line interface.
"""

import json

import pytest
from typer.testing import CliRunner

from design_extraction.cli import app

runner = CliRunner()


@pytest.fixture
def tree_file(tmp_path):
    path = tmp_path / "tree.json"
    path.write_text(
        json.dumps(
            {
                "document": {
                    "id": "0:0",
                    "name": "Page",
                    "type": "FRAME",
                    "absoluteBoundingBox": {"x": 0, "y": 0, "width": 1440, "height": 900},
                    "children": [
                        {"id": "1:1", "name": "Header", "type": "FRAME"},
                        {"id": "1:2", "name": "Hidden", "type": "VECTOR", "visible": False},
                        {"id": "1:3", "name": "CTA Button", "type": "INSTANCE", "fills": [{}]},
                    ],
                }
            }
        )
    )
    return path


class TestExtractCommand:
    def test_writes_results(self, tree_file, tmp_path):
        output = tmp_path / "out.json"

        result = runner.invoke(app, ["extract", str(tree_file), "--output", str(output), "--sequential"])

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        assert data["performance"]["total_nodes"] == 4
        assert data["performance"]["processed_nodes"] == 4
        assert {r["id"] for r in data["results"]} == {"0:0", "1:1", "1:2", "1:3"}
        button = next(r for r in data["results"] if r["id"] == "1:3")
        assert button["fills"] == 1

    def test_visible_only_and_budget(self, tree_file, tmp_path):
        output = tmp_path / "out.json"

        result = runner.invoke(
            app,
            ["extract", str(tree_file), "--visible-only", "--max-nodes", "2", "--output", str(output)],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        assert data["performance"]["total_nodes"] == 3
        assert data["performance"]["skipped_nodes"] == 1
        assert len(data["results"]) == 2

    def test_missing_file_exits_with_error(self, tmp_path):
        result = runner.invoke(app, ["extract", str(tmp_path / "nope.json")])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_invalid_option_value_exits_with_error(self, tree_file):
        result = runner.invoke(app, ["extract", str(tree_file), "--batch-size", "0"])

        assert result.exit_code == 1


def test_show_config():
    result = runner.invoke(app, ["show-config"])

    assert result.exit_code == 0
    config = json.loads(result.output)
    assert config["streaming"]["batch_size"] == 50
    assert config["processing"]["fallback"] == "simplify"


class TestBadEnvironment:
    """Test that invalid environment settings fail cleanly."""

    @pytest.fixture(autouse=True)
    def fresh_settings(self, monkeypatch):
        from design_extraction import config as config_module

        monkeypatch.setattr(config_module, "_settings", None)

    def test_extract_with_non_numeric_max_nodes(self, monkeypatch, tree_file):
        monkeypatch.setenv("MAX_NODES", "abc")

        result = runner.invoke(app, ["extract", str(tree_file)])

        assert result.exit_code == 1
        assert "Error" in result.output
        assert not isinstance(result.exception, ValueError)

    def test_show_config_with_invalid_worker_count(self, monkeypatch):
        monkeypatch.setenv("MAX_WORKERS", "0")

        result = runner.invoke(app, ["show-config"])

        assert result.exit_code == 1
        assert "Error" in result.output
