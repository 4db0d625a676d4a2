"""Tests for run orchestration: validation, depth clamping and JSON output."""

import json

import pytest

from modgraph.models import AnalyzeConfig, clamp_depth
from modgraph.pipeline import InvalidProjectError, run_analysis, summarize, validate_project, write_json


class TestValidation:
    def test_missing_directory(self, tmp_path):
        with pytest.raises(InvalidProjectError, match="directory not found"):
            validate_project(tmp_path / "nope")

    def test_missing_manifest(self, tmp_path):
        (tmp_path / "node_modules").mkdir()
        with pytest.raises(InvalidProjectError, match="package.json"):
            validate_project(tmp_path)

    def test_missing_node_modules(self, tmp_path):
        (tmp_path / "package.json").write_text("{}")
        with pytest.raises(InvalidProjectError, match="node_modules"):
            validate_project(tmp_path)

    def test_valid(self, project):
        validate_project(project)

    def test_invalid_project_is_value_error(self, tmp_path):
        with pytest.raises(ValueError):
            run_analysis(AnalyzeConfig(root_dir=tmp_path / "nope"))


class TestDepthClamp:
    @pytest.mark.parametrize("depth, expected", [(0, 1), (-5, 1), (3, 3), (64, 64), (100, 64)])
    def test_clamp(self, depth, expected):
        assert clamp_depth(depth) == expected

    def test_zero_depth_still_yields_root(self, project):
        result = run_analysis(AnalyzeConfig(root_dir=project, depth=0))
        assert [n.id for n in result.nodes] == ["app@1.0.0"]
        assert result.nodes[0].depth == 1


class TestOutput:
    def test_run_and_write_json(self, project, tmp_path):
        result = run_analysis(AnalyzeConfig(root_dir=project))
        out = write_json(result, tmp_path / "graph.json")
        data = json.loads(out.read_text())
        assert {n["id"] for n in data["nodesList"]} == {"app@1.0.0", "lib@1.2.0"}
        assert data["edgesList"][0]["sourceId"] == "app@1.0.0"

    def test_write_json_error_propagates(self, project, tmp_path):
        result = run_analysis(AnalyzeConfig(root_dir=project))
        with pytest.raises(OSError):
            write_json(result, tmp_path / "missing" / "graph.json")

    def test_summarize(self, project):
        info = summarize(run_analysis(AnalyzeConfig(root_dir=project)))
        assert info == {
            "nodes": 2,
            "edges": 1,
            "multiple_versions": [],
            "circular_count": 0,
            "circular_edges": [],
        }
