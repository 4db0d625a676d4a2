"""Run orchestration: validate the project, clamp depth, build the graph, write output."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from pathlib import Path
from typing import Any

from modgraph.analysis import analyze
from modgraph.analysis.graph_models import GraphResult
from modgraph.models import MANIFEST_NAME, MODULES_DIR_NAME, AnalyzeConfig, clamp_depth

logger = logging.getLogger(__name__)


class InvalidProjectError(ValueError):
    """The root directory cannot be analyzed."""


def validate_project(root_dir: Path) -> None:
    """Require a directory holding both a manifest and a node_modules folder."""
    if not root_dir.is_dir():
        raise InvalidProjectError(f"{root_dir} is not a valid dir: directory not found")
    if not (root_dir / MANIFEST_NAME).exists():
        raise InvalidProjectError(f"{root_dir} is not a valid dir: no {MANIFEST_NAME}")
    if not (root_dir / MODULES_DIR_NAME).exists():
        raise InvalidProjectError(f"{root_dir} is not a valid dir: no {MODULES_DIR_NAME}")


def run_analysis(config: AnalyzeConfig) -> GraphResult:
    """Validate *config.root_dir* and build its dependency graph."""
    validate_project(config.root_dir)
    depth = clamp_depth(config.depth)

    start = time.perf_counter()
    result = asyncio.run(analyze(
        config.root_dir,
        depth=depth,
        include_dev_dependencies=config.include_dev_dependencies,
        cycle_mode=config.cycle_mode,
    ))
    logger.info("Time: %.1fms", (time.perf_counter() - start) * 1000)
    return result


def write_json(result: GraphResult, json_path: Path) -> Path:
    try:
        json_path.write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")
    except OSError as e:
        logger.error("Error writing to file %s: %s", json_path, e)
        raise
    return json_path


def summarize(result: GraphResult) -> dict[str, Any]:
    return {
        "nodes": len(result.nodes),
        "edges": len(result.edges),
        "multiple_versions": result.duplicated_names,
        "circular_count": len(result.circular_edges),
        "circular_edges": [
            [e.source_id, e.target_id] for e in result.circular_edges
        ],
    }
