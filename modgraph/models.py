"""Configuration models for a modgraph run."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path

MANIFEST_NAME = "package.json"
MODULES_DIR_NAME = "node_modules"

MIN_DEPTH = 1
MAX_DEPTH = 64
DEFAULT_DEPTH = 3


class CycleMode(enum.Enum):
    PEEL = "peel"  # double topological peel
    SCC = "scc"  # exact strongly connected components


@dataclass
class AnalyzeConfig:
    """Configuration for one analysis run."""
    root_dir: Path = field(default_factory=lambda: Path("."))
    depth: int = DEFAULT_DEPTH
    include_dev_dependencies: bool = False
    json_path: Path | None = None
    cycle_mode: CycleMode = CycleMode.PEEL
    host: str = "127.0.0.1"
    port: int = 3000


def clamp_depth(depth: int) -> int:
    return max(MIN_DEPTH, min(depth, MAX_DEPTH))
