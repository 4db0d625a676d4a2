"""Locate the installed directory that satisfies a declared dependency.

Candidate ``node_modules`` directories are visited from the run's root
down toward the consumer. The first candidate whose installed version
satisfies the declared range wins, even if a deeper install exists.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from nodesemver import max_satisfying

from modgraph.analysis.filesystem import resolve_real_path
from modgraph.analysis.registry import NodeRegistry
from modgraph.models import MODULES_DIR_NAME

logger = logging.getLogger(__name__)


@dataclass
class Resolution:
    name: str
    target_id: str
    target_dir: Path


def satisfies(version: str, version_range: str) -> bool:
    """npm semver check of a single installed version against a range."""
    try:
        return max_satisfying([version], version_range, loose=False) is not None
    except (ValueError, TypeError) as e:
        logger.debug("Unmatchable range %r for %s: %s", version_range, version, e)
        return False


def modules_dirs(root_dir: Path, consumer_dir: Path) -> Iterator[Path]:
    """Yield every node_modules directory on the path root -> consumer, root first."""
    try:
        relative = os.path.relpath(consumer_dir / MODULES_DIR_NAME, root_dir)
    except ValueError:
        # different drive; only the consumer's own node_modules is reachable
        yield consumer_dir / MODULES_DIR_NAME
        return

    current = root_dir
    for part in Path(relative).parts:
        current = current / part
        if part == MODULES_DIR_NAME:
            yield current


class DependencyLocator:
    def __init__(self, registry: NodeRegistry, root_dir: Path):
        self.registry = registry
        self.root_dir = root_dir

    async def probe(
        self, modules_dir: Path, name: str, version_range: str,
    ) -> Resolution | None:
        candidate = await resolve_real_path(modules_dir / name)
        target_id = await self.registry.get_or_create_id(candidate)
        if target_id is None:
            return None

        node = self.registry.resolved(candidate).node
        if not satisfies(node.version, version_range):
            logger.debug("%s does not satisfy %s@%s", target_id, name, version_range)
            return None
        return Resolution(name=name, target_id=target_id, target_dir=candidate)

    async def locate(
        self, name: str, version_range: str, consumer_dir: Path,
    ) -> Resolution | None:
        """Resolve one declared dependency of the package in *consumer_dir*."""
        for modules_dir in modules_dirs(self.root_dir, consumer_dir):
            found = await self.probe(modules_dir, name, version_range)
            if found:
                return found
        return None

    async def locate_all(
        self, dependencies: dict[str, str], consumer_dir: Path,
    ) -> list[Resolution]:
        """Resolve every declared dependency, probing one directory level at a time.

        Dependencies still unresolved at a level are probed concurrently; a
        dependency accepted at one level is not probed again further down.
        """
        pending = dict(dependencies)
        found: list[Resolution] = []
        for modules_dir in modules_dirs(self.root_dir, consumer_dir):
            if not pending:
                break
            results = await asyncio.gather(*(
                self.probe(modules_dir, name, version_range)
                for name, version_range in pending.items()
            ))
            for resolution in results:
                if resolution:
                    found.append(resolution)
                    pending.pop(resolution.name)
        return found
