"""Directory resolution: existence checks, symlinks and manifest parsing.

Every helper here absorbs filesystem errors. A missing path, a broken
symlink or an unreadable manifest degrades to "no package here" rather
than aborting the traversal.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any

from modgraph.models import MANIFEST_NAME

logger = logging.getLogger(__name__)


def _exists(path: Path) -> bool:
    try:
        os.stat(path)
    except (OSError, ValueError):
        return False
    return True


def _real_path(path: Path) -> Path:
    try:
        return Path(os.path.realpath(path, strict=True))
    except (OSError, ValueError):
        return path


def _read_manifest(directory: Path) -> dict[str, Any] | None:
    manifest_path = directory / MANIFEST_NAME
    if not _exists(manifest_path):
        return None
    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Error reading %s: %s", manifest_path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Error reading %s: manifest is not a JSON object", manifest_path)
        return None
    return data


async def exists(path: Path) -> bool:
    """Return True if *path* exists. Never raises."""
    return await asyncio.to_thread(_exists, path)


async def resolve_real_path(path: Path) -> Path:
    """Follow symlinks; fall back to *path* itself when resolution fails."""
    return await asyncio.to_thread(_real_path, path)


async def load_manifest(directory: Path) -> dict[str, Any] | None:
    """Read ``<directory>/package.json``.

    Returns None when the manifest is absent or malformed.
    """
    return await asyncio.to_thread(_read_manifest, directory)


def declared_dependencies(
    manifest: dict[str, Any],
    include_dev_dependencies: bool = False,
) -> dict[str, str]:
    """Merge ``dependencies`` and, optionally, ``devDependencies`` into one map.

    Development entries overwrite production entries of the same name.
    """
    merged: dict[str, str] = {}
    sections = ["dependencies"]
    if include_dev_dependencies:
        sections.append("devDependencies")
    for section in sections:
        entries = manifest.get(section) or {}
        if not isinstance(entries, dict):
            logger.debug("Ignoring non-object %s in %s", section, manifest.get("name"))
            continue
        for name, version_range in entries.items():
            if isinstance(version_range, str):
                merged[name] = version_range
    return merged
