"""Shared helpers for building synthetic node_modules trees."""

import json

import pytest


def write_package(directory, name, version, dependencies=None,
                  dev_dependencies=None, description=""):
    directory.mkdir(parents=True, exist_ok=True)
    manifest = {"name": name, "version": version, "description": description}
    if dependencies is not None:
        manifest["dependencies"] = dependencies
    if dev_dependencies is not None:
        manifest["devDependencies"] = dev_dependencies
    (directory / "package.json").write_text(json.dumps(manifest))
    return directory


@pytest.fixture
def project(tmp_path):
    """Root project ``app@1.0.0`` depending on ``lib@^1.0.0`` with ``lib@1.2.0`` installed."""
    root = tmp_path / "app"
    write_package(root, "app", "1.0.0", {"lib": "^1.0.0"}, description="the app")
    write_package(root / "node_modules" / "lib", "lib", "1.2.0", description="a lib")
    return root
