"""Plugin discovery and blueprint registration."""

from __future__ import annotations

import importlib
import pkgutil
from pathlib import Path
from typing import Iterable, Iterator

from flask import Flask

PLUGINS_ROOT = Path(__file__).resolve().parent.parent


def discover_plugins(package: str = "plugins") -> Iterator[str]:
    """Yield dotted import paths for every plugin package."""

    package_path = PLUGINS_ROOT / package
    if not package_path.exists():
        return
    for module_info in sorted(pkgutil.iter_modules([str(package_path)]), key=lambda m: m.name):
        if module_info.ispkg:
            yield f"{package}.{module_info.name}"


def _iter_blueprints(package: str = "plugins") -> Iterable:
    blueprints = []
    for dotted in discover_plugins(package):
        module = importlib.import_module(f"{dotted}.api")
        module_blueprints = getattr(module, "blueprints", None)
        if module_blueprints:
            blueprints.extend(module_blueprints)
            continue
        blueprint = getattr(module, "bp", None)
        if blueprint is not None:
            blueprints.append(blueprint)
    return blueprints


def register_plugin_blueprints(app: Flask) -> None:
    for bp in _iter_blueprints():
        app.register_blueprint(bp)


def load_manifests(package: str = "plugins") -> list[dict[str, str]]:
    manifests: list[dict[str, str]] = []
    for dotted in discover_plugins(package):
        manifest = getattr(importlib.import_module(dotted), "manifest", None)
        if manifest:
            manifests.append(dict(manifest))
    manifests.sort(key=lambda item: item["title"].lower())
    return manifests


__all__ = ["discover_plugins", "register_plugin_blueprints", "load_manifests"]
