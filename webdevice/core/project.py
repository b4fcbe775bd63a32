"""Web application package: the project a web device serves."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

MANIFEST_FILE_NAME = "pubspec.yaml"
WEB_DIRECTORY_NAME = "web"
DEFAULT_TARGET = Path("lib") / "main.dart"


def load_manifest(root: Path) -> dict[str, Any] | None:
    """Return the parsed ``pubspec.yaml`` or None when absent or invalid."""
    manifest_path = root / MANIFEST_FILE_NAME
    if not manifest_path.is_file():
        return None
    try:
        with manifest_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to read %s: %s", manifest_path, e)
        return None
    if not isinstance(data, dict):
        logger.error("Manifest %s is not a mapping", manifest_path)
        return None
    return data


@dataclass
class WebProject:
    """Application package for a web build of a project."""

    root: Path
    manifest: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_directory(cls, root: Path) -> WebProject:
        return cls(root=root, manifest=load_manifest(root) or {})

    @property
    def id(self) -> str:
        return self.name

    @property
    def name(self) -> str:
        """The app name declared in the manifest, else the directory name."""
        declared = self.manifest.get("name")
        if isinstance(declared, str) and declared.strip():
            return declared.strip()
        return self.root.name

    @property
    def web_source_path(self) -> Path:
        """The location of the web source assets (``index.html``)."""
        return self.root / WEB_DIRECTORY_NAME

    @property
    def default_target(self) -> Path:
        return self.root / DEFAULT_TARGET

    def has_web(self) -> bool:
        return self.web_source_path.is_dir()
