"""Asset bundle collection and materialization.

Version: 0.1.0

The bundle is described by the ``flutter:`` section of ``pubspec.yaml``:

- ``assets:`` lists files, or directories when the entry ends with ``/``
  (only the files directly inside the directory are bundled).
- ``fonts:`` lists font families whose ``asset`` files are bundled too.

Two generated entries are always added: ``AssetManifest.json`` and
``FontManifest.json``.
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any, Callable, Mapping

from webdevice.core.project import MANIFEST_FILE_NAME, load_manifest

logger = logging.getLogger(__name__)

ASSET_MANIFEST_NAME = "AssetManifest.json"
FONT_MANIFEST_NAME = "FontManifest.json"


class AssetBundle:
    """Collects the assets declared by a project into in-memory entries."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.entries: dict[str, bytes] = {}

    def build(self) -> int:
        """Collect all declared assets. Returns 0 on success, 1 on failure."""
        self.entries = {}
        manifest = load_manifest(self.root)
        if manifest is None:
            logger.error("No valid %s found in %s", MANIFEST_FILE_NAME, self.root)
            return 1

        section = manifest.get("flutter") or {}
        if not isinstance(section, dict):
            logger.error("The 'flutter' section of %s must be a mapping", MANIFEST_FILE_NAME)
            return 1

        declared_assets = section.get("assets") or []
        declared_fonts = section.get("fonts") or []
        if not isinstance(declared_assets, list) or not isinstance(declared_fonts, list):
            logger.error("'assets' and 'fonts' in %s must be lists", MANIFEST_FILE_NAME)
            return 1

        assets: list[str] = []
        for entry in declared_assets:
            collected = self._collect(str(entry))
            if collected is None:
                return 1
            assets.extend(collected)

        font_manifest: list[dict[str, Any]] = []
        for family in declared_fonts:
            if not isinstance(family, dict) or not isinstance(family.get("fonts") or [], list):
                logger.error("Invalid font family in %s: %r", MANIFEST_FILE_NAME, family)
                return 1
            fonts = []
            for font in family.get("fonts") or []:
                if not isinstance(font, dict):
                    logger.error("Invalid font entry in %s: %r", MANIFEST_FILE_NAME, font)
                    return 1
                asset = str(font.get("asset", ""))
                collected = self._collect(asset)
                if not collected:
                    return 1
                assets.extend(collected)
                fonts.append(dict(font))
            font_manifest.append({"family": family.get("family"), "fonts": fonts})

        asset_manifest = {asset: [asset] for asset in sorted(set(assets))}
        self.entries[ASSET_MANIFEST_NAME] = json.dumps(asset_manifest, indent=2).encode("utf-8")
        self.entries[FONT_MANIFEST_NAME] = json.dumps(font_manifest, indent=2).encode("utf-8")
        logger.debug("Asset bundle built with %d entries", len(self.entries))
        return 0

    def _collect(self, entry: str) -> list[str] | None:
        """Read one manifest entry into ``entries``; None if it is missing."""
        if not entry:
            logger.error("Empty asset entry in %s", MANIFEST_FILE_NAME)
            return None

        source = self.root / entry
        if entry.endswith("/"):
            if not source.is_dir():
                logger.error("Asset directory not found: %s", source)
                return None
            files = sorted(p for p in source.iterdir() if p.is_file())
        elif source.is_file():
            files = [source]
        else:
            logger.error("Asset not found: %s", source)
            return None

        names = []
        for path in files:
            name = path.relative_to(self.root).as_posix()
            try:
                self.entries[name] = path.read_bytes()
            except OSError as e:
                logger.error("Cannot read asset %s: %s", path, e)
                return None
            names.append(name)
        return names


def write_bundle(directory: Path, entries: Mapping[str, bytes]) -> None:
    """Recreate ``directory`` and write every bundle entry beneath it."""
    if directory.exists():
        shutil.rmtree(directory)
    directory.mkdir(parents=True, exist_ok=True)

    for name, content in entries.items():
        target = directory / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
    logger.info("Wrote %d bundle entries to %s", len(entries), directory)


BundleWriter = Callable[[Path, Mapping[str, bytes]], None]
