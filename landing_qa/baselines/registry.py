"""On-disk store of reference screenshots, one per (snapshot name, viewport)."""

from __future__ import annotations

import hashlib
import logging
import shutil
import time
from pathlib import Path

from pydantic import ValidationError

from landing_qa.models.visual_baseline import BaselineEntry, VisualBaselineRegistry

logger = logging.getLogger(__name__)

REGISTRY_FILE = "registry.json"
IMAGES_DIR = "images"


def _timestamp() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


def _sha256(path: Path) -> str:
    return hashlib.sha256(path.read_bytes()).hexdigest()


class BaselineStore:
    """Baseline PNGs live under ``images/<viewport>/<name>.png``.

    ``registry.json`` beside them records size, hash and the run that
    captured each image. Entries are keyed by :meth:`baseline_key`.
    """

    def __init__(self, baselines_dir: Path, base_url: str):
        self.baselines_dir = baselines_dir
        self.registry_path = baselines_dir / REGISTRY_FILE
        self.base_url = base_url

    def load(self) -> VisualBaselineRegistry:
        if not self.registry_path.exists():
            return VisualBaselineRegistry(base_url=self.base_url)
        try:
            registry = VisualBaselineRegistry.model_validate_json(
                self.registry_path.read_text(encoding="utf-8")
            )
        except (OSError, ValidationError) as e:
            logger.warning("Ignoring unreadable baseline registry %s: %s", self.registry_path, e)
            return VisualBaselineRegistry(base_url=self.base_url)
        if registry.base_url != self.base_url:
            logger.info(
                "Baselines were captured against %s, now checking %s",
                registry.base_url, self.base_url,
            )
        return registry

    def save(self, registry: VisualBaselineRegistry) -> None:
        self.baselines_dir.mkdir(parents=True, exist_ok=True)
        registry.base_url = self.base_url
        registry.last_updated = _timestamp()
        self.registry_path.write_text(registry.model_dump_json(indent=2), encoding="utf-8")
        logger.debug("Wrote %d baseline entries to %s", len(registry.baselines), self.registry_path)

    @staticmethod
    def baseline_key(name: str, viewport_name: str) -> str:
        return f"{name}__{viewport_name}"

    def get_baseline_image_path(self, entry: BaselineEntry) -> Path:
        return self.baselines_dir / entry.image_path

    def get_baseline(
        self, registry: VisualBaselineRegistry, name: str, viewport_name: str,
    ) -> BaselineEntry | None:
        """Return the entry for ``name`` at ``viewport_name`` if its image is on disk."""
        entry = registry.baselines.get(self.baseline_key(name, viewport_name))
        if entry is None:
            return None
        image = self.get_baseline_image_path(entry)
        if not image.exists():
            logger.warning("Registered baseline %s/%s has no image at %s", viewport_name, name, image)
            return None
        if _sha256(image) != entry.image_hash:
            logger.warning("Baseline image %s was modified since it was captured", image)
        return entry

    def store_baseline(
        self,
        registry: VisualBaselineRegistry,
        name: str,
        viewport_name: str,
        viewport_width: int,
        viewport_height: int,
        source_image_path: Path,
        run_id: str,
    ) -> BaselineEntry:
        """Copy ``source_image_path`` into the store and (re)register it."""
        target = self.baselines_dir / IMAGES_DIR / viewport_name / f"{name}.png"
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source_image_path, target)

        entry = BaselineEntry(
            name=name,
            viewport_name=viewport_name,
            viewport_width=viewport_width,
            viewport_height=viewport_height,
            image_path=target.relative_to(self.baselines_dir).as_posix(),
            captured_at=_timestamp(),
            run_id=run_id,
            image_hash=_sha256(target),
        )
        registry.baselines[self.baseline_key(name, viewport_name)] = entry
        logger.info("Baseline %s/%s captured (%dx%d)", viewport_name, name, viewport_width, viewport_height)
        return entry

    def reset(self) -> int:
        """Remove every baseline image and the registry. Returns how many entries existed."""
        removed = len(self.load().baselines)
        shutil.rmtree(self.baselines_dir / IMAGES_DIR, ignore_errors=True)
        self.registry_path.unlink(missing_ok=True)
        logger.info("Removed %d baselines from %s", removed, self.baselines_dir)
        return removed
