"""Reference screenshots for the visual family and the registry that indexes them."""

from __future__ import annotations

from pydantic import BaseModel, Field


class BaselineEntry(BaseModel):
    """One stored snapshot: ``name`` captured at ``viewport_name``."""

    name: str
    viewport_name: str
    viewport_width: int
    viewport_height: int
    image_path: str  # relative to the baselines directory
    captured_at: str
    run_id: str
    image_hash: str  # sha256 of the PNG bytes

    @property
    def dimensions(self) -> str:
        return f"{self.viewport_width}x{self.viewport_height}"


class VisualBaselineRegistry(BaseModel):
    base_url: str  # site the snapshots were last saved against
    last_updated: str = ""
    baselines: dict[str, BaselineEntry] = Field(default_factory=dict)  # "<name>__<viewport>"
