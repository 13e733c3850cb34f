"""Configuration models for the landing page harness."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

AXE_CDN_URL = "https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.9.1/axe.min.js"


class ViewportConfig(BaseModel):
    name: str = "desktop"
    width: int = 1280
    height: int = 720
    label: str = "Desktop"

    @field_validator("width", "height")
    @classmethod
    def positive_dimension(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Viewport dimensions must be positive")
        return v

    def as_size(self) -> dict[str, int]:
        """Return the dict shape Playwright expects for viewport sizes."""
        return {"width": self.width, "height": self.height}


def default_viewports() -> list[ViewportConfig]:
    return [
        ViewportConfig(name="mobile", width=375, height=667, label="iPhone SE"),
        ViewportConfig(name="mobile_large", width=414, height=896, label="iPhone XR"),
        ViewportConfig(name="tablet", width=768, height=1024, label="iPad"),
        ViewportConfig(name="tablet_landscape", width=1024, height=768, label="iPad Landscape"),
        ViewportConfig(name="desktop", width=1280, height=720, label="Desktop"),
        ViewportConfig(name="desktop_large", width=1920, height=1080, label="Desktop Large"),
    ]


class HarnessConfig(BaseModel):
    # Target
    base_url: str = "http://localhost:8080"

    # Viewport table
    viewports: list[ViewportConfig] = Field(default_factory=default_viewports)

    # Execution limits
    readiness_timeout_seconds: float = 15.0
    check_timeout_seconds: float = 60.0
    max_parallel_contexts: int = 4
    headless: bool = True

    # Accessibility engine
    axe_script_url: str = AXE_CDN_URL

    # Visual comparison
    pixel_threshold: float = 0.2  # per-pixel colour distance, fraction of channel range
    max_diff_pixel_ratio: float = 0.0

    # Storage
    baselines_dir: str = "./baselines"
    runs_dir: str = "./runs"

    # Reporting
    report_formats: list[str] = Field(default_factory=lambda: ["html", "json"])
    report_output_dir: str = "./qa-reports"

    @field_validator("pixel_threshold", "max_diff_pixel_ratio")
    @classmethod
    def unit_interval(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("Value must be between 0 and 1")
        return v

    @field_validator("max_parallel_contexts")
    @classmethod
    def at_least_one(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_parallel_contexts must be at least 1")
        return v

    @model_validator(mode="after")
    def unique_viewport_names(self) -> "HarnessConfig":
        names = [vp.name for vp in self.viewports]
        if len(names) != len(set(names)):
            raise ValueError("Viewport names must be unique")
        return self

    def viewport(self, name: str) -> ViewportConfig:
        """Look up a viewport from the table by name."""
        for vp in self.viewports:
            if vp.name == name:
                return vp
        raise KeyError(f"Unknown viewport: {name}")

    def page_url(self, path: str = "/") -> str:
        return self.base_url.rstrip("/") + "/" + path.lstrip("/")

    @classmethod
    def load(cls, path: str | Path) -> "HarnessConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)
