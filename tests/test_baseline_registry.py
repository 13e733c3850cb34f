"""Tests for the visual baseline store."""

import hashlib
import json

from conftest import create_png
from landing_qa.baselines.registry import BaselineStore


class TestBaselineStore:

    def test_load_creates_empty_registry(self, baseline_store):
        registry = baseline_store.load()
        assert registry.base_url == "http://127.0.0.1:8080"
        assert registry.baselines == {}

    def test_load_corrupt_registry_starts_fresh(self, baseline_store):
        baseline_store.registry_path.parent.mkdir(parents=True)
        baseline_store.registry_path.write_text("{not json")
        assert baseline_store.load().baselines == {}

    def test_baseline_key(self):
        assert BaselineStore.baseline_key("homepage-desktop", "desktop") == "homepage-desktop__desktop"

    def test_store_baseline_copies_image(self, baseline_store, tmp_path):
        registry = baseline_store.load()
        source = create_png(tmp_path / "capture.png")

        entry = baseline_store.store_baseline(
            registry, "footer", "desktop", 1280, 720, source, "run_abc",
        )

        stored = baseline_store.baselines_dir / "images" / "desktop" / "footer.png"
        assert stored.exists()
        assert entry.image_path == "images/desktop/footer.png"
        assert entry.image_hash == hashlib.sha256(stored.read_bytes()).hexdigest()
        assert entry.run_id == "run_abc"
        assert registry.baselines["footer__desktop"] is entry

    def test_get_baseline_round_trip(self, baseline_store, tmp_path):
        registry = baseline_store.load()
        source = create_png(tmp_path / "capture.png")
        baseline_store.store_baseline(registry, "tags-section", "mobile", 375, 667, source, "run_1")
        baseline_store.save(registry)

        reloaded = baseline_store.load()
        entry = baseline_store.get_baseline(reloaded, "tags-section", "mobile")
        assert entry is not None
        assert baseline_store.get_baseline_image_path(entry).exists()
        assert reloaded.last_updated

    def test_missing_image_counts_as_missing_baseline(self, baseline_store, tmp_path):
        registry = baseline_store.load()
        source = create_png(tmp_path / "capture.png")
        entry = baseline_store.store_baseline(registry, "footer", "desktop", 1280, 720, source, "run_1")
        baseline_store.get_baseline_image_path(entry).unlink()

        assert baseline_store.get_baseline(registry, "footer", "desktop") is None

    def test_unknown_baseline(self, baseline_store):
        assert baseline_store.get_baseline(baseline_store.load(), "nope", "desktop") is None

    def test_save_writes_json(self, baseline_store):
        baseline_store.save(baseline_store.load())
        data = json.loads(baseline_store.registry_path.read_text())
        assert data["base_url"] == "http://127.0.0.1:8080"

    def test_reset_removes_everything(self, baseline_store, tmp_path):
        registry = baseline_store.load()
        source = create_png(tmp_path / "capture.png")
        baseline_store.store_baseline(registry, "a", "desktop", 1280, 720, source, "run_1")
        baseline_store.store_baseline(registry, "b", "mobile", 375, 667, source, "run_1")
        baseline_store.save(registry)

        assert baseline_store.reset() == 2
        assert not baseline_store.registry_path.exists()
        assert not (baseline_store.baselines_dir / "images").exists()
        assert baseline_store.load().baselines == {}

    def test_reset_when_empty(self, baseline_store):
        assert baseline_store.reset() == 0

    def test_save_records_current_base_url(self, baseline_store, tmp_path):
        other = BaselineStore(baseline_store.baselines_dir, "https://example.org")
        other.save(other.load())

        registry = baseline_store.load()
        assert registry.base_url == "https://example.org"
        baseline_store.save(registry)
        assert baseline_store.load().base_url == "http://127.0.0.1:8080"

    def test_modified_image_still_used(self, baseline_store, tmp_path, caplog):
        registry = baseline_store.load()
        entry = baseline_store.store_baseline(
            registry, "footer", "desktop", 1280, 720, create_png(tmp_path / "capture.png"), "run_1",
        )
        create_png(baseline_store.get_baseline_image_path(entry), color=(255, 0, 0))

        assert baseline_store.get_baseline(registry, "footer", "desktop") is entry
        assert "modified" in caplog.text
