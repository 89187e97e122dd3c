"""Tests for the background field, fog and tooltip text."""

import numpy as np
import pytest

from emospine.ambient import BackgroundField, fog_factor, fog_range
from emospine.inspect import describe


class TestBackgroundField:
    def test_shell_radius(self):
        field = BackgroundField(count=500, seed=1)
        radii = np.linalg.norm(field.base, axis=1)
        assert len(field) == 500
        assert radii.min() >= 7.0
        assert radii.max() <= 10.5

    def test_deterministic_for_seed(self):
        a, b = BackgroundField(count=50, seed=3), BackgroundField(count=50, seed=3)
        assert np.array_equal(a.base, b.base)
        assert np.array_equal(a.colors, b.colors)

    def test_drift_is_small(self):
        field = BackgroundField(count=100)
        moved = field.positions_at(12.5) - field.base
        assert np.abs(moved).max() <= 0.22 + 1e-9
        assert not np.allclose(field.positions_at(0.0), field.positions_at(5.0))


class TestFog:
    def test_range(self):
        assert fog_range(6.0) == pytest.approx((1.8, 21.0))
        assert fog_range(1.0) == pytest.approx((0.5, 3.5))

    def test_factor(self):
        assert fog_factor(1.0, 2.0, 4.0) == 0.0
        assert fog_factor(3.0, 2.0, 4.0) == pytest.approx(0.5)
        assert fog_factor(9.0, 2.0, 4.0) == 1.0


class TestDescribe:
    def test_bundled_scene(self, records):
        text = describe(records[28])
        assert text.startswith("Scene 29 · Resolution / Coccygeal")
        assert "Grief (Sadness)" in text
        assert "Intensity 100%" in text
        assert "Elizabeth steps between them" in text
        assert text.endswith("- Narrator")

    def test_minimal_record(self, make_record):
        record = make_record(40, category="ennui", intensity=0.55)
        text = describe(record)
        assert text.splitlines()[0] == "Scene 40"
        assert "Ennui (Other)" in text
        assert "Intensity 55%" in text
