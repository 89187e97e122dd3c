"""Tests for guide fitting and loading."""

import json

import pytest

from emospine.config import GuideConfig
from emospine.guide import GuideGeometry, default_guide, fit_guide, load_guide


class TestFitGuide:
    def test_scales_to_target_height(self):
        guide = fit_guide([(0, 0, 0), (0, 10, 0), (1, 5, 0)], target_height=2.5)
        assert guide.height == pytest.approx(2.5)
        assert guide.scale == pytest.approx(0.25)

    def test_centered_with_offset(self):
        guide = fit_guide([(3, 100, 0), (3, 110, 0)], vertical_offset=-0.05)
        assert guide.center == (0.0, -0.05, 0.0)
        assert guide.top == pytest.approx(1.2)
        assert guide.bottom == pytest.approx(-1.3)

    def test_half_width(self):
        guide = fit_guide([(-2, 0, 0), (2, 10, 0)], target_height=2.5)
        assert guide.half_width == pytest.approx(0.5)

    def test_empty_rejected(self):
        with pytest.raises(ValueError, match="no points"):
            fit_guide([])

    def test_flat_rejected(self):
        with pytest.raises(ValueError, match="zero height"):
            fit_guide([(0, 1, 0), (5, 1, 0)])


class TestLoadGuide:
    @pytest.mark.asyncio
    async def test_none_gives_default(self):
        assert await load_guide(None) == default_guide()

    @pytest.mark.asyncio
    async def test_json_points(self, tmp_path):
        path = tmp_path / "guide.json"
        path.write_text(json.dumps({"points": [[0, 0, 0], [0.5, 5, 0], [0, 10]]}))
        guide = await load_guide(path)
        assert guide.scale == pytest.approx(0.25)
        assert guide.half_width == pytest.approx(0.0625)

    @pytest.mark.asyncio
    async def test_yaml_points(self, tmp_path):
        path = tmp_path / "guide.yaml"
        path.write_text("points:\n  - [0, 0, 0]\n  - [0, 4, 0]\n")
        guide = await load_guide(path, GuideConfig(target_height=2.0))
        assert guide.height == pytest.approx(2.0)
        assert guide.scale == pytest.approx(0.5)

    @pytest.mark.asyncio
    async def test_missing_file_falls_back(self, tmp_path, caplog):
        guide = await load_guide(tmp_path / "nope.json")
        assert guide == GuideGeometry()
        assert "using default guide" in caplog.text

    @pytest.mark.asyncio
    async def test_garbage_falls_back(self, tmp_path):
        path = tmp_path / "guide.json"
        path.write_text("{not json")
        assert await load_guide(path) == default_guide()
