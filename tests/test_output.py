"""Tests for the PNG and HTML renderers."""

import json
import re

from PIL import Image

from emospine.graph import build_edges
from emospine.interaction import compute_highlights
from emospine.layout import GoldenAngleLayout, LayoutParams, layout
from emospine.models import RenderPayload
from emospine.output.projection import Projection
from emospine.output.spine_html import build_page_data, generate_spine_html
from emospine.output.spine_png import BAND, _draw_sections, render_spine_png
from emospine.session import VisualizationSession


def _payload(entities, active=None, strategy="helix"):
    edges = build_edges(entities)
    return RenderPayload(
        generation=1,
        strategy=strategy,
        entities=entities,
        edges=edges,
        interaction=compute_highlights(active, entities, edges),
    )


class TestSpinePng:
    def test_writes_png(self, tmp_path, config, records, entities):
        path = render_spine_png(_payload(entities), records, config, tmp_path / "out" / "spine.png")
        assert path.exists()
        with Image.open(path) as img:
            assert img.size == (config.render.width, config.render.height)
            assert img.mode == "RGB"

    def test_with_background_and_active(self, tmp_path, config, records, entities):
        session = VisualizationSession(config)
        frame = session.tick(1.0)
        path = render_spine_png(_payload(entities, active=29), records, config, tmp_path / "a.png", frame=frame)
        assert path.exists()

    def test_golden_angle(self, tmp_path, config, records):
        params = LayoutParams.from_config(config)
        entities = layout(records, params, GoldenAngleLayout())
        path = render_spine_png(
            _payload(entities, strategy="golden_angle"), records, config, tmp_path / "g.png",
        )
        assert path.exists()

    def test_empty(self, tmp_path, config):
        path = render_spine_png(_payload([]), [], config, tmp_path / "empty.png")
        assert path.exists()


    def test_section_band_is_translucent(self, config, entities):
        payload = _payload(entities)
        background = config.render.background
        img = Image.new("RGBA", (config.render.width, config.render.height), (*background, 255))
        proj = Projection(payload, config)
        _draw_sections(img, payload, proj)
        y = round(proj.point(entities[3].position)[1])
        pixel = img.getpixel((config.render.width - 2, y))[:3]
        assert pixel != BAND
        for channel, bg, band in zip(pixel, background, BAND):
            assert bg < channel < band


class TestSpineHtml:
    def test_page_data(self, config, records, entities):
        data = build_page_data(_payload(entities), records, config)
        assert len(data["scenes"]) == 33
        assert len(data["highlights"]) == 33
        assert data["highlights"][5]["entities"]["5"] == "active"
        assert data["scenes"][0]["tooltip"].startswith("Scene 1")

    def test_writes_self_contained_html(self, tmp_path, config, records, entities):
        path = generate_spine_html(_payload(entities), records, config, tmp_path / "spine.html")
        html = path.read_text()
        assert html.startswith("<!DOCTYPE html>")
        assert "<script src=" not in html
        match = re.search(r"const data = (.*);\n", html)
        data = json.loads(match.group(1))
        assert len(data["edges"]) == len(build_edges(entities))

    def test_script_safe(self, tmp_path, config, make_record):
        record = make_record(1).model_copy(update={"quote": "</script><b>"})
        entities = layout([record])
        html = generate_spine_html(_payload(entities), [record], config, tmp_path / "x.html").read_text()
        assert "</script><b>" not in html
