"""Static PNG render of the spine, seen head-on from the camera.

Layers, back to front: section bands, background particles, edges
(category web, chronological path, speaker threads), satellites, scene
particles, legend and the tooltip for the active scene. Depth is shown by
fading toward the background color with fog distance.
"""

import logging
import math
from pathlib import Path

import numpy as np
from PIL import Image, ImageChops, ImageDraw, ImageFilter, ImageFont

from emospine.ambient import AmbientFrame
from emospine.config import Config
from emospine.data import SECTIONS
from emospine.encoding import GROUP_COLORS, EmotionGroup
from emospine.inspect import describe
from emospine.interaction import highlight_opacity
from emospine.models import RGB, Edge, EdgeKind, HighlightState, Record, RenderPayload
from emospine.output.projection import Projection

logger = logging.getLogger(__name__)

# --- Fonts ---

_FONT_BOLD = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"
_FONT_REGULAR = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"


def _font(size: int, bold: bool = False) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    try:
        return ImageFont.truetype(_FONT_BOLD if bold else _FONT_REGULAR, size)
    except OSError:
        return ImageFont.load_default()


# --- Colors ---

TEXT = (230, 228, 236)
TEXT_DIM = (120, 116, 134)
BAND = (18, 16, 28)
ACTIVE_RING = (255, 255, 255)

LEGEND_ORDER = [
    EmotionGroup.ANGER,
    EmotionGroup.HOPE,
    EmotionGroup.FEAR,
    EmotionGroup.SADNESS,
    EmotionGroup.CURIOSITY,
]


def _fade(color: RGB, fog: float, background: RGB) -> RGB:
    return tuple(round(c + (b - c) * fog) for c, b in zip(color, background))  # type: ignore[return-value]


def _rgba(color: RGB, alpha: float) -> tuple[int, int, int, int]:
    return (*color, max(0, min(255, round(alpha * 255))))


# --- Layers ---


def _draw_background(img: Image.Image, frame: AmbientFrame, background: RGB) -> None:
    if not len(frame.positions):
        return
    layer = Image.new("RGBA", img.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    w, h = img.size
    scale = min(w, h) / 2 / float(np.abs(frame.positions[:, :2]).max() or 1.0)
    for (x, y, z), color in zip(frame.positions, frame.colors):
        if z > 0:
            continue  # in front of the spine
        px, py = w / 2 + x * scale, h / 2 - y * scale
        faded = _fade(tuple(int(c) for c in color), 0.6, background)
        draw.point((px, py), fill=_rgba(faded, 0.55))
    img.alpha_composite(layer)


def _draw_sections(img: Image.Image, payload: RenderPayload, proj: Projection) -> None:
    bands = Image.new("RGBA", img.size, (0, 0, 0, 0))
    band_draw = ImageDraw.Draw(bands)
    labels: list[tuple[float, str]] = []
    font = _font(11, bold=True)
    by_ordinal = {e.ordinal: e for e in payload.entities}
    for i, section in enumerate(SECTIONS):
        ys = [
            proj.point(by_ordinal[o].position)[1]
            for o in range(section.start, section.end + 1)
            if o in by_ordinal
        ]
        if not ys:
            continue
        top, bottom = min(ys) - 12, max(ys) + 12
        if i % 2 == 0:
            band_draw.rectangle([0, top, img.width, bottom], fill=_rgba(BAND, 0.6))
        labels.append((top, f"{section.key}  {section.label}"))

    img.alpha_composite(bands)
    draw = ImageDraw.Draw(img)
    for top, text in labels:
        draw.text((16, top + 4), text, font=font, fill=TEXT_DIM)


def _dashed_line(
    draw: ImageDraw.ImageDraw,
    start: tuple[float, float],
    end: tuple[float, float],
    dash: tuple[float, ...],
    fill: tuple[int, int, int, int],
    width: int,
) -> None:
    length = math.dist(start, end)
    if length == 0:
        return
    ux, uy = (end[0] - start[0]) / length, (end[1] - start[1]) / length
    pos, i = 0.0, 0
    while pos < length:
        seg = dash[i % len(dash)]
        if i % 2 == 0:
            stop = min(pos + seg, length)
            draw.line(
                [(start[0] + ux * pos, start[1] + uy * pos), (start[0] + ux * stop, start[1] + uy * stop)],
                fill=fill,
                width=width,
            )
        pos += seg
        i += 1


def _edge_alpha(edge: Edge, state: HighlightState, config: Config) -> float:
    if state == HighlightState.RELATED:
        return min(1.0, edge.style.opacity * 2)
    if state == HighlightState.DIMMED:
        return edge.style.opacity * config.interaction.dim_opacity
    return edge.style.opacity


def _draw_edges(img: Image.Image, payload: RenderPayload, proj: Projection, config: Config) -> Image.Image:
    positions = {e.ordinal: e.position for e in payload.entities}
    states = payload.interaction.edges

    def stroke(edges: list[Edge], layer: Image.Image) -> None:
        draw = ImageDraw.Draw(layer)
        for edge in edges:
            a, b = positions.get(edge.source), positions.get(edge.target)
            if a is None or b is None:
                continue
            alpha = _edge_alpha(edge, states.get(edge.key, HighlightState.NEUTRAL), config)
            fill = _rgba(edge.style.color, alpha)
            width = max(1, round(edge.style.width))
            if edge.style.dash:
                _dashed_line(draw, proj.point(a), proj.point(b), edge.style.dash, fill, width)
            else:
                draw.line([proj.point(a), proj.point(b)], fill=fill, width=width)

    # Additive web: brighten rather than cover
    glow = Image.new("RGBA", img.size, (0, 0, 0, 0))
    stroke(payload.edges.of_kind(EdgeKind.BY_CATEGORY), glow)
    r, g, b, a = glow.split()
    premultiplied = Image.merge("RGB", [ImageChops.multiply(c, a) for c in (r, g, b)])
    base = ImageChops.add(img.convert("RGB"), premultiplied).convert("RGBA")

    for kind in (EdgeKind.CHRONOLOGICAL, EdgeKind.BY_SPEAKER):
        layer = Image.new("RGBA", img.size, (0, 0, 0, 0))
        stroke(payload.edges.of_kind(kind), layer)
        base.alpha_composite(layer)
    return base


def _disc(
    img: Image.Image,
    center: tuple[float, float],
    radius: float,
    fill: tuple[int, int, int, int],
    blur: float = 0.0,
) -> None:
    """Composite a filled circle, optionally blurred, onto img."""
    radius = max(radius, 1.0)
    pad = int(math.ceil(radius + blur * 2 + 2))
    patch = Image.new("RGBA", (pad * 2, pad * 2), (0, 0, 0, 0))
    ImageDraw.Draw(patch).ellipse([pad - radius, pad - radius, pad + radius, pad + radius], fill=fill)
    if blur > 0:
        patch = patch.filter(ImageFilter.GaussianBlur(blur))
    dest = (int(round(center[0])) - pad, int(round(center[1])) - pad)
    # alpha_composite rejects negative offsets; crop the patch instead
    crop_x, crop_y = max(0, -dest[0]), max(0, -dest[1])
    if crop_x >= patch.width or crop_y >= patch.height:
        return
    img.alpha_composite(patch, dest=(max(0, dest[0]), max(0, dest[1])), source=(crop_x, crop_y))


def _draw_entities(img: Image.Image, payload: RenderPayload, proj: Projection, config: Config) -> None:
    background = config.render.background
    states = payload.interaction.entities
    # Far particles first so near ones overlap them
    for entity in sorted(payload.entities, key=lambda e: e.position[2]):
        state = states.get(entity.ordinal, HighlightState.NEUTRAL)
        fog = proj.fog(entity.position)
        sat_alpha = highlight_opacity(state, 1.0, config.interaction)
        for sat in entity.satellites:
            _disc(
                img,
                proj.point(sat.position),
                sat.size * proj.scale,
                _rgba(_fade(sat.color, fog, background), sat.opacity * sat_alpha),
            )
        alpha = highlight_opacity(state, entity.opacity, config.interaction)
        center = proj.point(entity.position)
        radius = entity.render_size * proj.scale
        _disc(
            img,
            center,
            radius,
            _rgba(_fade(entity.color, fog, background), alpha),
            blur=entity.blur / config.encoding.max_blur * radius * 0.5,
        )
        if state == HighlightState.ACTIVE:
            ImageDraw.Draw(img).ellipse(
                [center[0] - radius - 4, center[1] - radius - 4, center[0] + radius + 4, center[1] + radius + 4],
                outline=ACTIVE_RING,
                width=2,
            )


def _draw_legend(img: Image.Image) -> None:
    draw = ImageDraw.Draw(img)
    font = _font(12)
    x, y = 24, img.height - 40
    for group in LEGEND_ORDER:
        draw.ellipse([x, y, x + 12, y + 12], fill=GROUP_COLORS[group])
        label = group.value.title()
        draw.text((x + 18, y - 1), label, font=font, fill=TEXT)
        x += 18 + int(draw.textlength(label, font=font)) + 22


def _draw_tooltip(img: Image.Image, record: Record) -> None:
    draw = ImageDraw.Draw(img)
    font = _font(12)
    text = describe(record)
    left, top, right, bottom = draw.multiline_textbbox((0, 0), text, font=font, spacing=4)
    box_w, box_h = right - left + 24, bottom - top + 20
    x = img.width - box_w - 20
    draw.rounded_rectangle([x, 20, x + box_w, 20 + box_h], radius=6, fill=(20, 18, 30, 230))
    draw.multiline_text((x + 12, 30), text, font=font, fill=TEXT, spacing=4)


# --- Main render ---


def render_spine_png(
    payload: RenderPayload,
    records: list[Record],
    config: Config,
    output_path: Path,
    frame: AmbientFrame | None = None,
) -> Path:
    """Render the payload to a PNG file and return its path."""
    r = config.render
    img = Image.new("RGBA", (r.width, r.height), _rgba(r.background, 1.0))
    proj = Projection(payload, config)

    _draw_sections(img, payload, proj)
    if frame is not None:
        _draw_background(img, frame, r.background)
    img = _draw_edges(img, payload, proj, config)
    _draw_entities(img, payload, proj, config)

    draw = ImageDraw.Draw(img)
    draw.text((24, 20), "EMOTIONAL SPINE", font=_font(22, bold=True), fill=TEXT)
    draw.text((24, 50), f"{len(payload.entities)} scenes · {payload.strategy}", font=_font(12), fill=TEXT_DIM)
    _draw_legend(img)

    active = payload.interaction.active
    if active is not None:
        record = next((rec for rec in records if rec.ordinal == active), None)
        if record is not None:
            _draw_tooltip(img, record)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    img.convert("RGB").save(str(output_path), "PNG")
    logger.info("Spine saved to %s (%dx%d)", output_path, r.width, r.height)
    return output_path
