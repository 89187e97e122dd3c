"""Generate a self-contained interactive HTML page of the spine.

Geometry is projected in Python and drawn as SVG. Hover highlighting uses a
table of highlight snapshots precomputed for every scene, so the page
needs no layout or graph logic of its own.
"""

import json
import logging
from datetime import datetime
from pathlib import Path

from emospine.config import Config
from emospine.data import SECTIONS
from emospine.encoding import GROUP_COLORS, emotion_group, to_hex
from emospine.inspect import describe
from emospine.interaction import compute_highlights
from emospine.models import EdgeKind, Record, RenderPayload
from emospine.output.projection import Projection

logger = logging.getLogger(__name__)


def _script_json(value: object) -> str:
    """JSON safe to embed inside a <script> element."""
    return json.dumps(value).replace("</", "<\\/")


def build_page_data(payload: RenderPayload, records: list[Record], config: Config) -> dict:
    """Projected scenes, edges and the per-scene highlight table."""
    proj = Projection(payload, config)
    by_ordinal = {r.ordinal: r for r in records}

    scenes = []
    for e in payload.entities:
        x, y = proj.point(e.position)
        record = by_ordinal.get(e.ordinal)
        scenes.append({
            "ordinal": e.ordinal,
            "x": round(x, 2),
            "y": round(y, 2),
            "r": round(max(e.render_size * proj.scale, 2.0), 2),
            "color": to_hex(e.color),
            "opacity": round(e.opacity, 3),
            "blur": round(e.blur / config.encoding.max_blur * 6, 2),
            "fog": round(proj.fog(e.position), 3),
            "group": emotion_group(e.category).value,
            "tooltip": describe(record) if record is not None else f"Scene {e.ordinal}",
            "satellites": [
                {
                    "x": round(proj.point(s.position)[0], 2),
                    "y": round(proj.point(s.position)[1], 2),
                    "r": round(max(s.size * proj.scale, 1.0), 2),
                    "color": to_hex(s.color),
                    "opacity": s.opacity,
                    "label": s.label,
                }
                for s in e.satellites
            ],
        })

    positions = {s["ordinal"]: (s["x"], s["y"]) for s in scenes}
    edges = []
    for kind in (EdgeKind.BY_CATEGORY, EdgeKind.CHRONOLOGICAL, EdgeKind.BY_SPEAKER):
        for edge in payload.edges.of_kind(kind):
            (x1, y1), (x2, y2) = positions[edge.source], positions[edge.target]
            edges.append({
                "key": edge.key,
                "kind": kind.value,
                "x1": x1, "y1": y1, "x2": x2, "y2": y2,
                "color": to_hex(edge.style.color),
                "opacity": edge.style.opacity,
                "width": edge.style.width,
                "dash": " ".join(str(d) for d in edge.style.dash) if edge.style.dash else "",
                "additive": edge.style.blending == "additive",
            })

    highlights = {}
    for e in payload.entities:
        snapshot = compute_highlights(e.ordinal, payload.entities, payload.edges)
        highlights[e.ordinal] = {
            "entities": {str(k): v.value for k, v in snapshot.entities.items()},
            "edges": {k: v.value for k, v in snapshot.edges.items()},
        }

    return {"scenes": scenes, "edges": edges, "highlights": highlights}


def generate_spine_html(
    payload: RenderPayload,
    records: list[Record],
    config: Config,
    output_path: Path,
) -> Path:
    """Write the interactive page to output_path."""
    data = build_page_data(payload, records, config)
    html = _render_html(
        data=data,
        width=config.render.width,
        height=config.render.height,
        background=to_hex(config.render.background),
        dim_opacity=config.interaction.dim_opacity,
        related_opacity=config.interaction.related_opacity,
        strategy=payload.strategy,
        generated_at=datetime.now().strftime("%Y-%m-%d %H:%M"),
    )
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")
    logger.info("Spine page saved to %s (%d scenes)", output_path, len(data["scenes"]))
    return output_path


def _render_html(
    *,
    data: dict,
    width: int,
    height: int,
    background: str,
    dim_opacity: float,
    related_opacity: float,
    strategy: str,
    generated_at: str,
) -> str:
    legend = "".join(
        f'<span class="legend-item"><span class="swatch" style="background:{to_hex(color)}"></span>'
        f'{group.value.title()}</span>'
        for group, color in GROUP_COLORS.items()
        if group.value != "other"
    )
    sections = "".join(
        f'<li><b>{s.key}</b> {s.label} <span class="dim">({s.start}-{s.end})</span></li>'
        for s in SECTIONS
    )

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Emotional Spine</title>
<style>
  * {{ margin: 0; padding: 0; box-sizing: border-box; }}
  body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
         background: {background}; color: #e6e4ec; padding: 20px; display: flex; gap: 24px; }}
  h1 {{ font-size: 22px; letter-spacing: 2px; margin-bottom: 4px; }}
  .subtitle {{ color: #787486; margin-bottom: 16px; font-size: 13px; }}
  .panel {{ width: 280px; flex-shrink: 0; }}
  .legend-item {{ display: inline-flex; align-items: center; gap: 6px; margin: 0 12px 8px 0; font-size: 13px; }}
  .swatch {{ width: 12px; height: 12px; border-radius: 50%; display: inline-block; }}
  ul {{ list-style: none; font-size: 13px; margin-top: 12px; }}
  li {{ padding: 3px 0; }}
  .dim {{ color: #787486; }}
  #tooltip {{ margin-top: 20px; white-space: pre-wrap; font-size: 13px; line-height: 1.5;
             background: #14121e; border: 1px solid #2a2638; border-radius: 6px; padding: 12px;
             min-height: 80px; }}
  svg {{ background: {background}; }}
  .scene {{ cursor: pointer; transition: opacity 0.15s; }}
  .edge, .satellite {{ transition: opacity 0.15s; }}
  .additive {{ mix-blend-mode: screen; }}
</style>
</head>
<body>

<div class="panel">
  <h1>EMOTIONAL SPINE</h1>
  <p class="subtitle">Generated {generated_at} &middot; {len(data["scenes"])} scenes &middot; {strategy}</p>
  <div>{legend}</div>
  <ul>{sections}</ul>
  <div id="tooltip" class="dim">Hover a scene</div>
</div>

<svg id="spine" width="{width}" height="{height}" viewBox="0 0 {width} {height}">
  <defs id="defs"></defs>
  <g id="edges"></g>
  <g id="satellites"></g>
  <g id="scenes"></g>
</svg>

<script>
const data = {_script_json(data)};
const DIM = {dim_opacity};
const RELATED = {related_opacity};
const NS = 'http://www.w3.org/2000/svg';

function el(tag, attrs) {{
  const node = document.createElementNS(NS, tag);
  for (const [k, v] of Object.entries(attrs)) node.setAttribute(k, v);
  return node;
}}

const edgeNodes = {{}};
for (const e of data.edges) {{
  const line = el('line', {{
    x1: e.x1, y1: e.y1, x2: e.x2, y2: e.y2, stroke: e.color,
    'stroke-width': e.width, opacity: e.opacity, class: 'edge' + (e.additive ? ' additive' : ''),
  }});
  if (e.dash) line.setAttribute('stroke-dasharray', e.dash);
  document.getElementById('edges').appendChild(line);
  edgeNodes[e.key] = {{ node: line, base: e.opacity }};
}}

const sceneNodes = {{}};
for (const s of data.scenes) {{
  const sats = [];
  for (const sat of s.satellites) {{
    const c = el('circle', {{ cx: sat.x, cy: sat.y, r: sat.r, fill: sat.color, opacity: sat.opacity, class: 'satellite' }});
    document.getElementById('satellites').appendChild(c);
    sats.push({{ node: c, base: sat.opacity }});
  }}
  const attrs = {{ cx: s.x, cy: s.y, r: s.r, fill: s.color, opacity: s.opacity * (1 - s.fog * 0.6), class: 'scene' }};
  if (s.blur > 0) {{
    const f = el('filter', {{ id: 'blur' + s.ordinal, x: '-100%', y: '-100%', width: '300%', height: '300%' }});
    f.appendChild(el('feGaussianBlur', {{ stdDeviation: s.blur }}));
    document.getElementById('defs').appendChild(f);
    attrs.filter = 'url(#blur' + s.ordinal + ')';
  }}
  const c = el('circle', attrs);
  c.addEventListener('mouseenter', () => activate(s.ordinal));
  c.addEventListener('mouseleave', () => activate(null));
  document.getElementById('scenes').appendChild(c);
  sceneNodes[s.ordinal] = {{ node: c, base: attrs.opacity, sats, scene: s }};
}}

function stateOpacity(state, base) {{
  if (state === 'dimmed') return Math.min(base, DIM);
  if (state === 'active' || state === 'related') return RELATED;
  return base;
}}

let active = null;
function activate(ordinal) {{
  if (ordinal === active) return;
  active = ordinal;
  const table = ordinal === null ? null : data.highlights[ordinal];
  for (const [key, s] of Object.entries(sceneNodes)) {{
    const state = table ? table.entities[key] : 'neutral';
    s.node.setAttribute('opacity', stateOpacity(state, s.base));
    s.node.setAttribute('stroke', state === 'active' ? '#ffffff' : 'none');
    for (const sat of s.sats) sat.node.setAttribute('opacity', state === 'dimmed' ? sat.base * DIM : sat.base);
  }}
  for (const [key, e] of Object.entries(edgeNodes)) {{
    const state = table ? table.edges[key] : 'neutral';
    const o = state === 'related' ? Math.min(1, e.base * 2) : state === 'dimmed' ? e.base * DIM : e.base;
    e.node.setAttribute('opacity', o);
  }}
  const tip = document.getElementById('tooltip');
  tip.textContent = ordinal === null ? 'Hover a scene' : sceneNodes[ordinal].scene.tooltip;
}}
</script>

</body>
</html>"""
