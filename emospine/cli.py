"""CLI entry point for the emotional spine."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from emospine.config import Config, load_config
from emospine.data import section_for
from emospine.encoding import emotion_group, to_hex
from emospine.errors import EmospineError
from emospine.guide import load_guide
from emospine.ingest import load_records
from emospine.inspect import describe
from emospine.layout import STRATEGIES
from emospine.models import HighlightState
from emospine.output.spine_html import generate_spine_html
from emospine.output.spine_png import render_spine_png
from emospine.session import VisualizationSession


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument("--csv", type=Path, default=None, help="Scene CSV (overrides config)")
    parser.add_argument(
        "--strategy", choices=sorted(STRATEGIES), default=None,
        help="Layout strategy (overrides config)",
    )


async def _open_session(args: argparse.Namespace, config: Config) -> VisualizationSession:
    session = VisualizationSession(config)
    data_path = args.csv if args.csv is not None else config.resolved_data_path
    await session.load(
        load_records(data_path),
        load_guide(config.resolved_guide_path, config.guide),
    )
    return session


def _print_layout(session: VisualizationSession) -> None:
    print(f"{'#':>3}  {'emotion':<13} {'int':>4}  {'x':>8} {'y':>8} {'z':>8}  {'size':>6}  {'blur':>5}  color")
    for e in session.entities:
        record = session.record(e.ordinal)
        x, y, z = e.position
        print(
            f"{e.ordinal:>3}  {e.category:<13} {record.intensity:>4.2f}  "
            f"{x:>8.3f} {y:>8.3f} {z:>8.3f}  {e.size:>6.3f}  {e.blur:>5.1f}  {to_hex(e.color)}"
        )
    edges = session.edges
    print(
        f"\n{len(session.entities)} scenes, edges: {len(edges.chronological)} chronological, "
        f"{len(edges.by_speaker)} by speaker, {len(edges.by_category)} by category"
    )


def _print_hover(session: VisualizationSession) -> None:
    active = session.interaction.active
    if active is None:
        print("No scene under pointer")
        return
    snapshot = session.interaction.snapshot
    related = sorted(o for o, s in snapshot.entities.items() if s == HighlightState.RELATED)
    print(describe(session.record(active)))
    print(f"\nRelated scenes: {', '.join(str(o) for o in related) or 'none'}")


async def _run(args: argparse.Namespace, config: Config) -> int:
    session = await _open_session(args, config)
    try:
        if args.command == "layout":
            _print_layout(session)

        elif args.command == "inspect":
            record = session.record(args.scene)
            section = section_for(record.ordinal)
            print(describe(record))
            print(f"\nGroup: {emotion_group(record.category).value}"
                  + (f"  Section: {section.key}" if section else ""))

        elif args.command == "hover":
            session.hover_point(args.x, args.y)
            _print_hover(session)

        elif args.command in ("render", "html"):
            if args.active is not None:
                session.record(args.active)  # raises if unknown
                session.activate(args.active)
            payload = session.payload()
            out_dir = config.resolved_output_dir
            if args.command == "render":
                path = args.output or out_dir / f"spine_{payload.strategy}.png"
                render_spine_png(payload, session.records, config, path, frame=session.tick(0.0))
            else:
                path = args.output or out_dir / f"spine_{payload.strategy}.html"
                generate_spine_html(payload, session.records, config, path)
            print(f"Wrote {path}")
    finally:
        session.close()
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Emotional Spine")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    # layout command
    layout_parser = sub.add_parser("layout", help="Print positions and encoding for every scene")
    _add_common(layout_parser)

    # render command
    render_parser = sub.add_parser("render", help="Render the spine to a PNG")
    _add_common(render_parser)
    render_parser.add_argument("--active", type=int, default=None, help="Scene to highlight")
    render_parser.add_argument("-o", "--output", type=Path, default=None, help="Output PNG path")

    # html command
    html_parser = sub.add_parser("html", help="Write a self-contained interactive HTML page")
    _add_common(html_parser)
    html_parser.add_argument("--active", type=int, default=None, help="Scene to highlight initially")
    html_parser.add_argument("-o", "--output", type=Path, default=None, help="Output HTML path")

    # inspect command
    inspect_parser = sub.add_parser("inspect", help="Show the tooltip for one scene")
    _add_common(inspect_parser)
    inspect_parser.add_argument("scene", type=int, help="Scene number")

    # hover command
    hover_parser = sub.add_parser("hover", help="Hit-test a point as seen from the front camera")
    _add_common(hover_parser)
    hover_parser.add_argument("x", type=float)
    hover_parser.add_argument("y", type=float)

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = load_config(args.config)
    if args.strategy:
        config.layout.strategy = args.strategy

    try:
        sys.exit(asyncio.run(_run(args, config)))
    except (EmospineError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
