"""
Livability Map - Main Entry Point

Offline tools around the interpolation engine:

1. render   - writes the suburb score map (markers, zoom-scaled heat layer,
              legend) to an HTML file with Folium or PyDeck
2. estimate - prints the IDW estimate and nearest suburbs for a coordinate
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from livability_map.analysis.idw import estimate
from livability_map.data.score_store import load_store_from_config
from livability_map.models import Coordinate
from livability_map.utils.browser import open_html_in_browser
from livability_map.utils.config_loader import PROJECT_ROOT, as_bool, load_config
from livability_map.utils.logging import get_logger, setup_logging_from_config
from livability_map.visualization.color_scheme import POLICIES
from livability_map.visualization.map_generator import ENGINES, render_score_map

logger = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="livability-map",
        description="Suburb livability interpolation and heat map tool"
    )
    parser.add_argument("--config", type=str, default=None,
                        help="Path to configuration file (default: configs/config.yaml)")
    parser.add_argument("--dataset", type=str, default=None,
                        help="Suburb dataset JSON (overrides data.dataset)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    render = subparsers.add_parser("render", help="Render the score map to HTML")
    render.add_argument("--output", type=str, default=None,
                        help="Output HTML path (overrides visualization.output)")
    render.add_argument("--engine", choices=ENGINES, default="folium")
    render.add_argument("--zoom", type=float, default=None)
    render.add_argument("--policy", choices=POLICIES, default=None,
                        help="Color policy (overrides visualization.color_policy)")
    render.add_argument("--select", type=str, default=None, metavar="SUBURB",
                        help="Outline one suburb as selected")
    render.add_argument("--open", action="store_true", help="Open the map in a browser")

    estimate_cmd = subparsers.add_parser("estimate", help="Estimate the score at a coordinate")
    estimate_cmd.add_argument("--lat", type=float, required=True)
    estimate_cmd.add_argument("--lon", type=float, required=True)
    estimate_cmd.add_argument("--k", type=int, default=None)
    estimate_cmd.add_argument("--power", type=float, default=None)
    estimate_cmd.add_argument("--show", type=int, default=3,
                              help="Number of nearest suburbs to list (default: 3)")

    return parser


def _run_render(args: argparse.Namespace, config: dict, store) -> int:
    info = render_score_map(
        store,
        output_path=args.output,
        config=config,
        engine=args.engine,
        zoom=args.zoom,
        policy=args.policy,
        selected_id=args.select
    )

    surface = info['heat_surface']
    print(f"""Map saved: {info['file_path']}
  Engine: {info['method']}
  Suburbs: {len(store):,}
  Heat radius: {surface.radius:.1f}px, blur: {surface.blur:.1f}px (zoom {surface.zoom:g})
  File size: {info['file_size_mb']:.2f} MB""")

    if args.open or as_bool(config.get("visualization", {}).get("auto_open_html", False)):
        open_html_in_browser(info['file_path'])
    return 0


def _run_estimate(args: argparse.Namespace, config: dict, store) -> int:
    interp = config.get("interpolation", {})
    k = args.k if args.k is not None else int(interp.get("k", 8))
    power = args.power if args.power is not None else float(interp.get("power", 2.0))

    result = estimate(Coordinate(args.lat, args.lon), store, k=k, power=power)
    if not result.has_estimate:
        print("No data: the suburb dataset is empty")
        return 1

    print(f"Est. score at ({args.lat}, {args.lon}): {result.estimated_score:.2f}")
    for neighbor in result.influence(args.show):
        print(f"  {neighbor.point.id}: {neighbor.point.overall_score:g} "
              f"({neighbor.distance_meters / 1000:.2f} km)")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Command line entry point.

    Returns
    -------
    int
        Exit code (0 for success, 1 for failure)
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if args.dataset:
        config["data"]["dataset"] = str(Path(args.dataset).resolve())
    setup_logging_from_config(config, PROJECT_ROOT)

    try:
        store = load_store_from_config(config)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Could not load suburb dataset: %s", e)
        return 1

    if args.command == "render":
        return _run_render(args, config, store)
    return _run_estimate(args, config, store)


if __name__ == "__main__":
    sys.exit(main())
