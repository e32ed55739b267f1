"""
Command-line interface for the application.

Runs single fetch cycles of the sightings pipeline outside the map, which is
handy for checking the proxy and photo lookup from a terminal.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from rare_birds import __version__
from rare_birds.config import get_settings
from rare_birds.pipeline import SightingsPipeline
from rare_birds.schemas import Bounds, DaysBack, LatLng, LocationCluster, QueryParams, SightingType

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(debug: bool = False) -> None:
    """Send log records to stderr; DEBUG when ``--debug`` is given."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        stream=sys.stderr,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="rare-birds",
        description="Recent and rare eBird sightings around a map viewport",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info")

    sightings_parser = subparsers.add_parser(
        "sightings", help="Fetch sightings for one viewport and print the clusters"
    )
    sightings_parser.add_argument(
        "--lat", type=float, default=None, help="Center latitude (default: from settings)"
    )
    sightings_parser.add_argument(
        "--lng", type=float, default=None, help="Center longitude (default: from settings)"
    )
    sightings_parser.add_argument(
        "--bounds",
        type=float,
        nargs=4,
        metavar=("NE_LAT", "NE_LNG", "SW_LAT", "SW_LNG"),
        default=None,
        help="Visible map bounds; without them the maximum 25 km radius is used",
    )
    sightings_parser.add_argument(
        "--back",
        type=int,
        choices=[d.value for d in DaysBack],
        default=DaysBack.WEEK.value,
        help="Days back to search (default: 7)",
    )
    sightings_parser.add_argument(
        "--type",
        choices=[t.value for t in SightingType],
        default=SightingType.RECENT.value,
        help="Sighting classification (default: recent)",
    )
    sightings_parser.add_argument(
        "--json",
        action="store_true",
        help="Print clusters as JSON",
    )

    return parser


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug}")
    print(f"Sightings API: {settings.api_url}")
    print(f"Photo lookup: {settings.photo_lookup_url}")
    print(f"Minimum move: {settings.min_move_km} km")
    return 0


def _print_clusters(clusters: list[LocationCluster]) -> None:
    for cluster in clusters:
        name = cluster.loc_name or f"{cluster.lat}, {cluster.lng}"
        noun = "Bird" if cluster.species_count == 1 else "Birds"
        print(f"{name}: {cluster.species_count} {noun}")
        for bird in cluster.birds:
            photo = " [photo]" if bird.has_photo else ""
            print(f"  {bird.com_name} ({bird.sci_name}){photo}")
            print(f"    Last observed: {bird.obs_dt:%Y-%m-%d %H:%M}")
            print(f"    Checklists: {', '.join(bird.sub_ids)}")


def cmd_sightings(args: argparse.Namespace) -> int:
    """Handle the 'sightings' command: one pipeline cycle for a viewport."""
    settings = get_settings()
    center = LatLng(
        args.lat if args.lat is not None else settings.default_lat,
        args.lng if args.lng is not None else settings.default_lng,
    )
    bounds = None
    if args.bounds is not None:
        ne_lat, ne_lng, sw_lat, sw_lng = args.bounds
        bounds = Bounds(ne=LatLng(ne_lat, ne_lng), sw=LatLng(sw_lat, sw_lng))
    params = QueryParams(back=DaysBack(args.back), type=SightingType(args.type))

    errors: list[str] = []
    pipeline = SightingsPipeline(center=center, params=params, on_error=errors.append)
    pipeline.on_viewport_settled(center, bounds)

    if errors:
        print(f"Error: {errors[-1]}", file=sys.stderr)
        return 1

    clusters = pipeline.clusters
    if args.json:
        # Unset fields (no photo, no location name) are left out, not null
        payload = [c.model_dump(mode="json", exclude_none=True) for c in clusters]
        print(json.dumps(payload, indent=2))
    elif not clusters:
        print("No sightings found.")
    else:
        _print_clusters(clusters)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.debug)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
        "sightings": cmd_sightings,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
