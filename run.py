"""CLI entrypoint."""
from __future__ import annotations

import argparse
import logging
import math
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from placefinder import config
from placefinder.browser import PlaceBrowser
from placefinder.favorites import FavoritesStore
from placefinder.geocoding import NaverGeocoder
from placefinder.geolocation import LocationTracker
from placefinder.ingest import IngestionError, import_file
from placefinder.links import naver_web_directions_url
from placefinder.models import Bounds, Coordinates, PlaceFilter, PlaceWithDistance, is_valid_coordinate
from placefinder.reporting import (
    ensure_dir,
    read_places_json,
    write_places_json,
    write_results_csv,
    write_results_json,
)
from placefinder.repository import PlaceRepository
from placefinder.seed import seed_places
from placefinder.storage import SqliteKeyValueStore, StorageError

logger = logging.getLogger("placefinder")


def _repo_root() -> Path:
    return Path(__file__).resolve().parent


def load_env(path: str = ".env", root_dir: Optional[Path] = None) -> None:
    """Optionally load a repo-root .env file without overriding real env vars."""
    root = Path(root_dir) if root_dir else _repo_root()
    env_path = (root / path).resolve()
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path, override=False)


def parse_bounds(text: str) -> Bounds:
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 4:
        raise argparse.ArgumentTypeError("viewport must be SW_LAT,SW_LNG,NE_LAT,NE_LNG")
    try:
        sw_lat, sw_lng, ne_lat, ne_lng = (float(p) for p in parts)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"viewport values must be numbers: {exc}") from exc
    return Bounds(sw=Coordinates(sw_lat, sw_lng), ne=Coordinates(ne_lat, ne_lng))


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Find construction-resource businesses near you")
    parser.add_argument("--places", type=str, default=None, help="Places JSON file (default: built-in seed set)")
    parser.add_argument("--import-xlsx", dest="import_xlsx", type=str, default=None, help="Spreadsheet to import")
    parser.add_argument(
        "--import-category",
        choices=list(config.PLACE_CATEGORIES),
        default=None,
        help="Category assigned to imported rows",
    )
    parser.add_argument("--id-prefix", type=str, default=None)
    parser.add_argument("--lat", type=float, default=None, help="Current latitude")
    parser.add_argument("--lng", type=float, default=None, help="Current longitude")
    parser.add_argument("--region", choices=list(config.REGIONS), default=config.ALL_REGIONS)
    parser.add_argument(
        "--category",
        dest="categories",
        action="append",
        choices=list(config.PLACE_CATEGORIES),
        default=None,
        help="Category to include (repeatable; default: all)",
    )
    parser.add_argument("--keyword", type=str, default=None)
    parser.add_argument("--radius-m", type=float, default=None, help="Search radius in meters")
    parser.add_argument("--viewport", type=parse_bounds, default=None, help="SW_LAT,SW_LNG,NE_LAT,NE_LNG")
    parser.add_argument("--favorites-only", action="store_true")
    parser.add_argument("--toggle-favorite", action="append", default=[], help="Place id to (un)favorite")
    parser.add_argument("--remember-location", action="store_true", help="Persist --lat/--lng as last location")
    parser.add_argument("--store-path", type=str, default=None)
    parser.add_argument("--export-places", type=str, default=None, help="Write the repository to a JSON file")
    parser.add_argument("--out", type=str, default=None, help="Directory for results.csv/results.json")
    parser.add_argument("--limit", type=int, default=20)
    return parser.parse_args(argv)


def build_filter(args: argparse.Namespace) -> PlaceFilter:
    place_filter = PlaceFilter(
        region=args.region,
        categories=frozenset(args.categories or config.PLACE_CATEGORIES),
        keyword=args.keyword,
        radius=config.clamp_radius(args.radius_m) if args.radius_m is not None else config.DEFAULT_RADIUS_M,
        favorites_only=args.favorites_only,
    )
    if args.viewport is not None:
        place_filter = place_filter.for_viewport(args.viewport)
    return place_filter


def render_results(results: List[PlaceWithDistance], limit: int) -> List[str]:
    lines = [f"{len(results)} places"]
    for item in results[: max(0, limit)]:
        place = item.place
        star = "*" if item.is_favorite else " "
        lines.append(
            f"{star} {item.distance_label:>8}  [{place.category}] {place.name} ({place.id})"
            f"  {place.address}  {place.tel or '-'}"
        )
    if results and limit > 0:
        lines.append(f"Directions to nearest: {naver_web_directions_url(results[0].place)}")
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    load_env()
    config.load_app_config()
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if args.lat is not None or args.lng is not None:
        if not is_valid_coordinate(args.lat, args.lng):
            print("--lat and --lng must be given together as finite coordinates", file=sys.stderr)
            return 1
    if args.radius_m is not None and not math.isfinite(args.radius_m):
        print("--radius-m must be a finite number of meters", file=sys.stderr)
        return 1

    repository = PlaceRepository()
    try:
        places = read_places_json(args.places) if args.places else seed_places()
    except (OSError, ValueError) as exc:
        print(f"Cannot load places: {exc}", file=sys.stderr)
        return 1
    repository.add_places(places)

    if args.import_xlsx:
        if not args.import_category:
            print("--import-category is required with --import-xlsx", file=sys.stderr)
            return 1
        try:
            geocoder = NaverGeocoder.from_env()
            result = import_file(
                repository, args.import_xlsx, args.import_category, geocoder, id_prefix=args.id_prefix
            )
        except (IngestionError, ValueError, OSError) as exc:
            print(f"Import error: {exc}", file=sys.stderr)
            return 1
        print(
            f"Imported {result.added} places "
            f"({result.skipped_missing_fields} missing fields, "
            f"{result.skipped_geocode} not geocoded, {result.skipped_duplicates} duplicates)"
        )

    store_path = args.store_path or config.STORAGE_DB_PATH
    try:
        store = SqliteKeyValueStore(store_path)
    except StorageError as exc:
        logger.warning("Persistent storage unavailable, continuing in memory: %s", exc)
        store = None

    try:
        favorites = FavoritesStore(store)
        tracker = LocationTracker(store, persist_last_location=args.remember_location)
        if args.lat is not None and args.lng is not None:
            tracker.set_custom_coordinates(Coordinates(args.lat, args.lng))
        elif args.region in config.REGION_COORDINATES:
            tracker.set_custom_coordinates(Coordinates.from_dict(config.REGION_COORDINATES[args.region]))

        browser = PlaceBrowser(repository, favorites, tracker, place_filter=build_filter(args))
        for place_id in args.toggle_favorite:
            state = "added to" if browser.toggle_favorite(place_id) else "removed from"
            print(f"{place_id} {state} favorites")

        results = browser.results()
        for line in render_results(results, args.limit):
            print(line)

        if args.out:
            ensure_dir(args.out)
            write_results_csv(os.path.join(args.out, "results.csv"), results)
            write_results_json(os.path.join(args.out, "results.json"), results)
        if args.export_places:
            write_places_json(args.export_places, repository.list())
    finally:
        if store is not None:
            store.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
