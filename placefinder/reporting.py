"""Output reporting helpers."""
from __future__ import annotations

import csv
import json
import os
import tempfile
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional, TextIO

from .models import Place, PlaceWithDistance


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def _fsync_dir(path: str) -> None:
    try:
        dir_fd = os.open(path, os.O_DIRECTORY)
    except OSError:
        return
    try:
        os.fsync(dir_fd)
    except OSError:
        pass
    finally:
        os.close(dir_fd)


@contextmanager
def atomic_writer(
    path: str,
    mode: str = "w",
    encoding: str = "utf-8",
    newline: Optional[str] = None,
) -> Iterator[TextIO]:
    dir_path = os.path.dirname(path) or "."
    base = os.path.basename(path)
    fd, tmp_path = tempfile.mkstemp(prefix=f".{base}.", suffix=".tmp", dir=dir_path)
    try:
        with os.fdopen(fd, mode, encoding=encoding, newline=newline) as f:
            yield f
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
        _fsync_dir(dir_path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


RESULT_FIELDNAMES = [
    "id",
    "name",
    "category",
    "region",
    "address",
    "representative",
    "tel",
    "aggregate_type",
    "lat",
    "lng",
    "distance_m",
    "distance_label",
    "is_favorite",
]


def build_result_row(item: PlaceWithDistance) -> Dict[str, Any]:
    row = item.place.to_dict()
    row["distance_m"] = round(item.distance_m, 1)
    row["distance_label"] = item.distance_label
    row["is_favorite"] = item.is_favorite
    return row


def write_results_csv(path: str, results: Iterable[PlaceWithDistance]) -> None:
    with atomic_writer(path, mode="w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=RESULT_FIELDNAMES)
        writer.writeheader()
        for item in results:
            writer.writerow(build_result_row(item))


def write_results_json(path: str, results: Iterable[PlaceWithDistance]) -> None:
    with atomic_writer(path, mode="w", encoding="utf-8") as f:
        json.dump([build_result_row(item) for item in results], f, ensure_ascii=False, indent=2)


def write_places_json(path: str, places: Iterable[Place]) -> None:
    with atomic_writer(path, mode="w", encoding="utf-8") as f:
        json.dump([p.to_dict() for p in places], f, ensure_ascii=False, indent=2)


def read_places_json(path: str) -> List[Place]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of places")
    places: List[Place] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ValueError(f"{path}: entry {index} is not a place object")
        places.append(Place.from_dict(item))
    return places
