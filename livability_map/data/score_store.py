"""
ScorePoint Store

Loads the static suburb dataset once and exposes it as an immutable,
read-only collection of ScorePoints.
"""

import json
import math
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from livability_map.models import Coordinate, ScorePoint, SubScores
from livability_map.utils.config_loader import PROJECT_ROOT, resolve_path
from livability_map.utils.logging import get_logger

logger = get_logger(__name__)

UNSCORED_POLICIES = ("floor", "exclude")
DEFAULT_FLOOR_VALUE = 1.0
DEFAULT_EXCLUDE_IDS = ("CADGEE", "ARATULA", "WASHPOOL")

# Sub-score key aliases used by the different dataset variants
_SUB_SCORE_KEYS = {
    "safety": ("safety", "crime", "crimeScore"),
    "weather": ("weather", "weatherScore"),
    "transport": ("transport", "publicTransportation", "transportScore"),
    "family": ("family", "familyDemographics", "familyScore"),
}


class ScorePointStore(Sequence[ScorePoint]):
    """
    Immutable collection of known suburbs.

    Built once from the static dataset and never mutated during a map
    session, so it can be shared without locking.
    """

    def __init__(self, points: Iterable[ScorePoint]):
        self._points: Tuple[ScorePoint, ...] = tuple(points)
        self._by_id: Dict[str, ScorePoint] = {p.id: p for p in self._points}
        if len(self._by_id) != len(self._points):
            raise ValueError("ScorePoint ids must be unique within a store")
        self._lats = np.array([p.coordinate.lat for p in self._points], dtype=float)
        self._lons = np.array([p.coordinate.lon for p in self._points], dtype=float)
        self._lats.flags.writeable = False
        self._lons.flags.writeable = False

    def __len__(self) -> int:
        return len(self._points)

    def __getitem__(self, index):
        return self._points[index]

    def __iter__(self) -> Iterator[ScorePoint]:
        return iter(self._points)

    def __contains__(self, item) -> bool:
        if isinstance(item, str):
            return item in self._by_id
        return item in self._points

    def get(self, point_id: str) -> Optional[ScorePoint]:
        return self._by_id.get(point_id)

    @property
    def ids(self) -> Tuple[str, ...]:
        return tuple(p.id for p in self._points)

    def coordinates(self) -> Tuple[np.ndarray, np.ndarray]:
        """Read-only (latitudes, longitudes) arrays in store order."""
        return self._lats, self._lons

    def center(self) -> Optional[Coordinate]:
        """Mean coordinate of the store, or None when empty."""
        if not self._points:
            return None
        return Coordinate(float(self._lats.mean()), float(self._lons.mean()))

    def to_dataframe(self) -> pd.DataFrame:
        """Flat table with id, lat, lon and overall_score columns."""
        return pd.DataFrame({
            "id": list(self.ids),
            "lat": self._lats,
            "lon": self._lons,
            "overall_score": [p.overall_score for p in self._points],
        })


def _as_float(value: Any) -> Optional[float]:
    """Parse a numeric field; None for missing, non-numeric or non-finite values."""
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _first_present(record: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None and not (isinstance(value, float) and math.isnan(value)):
            return value
    return None


def _parse_coordinate(record: Mapping[str, Any]) -> Optional[Coordinate]:
    coordinate = record.get("coordinate")
    if isinstance(coordinate, Mapping):
        lat = _as_float(coordinate.get("lat"))
        lon = _as_float(_first_present(coordinate, ("lon", "lng")))
    else:
        lat = _as_float(record.get("lat"))
        lon = _as_float(_first_present(record, ("lon", "lng")))
    if lat is None or lon is None:
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None
    return Coordinate(lat, lon)


def _parse_sub_scores(record: Mapping[str, Any], scale_factor: float) -> Optional[SubScores]:
    raw = _first_present(record, ("subScores", "sub_scores", "metrics", "breakdown"))
    if not isinstance(raw, Mapping):
        return None
    values = {}
    for name, aliases in _SUB_SCORE_KEYS.items():
        value = _as_float(_first_present(raw, aliases))
        if value is None:
            return None
        values[name] = value
    return SubScores(**values).scaled(scale_factor)


def build_score_points(
    records: Iterable[Mapping[str, Any]],
    score_scale: float = 10.0,
    unscored_policy: str = "floor",
    floor_value: float = DEFAULT_FLOOR_VALUE,
    exclude_ids: Iterable[str] = DEFAULT_EXCLUDE_IDS
) -> ScorePointStore:
    """
    Convert raw suburb records into a ScorePointStore.

    Parameters
    ----------
    records : Iterable[Mapping]
        Raw dataset records
    score_scale : float, optional
        Maximum of the dataset's score range (10 or 100); scores are
        rescaled to 0-10 (default: 10)
    unscored_policy : str, optional
        "floor" keeps suburbs with a missing, zero or invalid score at
        `floor_value`; "exclude" drops them (default: "floor")
    floor_value : float, optional
        Score assigned under the "floor" policy (default: 1.0)
    exclude_ids : Iterable[str], optional
        Identifiers dropped from both display and interpolation

    Returns
    -------
    ScorePointStore
        Immutable store of valid points
    """
    if unscored_policy not in UNSCORED_POLICIES:
        raise ValueError(
            f"unscored_policy must be one of {UNSCORED_POLICIES}, got '{unscored_policy}'"
        )
    score_scale = float(score_scale)
    if not math.isfinite(score_scale) or score_scale <= 0:
        raise ValueError(f"score_scale must be positive, got {score_scale}")

    scale_factor = 10.0 / score_scale
    excluded = {str(i) for i in exclude_ids}
    points = []
    seen = set()
    skipped = {"denylisted": 0, "no_coordinate": 0, "no_id": 0, "unscored": 0, "duplicate": 0}

    for record in records:
        identifier = _first_present(record, ("suburb", "id", "name"))
        if identifier is None:
            skipped["no_id"] += 1
            continue
        identifier = str(identifier)

        if identifier in excluded:
            skipped["denylisted"] += 1
            continue

        if identifier in seen:
            logger.warning("Duplicate suburb '%s' in dataset; keeping first record", identifier)
            skipped["duplicate"] += 1
            continue

        coordinate = _parse_coordinate(record)
        if coordinate is None:
            logger.warning("Suburb '%s' has no usable coordinate; skipping", identifier)
            skipped["no_coordinate"] += 1
            continue

        score = _as_float(_first_present(record, ("score", "overallScore", "overall_score")))
        if score is None or score <= 0:
            if unscored_policy == "exclude":
                skipped["unscored"] += 1
                continue
            score = floor_value
        else:
            score *= scale_factor

        seen.add(identifier)
        points.append(ScorePoint(
            id=identifier,
            coordinate=coordinate,
            overall_score=score,
            sub_scores=_parse_sub_scores(record, scale_factor)
        ))

    logger.info(
        "Loaded %d score points (%s)",
        len(points),
        ", ".join(f"{reason}: {count}" for reason, count in skipped.items() if count) or "none skipped"
    )
    return ScorePointStore(points)


def load_score_points(
    path: Union[str, Path],
    score_scale: float = 10.0,
    unscored_policy: str = "floor",
    floor_value: float = DEFAULT_FLOOR_VALUE,
    exclude_ids: Iterable[str] = DEFAULT_EXCLUDE_IDS
) -> ScorePointStore:
    """
    Load the static JSON suburb dataset into a ScorePointStore.

    The file must contain a JSON list of suburb records.

    Raises
    ------
    FileNotFoundError
        If the dataset file does not exist
    ValueError
        If the file is not a JSON list of records
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Suburb dataset not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        records = json.load(f)

    if not isinstance(records, list) or not all(isinstance(r, Mapping) for r in records):
        raise ValueError(f"Suburb dataset must be a JSON list of records: {path}")

    logger.debug("Read %d records from %s", len(records), path)
    return build_score_points(
        records,
        score_scale=score_scale,
        unscored_policy=unscored_policy,
        floor_value=floor_value,
        exclude_ids=exclude_ids
    )


def load_store_from_config(config: Dict[str, Any], project_root: Optional[Path] = None) -> ScorePointStore:
    """Load the dataset described by the `data` section of a config."""
    data_config = config.get("data", {})
    path = resolve_path(data_config.get("dataset"), project_root or PROJECT_ROOT)

    exclude_ids = data_config.get("exclude_ids") or ()
    if isinstance(exclude_ids, str):
        # Environment overrides arrive as a comma-separated string
        exclude_ids = [i.strip() for i in exclude_ids.split(",") if i.strip()]

    return load_score_points(
        path,
        score_scale=float(data_config.get("score_scale", 10)),
        unscored_policy=str(data_config.get("unscored_policy", "floor")),
        floor_value=float(data_config.get("floor_value", DEFAULT_FLOOR_VALUE)),
        exclude_ids=exclude_ids
    )
