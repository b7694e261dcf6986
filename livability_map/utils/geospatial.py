"""
Geospatial Utility Functions

Great-circle distances and Web Mercator pixel projection for the map
viewport.
"""

from typing import Tuple, Union

import numpy as np
import pyproj

# Mean earth radius used by Leaflet's CRS.Earth
EARTH_RADIUS_M = 6371000.0

TILE_SIZE = 256

ArrayLike = Union[float, np.ndarray]

_TO_WEB_MERCATOR = pyproj.Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)

# Half the width of the EPSG:3857 world, in meters
_MERCATOR_HALF_WORLD = np.pi * 6378137.0


def haversine_meters(lat1: ArrayLike, lon1: ArrayLike, lat2: ArrayLike, lon2: ArrayLike) -> ArrayLike:
    """
    Great-circle distance in meters between two points (or arrays of points).

    Parameters
    ----------
    lat1, lon1 : float or np.ndarray
        First coordinate(s) in decimal degrees
    lat2, lon2 : float or np.ndarray
        Second coordinate(s) in decimal degrees

    Returns
    -------
    float or np.ndarray
        Distance(s) in meters
    """
    lat1_r = np.radians(lat1)
    lat2_r = np.radians(lat2)
    dlat = lat2_r - lat1_r
    dlon = np.radians(np.asarray(lon2) - np.asarray(lon1))

    a = np.sin(dlat / 2.0) ** 2 + np.cos(lat1_r) * np.cos(lat2_r) * np.sin(dlon / 2.0) ** 2
    # Rounding can push a just above 1 for antipodal points
    a = np.clip(a, 0.0, 1.0)
    return 2.0 * EARTH_RADIUS_M * np.arctan2(np.sqrt(a), np.sqrt(1.0 - a))


def to_world_pixels(lat: float, lon: float, zoom: float) -> Tuple[float, float]:
    """
    Project a WGS84 coordinate to global Web Mercator pixel space at a zoom level.

    Pixel (0, 0) is the north-west corner of the world; the world is
    TILE_SIZE * 2**zoom pixels wide.
    """
    # Web Mercator is undefined at the poles
    lat = float(np.clip(lat, -85.05112878, 85.05112878))
    x, y = _TO_WEB_MERCATOR.transform(lon, lat)
    world_size = TILE_SIZE * (2.0 ** zoom)
    px = (x + _MERCATOR_HALF_WORLD) / (2.0 * _MERCATOR_HALF_WORLD) * world_size
    py = (_MERCATOR_HALF_WORLD - y) / (2.0 * _MERCATOR_HALF_WORLD) * world_size
    return px, py


def to_container_pixels(
    lat: float,
    lon: float,
    center_lat: float,
    center_lon: float,
    zoom: float,
    width: int,
    height: int
) -> Tuple[float, float]:
    """
    Convert a coordinate to pixel offsets within a map viewport.

    Parameters
    ----------
    lat, lon : float
        Coordinate to convert
    center_lat, center_lon : float
        Viewport center
    zoom : float
        Viewport zoom level
    width, height : int
        Viewport size in pixels

    Returns
    -------
    Tuple[float, float]
        (x, y) pixels from the top-left corner of the viewport
    """
    px, py = to_world_pixels(lat, lon, zoom)
    cx, cy = to_world_pixels(center_lat, center_lon, zoom)
    return px - cx + width / 2.0, py - cy + height / 2.0
