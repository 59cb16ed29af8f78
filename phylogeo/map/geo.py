"""
Geographic lookup and world-copy bounds.

Longitudes of the base map are -180 to 180 and those of a fully triplicated
map are -540 to 540. Rendering is restricted to longitudes strictly between
WEST_BOUND and EAST_BOUND.
"""

import logging
from typing import Optional, Set, Tuple

from phylogeo.map.types import GeoLookupTable, LatLong
from phylogeo.tree import Node

logger = logging.getLogger(__name__)

WEST_BOUND = -360.0
EAST_BOUND = 360.0
WORLD_OFFSETS: Tuple[float, ...] = (-360.0, 0.0, 360.0)
MAX_LONGITUDE_SPAN = 180.0


def world_offsets(triplicate: bool) -> Tuple[float, ...]:
    """Longitude offsets of the rendered world copies."""
    return WORLD_OFFSETS if triplicate else (0.0,)


def in_bounds(longitude: float) -> bool:
    return WEST_BOUND < longitude < EAST_BOUND


def get_location(node: Node, geo_resolution: str) -> Optional[str]:
    """
    Location of ``node`` at ``geo_resolution`` as a lookup key.

    Parsed annotations may be numeric (``region=1``) while geo lookup keys are
    always strings, so the value is returned as ``str``.
    """
    value = node.get_trait(geo_resolution)
    if value is None:
        return None
    return str(value)


def lookup_lat_long(
    geo: GeoLookupTable,
    geo_resolution: str,
    location: str,
    missing: Optional[Set[str]] = None,
) -> Optional[LatLong]:
    """
    Look up the raw coordinates of ``location`` at ``geo_resolution``.

    Returns None when the resolution or the location is absent, or when the
    entry lacks a coordinate. The location is then added to ``missing``;
    a warning is logged the first time a location is recorded there.
    """
    entry = geo.get(geo_resolution, {}).get(location)
    if entry is not None:
        try:
            return LatLong(float(entry["latitude"]), float(entry["longitude"]))
        except (KeyError, TypeError, ValueError):
            logger.debug(f"Malformed geo entry for {location}: {entry!r}")

    if missing is not None:
        if location not in missing:
            logger.warning(
                f"Lat/long missing from metadata for {location} "
                f"(resolution '{geo_resolution}')"
            )
        missing.add(location)
    return None


def is_valid_transmission_pair(long_orig: float, long_dest: float) -> bool:
    """
    Decide whether an (origin, destination) longitude pair may be drawn.

    At least one end must lie inside the rendered window on each side, and
    the pair must span less than half the globe so the curve never takes the
    long way round.
    """
    return (
        (long_orig > WEST_BOUND or long_dest > WEST_BOUND)
        and (long_orig < EAST_BOUND or long_dest < EAST_BOUND)
        and abs(long_orig - long_dest) < MAX_LONGITUDE_SPAN
    )
