"""
Transmission (location change along a tree edge) construction.

Every parent -> child edge whose endpoints sit in different locations is a
transmission. On a triplicated map the edge is realised once per origin world
copy; for each of those the destination may independently wrap to a
neighbouring copy, and the candidate with the shortest on-screen horizontal
span wins.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from phylogeo.map.colors import check_node_vector
from phylogeo.map.curves import bezier, interpolate_dates
from phylogeo.map.geo import (
    WORLD_OFFSETS,
    get_location,
    is_valid_transmission_pair,
    lookup_lat_long,
    world_offsets,
)
from phylogeo.map.projection import Projection
from phylogeo.map.types import (
    NODE_NOT_VISIBLE,
    TRANSMISSION_HIDDEN,
    TRANSMISSION_VISIBLE,
    GeoLookupTable,
    LatLong,
    Point,
    Transmission,
    TransmissionIndices,
    TransmissionResult,
)
from phylogeo.tree import Node

logger = logging.getLogger(__name__)

CurveFn = Callable[[Point, Point, int], List[Point]]
# (origin location, destination location) -> number of edges seen so far
DemePairCounts = Dict[Tuple[str, str], int]


def transmission_id(node: Node, child: Node) -> str:
    return f"{node.array_idx}-{child.array_idx}"


def transmission_visibility(visibility: Sequence[int], child: Node) -> str:
    """A transmission is shown iff its destination node is visible."""
    if visibility[child.array_idx] != NODE_NOT_VISIBLE:
        return TRANSMISSION_VISIBLE
    return TRANSMISSION_HIDDEN


def iter_transmission_edges(nodes: Sequence[Node], geo_resolution: str):
    """Yield (node, child, node_location, child_location) for location changes."""
    for node in nodes:
        if not node.children:
            continue
        node_location = get_location(node, geo_resolution)
        for child in node.children:
            child_location = get_location(child, geo_resolution)
            if node_location and child_location and node_location != child_location:
                yield node, child, node_location, child_location


def maybe_construct_transmission(
    node: Node,
    child: Node,
    node_location: str,
    child_location: str,
    origin: LatLong,
    destination: LatLong,
    offset_orig: float,
    offset_dest: float,
    node_colors: Sequence[str],
    visibility: Sequence[int],
    projection: Projection,
    extend: int,
    curve: CurveFn = bezier,
    date_trait: str = "num_date",
) -> Optional[Transmission]:
    """Build the transmission for one offset pair, or None if it may not be drawn."""
    long_orig = origin.longitude + offset_orig
    long_dest = destination.longitude + offset_dest
    if not is_valid_transmission_pair(long_orig, long_dest):
        return None

    origin_coords = projection.project(origin.latitude, long_orig)
    destination_coords = projection.project(destination.latitude, long_dest)
    bezier_curve = curve(origin_coords, destination_coords, extend)

    origin_num_date = node.get_num_date(date_trait)
    destination_num_date = child.get_num_date(date_trait)

    return Transmission(
        id=transmission_id(node, child),
        origin_node=node,
        destination_node=child,
        bezier_curve=bezier_curve,
        bezier_dates=interpolate_dates(
            origin_num_date, destination_num_date, len(bezier_curve)
        ),
        origin_name=node_location,
        destination_name=child_location,
        origin_coords=origin_coords,
        destination_coords=destination_coords,
        origin_latitude=origin.latitude,
        origin_longitude=long_orig,
        destination_latitude=destination.latitude,
        destination_longitude=long_dest,
        origin_num_date=origin_num_date,
        destination_num_date=destination_num_date,
        color=node_colors[node.array_idx],
        visible=transmission_visibility(visibility, child),
        extend=extend,
    )


def maybe_get_closest_transmission(
    node: Node,
    child: Node,
    node_location: str,
    child_location: str,
    origin: LatLong,
    destination: LatLong,
    offset_orig: float,
    node_colors: Sequence[str],
    visibility: Sequence[int],
    projection: Projection,
    extend: int,
    curve: CurveFn = bezier,
    date_trait: str = "num_date",
) -> Optional[Transmission]:
    """
    Pick the destination world copy giving the shortest horizontal span.

    All three destination offsets are tried even on a single-copy map so an
    edge is never drawn across the whole world when a wrapped path is shorter.
    Ties go to the first candidate in offset order.
    """
    candidates: List[Transmission] = []
    for offset_dest in WORLD_OFFSETS:
        transmission = maybe_construct_transmission(
            node,
            child,
            node_location,
            child_location,
            origin,
            destination,
            offset_orig,
            offset_dest,
            node_colors,
            visibility,
            projection,
            extend,
            curve=curve,
            date_trait=date_trait,
        )
        if transmission is not None:
            candidates.append(transmission)

    if not candidates:
        return None
    return min(
        candidates,
        key=lambda t: abs(t.destination_coords.x - t.origin_coords.x),
    )


def build_transmission_indices(
    transmission_data: Sequence[Transmission],
) -> TransmissionIndices:
    transmission_indices: TransmissionIndices = {}
    for index, transmission in enumerate(transmission_data):
        transmission_indices.setdefault(transmission.id, []).append(index)
    return transmission_indices


def setup_transmission_data(
    nodes: Sequence[Node],
    visibility: Sequence[int],
    geo_resolution: str,
    node_colors: Sequence[str],
    triplicate: bool,
    geo: GeoLookupTable,
    projection: Projection,
    curve: CurveFn = bezier,
    date_trait: str = "num_date",
    missing: Optional[Set[str]] = None,
) -> TransmissionResult:
    """
    Build the transmission collection and the id -> positions index.

    The per location-pair counter feeding ``extend`` is local to this call,
    so rebuilding from identical inputs yields identical curves.
    """
    check_node_vector("visibility", visibility, nodes)
    check_node_vector("node_colors", node_colors, nodes)

    transmission_data: List[Transmission] = []
    if missing is None:
        missing = set()
    deme_to_deme_counts: DemePairCounts = {}
    n_edges = 0

    for node, child, node_location, child_location in iter_transmission_edges(
        nodes, geo_resolution
    ):
        n_edges += 1
        pair = (node_location, child_location)
        deme_to_deme_counts[pair] = deme_to_deme_counts.get(pair, 0) + 1
        extend = deme_to_deme_counts[pair]

        origin = lookup_lat_long(geo, geo_resolution, node_location, missing)
        destination = lookup_lat_long(geo, geo_resolution, child_location, missing)
        if origin is None or destination is None:
            continue

        for offset_orig in world_offsets(triplicate):
            transmission = maybe_get_closest_transmission(
                node,
                child,
                node_location,
                child_location,
                origin,
                destination,
                offset_orig,
                node_colors,
                visibility,
                projection,
                extend,
                curve=curve,
                date_trait=date_trait,
            )
            if transmission is None:
                logger.debug(
                    f"No drawable path for {transmission_id(node, child)} "
                    f"at origin offset {offset_orig}"
                )
                continue
            transmission_data.append(transmission)

    logger.debug(
        f"Built {len(transmission_data)} transmissions from {n_edges} "
        "location-changing edges"
    )
    return TransmissionResult(
        transmission_data=transmission_data,
        transmission_indices=build_transmission_indices(transmission_data),
        demes_missing_lat_longs=missing,
    )
