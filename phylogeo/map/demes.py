"""Deme (per-location marker) construction."""

import logging
from typing import Callable, List, Mapping, Optional, Sequence, Set

from phylogeo.map.colors import aggregate_colors, average_colors, visible_count
from phylogeo.map.curves import PieArc, pie
from phylogeo.map.geo import in_bounds, lookup_lat_long, world_offsets
from phylogeo.map.projection import Projection
from phylogeo.map.types import (
    BlendedColor,
    ColorCount,
    Deme,
    DemeIndices,
    DemeResult,
    DemeVisual,
    GeoLookupTable,
    PieSlice,
    PieSlices,
)
from phylogeo.tree import Node

logger = logging.getLogger(__name__)

BlendFn = Callable[[Mapping[str, ColorCount]], str]
PieFn = Callable[[Sequence[float]], List[PieArc]]


def pie_slices(
    color_counts: Mapping[str, ColorCount],
    deme_data_idx: int,
    pie_layout: PieFn = pie,
) -> PieSlices:
    """One slice per color, sized by its visible tip count."""
    colors = list(color_counts)
    arcs = pie_layout([color_counts[c].n_visible for c in colors])
    return PieSlices(
        arcs=[
            PieSlice(
                color=color,
                value=arc.value,
                start_angle=arc.start_angle,
                end_angle=arc.end_angle,
                deme_data_idx=deme_data_idx,
            )
            for color, arc in zip(colors, arcs)
        ]
    )


def make_deme_visual(
    color_counts: Mapping[str, ColorCount],
    deme_data_idx: int,
    pie_chart: bool,
    blend: BlendFn = average_colors,
    pie_layout: PieFn = pie,
) -> DemeVisual:
    if pie_chart:
        return pie_slices(color_counts, deme_data_idx, pie_layout)
    return BlendedColor(color=blend(color_counts))


def setup_deme_data(
    nodes: Sequence[Node],
    visibility: Sequence[int],
    geo_resolution: str,
    node_colors: Sequence[str],
    triplicate: bool,
    geo: GeoLookupTable,
    projection: Projection,
    pie_chart: bool,
    blend: BlendFn = average_colors,
    pie_layout: PieFn = pie,
    missing: Optional[Set[str]] = None,
) -> DemeResult:
    """
    Build the deme collection and the location -> positions index.

    One deme is emitted per (world offset, location) whose offset longitude
    lies inside the rendered window. Locations without coordinates are
    skipped and reported in ``demes_missing_lat_longs``; pass ``missing`` to
    share that set (and its one warning per location) with another builder.
    """
    deme_data: List[Deme] = []
    deme_indices: DemeIndices = {}
    if missing is None:
        missing = set()

    deme_to_color_map = aggregate_colors(nodes, visibility, geo_resolution, node_colors)

    for offset in world_offsets(triplicate):
        for location, color_counts in deme_to_color_map.items():
            lat_long = lookup_lat_long(geo, geo_resolution, location, missing)
            if lat_long is None:
                continue

            lat = lat_long.latitude
            long = lat_long.longitude + offset
            if not in_bounds(long):
                continue

            deme_data_idx = len(deme_data)
            deme_data.append(
                Deme(
                    name=location,
                    count=visible_count(color_counts),
                    latitude=lat,
                    longitude=long,
                    coords=projection.project(lat, long),
                    visual=make_deme_visual(
                        color_counts, deme_data_idx, pie_chart, blend, pie_layout
                    ),
                )
            )
            deme_indices.setdefault(location, []).append(deme_data_idx)

    logger.debug(
        f"Built {len(deme_data)} demes for {len(deme_to_color_map)} locations "
        f"({len(missing)} without coordinates)"
    )
    return DemeResult(
        deme_data=deme_data,
        deme_indices=deme_indices,
        demes_missing_lat_longs=missing,
    )
