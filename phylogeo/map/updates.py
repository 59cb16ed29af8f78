"""
Incremental updates of an already built map layer.

Two independent paths exist: a color/visibility update, which re-aggregates
tip colors and patches counts, pie angles, blended colors and transmission
color/visibility through the index maps; and a projection update, which only
re-projects stored raw coordinates and rebuilds curves. Neither changes the
length of a collection or its index map.

Both paths work on a copy of the collection. Patched entries are replaced by
new objects, so the caller's previous snapshot is never modified.
"""

import logging
from dataclasses import replace
from typing import List, Mapping, Optional, Sequence, Set

from phylogeo.map.colors import (
    aggregate_colors,
    average_colors,
    check_node_vector,
    visible_count,
)
from phylogeo.map.curves import bezier, pie
from phylogeo.map.demes import BlendFn, PieFn, pie_slices
from phylogeo.map.projection import Projection
from phylogeo.map.transmissions import (
    CurveFn,
    iter_transmission_edges,
    transmission_id,
    transmission_visibility,
)
from phylogeo.map.types import (
    BlendedColor,
    ColorCount,
    Deme,
    DemeIndices,
    MapUpdate,
    PieSlices,
    Transmission,
    TransmissionIndices,
)
from phylogeo.tree import Node

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------
# Color & visibility
# ------------------------------------------------------------------------


def _repatch_pie(
    visual: PieSlices,
    color_counts: Mapping[str, ColorCount],
    deme_data_idx: int,
    pie_layout: PieFn,
) -> PieSlices:
    """
    Recompute slice angles keeping the slice-to-color assignment of the build.

    If the colors present at the location changed (a recoloring), the slices
    are rebuilt from the fresh counts instead.
    """
    colors = [arc.color for arc in visual.arcs]
    if set(colors) != set(color_counts):
        logger.debug(
            f"Colors changed for deme {deme_data_idx}; rebuilding its pie slices"
        )
        return pie_slices(color_counts, deme_data_idx, pie_layout)

    arcs = pie_layout([color_counts[c].n_visible for c in colors])
    return PieSlices(
        arcs=[
            replace(
                slice_,
                value=arc.value,
                start_angle=arc.start_angle,
                end_angle=arc.end_angle,
            )
            for slice_, arc in zip(visual.arcs, arcs)
        ]
    )


def update_deme_data_col_and_vis(
    deme_data: Sequence[Deme],
    deme_indices: DemeIndices,
    nodes: Sequence[Node],
    visibility: Sequence[int],
    geo_resolution: str,
    node_colors: Sequence[str],
    pie_chart: bool,
    blend: BlendFn = average_colors,
    pie_layout: PieFn = pie,
    missing_locations: Optional[Set[str]] = None,
) -> List[Deme]:
    """Patch ``count`` and the visual of every deme via ``deme_indices``."""
    deme_data_copy = list(deme_data)
    deme_to_color_map = aggregate_colors(nodes, visibility, geo_resolution, node_colors)

    for location, color_counts in deme_to_color_map.items():
        indices = deme_indices.get(location)
        if indices is None:
            # Locations without coordinates never produce demes
            if missing_locations is not None:
                missing_locations.add(location)
            continue

        count = visible_count(color_counts)
        for index in indices:
            deme = deme_data_copy[index]
            if pie_chart and isinstance(deme.visual, PieSlices):
                visual = _repatch_pie(deme.visual, color_counts, index, pie_layout)
            else:
                visual = BlendedColor(color=blend(color_counts))
            deme_data_copy[index] = replace(deme, count=count, visual=visual)

    return deme_data_copy


def update_transmission_data_col_and_vis(
    transmission_data: Sequence[Transmission],
    transmission_indices: TransmissionIndices,
    nodes: Sequence[Node],
    visibility: Sequence[int],
    geo_resolution: str,
    node_colors: Sequence[str],
    missing_ids: Optional[Set[str]] = None,
) -> List[Transmission]:
    """Patch ``color`` and ``visible`` of every transmission via its id."""
    check_node_vector("visibility", visibility, nodes)
    check_node_vector("node_colors", node_colors, nodes)

    transmission_data_copy = list(transmission_data)

    for node, child, _, _ in iter_transmission_edges(nodes, geo_resolution):
        tid = transmission_id(node, child)
        indices = transmission_indices.get(tid)
        if indices is None:
            # Edges without a drawable path or coordinates have no entries
            if missing_ids is not None:
                missing_ids.add(tid)
            continue

        color = node_colors[node.array_idx]
        visible = transmission_visibility(visibility, child)
        for index in indices:
            transmission_data_copy[index] = replace(
                transmission_data_copy[index], color=color, visible=visible
            )

    return transmission_data_copy


def update_deme_and_transmission_data_col_and_vis(
    deme_data: Optional[Sequence[Deme]],
    transmission_data: Optional[Sequence[Transmission]],
    deme_indices: DemeIndices,
    transmission_indices: TransmissionIndices,
    nodes: Sequence[Node],
    visibility: Sequence[int],
    geo_resolution: str,
    node_colors: Sequence[str],
    pie_chart: bool,
    blend: BlendFn = average_colors,
    pie_layout: PieFn = pie,
) -> MapUpdate:
    """
    Update the attributes that follow color and visibility.

    For demes: ``count`` and pie angles or blended color. For transmissions:
    ``color`` and ``visible``. Returns an empty ``MapUpdate`` when either
    collection is missing.
    """
    update = MapUpdate()
    if deme_data is None or transmission_data is None:
        return update

    update.new_demes = update_deme_data_col_and_vis(
        deme_data,
        deme_indices,
        nodes,
        visibility,
        geo_resolution,
        node_colors,
        pie_chart,
        blend=blend,
        pie_layout=pie_layout,
        missing_locations=update.missing_deme_locations,
    )
    update.new_transmissions = update_transmission_data_col_and_vis(
        transmission_data,
        transmission_indices,
        nodes,
        visibility,
        geo_resolution,
        node_colors,
        missing_ids=update.missing_transmission_ids,
    )
    if update.missing_deme_locations or update.missing_transmission_ids:
        # Includes locations without coordinates and edges that never had a
        # drawable path, so this is not an error on its own
        logger.debug(
            f"{len(update.missing_deme_locations)} locations and "
            f"{len(update.missing_transmission_ids)} transmission ids were not "
            "found in the index maps; map entries for them were left unchanged"
        )
    return update


# ------------------------------------------------------------------------
# Projection (pan / zoom)
# ------------------------------------------------------------------------


def update_deme_data_lat_long(
    deme_data: Sequence[Deme], projection: Projection
) -> List[Deme]:
    return [
        replace(deme, coords=projection.project(deme.latitude, deme.longitude))
        for deme in deme_data
    ]


def update_transmission_data_lat_long(
    transmission_data: Sequence[Transmission],
    projection: Projection,
    curve: CurveFn = bezier,
) -> List[Transmission]:
    """Re-project both ends and rebuild the curve; dates are left as they are."""
    transmission_data_copy: List[Transmission] = []
    for transmission in transmission_data:
        origin_coords = projection.project(
            transmission.origin_latitude, transmission.origin_longitude
        )
        destination_coords = projection.project(
            transmission.destination_latitude, transmission.destination_longitude
        )
        transmission_data_copy.append(
            replace(
                transmission,
                origin_coords=origin_coords,
                destination_coords=destination_coords,
                bezier_curve=curve(
                    origin_coords, destination_coords, transmission.extend
                ),
            )
        )
    return transmission_data_copy


def update_deme_and_transmission_data_lat_long(
    deme_data: Optional[Sequence[Deme]],
    transmission_data: Optional[Sequence[Transmission]],
    projection: Projection,
    curve: CurveFn = bezier,
) -> MapUpdate:
    """Re-project every deme and transmission for a new viewport."""
    update = MapUpdate()
    if deme_data is None or transmission_data is None:
        return update

    update.new_demes = update_deme_data_lat_long(deme_data, projection)
    update.new_transmissions = update_transmission_data_lat_long(
        transmission_data, projection, curve=curve
    )
    return update
