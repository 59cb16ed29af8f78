"""
Per-location color aggregation and color utilities.

``aggregate_colors`` walks the tips of the tree and builds, for every
location, a dictionary of the colors present there. For example::

    deme_to_color_map["new_zealand"]["#A3A3A3"].n_visible == 10
    deme_to_color_map["new_zealand"]["#A3A3A3"].n_total == 20
"""

from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np
from matplotlib import colormaps
from matplotlib.colors import to_hex, to_rgb

from phylogeo.map.geo import get_location
from phylogeo.map.types import NODE_NOT_VISIBLE, ColorCount, DemeColorMap
from phylogeo.tree import Node

UNKNOWN_COLOR = "#AAAAAA"


def check_node_vector(name: str, vector: Sequence, nodes: Sequence[Node]) -> None:
    """Raise ValueError when ``vector`` cannot be indexed by every node."""
    needed = max((n.array_idx for n in nodes if n.array_idx is not None), default=-1)
    if len(vector) <= needed:
        raise ValueError(
            f"{name} has {len(vector)} entries but node array_idx goes up to {needed}"
        )


def aggregate_colors(
    nodes: Sequence[Node],
    visibility: Sequence[int],
    geo_resolution: str,
    node_colors: Sequence[str],
) -> DemeColorMap:
    """
    Count visible and total tips per (location, color).

    Only tips contribute and tips without a location at ``geo_resolution``
    are ignored. ``visibility`` and ``node_colors`` are indexed by
    ``Node.array_idx``.
    """
    check_node_vector("visibility", visibility, nodes)
    check_node_vector("node_colors", node_colors, nodes)

    deme_to_color_map: DemeColorMap = {}
    for node in nodes:
        if node.children:
            continue
        location = get_location(node, geo_resolution)
        if location is None:
            continue
        color = node_colors[node.array_idx]
        counts = deme_to_color_map.setdefault(location, {}).setdefault(
            color, ColorCount()
        )
        counts.n_total += 1
        if visibility[node.array_idx] != NODE_NOT_VISIBLE:
            counts.n_visible += 1
    return deme_to_color_map


def visible_count(color_counts: Mapping[str, ColorCount]) -> int:
    return sum(c.n_visible for c in color_counts.values())


def average_colors(color_counts: Mapping[str, ColorCount]) -> str:
    """
    Blend the colors present at a location into one hex color.

    RGB components are averaged with ``n_visible`` as weights. When nothing
    is visible the ``n_total`` counts are used instead, so hidden demes keep
    a meaningful color.
    """
    if not color_counts:
        return UNKNOWN_COLOR
    rgb = np.array([to_rgb(c) for c in color_counts])
    weights = np.array([c.n_visible for c in color_counts.values()], dtype=float)
    if weights.sum() == 0:
        weights = np.array([c.n_total for c in color_counts.values()], dtype=float)
    if weights.sum() == 0:
        return UNKNOWN_COLOR
    blended = np.average(rgb, axis=0, weights=weights)
    return to_hex(np.clip(blended, 0.0, 1.0))


def color_by_trait(
    nodes: Sequence[Node],
    trait: str,
    cmap: str = "tab10",
    unknown_color: str = UNKNOWN_COLOR,
) -> List[str]:
    """
    Build a per-node color vector from a categorical trait.

    Trait values are sorted and mapped onto the colormap in order; nodes
    lacking the trait get ``unknown_color``. The result is indexed by
    ``Node.array_idx``.
    """
    values = sorted(
        {str(n.get_trait(trait)) for n in nodes if n.get_trait(trait) is not None}
    )
    colormap = colormaps[cmap]
    n_colors: Optional[int] = getattr(colormap, "N", None)
    palette: Dict[str, str] = {}
    for i, value in enumerate(values):
        if n_colors and n_colors < 256:
            # Qualitative colormaps: cycle through their discrete colors
            palette[value] = to_hex(colormap(i % n_colors))
        else:
            position = i / (len(values) - 1) if len(values) > 1 else 0.0
            palette[value] = to_hex(colormap(position))

    size = max((n.array_idx for n in nodes if n.array_idx is not None), default=-1) + 1
    colors = [unknown_color] * size
    for node in nodes:
        value = node.get_trait(trait)
        colors[node.array_idx] = (
            palette[str(value)] if value is not None else unknown_color
        )
    return colors
