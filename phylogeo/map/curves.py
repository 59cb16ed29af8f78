"""Curve, pie-layout and date interpolation services."""

import math
from typing import List, NamedTuple, Sequence

import numpy as np

from phylogeo.map.types import Point

TAU = 2 * math.pi

# Control-point displacement as a fraction of the chord length
BASE_BEND = 0.2
# Additional displacement for each further transmission between the same pair
EXTEND_BEND = 0.1


class PieArc(NamedTuple):
    value: float
    start_angle: float
    end_angle: float


def pie(values: Sequence[float]) -> List[PieArc]:
    """
    Partition the full circle into arcs proportional to ``values``.

    Arcs are laid out in input order starting at angle 0. When all values are
    zero every arc collapses to zero width at angle 0.
    """
    values_arr = np.asarray(values, dtype=float)
    total = values_arr.sum()
    if total > 0:
        ends = np.cumsum(values_arr) * (TAU / total)
    else:
        ends = np.zeros(len(values_arr))
    starts = np.concatenate(([0.0], ends[:-1])) if len(ends) else ends
    return [
        PieArc(float(v), float(s), float(e))
        for v, s, e in zip(values_arr, starts, ends)
    ]


def bezier(
    origin: Point, destination: Point, extend: int = 1, num_points: int = 30
) -> List[Point]:
    """
    Sample a quadratic Bezier curve from ``origin`` to ``destination``.

    The control point sits on the perpendicular bisector of the chord, offset
    to the left of the direction of travel. Larger ``extend`` values push it
    further out so repeated transmissions between the same two points are
    drawn as separate arcs.
    """
    p0 = np.array(origin, dtype=float)
    p2 = np.array(destination, dtype=float)
    chord = p2 - p0
    normal = np.array([-chord[1], chord[0]])

    bend = BASE_BEND + EXTEND_BEND * max(extend - 1, 0)
    p1 = (p0 + p2) / 2 + normal * bend

    t = np.linspace(0.0, 1.0, num_points)[:, np.newaxis]
    points = (1 - t) ** 2 * p0 + 2 * (1 - t) * t * p1 + t**2 * p2
    return [Point(float(x), float(y)) for x, y in points]


def interpolate_dates(start: float, end: float, n: int) -> List[float]:
    """
    Linearly interpolate ``n`` dates from ``start`` to ``end``.

    Sample ``i`` gets ``start + (end - start) * i / (n - 1)``, so a missing
    date at either end makes every sample ``nan``.
    """
    if n == 1:
        return [float(start)]
    steps = np.arange(n, dtype=float) / (n - 1)
    return [float(d) for d in start + (end - start) * steps]
