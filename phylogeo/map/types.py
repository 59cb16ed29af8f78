"""Core type definitions for the phylogeographic map layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional, Set, TypeAlias, Union

from phylogeo.tree import Node

# Node visibility states, indexed by Node.array_idx
NODE_NOT_VISIBLE = 0
NODE_VISIBLE_TO_MAP_ONLY = 1
NODE_VISIBLE = 2

TRANSMISSION_VISIBLE = "visible"
TRANSMISSION_HIDDEN = "hidden"


class Point(NamedTuple):
    """Screen-space point produced by a projection."""

    x: float
    y: float


class LatLong(NamedTuple):
    latitude: float
    longitude: float


@dataclass
class ColorCount:
    """Tip counts for one (location, color) pair."""

    n_visible: int = 0
    """Number of currently visible tips with this color at this location."""

    n_total: int = 0
    """Number of tips with this color at this location, visible or not."""


@dataclass
class PieSlice:
    """One slice of a deme pie chart."""

    color: str
    value: float
    start_angle: float
    end_angle: float
    deme_data_idx: int
    """Index of the owning deme in the deme collection."""

    inner_radius: float = 0.0


@dataclass
class PieSlices:
    """Pie-chart rendering of a deme: one slice per color present."""

    arcs: List[PieSlice]


@dataclass
class BlendedColor:
    """Blended-circle rendering of a deme: a single averaged color."""

    color: str


DemeVisual: TypeAlias = Union[PieSlices, BlendedColor]


@dataclass
class Deme:
    """Aggregated marker for one location at one world-copy offset."""

    name: str
    count: int
    """Number of visible tips at this location."""

    latitude: float
    longitude: float
    """Raw longitude, world-copy offset included."""

    coords: Point
    visual: DemeVisual

    @property
    def arcs(self) -> Optional[List[PieSlice]]:
        if isinstance(self.visual, PieSlices):
            return self.visual.arcs
        return None

    @property
    def color(self) -> Optional[str]:
        if isinstance(self.visual, BlendedColor):
            return self.visual.color
        return None


@dataclass(eq=False)
class Transmission:
    """
    Directed curve for one tree edge that changes location, realised at one
    world-copy offset of its origin.
    """

    id: str
    """"<parentArrayIdx>-<childArrayIdx>", shared by all world copies of the edge."""

    origin_node: Node
    destination_node: Node
    bezier_curve: List[Point]
    bezier_dates: List[float]
    """Interpolated numeric date for every point of ``bezier_curve``."""

    origin_name: str
    destination_name: str
    origin_coords: Point
    destination_coords: Point
    origin_latitude: float
    origin_longitude: float
    destination_latitude: float
    destination_longitude: float
    origin_num_date: float
    destination_num_date: float
    color: str
    visible: str
    extend: int
    """Occurrence number of this location pair, used to fan out parallel curves."""

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Transmission):
            return NotImplemented
        # Nodes compare by identity; dates compare with nan == nan
        return (
            self.id == other.id
            and self.origin_node is other.origin_node
            and self.destination_node is other.destination_node
            and self.bezier_curve == other.bezier_curve
            and _same_floats(self.bezier_dates, other.bezier_dates)
            and self.origin_name == other.origin_name
            and self.destination_name == other.destination_name
            and self.origin_coords == other.origin_coords
            and self.destination_coords == other.destination_coords
            and self.origin_latitude == other.origin_latitude
            and self.origin_longitude == other.origin_longitude
            and self.destination_latitude == other.destination_latitude
            and self.destination_longitude == other.destination_longitude
            and _same_floats(
                [self.origin_num_date, self.destination_num_date],
                [other.origin_num_date, other.destination_num_date],
            )
            and self.color == other.color
            and self.visible == other.visible
            and self.extend == other.extend
        )


def _same_floats(a: List[float], b: List[float]) -> bool:
    if len(a) != len(b):
        return False
    return all(x == y or (x != x and y != y) for x, y in zip(a, b))


# location -> {color -> ColorCount}
DemeColorMap: TypeAlias = Dict[str, Dict[str, ColorCount]]
# location -> positions in the deme collection
DemeIndices: TypeAlias = Dict[str, List[int]]
# transmission id -> positions in the transmission collection
TransmissionIndices: TypeAlias = Dict[str, List[int]]
# resolution -> location -> {"latitude": .., "longitude": ..}
GeoLookupTable: TypeAlias = Dict[str, Dict[str, Dict[str, float]]]


@dataclass
class DemeResult:
    deme_data: List[Deme]
    deme_indices: DemeIndices
    demes_missing_lat_longs: Set[str] = field(default_factory=set)


@dataclass
class TransmissionResult:
    transmission_data: List[Transmission]
    transmission_indices: TransmissionIndices
    demes_missing_lat_longs: Set[str] = field(default_factory=set)


@dataclass
class MapData:
    """Result of a full build of the map layer."""

    deme_data: List[Deme]
    transmission_data: List[Transmission]
    deme_indices: DemeIndices
    transmission_indices: TransmissionIndices
    demes_missing_lat_longs: Set[str] = field(default_factory=set)
    """Locations without coordinates in the lookup table (diagnostic only)."""


@dataclass
class MapUpdate:
    """
    Result of an incremental update.

    ``new_demes`` and ``new_transmissions`` are None when the update was a
    no-op because no build result was available.
    """

    new_demes: Optional[List[Deme]] = None
    new_transmissions: Optional[List[Transmission]] = None
    missing_deme_locations: Set[str] = field(default_factory=set)
    missing_transmission_ids: Set[str] = field(default_factory=set)


@dataclass
class MapConfig:
    """Configuration for building the map layer."""

    geo_resolution: str = "country"
    triplicate: bool = False
    pie_chart: bool = True
    curve_points: int = 30
    date_trait: str = "num_date"
    logger_name: str = __name__

    def __post_init__(self):
        if self.curve_points < 2:
            raise ValueError(
                f"curve_points must be at least 2, got {self.curve_points}"
            )
        if not self.geo_resolution:
            raise ValueError("geo_resolution must be a non-empty trait name")
