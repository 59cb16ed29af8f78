"""
Projection services mapping (latitude, longitude) to screen points.

The map layer only relies on the ``Projection`` protocol. Two concrete
projections are provided: a spherical Web Mercator matching slippy-map
"lat/long to layer point" conversion, and a linear plate carree.
"""

import math
from dataclasses import dataclass, replace
from typing import Optional, Protocol, Tuple

from phylogeo.map.types import Point

EARTH_RADIUS = 6378137.0
MAX_LATITUDE = 85.0511287798


class Projection(Protocol):
    def project(self, lat: float, long: float) -> Point: ...


@dataclass(frozen=True)
class WebMercatorProjection:
    """
    Spherical Mercator projection into layer pixels.

    A world copy is ``tile_size * 2**zoom`` pixels wide; ``pixel_origin`` is
    the pixel position of the layer's top-left corner, so panning changes the
    origin and zooming changes ``zoom``.
    """

    zoom: float = 2.0
    pixel_origin: Tuple[float, float] = (0.0, 0.0)
    tile_size: int = 256

    @property
    def world_size(self) -> float:
        return self.tile_size * math.pow(2.0, self.zoom)

    def project(self, lat: float, long: float) -> Point:
        d = math.pi / 180.0
        lat = max(min(MAX_LATITUDE, lat), -MAX_LATITUDE)
        sin = math.sin(lat * d)

        x = EARTH_RADIUS * long * d
        y = EARTH_RADIUS * math.log((1 + sin) / (1 - sin)) / 2

        scale = 0.5 / (math.pi * EARTH_RADIUS)
        px = self.world_size * (scale * x + 0.5)
        py = self.world_size * (-scale * y + 0.5)
        return Point(px - self.pixel_origin[0], py - self.pixel_origin[1])

    def with_view(
        self,
        zoom: Optional[float] = None,
        pixel_origin: Optional[Tuple[float, float]] = None,
    ) -> "WebMercatorProjection":
        """Return a projection for a new viewport."""
        return replace(
            self,
            zoom=self.zoom if zoom is None else zoom,
            pixel_origin=self.pixel_origin if pixel_origin is None else pixel_origin,
        )


@dataclass(frozen=True)
class EquirectangularProjection:
    """Linear projection: ``scale`` pixels per degree, north up."""

    scale: float = 1.0
    origin: Tuple[float, float] = (0.0, 0.0)

    def project(self, lat: float, long: float) -> Point:
        return Point(
            long * self.scale - self.origin[0],
            -lat * self.scale - self.origin[1],
        )

    def with_view(
        self,
        scale: Optional[float] = None,
        origin: Optional[Tuple[float, float]] = None,
    ) -> "EquirectangularProjection":
        return replace(
            self,
            scale=self.scale if scale is None else scale,
            origin=self.origin if origin is None else origin,
        )
