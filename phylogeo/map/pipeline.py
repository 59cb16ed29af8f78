"""Map-layer pipeline: full builds and incremental updates."""

import logging
import time
from functools import partial
from typing import Optional, Sequence, Set

from phylogeo.logger import map_logger
from phylogeo.map.colors import average_colors
from phylogeo.map.curves import bezier, pie
from phylogeo.map.demes import BlendFn, PieFn, setup_deme_data
from phylogeo.map.projection import Projection
from phylogeo.map.transmissions import CurveFn, setup_transmission_data
from phylogeo.map.types import GeoLookupTable, MapConfig, MapData, MapUpdate
from phylogeo.map.updates import (
    update_deme_and_transmission_data_col_and_vis,
    update_deme_and_transmission_data_lat_long,
)
from phylogeo.tree import Node


def create_deme_and_transmission_data(
    nodes: Sequence[Node],
    visibility: Sequence[int],
    geo_resolution: str,
    node_colors: Sequence[str],
    triplicate: bool,
    geo: GeoLookupTable,
    projection: Projection,
    pie_chart: bool,
    curve: CurveFn = bezier,
    blend: BlendFn = average_colors,
    pie_layout: PieFn = pie,
    date_trait: str = "num_date",
) -> MapData:
    """
    Walk the tree and build both map collections.

    Demes carry name, coords, count and a pie or blended-color visual;
    transmissions carry their endpoints, curve, dates, color and visibility.
    The two are built independently and each re-aggregates tip colors; they
    share one missing-location set so every location is warned about once.
    """
    missing: Set[str] = set()
    demes = setup_deme_data(
        nodes,
        visibility,
        geo_resolution,
        node_colors,
        triplicate,
        geo,
        projection,
        pie_chart,
        blend=blend,
        pie_layout=pie_layout,
        missing=missing,
    )
    transmissions = setup_transmission_data(
        nodes,
        visibility,
        geo_resolution,
        node_colors,
        triplicate,
        geo,
        projection,
        curve=curve,
        date_trait=date_trait,
        missing=missing,
    )
    return MapData(
        deme_data=demes.deme_data,
        transmission_data=transmissions.transmission_data,
        deme_indices=demes.deme_indices,
        transmission_indices=transmissions.transmission_indices,
        demes_missing_lat_longs=missing,
    )


class MapDataPipeline:
    """
    Owns the current map-layer state for one dataset.

    ``build`` must run before the update methods; until then they return an
    empty ``MapUpdate``. Each successful update replaces the stored
    collections with the returned ones, the index maps never change.
    """

    def __init__(
        self,
        geo: GeoLookupTable,
        config: Optional[MapConfig] = None,
        logger: Optional[logging.Logger] = None,
        blend: BlendFn = average_colors,
        pie_layout: PieFn = pie,
    ):
        self.geo = geo
        self.config: MapConfig = config or MapConfig()
        self.logger = logger or logging.getLogger(self.config.logger_name)
        self.curve: CurveFn = partial(bezier, num_points=self.config.curve_points)
        self.blend = blend
        self.pie_layout = pie_layout
        self.map_data: Optional[MapData] = None

    def build(
        self,
        nodes: Sequence[Node],
        visibility: Sequence[int],
        node_colors: Sequence[str],
        projection: Projection,
    ) -> MapData:
        start_time = time.perf_counter()
        self.map_data = create_deme_and_transmission_data(
            nodes,
            visibility,
            self.config.geo_resolution,
            node_colors,
            self.config.triplicate,
            self.geo,
            projection,
            self.config.pie_chart,
            curve=self.curve,
            blend=self.blend,
            pie_layout=self.pie_layout,
            date_trait=self.config.date_trait,
        )
        self.logger.info(
            f"Built {len(self.map_data.deme_data)} demes and "
            f"{len(self.map_data.transmission_data)} transmissions in "
            f"{time.perf_counter() - start_time:.3f}s"
        )
        if self.map_data.demes_missing_lat_longs:
            self.logger.warning(
                f"{len(self.map_data.demes_missing_lat_longs)} locations have no "
                "coordinates and are not drawn"
            )

        if not map_logger.disabled:
            map_logger.section(
                f"Map build ({self.config.geo_resolution}, "
                f"{'pie' if self.config.pie_chart else 'blended'}, "
                f"{'triplicate' if self.config.triplicate else 'single'})"
            )
            map_logger.log_demes(self.map_data.deme_data)
            map_logger.log_transmissions(self.map_data.transmission_data)
            map_logger.log_missing_locations(self.map_data.demes_missing_lat_longs)
            map_logger.end_section()
        return self.map_data

    def update_colors_and_visibility(
        self,
        nodes: Sequence[Node],
        visibility: Sequence[int],
        node_colors: Sequence[str],
    ) -> MapUpdate:
        if self.map_data is None:
            return MapUpdate()

        start_time = time.perf_counter()
        update = update_deme_and_transmission_data_col_and_vis(
            self.map_data.deme_data,
            self.map_data.transmission_data,
            self.map_data.deme_indices,
            self.map_data.transmission_indices,
            nodes,
            visibility,
            self.config.geo_resolution,
            node_colors,
            self.config.pie_chart,
            blend=self.blend,
            pie_layout=self.pie_layout,
        )
        self._store(update)
        self.logger.info(
            f"Updated colors and visibility in {time.perf_counter() - start_time:.3f}s"
        )
        return update

    def update_projection(self, projection: Projection) -> MapUpdate:
        if self.map_data is None:
            return MapUpdate()

        start_time = time.perf_counter()
        update = update_deme_and_transmission_data_lat_long(
            self.map_data.deme_data,
            self.map_data.transmission_data,
            projection,
            curve=self.curve,
        )
        self._store(update)
        self.logger.info(
            f"Re-projected map data in {time.perf_counter() - start_time:.3f}s"
        )
        return update

    def _store(self, update: MapUpdate) -> None:
        if self.map_data is None or update.new_demes is None:
            return
        self.map_data.deme_data = update.new_demes
        self.map_data.transmission_data = update.new_transmissions
