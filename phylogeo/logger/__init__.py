"""Logging package for phylogeo."""

from phylogeo.logger.base_logger import AlgorithmLogger
from phylogeo.logger.table_logger import TableLogger
from phylogeo.logger.map_logger import MapLogger, write_debug_output
from phylogeo.logger.formatting import (
    format_set,
    format_point,
    format_degrees,
)

# Unified singleton for map-layer reports, enabled on demand
map_logger = MapLogger("PhyloGeoMap")
map_logger.disabled = True

__all__ = [
    "AlgorithmLogger",
    "TableLogger",
    "MapLogger",
    "map_logger",
    "write_debug_output",
    "format_set",
    "format_point",
    "format_degrees",
]
