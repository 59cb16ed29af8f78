from dataclasses import is_dataclass, fields
from pathlib import Path
from typing import IO, Any, List, Optional, Union
import json
import math

from phylogeo.map.types import GeoLookupTable, MapData, Point
from phylogeo.parser.newick_parser import parse_newick
from phylogeo.tree import Node


def to_jsonable(o: Any) -> Any:
    """
    Convert map-layer objects into plain JSON values.

    Nodes referenced from transmissions are written as their ``array_idx`` so
    the output stays flat; points become ``{"x", "y"}``; sets become sorted
    lists and NaN dates become null.
    """
    if isinstance(o, Node):
        return o.array_idx
    if isinstance(o, float) and math.isnan(o):
        return None
    if isinstance(o, Point):
        return {"x": to_jsonable(o.x), "y": to_jsonable(o.y)}
    if is_dataclass(o) and not isinstance(o, type):
        return {f.name: to_jsonable(getattr(o, f.name)) for f in fields(o)}
    if isinstance(o, dict):
        return {str(k): to_jsonable(v) for k, v in o.items()}
    if isinstance(o, (set, frozenset)):
        return sorted(to_jsonable(v) for v in o)
    if isinstance(o, (list, tuple)):
        return [to_jsonable(v) for v in o]
    return o


class MapDataEncoder(json.JSONEncoder):
    """JSON encoder for ``MapData``, ``MapUpdate`` and their members."""

    def iterencode(self, o: Any, _one_shot: bool = False):
        return super().iterencode(to_jsonable(o), _one_shot)

    def default(self, o: Any):
        if isinstance(o, Node):
            return o.array_idx
        return super().default(o)


def read_newick(path: Union[str, Path], force_list: bool = False):
    with open(path) as f:
        newick_string: str = f.read()

    tree: Union[Node, List[Node]] = parse_newick(newick_string, force_list=force_list)
    return tree


def read_geo_lookup(path: Union[str, Path]) -> GeoLookupTable:
    """
    Read a geographic lookup table.

    Expected layout: ``{resolution: {location: {"latitude": .., "longitude": ..}}}``.
    """
    with open(path) as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Geo lookup in {path} must be a JSON object")
    for resolution, locations in data.items():
        if not isinstance(locations, dict):
            raise ValueError(
                f"Geo lookup entry for resolution '{resolution}' must be an object"
            )
    return data


def dump_map_data(map_data: MapData, f: IO[str], indent: Optional[int] = None):
    json.dump(map_data, f, cls=MapDataEncoder, indent=indent)


def write_map_data_json(
    map_data: MapData, path: Union[str, Path], indent: Optional[int] = 2
):
    with open(path, mode="w") as f:
        dump_map_data(map_data, f, indent=indent)
