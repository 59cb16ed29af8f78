"""Core phylogeo package."""

__all__ = [
    "Node",
    "index_nodes",
    "parse_newick",
    "MapConfig",
    "MapData",
    "MapUpdate",
    "MapDataPipeline",
    "create_deme_and_transmission_data",
]


def __getattr__(name):
    if name in {"Node", "index_nodes"}:
        from .tree import Node, index_nodes

        return locals()[name]
    if name == "parse_newick":
        from .parser import parse_newick

        return parse_newick
    if name in {"MapConfig", "MapData", "MapUpdate"}:
        from .map.types import MapConfig, MapData, MapUpdate

        return locals()[name]
    if name in {"MapDataPipeline", "create_deme_and_transmission_data"}:
        from .map.pipeline import MapDataPipeline, create_deme_and_transmission_data

        return locals()[name]
    raise AttributeError(name)
