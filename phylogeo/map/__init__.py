"""Phylogeographic map layer: demes, transmissions and their updates."""

__all__ = [
    "MapConfig",
    "MapData",
    "MapUpdate",
    "MapDataPipeline",
    "create_deme_and_transmission_data",
    "update_deme_and_transmission_data_col_and_vis",
    "update_deme_and_transmission_data_lat_long",
    "WebMercatorProjection",
    "EquirectangularProjection",
]


def __getattr__(name):
    if name in {"MapConfig", "MapData", "MapUpdate"}:
        from phylogeo.map import types

        return getattr(types, name)
    if name in {"MapDataPipeline", "create_deme_and_transmission_data"}:
        from phylogeo.map import pipeline

        return getattr(pipeline, name)
    if name in {
        "update_deme_and_transmission_data_col_and_vis",
        "update_deme_and_transmission_data_lat_long",
    }:
        from phylogeo.map import updates

        return getattr(updates, name)
    if name in {"WebMercatorProjection", "EquirectangularProjection"}:
        from phylogeo.map import projection

        return getattr(projection, name)
    raise AttributeError(name)
