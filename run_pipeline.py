"""Build map-layer data (demes and transmissions) for an annotated tree."""

import argparse
import logging
from typing import List, Optional

from phylogeo.io import read_geo_lookup, read_newick, write_map_data_json
from phylogeo.logger import map_logger, write_debug_output
from phylogeo.map.colors import color_by_trait
from phylogeo.map.pipeline import MapDataPipeline
from phylogeo.map.projection import WebMercatorProjection
from phylogeo.map.types import NODE_VISIBLE, MapConfig


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("tree", help="Newick file with location/date annotations")
    parser.add_argument("geo", help="JSON lookup: resolution -> location -> lat/long")
    parser.add_argument("-o", "--output", default="map_data.json")
    parser.add_argument("--resolution", default="country")
    parser.add_argument(
        "--color-by", default=None, help="Trait used to color nodes (default: resolution)"
    )
    parser.add_argument("--cmap", default="tab10")
    parser.add_argument("--triplicate", action="store_true")
    parser.add_argument(
        "--blended", action="store_true", help="Blended circles instead of pie charts"
    )
    parser.add_argument("--zoom", type=float, default=2.0)
    parser.add_argument("--curve-points", type=int, default=30)
    parser.add_argument("--debug-html", default=None, help="Write an HTML report")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.debug_html:
        map_logger.disabled = False

    trees = read_newick(args.tree, force_list=True)
    print(f"Number of input trees: {len(trees)} (using the first)")
    nodes = trees[0].traverse()
    geo = read_geo_lookup(args.geo)

    config = MapConfig(
        geo_resolution=args.resolution,
        triplicate=args.triplicate,
        pie_chart=not args.blended,
        curve_points=args.curve_points,
        logger_name="phylogeo.run_pipeline",
    )
    pipeline = MapDataPipeline(geo, config=config)
    map_data = pipeline.build(
        nodes,
        [NODE_VISIBLE] * len(nodes),
        color_by_trait(nodes, args.color_by or args.resolution, cmap=args.cmap),
        WebMercatorProjection(zoom=args.zoom),
    )
    write_map_data_json(map_data, args.output)

    print(
        f"Wrote {len(map_data.deme_data)} demes and "
        f"{len(map_data.transmission_data)} transmissions to {args.output}"
    )
    if args.debug_html:
        write_debug_output(args.debug_html, title=f"Map data for {args.tree}")


if __name__ == "__main__":
    main()
