import json
import math

import pytest

from phylogeo.io import (
    read_geo_lookup,
    read_newick,
    to_jsonable,
    write_map_data_json,
)
from phylogeo.map.pipeline import create_deme_and_transmission_data
from phylogeo.map.types import NODE_VISIBLE, Point
from phylogeo.tree import Node, index_nodes

RED = "#ff0000"


def test_read_newick(tmp_path):
    path = tmp_path / "tree.nwk"
    path.write_text("((A[&&NHX:country=A],B[&&NHX:country=B])X,C);\n")

    tree = read_newick(path)

    assert [n.name for n in tree.get_leaves()] == ["A", "B", "C"]
    assert tree.children[0].children[1].get_trait("country") == "B"
    assert [n.array_idx for n in tree.traverse()] == list(range(5))


def test_read_geo_lookup(tmp_path, geo):
    path = tmp_path / "geo.json"
    path.write_text(json.dumps(geo))

    assert read_geo_lookup(path) == geo


@pytest.mark.parametrize("content", ["[1, 2]", '{"country": [1, 2]}'])
def test_read_geo_lookup_rejects_bad_layout(tmp_path, content):
    path = tmp_path / "geo.json"
    path.write_text(content)

    with pytest.raises(ValueError):
        read_geo_lookup(path)


def test_write_map_data_json(tmp_path, simple_tree, simple_visibility, simple_colors, geo, projection):
    map_data = create_deme_and_transmission_data(
        simple_tree,
        simple_visibility,
        "country",
        simple_colors,
        False,
        geo,
        projection,
        True,
    )
    path = tmp_path / "out" / "map.json"
    path.parent.mkdir()

    write_map_data_json(map_data, path)
    data = json.loads(path.read_text())

    assert set(data) == {
        "deme_data",
        "transmission_data",
        "deme_indices",
        "transmission_indices",
        "demes_missing_lat_longs",
    }
    deme = data["deme_data"][0]
    assert deme["name"] == "A"
    assert deme["coords"] == {"x": 20.0, "y": -10.0}
    assert [arc["color"] for arc in deme["visual"]["arcs"]] == [RED, "#0000ff"]
    transmission = data["transmission_data"][0]
    assert transmission["id"] == "0-3"
    assert transmission["origin_node"] == 0
    assert transmission["destination_node"] == 3
    assert len(transmission["bezier_curve"]) == len(transmission["bezier_dates"])
    assert data["transmission_indices"] == {"0-3": [0]}
    assert data["demes_missing_lat_longs"] == []


def test_nan_dates_serialise_as_null():
    root = Node(name="root", values={"country": "A"}, children=[Node(name="t")])
    index_nodes(root)

    assert to_jsonable({"num_date": root.num_date, "missing": {"b", "a"}}) == {
        "num_date": None,
        "missing": ["a", "b"],
    }
    assert to_jsonable([Point(1.0, math.nan), root.children[0]]) == [
        {"x": 1.0, "y": None},
        1,
    ]
