import random

import pytest

from phylogeo.map.colors import (
    UNKNOWN_COLOR,
    aggregate_colors,
    average_colors,
    color_by_trait,
    visible_count,
)
from phylogeo.map.types import (
    NODE_NOT_VISIBLE,
    NODE_VISIBLE,
    NODE_VISIBLE_TO_MAP_ONLY,
    ColorCount,
)
from phylogeo.tree import Node, index_nodes

RED = "#ff0000"
BLUE = "#0000ff"


def test_aggregate_colors_example(simple_tree, simple_visibility, simple_colors):
    result = aggregate_colors(simple_tree, simple_visibility, "country", simple_colors)

    assert result == {
        "A": {RED: ColorCount(1, 1), BLUE: ColorCount(0, 1)},
        "B": {RED: ColorCount(1, 1)},
    }


def test_internal_nodes_do_not_count(simple_tree, simple_colors):
    # Only the root is visible; it is internal so nothing is visible
    visibility = [NODE_VISIBLE, NODE_NOT_VISIBLE, NODE_NOT_VISIBLE, NODE_NOT_VISIBLE]
    result = aggregate_colors(simple_tree, visibility, "country", simple_colors)

    assert sum(visible_count(c) for c in result.values()) == 0
    assert sum(c.n_total for cc in result.values() for c in cc.values()) == 3


def test_visible_to_map_only_counts_as_visible(simple_tree, simple_colors):
    visibility = [NODE_VISIBLE_TO_MAP_ONLY] * 4
    result = aggregate_colors(simple_tree, visibility, "country", simple_colors)

    assert result["A"][BLUE] == ColorCount(1, 1)


def test_undefined_locations_are_skipped(simple_colors):
    root = Node(
        name="root",
        children=[
            Node(name="t1", values={"country": "A"}),
            Node(name="t2", values={}),
            Node(name="t3", values={"country": ""}),
        ],
    )
    nodes = index_nodes(root)
    result = aggregate_colors(nodes, [NODE_VISIBLE] * 4, "country", simple_colors)

    assert list(result) == ["A"]


def test_other_resolution_is_used():
    root = Node(
        name="root",
        children=[
            Node(name="t1", values={"country": "A", "region": "europe"}),
            Node(name="t2", values={"country": "B", "region": "europe"}),
        ],
    )
    nodes = index_nodes(root)
    result = aggregate_colors(nodes, [NODE_VISIBLE] * 3, "region", [RED] * 3)

    assert result == {"europe": {RED: ColorCount(2, 2)}}


def test_short_vectors_raise(simple_tree, simple_colors):
    with pytest.raises(ValueError):
        aggregate_colors(simple_tree, [NODE_VISIBLE], "country", simple_colors)


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_visible_never_exceeds_total(seed):
    rng = random.Random(seed)
    root = Node(name="root")
    for i in range(60):
        root.append_child(
            Node(name=f"t{i}", values={"country": rng.choice(["A", "B", "C"])})
        )
    nodes = index_nodes(root)
    visibility = [rng.choice([NODE_VISIBLE, NODE_NOT_VISIBLE]) for _ in nodes]
    colors = [rng.choice([RED, BLUE, "#00ff00"]) for _ in nodes]

    result = aggregate_colors(nodes, visibility, "country", colors)
    for color_counts in result.values():
        assert visible_count(color_counts) <= sum(
            c.n_total for c in color_counts.values()
        )
        for counts in color_counts.values():
            assert 0 <= counts.n_visible <= counts.n_total

    # Order of iteration does not change the counts
    shuffled = list(nodes)
    rng.shuffle(shuffled)
    assert aggregate_colors(shuffled, visibility, "country", colors) == result


def test_average_colors_weights_by_visible():
    assert average_colors({RED: ColorCount(1, 1), BLUE: ColorCount(0, 1)}) == RED
    assert average_colors({RED: ColorCount(3, 3), BLUE: ColorCount(1, 1)}) == "#bf0040"


def test_average_colors_falls_back_to_total():
    assert average_colors({RED: ColorCount(0, 3), BLUE: ColorCount(0, 1)}) == "#bf0040"


def test_average_colors_empty():
    assert average_colors({}) == UNKNOWN_COLOR


def test_color_by_trait(simple_tree):
    colors = color_by_trait(simple_tree, "country")

    assert len(colors) == len(simple_tree)
    # root, a1 and a2 share location A; b1 is B
    assert colors[0] == colors[1] == colors[2] == "#1f77b4"
    assert colors[3] == "#ff7f0e"


def test_color_by_trait_unknown():
    root = Node(name="root", children=[Node(name="t1"), Node(name="t2")])
    nodes = index_nodes(root)
    root.children[0].set_trait("country", "A")

    colors = color_by_trait(nodes, "country")
    assert colors[2] == UNKNOWN_COLOR
