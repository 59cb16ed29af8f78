import logging
from typing import Dict, List

import pytest

from phylogeo.logger import map_logger
from phylogeo.map.projection import EquirectangularProjection
from phylogeo.map.types import NODE_NOT_VISIBLE, NODE_VISIBLE
from phylogeo.tree import Node, index_nodes

RED = "#ff0000"
BLUE = "#0000ff"
GREEN = "#00ff00"


def pytest_configure(config):
    """Set up test environment before tests run."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # The HTML report logger stays off unless a test enables its own instance
    map_logger.disabled = True


def make_node(name: str, country=None, num_date=None, children=None) -> Node:
    values = {}
    if country is not None:
        values["country"] = country
    if num_date is not None:
        values["num_date"] = num_date
    return Node(name=name, values=values, children=children)


@pytest.fixture
def geo() -> Dict[str, Dict[str, Dict[str, float]]]:
    return {
        "country": {
            "A": {"latitude": 10.0, "longitude": 20.0},
            "B": {"latitude": -10.0, "longitude": 60.0},
            "east": {"latitude": 0.0, "longitude": 170.0},
            "west": {"latitude": 0.0, "longitude": -170.0},
        }
    }


@pytest.fixture
def projection() -> EquirectangularProjection:
    return EquirectangularProjection(scale=1.0)


@pytest.fixture
def simple_tree() -> List[Node]:
    r"""
         root (A, 2000)
        /     |      \
      a1(A)  a2(A)   b1(B)
    """
    root = make_node(
        "root",
        "A",
        2000.0,
        children=[
            make_node("a1", "A", 2001.0),
            make_node("a2", "A", 2002.0),
            make_node("b1", "B", 2003.0),
        ],
    )
    return index_nodes(root)


@pytest.fixture
def simple_colors() -> List[str]:
    # root, a1, a2, b1
    return [RED, RED, BLUE, RED]


@pytest.fixture
def simple_visibility() -> List[int]:
    return [NODE_VISIBLE, NODE_VISIBLE, NODE_NOT_VISIBLE, NODE_VISIBLE]


@pytest.fixture
def migration_tree() -> List[Node]:
    r"""
    A tree with repeated A -> B moves, a move back, and an unknown location.

              root (A)
            /          \
         n1 (B)        n2 (A)
        /     \       /  |   \
     t1(B)  t2(A)  t3(B) t4(A) t5(C)
    """
    root = make_node(
        "root",
        "A",
        2000.0,
        children=[
            make_node(
                "n1",
                "B",
                2002.0,
                children=[make_node("t1", "B", 2005.0), make_node("t2", "A", 2006.0)],
            ),
            make_node(
                "n2",
                "A",
                2001.0,
                children=[
                    make_node("t3", "B", 2004.0),
                    make_node("t4", "A", 2003.0),
                    make_node("t5", "C", 2007.0),
                ],
            ),
        ],
    )
    return index_nodes(root)
