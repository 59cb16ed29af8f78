from phylogeo.logger import MapLogger, format_set, write_debug_output
from phylogeo.logger.formatting import format_degrees, format_point
from phylogeo.map.demes import setup_deme_data
from phylogeo.map.transmissions import setup_transmission_data
from phylogeo.map.types import NODE_VISIBLE, Point
from phylogeo.tree import Node, index_nodes


def make_logger():
    logger = MapLogger("phylogeo.test.report")
    logger.disabled = False
    return logger


def test_formatting():
    assert format_set(set()) == "∅"
    assert format_set({"b", "a"}) == "{a, b}"
    assert format_point(Point(1.25, -3.0)) == "(1.2, -3.0)"
    assert format_point(None) == "-"
    assert format_degrees(3.141592653589793) == "180.0°"


def test_disabled_logger_records_nothing():
    logger = MapLogger("phylogeo.test.disabled")
    logger.disabled = True
    logger.section("Build")
    logger.log_missing_locations({"C"})

    assert logger.get_html_content() == '<div class="content">\n</div>'


def test_report_tables(simple_tree, simple_visibility, simple_colors, geo, projection):
    demes = setup_deme_data(
        simple_tree, simple_visibility, "country", simple_colors, False, geo, projection, True
    )
    transmissions = setup_transmission_data(
        simple_tree, simple_visibility, "country", simple_colors, False, geo, projection
    )
    logger = make_logger()

    logger.section("Build <test>")
    logger.log_demes(demes.deme_data)
    logger.log_transmissions(transmissions.transmission_data)
    logger.log_missing_locations({"C", "D"})
    html_content = logger.get_html_content()

    assert "Build &lt;test&gt;" in html_content
    assert "<th>Location</th>" in html_content
    assert "<td>A</td>" in html_content
    assert "360.0°" in html_content
    assert "Locations without coordinates: {C, D}" in html_content
    # Section is closed on read without changing the buffer
    assert html_content.count("</section>") == 1
    assert logger.get_html_content() == html_content


def test_write_debug_output(tmp_path):
    logger = make_logger()
    logger.section("Summary")
    logger.result("Demes", 4)

    path = write_debug_output(tmp_path / "reports" / "map.html", title="Map", logger=logger)

    text = path.read_text(encoding="utf-8")
    assert text.startswith("<!DOCTYPE html>")
    assert "<title>Map</title>" in text
    assert "<strong>Demes:</strong> 4" in text
    assert ".color-swatch" in text


def test_clear():
    logger = make_logger()
    logger.info("something")
    logger.clear()
    assert "something" not in logger.get_html_content()


def test_table_cells_are_escaped(projection):
    root = Node(name="root", children=[Node(name="t", values={"country": "<b>"})])
    nodes = index_nodes(root)
    geo = {"country": {"<b>": {"latitude": 0.0, "longitude": 0.0}}}
    demes = setup_deme_data(
        nodes, [NODE_VISIBLE] * 2, "country", ["#ff0000"] * 2, False, geo, projection, True
    )
    logger = make_logger()

    logger.log_demes(demes.deme_data)
    html_content = logger.get_html_content()

    assert "<td>&lt;b&gt;</td>" in html_content
    assert "<b>" not in html_content
    assert '<span class="color-swatch" style="background:#ff0000"></span>' in html_content
