"""Combined logger with map-layer specific reports."""

import html
from collections import Counter
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from phylogeo.logger.base_logger import AlgorithmLogger
from phylogeo.logger.formatting import (
    SafeHtml,
    format_color_swatch,
    format_degrees,
    format_point,
    format_set,
)
from phylogeo.logger.table_logger import TableLogger
from phylogeo.map.types import Deme, Transmission, TRANSMISSION_VISIBLE


class MapLogger(TableLogger):
    """
    Logger for inspecting built deme and transmission collections.

    Usage:
        logger = MapLogger("phylogeo")
        logger.section("Build")
        logger.log_demes(map_data.deme_data)
        logger.log_transmissions(map_data.transmission_data)
        write_debug_output("map_debug.html", logger=logger)
    """

    def log_demes(self, deme_data: Sequence[Deme], title: str = "Demes") -> None:
        """One row per deme; deme names are escaped, color swatches are not."""
        if self.disabled:
            return
        rows = []
        for idx, deme in enumerate(deme_data):
            if deme.arcs is not None:
                visual = SafeHtml(
                    ", ".join(
                        f"{format_color_swatch(a.color)} "
                        f"{format_degrees(a.end_angle - a.start_angle)}"
                        for a in deme.arcs
                    )
                )
            else:
                visual = format_color_swatch(deme.color or "")
            rows.append(
                [
                    idx,
                    deme.name,
                    deme.count,
                    f"{deme.latitude:.2f}",
                    f"{deme.longitude:.2f}",
                    format_point(deme.coords),
                    visual,
                ]
            )
        self.table(
            rows,
            headers=["#", "Location", "Visible tips", "Lat", "Long", "Coords", "Visual"],
            title=title,
        )

    def log_transmissions(
        self, transmission_data: Sequence[Transmission], title: str = "Transmissions"
    ) -> None:
        """Summarise transmissions per (origin, destination) location pair."""
        if self.disabled:
            return
        pairs = Counter(
            (t.origin_name, t.destination_name) for t in transmission_data
        )
        visible = Counter(
            (t.origin_name, t.destination_name)
            for t in transmission_data
            if t.visible == TRANSMISSION_VISIBLE
        )
        rows = [
            [origin, destination, n, visible[(origin, destination)]]
            for (origin, destination), n in sorted(pairs.items())
        ]
        self.table(
            rows,
            headers=["Origin", "Destination", "Curves", "Visible"],
            title=title,
        )

    def log_missing_locations(self, locations: Iterable[str]) -> None:
        locations = set(locations)
        if self.disabled or not locations:
            return
        self.warning(f"Locations without coordinates: {format_set(locations)}")


def write_debug_output(
    output_path: Union[str, Path],
    title: str = "Map debug report",
    logger: Optional[AlgorithmLogger] = None,
) -> Path:
    """Write the accumulated HTML report of ``logger`` (default: map_logger)."""
    if logger is None:
        from phylogeo.logger import map_logger

        logger = map_logger

    path = Path(output_path)
    title = html.escape(title)
    path.parent.mkdir(parents=True, exist_ok=True)
    document = (
        "<!DOCTYPE html>\n<html>\n<head>\n<meta charset=\"utf-8\">\n"
        f"<title>{title}</title>\n<style>\n{logger.get_css_content()}\n</style>\n"
        f"</head>\n<body>\n<h1>{title}</h1>\n{logger.get_html_content()}\n"
        "</body>\n</html>\n"
    )
    path.write_text(document, encoding="utf-8")
    return path
