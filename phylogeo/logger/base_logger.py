"""Base logging functionality for map-layer debugging reports."""

import html
import logging
from typing import Any, List

from phylogeo.logger.html_content import CSS_LOG


class AlgorithmLogger:
    """
    Echoes messages to a ``logging`` logger and accumulates an HTML report.

    A disabled instance ignores every call, so callers can leave report calls
    in place and switch them on with ``disabled = False``.
    """

    def __init__(self, name: str):
        self.name = name
        self.disabled = False
        self._html_content: List[str] = ['<div class="content">']
        self._section_open = False

        self.logger = logging.getLogger(name)

        # Several instances may share a name; only the first adds a handler
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("%(message)s"))
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)
            self.logger.propagate = False
        elif self.logger.level == logging.NOTSET:
            self.logger.setLevel(logging.INFO)

    def section(self, title: str):
        """Start a new report section, closing the previous one."""
        if self.disabled:
            return
        self.end_section()
        self.logger.info(f"\n{'=' * 20} {title} {'=' * 20}\n")
        self._html_content.append(
            f'<section class="section"><h3>{html.escape(title)}</h3>'
        )
        self._section_open = True

    def end_section(self):
        if self.disabled or not self._section_open:
            return
        self._html_content.append("</section>")
        self._section_open = False

    def info(self, message: str):
        if self.disabled:
            return
        self.logger.info(message)
        self._html_content.append(f'<p class="info">{html.escape(message)}</p>')

    def warning(self, message: str):
        if self.disabled:
            return
        self.logger.warning(message)
        self._html_content.append(f'<p class="warning">{html.escape(message)}</p>')

    def result(self, label: str, value: Any):
        """Log a labelled value."""
        if self.disabled:
            return
        self.logger.info(f"{label}: {value}")
        self._html_content.append(
            f'<div class="result"><strong>{html.escape(label)}:</strong> '
            f"{html.escape(str(value))}</div>"
        )

    def raw_html(self, html_content: str):
        """Append trusted markup to the report as is."""
        if self.disabled:
            return
        self._html_content.append(html_content)

    def clear(self):
        self._html_content = ['<div class="content">']
        self._section_open = False

    def get_html_content(self) -> str:
        """Report body so far; an open section is closed in the copy only."""
        parts = list(self._html_content)
        if self._section_open:
            parts.append("</section>")
        parts.append("</div>")
        return "\n".join(parts)

    def get_css_content(self) -> str:
        return CSS_LOG
