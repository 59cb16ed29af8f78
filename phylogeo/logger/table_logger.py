"""Table display functionality for logs."""

import html
from typing import Any, List, Optional

from tabulate import tabulate

from phylogeo.logger.base_logger import AlgorithmLogger
from phylogeo.logger.formatting import SafeHtml


def html_cell(cell: Any) -> str:
    """Escape a table cell unless it is already ``SafeHtml`` markup."""
    if isinstance(cell, SafeHtml):
        return cell
    return html.escape(str(cell))


class TableLogger(AlgorithmLogger):
    """Extension of AlgorithmLogger with table support."""

    def table(
        self,
        data: List[List[Any]],
        headers: Optional[List[str]] = None,
        title: Optional[str] = None,
    ) -> None:
        """
        Log ``data`` as a table.

        The console gets a plain ``tabulate`` rendering, the HTML report a real
        ``<table>``.
        """
        if self.disabled:
            return

        if headers is None:
            headers = []

        if title:
            self.logger.info(f"\n{title}:")
            self._html_content.append(f"<h4>{html.escape(title)}</h4>")

        self.logger.info(tabulate(data, headers=headers, tablefmt="simple"))
        self.raw_html(self._create_html_table(data, headers))

    def _create_html_table(self, data: List[List[Any]], headers: List[str]) -> str:
        html_parts = ['<div class="table-container">', "<table>"]

        if headers:
            html_parts.append("<thead><tr>")
            for header in headers:
                html_parts.append(f"<th>{html.escape(str(header))}</th>")
            html_parts.append("</tr></thead>")

        html_parts.append("<tbody>")
        for row in data:
            html_parts.append("<tr>")
            for cell in row:
                html_parts.append(f"<td>{html_cell(cell)}</td>")
            html_parts.append("</tr>")
        html_parts.append("</tbody>")

        html_parts.append("</table>")
        html_parts.append("</div>")
        return "\n".join(html_parts)
