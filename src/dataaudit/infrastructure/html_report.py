"""
HTML rendering of audit result tables.

Produces the bordered table embedded in notification bodies: a caption
with the row count, a colored header row and one row per result row, in
the order the engine returned them.
"""

from __future__ import annotations

import html
from typing import Any

from dataaudit.domain.report_template import ReportTemplate, get_template
from dataaudit.domain.results import ResultSet, ResultTable

NBSP = "&nbsp;"


def _cell(value: Any) -> str:
    """Cell body; blank values become a non-breaking space."""
    text = "" if value is None else str(value)
    if not text.strip():
        return NBSP
    return html.escape(text, quote=False)


def render_html_table(table: ResultTable, template: ReportTemplate | None = None) -> str:
    """
    Render one result table.

    Args:
        table: Result table to render
        template: Color preset; None selects the default preset

    Returns:
        HTML fragment (caption followed by the table)
    """
    if template is None:
        template = get_template()

    parts = [f"<caption> Total Rows = {table.row_count}  </caption>", "<TABLE BORDER=1>"]

    parts.append("<TR ALIGN='CENTER'>")
    for column in table.columns:
        parts.append(
            f'<TD bgcolor="{template.header_background_color}"><B>'
            f'<font color="{template.header_font_color}">{html.escape(column, quote=False)}</font>'
            "</B></TD>"
        )
    parts.append("</TR>")

    for row_number, row in enumerate(table.rows, start=1):
        if template.use_alternate_row_colors and row_number % 2 == 0:
            parts.append(f"<TR ALIGN='CENTER' bgcolor=\"{template.alternate_row_color}\">")
        else:
            parts.append("<TR ALIGN='CENTER'>")
        parts.extend(f"<TD>{_cell(value)}</TD>" for value in row)
        parts.append("</TR>")

    parts.append("</TABLE>")
    return "".join(parts)


def render_result_set(result_set: ResultSet, template: ReportTemplate | None = None) -> str:
    """Render the first table of a result set; empty string when there is none."""
    table = result_set.first_table
    if table is None:
        return ""
    return render_html_table(table, template)
