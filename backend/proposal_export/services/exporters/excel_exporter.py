# backend/proposal_export/services/exporters/excel_exporter.py
"""Excel exporter - flattens sections into (Section, Field, Value) rows."""
from dataclasses import dataclass, field
from io import BytesIO
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from proposal_export.models import BasicInfoBox, Heading, KeyValue, RichText, Section, Text
from proposal_export.utils.logging import logger
from proposal_export.utils.text_utils import normalize, parse_bold_runs, runs_to_text
from .base_exporter import BaseExporter, list_prefix

SHEET_NAME = "Proposal"
COLUMNS = ["Section", "Field", "Value"]
COLUMN_WIDTHS = [24, 32, 80]
DEFAULT_SECTION = "Proposal"
TEXT_FIELD = "Content"
LIST_FIELD = "Items"
EXCEL_CELL_LIMIT = 32767


def cell_text(text: str) -> str:
    """Item/label text without bold markers; long tokens are left unbroken."""
    return normalize(runs_to_text(parse_bold_runs(normalize(text))))


@dataclass
class RowBuffer:
    """Rows emitted so far plus the title of the most recent heading."""
    rows: List[Dict[str, str]] = field(default_factory=list)
    section: str = DEFAULT_SECTION

    def add(self, label: str, value: str) -> None:
        self.rows.append({"Section": self.section, "Field": label, "Value": value})


class ExcelExporter(BaseExporter):
    """One sheet, one row per logical item; no pagination, no styling."""

    file_extension = "xlsx"
    content_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

    def flatten(self, sections: Sequence[Section]) -> List[Dict[str, str]]:
        buffer = RowBuffer()
        self.render_sections(sections, buffer)
        return buffer.rows

    def tabular_rows(self, title: str, sections: Sequence[Section]) -> List[Dict[str, str]]:
        """Title row first, then the flattened sections."""
        title_row = {"Section": DEFAULT_SECTION, "Field": "Title", "Value": title}
        return [title_row] + self.flatten(sections)

    def export_to_excel(
        self,
        title: str,
        sections: Sequence[Section],
        filename: Optional[str] = None
    ) -> Tuple[bytes, str, str]:
        """
        Export sections to a single-sheet workbook.

        Returns:
            Tuple of (bytes, filename, content_type)
        """
        rows = self.tabular_rows(title, sections)
        df = pd.DataFrame(rows, columns=COLUMNS)
        df["Value"] = df["Value"].str.slice(0, EXCEL_CELL_LIMIT)

        bio = BytesIO()
        # proposal text is data: never turn "=..." into a formula or "http..." into a link
        engine_kwargs = {"options": {"strings_to_formulas": False, "strings_to_urls": False}}
        with pd.ExcelWriter(bio, engine="xlsxwriter", engine_kwargs=engine_kwargs) as writer:
            df.to_excel(writer, sheet_name=SHEET_NAME, index=False)
            worksheet = writer.sheets[SHEET_NAME]
            wrap_format = writer.book.add_format({"text_wrap": True, "valign": "top"})
            for index, width in enumerate(COLUMN_WIDTHS):
                worksheet.set_column(index, index, width, wrap_format)

        bio.seek(0)
        content = bio.read()
        logger.info("Rendered XLSX", extra={"rows": len(rows), "bytes": len(content)})
        return self.result(content, title, filename)

    # ------------------------------------------------------------------
    # Section renderers
    # ------------------------------------------------------------------
    def render_heading(self, section: Heading, buffer: RowBuffer) -> None:
        buffer.section = normalize(section.title)

    def render_text(self, section: Text, buffer: RowBuffer) -> None:
        buffer.add(TEXT_FIELD, normalize(section.value))

    def render_rich_text(self, section: RichText, buffer: RowBuffer) -> None:
        buffer.add(TEXT_FIELD, normalize(runs_to_text(section.runs)))

    def render_list(self, section: Section, buffer: RowBuffer) -> None:
        lines = []
        for index, item in enumerate(section.items, start=1):
            text = cell_text(item)
            if text:
                lines.append(f"{list_prefix(section, index)}{text}")
        buffer.add(LIST_FIELD, "\n".join(lines))

    def render_key_value(self, section: KeyValue, buffer: RowBuffer) -> None:
        buffer.add(cell_text(section.label), normalize(section.value))

    def render_basic_info(self, section: BasicInfoBox, buffer: RowBuffer) -> None:
        for item in section.items:
            buffer.add(normalize(item.label), normalize(item.value))


def flatten_sections(sections: Sequence[Section]) -> List[Dict[str, str]]:
    """Module-level shortcut for ExcelExporter().flatten()."""
    return ExcelExporter().flatten(sections)
