# backend/proposal_export/services/exporters/word_exporter.py
"""Word exporter - document-markup package (.docx).

Tree construction (build_document) is synchronous and consumes the same
section list, in the same order, as the PDF renderer. Only packaging the
finished tree into bytes is awaited (export_to_word_async).
"""
import asyncio
from io import BytesIO
from typing import Optional, Sequence, Tuple

from docx import Document
from docx.document import Document as DocxDocument
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt

from proposal_export.models import BasicInfoBox, Heading, KeyValue, OrderedList, RichText, Run, Section, Text
from proposal_export.utils.logging import logger
from proposal_export.utils.text_utils import prepare_text
from .base_exporter import (
    BaseExporter,
    grid_rows,
    info_grid,
    needs_rule,
    paragraphs,
    plain_text,
    prepared_runs,
    text_runs,
)

BODY_FONT_SIZE = Pt(11)
TITLE_FONT_SIZE = Pt(14)
PARAGRAPH_SPACING_AFTER = Pt(5)
LIST_STYLES = {"bullet": "List Bullet", "ordered": "List Number"}


class WordExporter(BaseExporter):
    """
    Exporter for the Word document.

    Node mapping:
    - title         → Title paragraph
    - Heading       → Heading 1 (preceded by a rule paragraph for Requirements)
    - BasicInfoBox  → 2-column table, ceil(n/2) rows, bold label + value per cell
    - BulletList / OrderedList → List Bullet / List Number paragraphs
    - Text / RichText / KeyValue → paragraphs with styled runs
    """

    file_extension = "docx"
    content_type = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

    def build_document(self, title: str, sections: Sequence[Section]) -> DocxDocument:
        """Build the document tree (synchronous)."""
        doc = Document()
        doc.styles["Normal"].font.size = BODY_FONT_SIZE
        doc.core_properties.title = prepare_text(title)

        title_para = doc.add_heading(level=0)
        title_run = title_para.add_run(prepare_text(title))
        title_run.bold = True
        title_run.font.size = TITLE_FONT_SIZE

        self.render_sections(sections, doc)
        return doc

    def export_to_word(
        self,
        title: str,
        sections: Sequence[Section],
        filename: Optional[str] = None
    ) -> Tuple[bytes, str, str]:
        """
        Export sections to a Word document.

        Args:
            title: Proposal title
            sections: Canonical section list
            filename: Optional filename stem overriding the sanitized title

        Returns:
            Tuple of (bytes, filename, content_type)
        """
        doc = self.build_document(title, sections)
        content = self.save_to_bytes(doc)
        logger.info("Rendered DOCX", extra={"bytes": len(content)})
        return self.result(content, title, filename)

    async def export_to_word_async(
        self,
        title: str,
        sections: Sequence[Section],
        filename: Optional[str] = None
    ) -> Tuple[bytes, str, str]:
        """Same as export_to_word, with packaging moved off the event loop."""
        doc = self.build_document(title, sections)
        content = await asyncio.to_thread(self.save_to_bytes, doc)
        logger.info("Rendered DOCX", extra={"bytes": len(content)})
        return self.result(content, title, filename)

    @staticmethod
    def save_to_bytes(doc: DocxDocument) -> bytes:
        """Save document to bytes."""
        buffer = BytesIO()
        doc.save(buffer)
        buffer.seek(0)
        return buffer.read()

    # ------------------------------------------------------------------
    # Section renderers
    # ------------------------------------------------------------------
    def render_heading(self, section: Heading, doc: DocxDocument) -> None:
        if needs_rule(section):
            self._add_rule(doc)
        doc.add_heading(prepare_text(section.title), level=1)

    def render_text(self, section: Text, doc: DocxDocument) -> None:
        for paragraph in paragraphs(section.value):
            para = doc.add_paragraph(paragraph)
            para.paragraph_format.space_after = PARAGRAPH_SPACING_AFTER

    def render_rich_text(self, section: RichText, doc: DocxDocument) -> None:
        para = doc.add_paragraph()
        self._add_runs(para, prepared_runs(section.runs))
        para.paragraph_format.space_after = PARAGRAPH_SPACING_AFTER

    def render_list(self, section: Section, doc: DocxDocument) -> None:
        style = LIST_STYLES["ordered" if isinstance(section, OrderedList) else "bullet"]
        for item in section.items:
            runs = text_runs(item)
            if not runs:
                continue
            para = doc.add_paragraph(style=style)
            self._add_runs(para, self._trim(runs))

    def render_key_value(self, section: KeyValue, doc: DocxDocument) -> None:
        para = doc.add_paragraph()
        label = plain_text(section.label)
        if label:
            para.add_run(f"{label}: ").bold = True
        value = prepare_text(section.value)
        if value:
            para.add_run(value)
        para.paragraph_format.space_after = PARAGRAPH_SPACING_AFTER

    def render_basic_info(self, section: BasicInfoBox, doc: DocxDocument) -> None:
        grid = info_grid(section.items)
        table = doc.add_table(rows=grid_rows(len(section.items)), cols=2)
        table.style = "Table Grid"
        for row_index, row in enumerate(grid):
            for column, item in enumerate(row):
                if item is None:
                    continue
                para = table.cell(row_index, column).paragraphs[0]
                para.add_run(f"{prepare_text(item.label)}: ").bold = True
                para.add_run(prepare_text(item.value))
        # spacing so the next heading does not stick to the table
        doc.add_paragraph()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _add_runs(paragraph, runs: Sequence[Run]) -> None:
        for run in runs:
            docx_run = paragraph.add_run(run.text)
            if run.bold:
                docx_run.bold = True

    @staticmethod
    def _trim(runs: Sequence[Run]) -> list:
        runs = list(runs)
        if runs:
            runs[0] = Run(runs[0].text.lstrip(), runs[0].bold)
            runs[-1] = Run(runs[-1].text.rstrip(), runs[-1].bold)
        return [run for run in runs if run.text]

    @staticmethod
    def _add_rule(doc: DocxDocument) -> None:
        """Empty paragraph with a bottom border: a horizontal rule block."""
        para = doc.add_paragraph()
        p_pr = para._p.get_or_add_pPr()
        p_bdr = OxmlElement("w:pBdr")
        bottom = OxmlElement("w:bottom")
        bottom.set(qn("w:val"), "single")
        bottom.set(qn("w:sz"), "6")
        bottom.set(qn("w:space"), "1")
        bottom.set(qn("w:color"), "auto")
        p_bdr.append(bottom)
        p_pr.append(p_bdr)
