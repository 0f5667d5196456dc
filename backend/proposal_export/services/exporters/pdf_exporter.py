# backend/proposal_export/services/exporters/pdf_exporter.py
"""PDF exporter - paginated page document with manual flow control.

Layout and painting are separate steps:
- layout(): walks the sections with a PageCursor and records draw operations
  per page (coordinates in points, y measured down from the top edge)
- _paint(): replays those operations onto a reportlab canvas

Every emit routine calls PageCursor.ensure_space() before writing, so no
baseline ever lands below PAGE_HEIGHT - MARGIN - BOTTOM_BUFFER.
"""
import re
from dataclasses import dataclass, field
from io import BytesIO
from typing import List, Optional, Sequence, Tuple, Union

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from proposal_export.models import BasicInfoBox, Heading, KeyValue, RichText, Run, Section, Text
from proposal_export.utils.logging import logger
from proposal_export.utils.text_utils import prepare_text
from .base_exporter import (
    BaseExporter,
    info_grid,
    list_prefix,
    needs_rule,
    paragraphs,
    plain_text,
    prepared_runs,
    text_runs,
)

# ---------------------------------------------------------------------------
# Page geometry (points)
# ---------------------------------------------------------------------------
PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 18 * mm
BOTTOM_BUFFER = 8 * mm
USABLE_WIDTH = PAGE_WIDTH - 2 * MARGIN
# narrower than the margins allow, so font-metric drift never clips the right edge
BODY_WIDTH = USABLE_WIDTH - 6 * mm
LIST_INDENT = 6 * mm
LIST_PREFIX_OFFSET = 1 * mm
CELL_PADDING = 2 * mm
MIN_CELL_VALUE_WIDTH = 20 * mm
BASELINE_LIMIT = PAGE_HEIGHT - MARGIN - BOTTOM_BUFFER

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
TITLE_FONT_SIZE = 16
HEADING_FONT_SIZE = 13
BODY_FONT_SIZE = 10
LINE_SPACING = 1.4

TITLE_GAP_AFTER = 4 * mm
HEADING_GAP_BEFORE = 4 * mm
HEADING_GAP_AFTER = 1.5 * mm
PARAGRAPH_GAP = 2 * mm
SECTION_GAP = 3 * mm
RULE_SPACE = 4 * mm
RULE_WIDTH = 0.6
BOX_LINE_WIDTH = 0.5

_TOKEN_SPLIT = re.compile(r"(\n| +)")


def line_height(font_size: float) -> float:
    return font_size * LINE_SPACING


# ---------------------------------------------------------------------------
# Draw operations
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class TextOp:
    x: float
    y: float  # baseline
    text: str
    font: str
    size: float


@dataclass(frozen=True)
class LineOp:
    x1: float
    y1: float
    x2: float
    y2: float
    width: float = BOX_LINE_WIDTH


@dataclass(frozen=True)
class RectOp:
    x: float
    y: float  # top edge
    width: float
    height: float


DrawOp = Union[TextOp, LineOp, RectOp]


@dataclass
class PageCursor:
    """Vertical position on the current page plus every page drawn so far."""

    pages: List[List[DrawOp]] = field(default_factory=lambda: [[]])
    y: float = MARGIN

    @property
    def page_index(self) -> int:
        return len(self.pages) - 1

    @property
    def at_page_top(self) -> bool:
        return self.y <= MARGIN

    def ensure_space(self, height: float) -> bool:
        """Start a new page unless ``height`` fits above the bottom limit.

        Returns True when a page break happened. A fresh page is never
        broken again, whatever the requested height.
        """
        if self.at_page_top or self.y + height <= BASELINE_LIMIT:
            return False
        self.pages.append([])
        self.y = MARGIN
        return True

    def ensure_lines(self, count: int, font_size: float) -> bool:
        return self.ensure_space(count * line_height(font_size))

    def advance(self, dy: float) -> None:
        self.y += dy

    def draw(self, op: DrawOp) -> None:
        self.pages[-1].append(op)


# ---------------------------------------------------------------------------
# Measuring / wrapping
# ---------------------------------------------------------------------------
def _hard_split(word: str, font: str, size: float, width: float) -> List[str]:
    """Split a single word that is wider than ``width`` by characters."""
    pieces, current = [], ""
    for ch in word:
        if current and stringWidth(current + ch, font, size) > width:
            pieces.append(current)
            current = ch
        else:
            current += ch
    if current:
        pieces.append(current)
    return pieces


def wrap(text: str, font: str, size: float, width: float) -> List[str]:
    """Wrap text to ``width``; ``\\n`` forces a break."""
    lines: List[str] = []
    for raw_line in text.split("\n"):
        split = simpleSplit(raw_line, font, size, width) or [""]
        for line in split:
            if stringWidth(line, font, size) > width:
                lines.extend(_hard_split(line, font, size, width))
            else:
                lines.append(line)
    return lines


class PdfExporter(BaseExporter):
    """Renders the section list onto fixed A4 pages."""

    file_extension = "pdf"
    content_type = "application/pdf"

    def export_to_pdf(
        self,
        title: str,
        sections: Sequence[Section],
        filename: Optional[str] = None
    ) -> Tuple[bytes, str, str]:
        """
        Export sections to a PDF document.

        Args:
            title: Proposal title, printed first
            sections: Canonical section list
            filename: Optional filename stem overriding the sanitized title

        Returns:
            Tuple of (bytes, filename, content_type)
        """
        cursor = self.layout(title, sections)
        content = self._paint(cursor, title)
        logger.info("Rendered PDF", extra={"pages": len(cursor.pages), "bytes": len(content)})
        return self.result(content, title, filename)

    def layout(self, title: str, sections: Sequence[Section]) -> PageCursor:
        cursor = PageCursor()
        for line in wrap(prepare_text(title), FONT_BOLD, TITLE_FONT_SIZE, USABLE_WIDTH):
            self._write_line(cursor, line, MARGIN, FONT_BOLD, TITLE_FONT_SIZE)
        cursor.advance(TITLE_GAP_AFTER)
        self.render_sections(sections, cursor)
        return cursor

    # ------------------------------------------------------------------
    # Primitive writers
    # ------------------------------------------------------------------
    def _write_line(self, cursor: PageCursor, text: str, x: float, font: str, size: float) -> None:
        cursor.ensure_lines(1, size)
        if text:
            cursor.draw(TextOp(x, cursor.y + size, text, font, size))
        cursor.advance(line_height(size))

    def _flow_runs(self, cursor: PageCursor, runs: Sequence[Run], x0: float, width: float,
                   size: float = BODY_FONT_SIZE) -> None:
        """Word-wrap a run sequence, switching font weight per run.

        The line position carries over from one run to the next; only a
        full line or an explicit ``\\n`` starts a new line.
        """
        h = line_height(size)
        right = x0 + width
        cursor.ensure_space(h)
        x = x0
        pending_space = False

        for run in runs:
            font = FONT_BOLD if run.bold else FONT
            space_w = stringWidth(" ", font, size)
            for token in _TOKEN_SPLIT.split(run.text):
                if not token:
                    continue
                if token == "\n":
                    cursor.advance(h)
                    cursor.ensure_space(h)
                    x, pending_space = x0, False
                    continue
                if token.isspace():
                    pending_space = x > x0
                    continue

                word_w = stringWidth(token, font, size)
                pieces = [token] if word_w <= width else _hard_split(token, font, size, width)
                for piece in pieces:
                    piece_w = stringWidth(piece, font, size)
                    gap = space_w if pending_space else 0
                    if x > x0 and x + gap + piece_w > right:
                        cursor.advance(h)
                        cursor.ensure_space(h)
                        x, gap = x0, 0
                    x += gap
                    cursor.draw(TextOp(x, cursor.y + size, piece, font, size))
                    x += piece_w
                    pending_space = False

        cursor.advance(h)

    # ------------------------------------------------------------------
    # Section renderers
    # ------------------------------------------------------------------
    def render_heading(self, section: Heading, cursor: PageCursor) -> None:
        if not cursor.at_page_top:
            cursor.advance(HEADING_GAP_BEFORE)

        if needs_rule(section):
            cursor.ensure_space(RULE_SPACE + line_height(HEADING_FONT_SIZE))
            rule_y = cursor.y + RULE_SPACE / 2
            cursor.draw(LineOp(MARGIN, rule_y, MARGIN + USABLE_WIDTH, rule_y, RULE_WIDTH))
            cursor.advance(RULE_SPACE)

        lines = wrap(prepare_text(section.title), FONT_BOLD, HEADING_FONT_SIZE, USABLE_WIDTH)
        # keep the heading on the same page as the first body line
        cursor.ensure_space(len(lines) * line_height(HEADING_FONT_SIZE) + line_height(BODY_FONT_SIZE))
        for line in lines:
            self._write_line(cursor, line, MARGIN, FONT_BOLD, HEADING_FONT_SIZE)
        cursor.advance(HEADING_GAP_AFTER)

    def render_text(self, section: Text, cursor: PageCursor) -> None:
        blocks = paragraphs(section.value)
        for index, paragraph in enumerate(blocks):
            for line in wrap(paragraph, FONT, BODY_FONT_SIZE, BODY_WIDTH):
                self._write_line(cursor, line, MARGIN, FONT, BODY_FONT_SIZE)
            if index < len(blocks) - 1:
                cursor.advance(PARAGRAPH_GAP)
        cursor.advance(SECTION_GAP)

    def render_rich_text(self, section: RichText, cursor: PageCursor) -> None:
        self._flow_runs(cursor, prepared_runs(section.runs), MARGIN, BODY_WIDTH)
        cursor.advance(SECTION_GAP)

    def render_list(self, section: Section, cursor: PageCursor) -> None:
        indent_x = MARGIN + LIST_INDENT
        content_width = BODY_WIDTH - LIST_INDENT
        for index, item in enumerate(section.items, start=1):
            runs = text_runs(item)
            if not runs:
                continue
            # prefix and first line of the item share a page
            cursor.ensure_lines(1, BODY_FONT_SIZE)
            cursor.draw(TextOp(MARGIN + LIST_PREFIX_OFFSET, cursor.y + BODY_FONT_SIZE,
                               list_prefix(section, index).strip(), FONT, BODY_FONT_SIZE))
            if any(run.bold for run in runs):
                self._flow_runs(cursor, runs, indent_x, content_width)
            else:
                text = "".join(run.text for run in runs).strip()
                for line in wrap(text, FONT, BODY_FONT_SIZE, content_width):
                    self._write_line(cursor, line, indent_x, FONT, BODY_FONT_SIZE)
        cursor.advance(SECTION_GAP)

    def render_key_value(self, section: KeyValue, cursor: PageCursor) -> None:
        label = plain_text(section.label)
        runs = []
        if label:
            runs.append(Run(f"{label}: ", True))
        value = prepare_text(section.value)
        if value:
            runs.append(Run(value, False))
        # first value line continues after the label, the rest wrap flush left
        self._flow_runs(cursor, runs, MARGIN, BODY_WIDTH)
        cursor.advance(PARAGRAPH_GAP)

    def render_basic_info(self, section: BasicInfoBox, cursor: PageCursor) -> None:
        cell_width = USABLE_WIDTH / 2
        h = line_height(BODY_FONT_SIZE)
        max_lines = max(1, int((BASELINE_LIMIT - MARGIN - 2 * CELL_PADDING) // h))

        rows = []
        for row in info_grid(section.items):
            cells = [self._grid_cell(item, cell_width, max_lines) for item in row]
            line_count = max(len(cell[2]) for cell in cells if cell is not None)
            rows.append((cells, line_count * h + 2 * CELL_PADDING))

        index = 0
        while index < len(rows):
            cursor.ensure_space(rows[index][1])
            top = y = cursor.y
            chunk = []
            # as many rows as fit on this page; always at least one
            while index < len(rows) and (not chunk or y + rows[index][1] <= BASELINE_LIMIT):
                chunk.append((y, rows[index][0]))
                y += rows[index][1]
                index += 1
            self._draw_grid(cursor, chunk, top, y - top, cell_width)
            cursor.advance(y - top)

        cursor.advance(SECTION_GAP)

    def _grid_cell(self, item, cell_width: float, max_lines: int):
        if item is None:
            return None
        label = f"{prepare_text(item.label)}: "
        label_width = stringWidth(label, FONT_BOLD, BODY_FONT_SIZE)
        inner = cell_width - 2 * CELL_PADDING
        available = inner - label_width
        value = prepare_text(item.value)
        if available >= MIN_CELL_VALUE_WIDTH:
            lines = wrap(value, FONT, BODY_FONT_SIZE, available)
            value_offset = label_width
        else:
            # label eats the cell: value starts on the next line, flush left
            lines = [""] + wrap(value, FONT, BODY_FONT_SIZE, inner)
            value_offset = 0
        return label, value_offset, lines[:max_lines]

    def _draw_grid(self, cursor: PageCursor, chunk, top: float, height: float, cell_width: float) -> None:
        h = line_height(BODY_FONT_SIZE)
        cursor.draw(RectOp(MARGIN, top, USABLE_WIDTH, height))
        cursor.draw(LineOp(MARGIN + cell_width, top, MARGIN + cell_width, top + height))
        for row_top, _ in chunk[1:]:
            cursor.draw(LineOp(MARGIN, row_top, MARGIN + USABLE_WIDTH, row_top))

        for row_top, cells in chunk:
            for column, cell in enumerate(cells):
                if cell is None:
                    continue
                label, value_offset, lines = cell
                x = MARGIN + column * cell_width + CELL_PADDING
                baseline = row_top + CELL_PADDING + BODY_FONT_SIZE
                cursor.draw(TextOp(x, baseline, label.rstrip(), FONT_BOLD, BODY_FONT_SIZE))
                for offset, line in enumerate(lines):
                    if line:
                        cursor.draw(TextOp(x + value_offset, baseline + offset * h, line, FONT, BODY_FONT_SIZE))

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------
    @staticmethod
    def _paint(cursor: PageCursor, title: str) -> bytes:
        buffer = BytesIO()
        # invariant=1 drops timestamps and random ids: same input, same bytes
        pdf = canvas.Canvas(buffer, pagesize=A4, invariant=1)
        pdf.setTitle(prepare_text(title))
        for ops in cursor.pages:
            for op in ops:
                if isinstance(op, TextOp):
                    pdf.setFont(op.font, op.size)
                    pdf.drawString(op.x, PAGE_HEIGHT - op.y, op.text)
                elif isinstance(op, LineOp):
                    pdf.setLineWidth(op.width)
                    pdf.line(op.x1, PAGE_HEIGHT - op.y1, op.x2, PAGE_HEIGHT - op.y2)
                elif isinstance(op, RectOp):
                    pdf.setLineWidth(BOX_LINE_WIDTH)
                    pdf.rect(op.x, PAGE_HEIGHT - op.y - op.height, op.width, op.height, stroke=1, fill=0)
            pdf.showPage()
        pdf.save()
        return buffer.getvalue()
