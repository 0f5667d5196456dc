# backend/proposal_export/services/exporters/base_exporter.py
"""Base exporter with the section dispatch shared by every renderer.

Each concrete exporter implements one ``render_*`` method per Section variant.
They are abstract, so a renderer missing a variant cannot be instantiated.
"""
import math
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence, Tuple

from proposal_export.models import (
    BasicInfoBox,
    BulletList,
    Heading,
    InfoItem,
    KeyValue,
    OrderedList,
    RichText,
    Run,
    Section,
    Text,
)
from proposal_export.utils.file_utils import sanitize_filename
from proposal_export.utils.text_utils import normalize, parse_bold_runs, prepare_text

GRID_COLUMNS = 2
BULLET_GLYPH = "•"
RULE_BEFORE_HEADING = "requirements"


def grid_rows(count: int) -> int:
    """Rows of the 2-column basic info grid for ``count`` items."""
    return math.ceil(count / GRID_COLUMNS)


def info_grid(items: Sequence[InfoItem]) -> List[List[Optional[InfoItem]]]:
    """Lay items out row-major in 2 columns; a missing last cell is None."""
    rows = []
    for start in range(0, len(items), GRID_COLUMNS):
        row: List[Optional[InfoItem]] = list(items[start:start + GRID_COLUMNS])
        row.extend([None] * (GRID_COLUMNS - len(row)))
        rows.append(row)
    return rows


def text_runs(text: str) -> List[Run]:
    """Inline ``**bold**`` spans of a list item or label, ready for wrapping."""
    runs = []
    for run in parse_bold_runs(normalize(text)):
        prepared = prepare_text(run.text, strip=False)
        if prepared:
            runs.append(Run(prepared, run.bold))
    return runs


def prepared_runs(runs: Sequence[Run]) -> List[Run]:
    """RichText runs with normalized text; spaces between runs are kept."""
    result = [Run(prepare_text(run.text, strip=False), run.bold) for run in runs]
    return [run for run in result if run.text]


def plain_text(text: str) -> str:
    """Item/label text without bold markers."""
    return "".join(run.text for run in text_runs(text)).strip()


def paragraphs(value: str) -> List[str]:
    """Blank-line separated paragraphs of a Text value, prepared for wrapping."""
    return [p.strip() for p in prepare_text(value).split("\n\n") if p.strip()]


def list_prefix(section: Section, index: int) -> str:
    if isinstance(section, OrderedList):
        return f"{index}. "
    return f"{BULLET_GLYPH} "


def needs_rule(heading: Heading) -> bool:
    """A horizontal rule goes right before the Requirements heading, nowhere else."""
    return heading.title.strip().lower() == RULE_BEFORE_HEADING


class BaseExporter(ABC):
    """Base class for all section renderers.

    ``target`` is whatever the concrete renderer writes into: a page cursor,
    a python-docx Document, or a row buffer. It is created per export call
    and never shared.
    """

    file_extension: str = ""
    content_type: str = ""

    def render_sections(self, sections: Sequence[Section], target: Any) -> None:
        for section in sections:
            self.render_section(section, target)

    def render_section(self, section: Section, target: Any) -> None:
        if isinstance(section, Heading):
            self.render_heading(section, target)
        elif isinstance(section, Text):
            self.render_text(section, target)
        elif isinstance(section, RichText):
            self.render_rich_text(section, target)
        elif isinstance(section, (BulletList, OrderedList)):
            self.render_list(section, target)
        elif isinstance(section, KeyValue):
            self.render_key_value(section, target)
        elif isinstance(section, BasicInfoBox):
            self.render_basic_info(section, target)
        else:
            raise TypeError(f"Unsupported section type: {type(section).__name__}")

    @abstractmethod
    def render_heading(self, section: Heading, target: Any) -> None:
        pass

    @abstractmethod
    def render_text(self, section: Text, target: Any) -> None:
        pass

    @abstractmethod
    def render_rich_text(self, section: RichText, target: Any) -> None:
        pass

    @abstractmethod
    def render_list(self, section: Section, target: Any) -> None:
        """BulletList and OrderedList"""
        pass

    @abstractmethod
    def render_key_value(self, section: KeyValue, target: Any) -> None:
        pass

    @abstractmethod
    def render_basic_info(self, section: BasicInfoBox, target: Any) -> None:
        pass

    def build_filename(self, title: str, filename: Optional[str] = None) -> str:
        """``<stem>.<ext>``; an explicit filename stem wins over the title."""
        stem = filename or sanitize_filename(title)
        return f"{stem}.{self.file_extension}"

    def result(self, content: bytes, title: str, filename: Optional[str] = None) -> Tuple[bytes, str, str]:
        return content, self.build_filename(title, filename), self.content_type
