"""Export renderers for proposal documents.

Architecture:
- BaseExporter: Section dispatch + helpers shared by the section renderers
- PdfExporter: Paginated page document (manual flow control)
- WordExporter: Document-markup package (sync tree, async packaging)
- ExcelExporter: Flattened (Section, Field, Value) rows
- JsonExporter: Raw payload dump, bypasses the section list
"""

from .base_exporter import BaseExporter
from .excel_exporter import ExcelExporter, flatten_sections
from .json_exporter import JsonExporter
from .pdf_exporter import PageCursor, PdfExporter
from .word_exporter import WordExporter

__all__ = [
    'BaseExporter',
    'ExcelExporter',
    'JsonExporter',
    'PageCursor',
    'PdfExporter',
    'WordExporter',
    'flatten_sections',
]
