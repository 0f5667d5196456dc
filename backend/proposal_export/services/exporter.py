# backend/proposal_export/services/exporter.py
"""Export entry points: payload -> (bytes, filename, content_type).

Design choices:
- The section list is built once per call and handed unchanged to exactly one renderer.
- pdf/xlsx/json are rendered synchronously; docx packaging is the one awaited step.
- Content never makes an export fail. Only packaging failures surface, as ExportError.
"""
import uuid
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from proposal_export.models import ExportPayload
from proposal_export.services.exporters import ExcelExporter, JsonExporter, PdfExporter, WordExporter
from proposal_export.services.sections import build_sections
from proposal_export.utils.file_utils import save_export
from proposal_export.utils.logging import logger

FORMATS = ("pdf", "docx", "xlsx", "json")
UNTITLED = "Untitled"

PayloadLike = Union[ExportPayload, Mapping[str, Any]]


class ExportError(Exception):
    """Turning a finished document into bytes failed."""


def _coerce_payload(payload: PayloadLike) -> ExportPayload:
    if isinstance(payload, ExportPayload):
        return payload
    return ExportPayload.model_validate(dict(payload))


def _check_format(fmt: str) -> str:
    fmt = (fmt or "").lower()
    if fmt not in FORMATS:
        raise ValueError('unsupported format')
    return fmt


def _render_sync(payload: PayloadLike, fmt: str, filename: Optional[str]) -> Tuple[bytes, str, str]:
    if fmt == "json":
        # raw dump bypasses section assembly
        return JsonExporter().export_to_json(payload, filename)

    export_payload = _coerce_payload(payload)
    title = export_payload.title or UNTITLED
    sections = build_sections(export_payload)

    if fmt == "pdf":
        return PdfExporter().export_to_pdf(title, sections, filename)
    if fmt == "xlsx":
        return ExcelExporter().export_to_excel(title, sections, filename)
    return WordExporter().export_to_word(title, sections, filename)


def export_bytes(payload: PayloadLike, fmt: str = 'pdf', filename: Optional[str] = None) -> Tuple[bytes, str, str]:
    """Return (bytes, filename, content_type) for given format: 'pdf'|'docx'|'xlsx'|'json'"""
    fmt = _check_format(fmt)
    export_id = uuid.uuid4().hex
    logger.info("Export started", extra={"export_id": export_id, "format": fmt})
    try:
        result = _render_sync(payload, fmt, filename)
    except (ValueError, TypeError):
        raise
    except Exception as e:
        logger.exception("Export packaging failed", extra={"export_id": export_id, "format": fmt})
        raise ExportError(f"Failed to export {fmt}: {e}") from e
    logger.info("Export finished", extra={"export_id": export_id, "format": fmt, "export_filename": result[1]})
    return result


async def export_bytes_async(payload: PayloadLike, fmt: str = 'pdf',
                             filename: Optional[str] = None) -> Tuple[bytes, str, str]:
    """Same as export_bytes; the docx package is written off the event loop."""
    fmt = _check_format(fmt)
    if fmt != "docx":
        return export_bytes(payload, fmt, filename)

    export_id = uuid.uuid4().hex
    logger.info("Export started", extra={"export_id": export_id, "format": fmt})
    export_payload = _coerce_payload(payload)
    sections = build_sections(export_payload)
    try:
        result = await WordExporter().export_to_word_async(
            export_payload.title or UNTITLED, sections, filename
        )
    except (ValueError, TypeError):
        raise
    except Exception as e:
        logger.exception("Export packaging failed", extra={"export_id": export_id, "format": fmt})
        raise ExportError(f"Failed to export {fmt}: {e}") from e
    logger.info("Export finished", extra={"export_id": export_id, "format": fmt, "export_filename": result[1]})
    return result


async def export_proposal(
    payload: PayloadLike,
    fmt: str,
    output_dir: Optional[Path] = None,
    filename: Optional[str] = None,
) -> Path:
    """Produce the artifact and save it to disk ("save as file").

    Returns the path of the written file.
    """
    content, name, _ = await export_bytes_async(payload, fmt, filename)
    return save_export(content, name, output_dir)


def content_types() -> Dict[str, str]:
    """Format name -> MIME type of the artifact it produces."""
    return {
        "pdf": PdfExporter.content_type,
        "docx": WordExporter.content_type,
        "xlsx": ExcelExporter.content_type,
        "json": JsonExporter.content_type,
    }


__all__ = [
    'FORMATS',
    'ExportError',
    'content_types',
    'export_bytes',
    'export_bytes_async',
    'export_proposal',
]
