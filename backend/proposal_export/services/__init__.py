# backend/proposal_export/services/__init__.py
"""
Proposal export services.

Main components:
- build_sections: ExportPayload -> canonical Section list
- export_bytes / export_bytes_async / export_proposal: render one format
- build_export_payload*: ExportPayload from CRUD-layer proposal records
"""

from proposal_export.services.exporter import (
    FORMATS,
    ExportError,
    content_types,
    export_bytes,
    export_bytes_async,
    export_proposal,
)
from proposal_export.services.payloads import build_export_payload, build_export_payload_from_proposal
from proposal_export.services.sections import build_sections

__all__ = [
    "FORMATS",
    "ExportError",
    "build_export_payload",
    "build_export_payload_from_proposal",
    "build_sections",
    "content_types",
    "export_bytes",
    "export_bytes_async",
    "export_proposal",
]
