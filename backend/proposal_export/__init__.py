"""Proposal document export engine.

    from proposal_export import export_bytes
    content, filename, content_type = export_bytes({"title": "Acme RFP"}, "pdf")
"""
from proposal_export.models import ExportPayload, QuestionAnswer
from proposal_export.services import (
    FORMATS,
    ExportError,
    build_export_payload,
    build_export_payload_from_proposal,
    build_sections,
    export_bytes,
    export_bytes_async,
    export_proposal,
)

__all__ = [
    "FORMATS",
    "ExportError",
    "ExportPayload",
    "QuestionAnswer",
    "build_export_payload",
    "build_export_payload_from_proposal",
    "build_sections",
    "export_bytes",
    "export_bytes_async",
    "export_proposal",
]
