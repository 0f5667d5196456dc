# backend/proposal_export/services/payloads.py
"""Build ExportPayload objects from CRUD-layer proposal records.

Records use camelCase keys (``budgetRange``, ``clientEmail``, ...).
"""
from typing import Any, Dict, Mapping, Optional

from proposal_export.models import ExportPayload

UNTITLED = "Untitled"

SCALAR_FIELDS = [
    "description",
    "industry",
    "budgetRange",
    "timeline",
    "dueDate",
    "status",
    "clientName",
    "clientContact",
    "clientEmail",
]


def _first(key: str, *sources: Mapping[str, Any]) -> Any:
    """First non-None value for ``key`` across sources, in order."""
    for source in sources:
        value = source.get(key)
        if value is not None:
            return value
    return None


def build_export_payload(
    proposal: Optional[Mapping[str, Any]],
    form_data: Optional[Mapping[str, Any]] = None,
    content_data: Optional[Mapping[str, Any]] = None,
) -> ExportPayload:
    """Payload for the proposal detail view.

    Unsaved form edits win over the stored proposal; edited content wins over
    the stored content. Questions always come from the stored proposal.
    """
    p = proposal or {}
    f = form_data or {}
    content = content_data if content_data is not None else p.get("content")

    data: Dict[str, Any] = {"title": _first("title", f, p) or UNTITLED}
    for key in SCALAR_FIELDS:
        data[key] = _first(key, f, p)
    data["content"] = dict(content) if isinstance(content, Mapping) else None
    if p.get("questions") is not None:
        data["questions"] = p["questions"]
    return ExportPayload.model_validate(data)


def build_export_payload_from_proposal(proposal: Optional[Mapping[str, Any]]) -> ExportPayload:
    """Payload for a proposal list row (no form overrides, no questions)."""
    p = proposal or {}
    data: Dict[str, Any] = {"title": _first("title", p) or UNTITLED}
    for key in SCALAR_FIELDS:
        data[key] = _first(key, p)
    content = p.get("content")
    data["content"] = dict(content) if isinstance(content, Mapping) else None
    return ExportPayload.model_validate(data)
