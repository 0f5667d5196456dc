# backend/proposal_export/services/sections.py
"""Section assembly: ExportPayload -> canonical, ordered Section list.

Order is fixed:
1. Basic Information heading + one BasicInfoBox (industry, budget, timeline, due date, status)
2. Client heading + one KeyValue per client field
3. Body: parsed ``fullDocument`` or the known structured content keys
4. Questions & Answers heading + one KeyValue per question

Every renderer consumes this list as-is; nothing downstream re-derives structure.
"""
from typing import Any, Dict, List, Optional

from proposal_export.models import (
    BasicInfoBox,
    BulletList,
    ExportPayload,
    Heading,
    InfoItem,
    KeyValue,
    OrderedList,
    Section,
    Text,
    section_has_content,
)
from proposal_export.services.parsers import parse_body
from proposal_export.utils.logging import logger
from proposal_export.utils.text_utils import humanize_key, strip_markup

BASIC_INFO_HEADING = "Basic Information"
CLIENT_HEADING = "Client"
QA_HEADING = "Questions & Answers"
FALLBACK_BODY_HEADING = "Proposal Content"
UNKNOWN_QUESTION = "Unknown"


def build_sections(payload: ExportPayload) -> List[Section]:
    """Build the Section list for one export.

    Pure and deterministic: the same payload always yields an equal list.
    Missing optional fields simply produce no section; empty sections are
    never emitted.
    """
    sections: List[Section] = []
    sections.extend(_basic_info_sections(payload))
    sections.extend(_client_sections(payload))
    sections.extend(_body_sections(payload.content))
    sections.extend(_question_sections(payload))
    logger.debug("Built export sections", extra={"sections": len(sections)})
    return sections


# ----------------------------------------------------------------------
# Scalar blocks
# ----------------------------------------------------------------------
def _present(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _basic_info_sections(payload: ExportPayload) -> List[Section]:
    fields = [
        ("Industry", payload.industry),
        ("Budget Range", payload.budget_range),
        ("Timeline", payload.timeline),
        ("Due Date", payload.due_date),
        ("Status", payload.status),
    ]
    items = tuple(InfoItem(label, _present(value)) for label, value in fields if _present(value))
    if not items:
        return []
    return [Heading(BASIC_INFO_HEADING), BasicInfoBox(items=items)]


def _client_sections(payload: ExportPayload) -> List[Section]:
    fields = [
        ("Client Name", payload.client_name),
        ("Client Contact", payload.client_contact),
        ("Client Email", payload.client_email),
    ]
    pairs = [KeyValue(label, _present(value)) for label, value in fields if _present(value)]
    if not pairs:
        return []
    return [Heading(CLIENT_HEADING)] + pairs


def _question_sections(payload: ExportPayload) -> List[Section]:
    pairs = []
    for qa in payload.questions or []:
        question = _present(qa.question)
        answer = _present(qa.answer) or ""
        if not question and not answer:
            continue
        pairs.append(KeyValue(question or UNKNOWN_QUESTION, answer))
    if not pairs:
        return []
    return [Heading(QA_HEADING)] + pairs


# ----------------------------------------------------------------------
# Body
# ----------------------------------------------------------------------
def full_document_text(content: Optional[Dict[str, Any]]) -> Optional[str]:
    """``content.fullDocument`` (or ``full_document``) when it is a string."""
    if not isinstance(content, dict):
        return None
    for key in ("fullDocument", "full_document"):
        value = content.get(key)
        if isinstance(value, str):
            return value
    return None


def _body_sections(content: Optional[Dict[str, Any]]) -> List[Section]:
    if not isinstance(content, dict) or not content:
        return []

    raw = full_document_text(content)
    if raw is not None:
        # mirrors the live editor view exactly
        sections = parse_body(raw)
        if sections:
            return sections
        stripped = strip_markup(raw)
        if not stripped:
            return []
        logger.info("Body produced no sections, using plain-text fallback", extra={"chars": len(raw)})
        return [Heading(FALLBACK_BODY_HEADING), Text(stripped)]

    sections: List[Section] = []
    for key, title, mapper in STRUCTURED_KEYS:
        if key not in content:
            continue
        body = [s for s in mapper(content[key]) if section_has_content(s)]
        if body:
            sections.append(Heading(title))
            sections.extend(body)
    return sections


def _string_items(value: Any) -> tuple:
    """List of strings / {description} objects -> tuple of item strings."""
    if not isinstance(value, list):
        return ()
    items = []
    for item in value:
        if isinstance(item, dict):
            item = item.get("description")
        text = _present(item)
        if text:
            items.append(text)
    return tuple(items)


def _description(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return _present(value)
    if isinstance(value, dict):
        return _present(value.get("description"))
    return None


def _map_text(value: Any) -> List[Section]:
    text = _description(value)
    return [Text(text)] if text else []


def _map_list(value: Any) -> List[Section]:
    if isinstance(value, str):
        return _map_text(value)
    items = _string_items(value)
    return [BulletList(items)] if items else []


def _map_project_overview(value: Any) -> List[Section]:
    if isinstance(value, str):
        return _map_text(value)
    if not isinstance(value, dict):
        return []
    timeline = value.get("timeline")
    if not _present(timeline) and isinstance(value.get("projectTimeline"), dict):
        timeline = value["projectTimeline"].get("description")
    fields = [
        ("Industry", value.get("industry")),
        ("Timeline", timeline),
        ("Budget", value.get("budget")),
        ("Description", value.get("description")),
    ]
    sections: List[Section] = [KeyValue(label, _present(v)) for label, v in fields if _present(v)]
    scope = _string_items(value.get("projectScope"))
    if scope:
        sections.append(BulletList(scope))
    return sections


def _map_deliverables(value: Any) -> List[Section]:
    if isinstance(value, (str, list)):
        return _map_list(value)
    if not isinstance(value, dict):
        return []
    sections = _map_text(value)
    sections.extend(_map_list(value.get("keyDeliverables")))
    sections.extend(_map_list(value.get("qualityStandards")))
    return sections


def _map_key_values(value: Any) -> List[Section]:
    """Timeline / team / pricing: text, {description}, or a label -> value map."""
    if isinstance(value, str) or (isinstance(value, dict) and _present(value.get("description"))):
        return _map_text(value)
    if not isinstance(value, dict):
        return []
    return [
        KeyValue(humanize_key(key), _present(v))
        for key, v in value.items()
        if _present(v) and not isinstance(v, (dict, list))
    ]


def _map_next_steps(value: Any) -> List[Section]:
    if isinstance(value, str):
        return _map_text(value)
    if isinstance(value, list):
        items = _string_items(value)
        return [OrderedList(items)] if items else []
    if not isinstance(value, dict):
        return []
    sections = _map_text(value)
    actions = value.get("keyActions")
    if not isinstance(actions, list):
        actions = [v for k, v in value.items() if k != "description" and isinstance(v, str)]
    items = _string_items(actions)
    if items:
        sections.append(OrderedList(items))
    return sections


# Known structured keys, in document order. Anything else in content is dropped.
STRUCTURED_KEYS: List[tuple] = [
    ("executiveSummary", "Executive Summary", _map_text),
    ("introduction", "Introduction", _map_text),
    ("projectOverview", "Project Overview", _map_project_overview),
    ("requirements", "Requirements", _map_list),
    ("solutionApproach", "Solution Approach", _map_text),
    ("technicalSpecifications", "Technical Specifications", _map_list),
    ("deliverables", "Deliverables", _map_deliverables),
    ("timeline", "Timeline", _map_key_values),
    ("team", "Team", _map_key_values),
    ("pricing", "Pricing", _map_key_values),
    ("nextSteps", "Next Steps", _map_next_steps),
]
