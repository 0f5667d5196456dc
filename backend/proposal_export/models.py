# backend/proposal_export/models.py
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _as_text(value: Any) -> Any:
    """Numbers, dates and other scalars from the CRUD layer arrive as text."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


# ---------- Export input (data contract of the CRUD layer) ----------
class QuestionAnswer(BaseModel):
    """One proposal question and its (optional) answer."""
    question: str = ""
    answer: Optional[str] = None

    @field_validator("question", "answer", mode="before")
    @classmethod
    def stringify(cls, v):
        return _as_text(v)


class ExportPayload(BaseModel):
    """Everything the export engine knows about one proposal.

    Field names are snake_case in Python and camelCase on the wire
    (``budgetRange``, ``clientEmail``, ...); both spellings are accepted.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    description: Optional[str] = None
    industry: Optional[str] = None
    budget_range: Optional[str] = None
    timeline: Optional[str] = None
    due_date: Optional[str] = None
    status: Optional[str] = None
    client_name: Optional[str] = None
    client_contact: Optional[str] = None
    client_email: Optional[str] = None
    # either {"fullDocument": "..."} or a map of known structured keys
    content: Optional[Dict[str, Any]] = None
    questions: Optional[List[QuestionAnswer]] = Field(default=None)

    @field_validator(
        "title", "description", "industry", "budget_range", "timeline", "due_date",
        "status", "client_name", "client_contact", "client_email",
        mode="before",
    )
    @classmethod
    def stringify(cls, v):
        return _as_text(v)


# ---------- Canonical section model ----------
# Closed set of variants. Every renderer dispatches on SECTION_TYPES and
# raises TypeError on anything else.

@dataclass(frozen=True)
class Run:
    """Contiguous span of text sharing one bold flag."""
    text: str
    bold: bool = False


@dataclass(frozen=True)
class InfoItem:
    label: str
    value: str


@dataclass(frozen=True)
class Heading:
    title: str


@dataclass(frozen=True)
class Text:
    """Plain paragraph(s), blank-line separated."""
    value: str


@dataclass(frozen=True)
class BulletList:
    # items may still carry **bold** markers; renderers split them into runs
    items: Tuple[str, ...]


@dataclass(frozen=True)
class OrderedList:
    items: Tuple[str, ...]


@dataclass(frozen=True)
class KeyValue:
    label: str
    value: str


@dataclass(frozen=True)
class RichText:
    runs: Tuple[Run, ...]


@dataclass(frozen=True)
class BasicInfoBox:
    """2-column grid of scalar proposal facts."""
    items: Tuple[InfoItem, ...]


Section = Union[Heading, Text, BulletList, OrderedList, KeyValue, RichText, BasicInfoBox]

SECTION_TYPES = (Heading, Text, BulletList, OrderedList, KeyValue, RichText, BasicInfoBox)


def section_has_content(section: Section) -> bool:
    """True when the section carries any non-blank text."""
    if isinstance(section, Heading):
        return bool(section.title.strip())
    if isinstance(section, Text):
        return bool(section.value.strip())
    if isinstance(section, (BulletList, OrderedList)):
        return any(item.strip() for item in section.items)
    if isinstance(section, KeyValue):
        return bool(section.label.strip() or section.value.strip())
    if isinstance(section, RichText):
        return any(run.text.strip() for run in section.runs)
    if isinstance(section, BasicInfoBox):
        return any(item.value.strip() for item in section.items)
    raise TypeError(f"Unsupported section type: {type(section).__name__}")
