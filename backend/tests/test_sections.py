import pytest

from proposal_export.models import (
    BasicInfoBox,
    BulletList,
    ExportPayload,
    Heading,
    InfoItem,
    KeyValue,
    OrderedList,
    RichText,
    Run,
    Text,
    section_has_content,
)
from proposal_export.services.sections import build_sections, full_document_text


def test_acme_end_to_end(acme_payload):
    assert build_sections(acme_payload) == [
        Heading("Basic Information"),
        BasicInfoBox((InfoItem("Industry", "Tech"),)),
        Heading("Questions & Answers"),
        KeyValue("Timeline?", "6 months"),
    ]


def test_build_sections_is_deterministic(full_payload):
    first = build_sections(full_payload)
    second = build_sections(full_payload)
    assert first == second
    assert repr(first) == repr(second)


def test_full_order(full_payload):
    sections = build_sections(full_payload)
    headings = [s.title for s in sections if isinstance(s, Heading)]
    assert headings == [
        "Basic Information",
        "Client",
        "Executive Summary",
        "Requirements",
        "Next Steps",
        "Questions & Answers",
    ]
    info = sections[1]
    assert isinstance(info, BasicInfoBox)
    assert [item.label for item in info.items] == [
        "Industry", "Budget Range", "Timeline", "Due Date", "Status"
    ]
    assert sections[3:5] == [
        KeyValue("Client Name", "Jane Doe"),
        KeyValue("Client Email", "jane@acme.example"),
    ]
    assert BulletList(("Single sign-on", "**Audit** logging")) in sections
    assert OrderedList(("Kickoff", "Discovery")) in sections
    # unanswered question keeps an empty value
    assert sections[-1] == KeyValue("Hosting?", "")


def test_every_section_has_content(full_payload):
    assert all(section_has_content(s) for s in build_sections(full_payload))


def test_title_only_payload_has_no_sections():
    assert build_sections(ExportPayload(title="Bare")) == []


def test_blank_fields_are_skipped():
    payload = ExportPayload.model_validate({
        "title": "T",
        "industry": "   ",
        "clientName": "",
        "questions": [{"question": "", "answer": ""}],
    })
    assert build_sections(payload) == []


def test_question_without_text_is_unknown():
    payload = ExportPayload.model_validate({
        "title": "T",
        "questions": [{"question": "", "answer": "Yes"}],
    })
    assert build_sections(payload) == [
        Heading("Questions & Answers"),
        KeyValue("Unknown", "Yes"),
    ]


def test_markdown_body():
    payload = ExportPayload.model_validate({
        "title": "T",
        "content": {"fullDocument": "## Approach\n\nWe use **agile** sprints."},
    })
    assert build_sections(payload) == [
        Heading("Approach"),
        RichText((Run("We use ", False), Run("agile", True), Run(" sprints.", False))),
    ]


def test_full_document_alias():
    assert full_document_text({"full_document": "x"}) == "x"
    assert full_document_text({"fullDocument": "a", "full_document": "b"}) == "a"
    assert full_document_text({"executiveSummary": "x"}) is None
    assert full_document_text(None) is None


def test_unparseable_body_falls_back_to_plain_text():
    payload = ExportPayload.model_validate({
        "title": "T",
        "content": {"fullDocument": "<title>Plan</title>"},
    })
    assert build_sections(payload) == [Heading("Proposal Content"), Text("Plan")]


def test_empty_body_emits_nothing():
    payload = ExportPayload.model_validate({
        "title": "T",
        "content": {"fullDocument": "<p><br></p>"},
    })
    assert build_sections(payload) == []


def test_structured_content_keys():
    payload = ExportPayload.model_validate({
        "title": "T",
        "content": {
            "pricing": {"totalCost": "$10k", "paymentTerms": "Net 30"},
            "executiveSummary": "Short summary.",
            "requirements": ["SSO", {"description": "Audit logs"}],
            "customField": "dropped",
            "nextSteps": {"description": "Then:", "keyActions": ["Sign", "Start"]},
        },
    })
    assert build_sections(payload) == [
        Heading("Executive Summary"),
        Text("Short summary."),
        Heading("Requirements"),
        BulletList(("SSO", "Audit logs")),
        Heading("Pricing"),
        KeyValue("Total Cost", "$10k"),
        KeyValue("Payment Terms", "Net 30"),
        Heading("Next Steps"),
        Text("Then:"),
        OrderedList(("Sign", "Start")),
    ]


def test_structured_project_overview_and_deliverables():
    payload = ExportPayload.model_validate({
        "title": "T",
        "content": {
            "projectOverview": {
                "industry": "Retail",
                "projectTimeline": {"description": "Q3"},
                "projectScope": ["Web", "Mobile"],
            },
            "deliverables": {
                "keyDeliverables": ["App"],
                "qualityStandards": "ISO 9001",
            },
        },
    })
    assert build_sections(payload) == [
        Heading("Project Overview"),
        KeyValue("Industry", "Retail"),
        KeyValue("Timeline", "Q3"),
        BulletList(("Web", "Mobile")),
        Heading("Deliverables"),
        BulletList(("App",)),
        Text("ISO 9001"),
    ]


def test_structured_key_with_no_content_is_skipped():
    payload = ExportPayload.model_validate({
        "title": "T",
        "content": {"requirements": [], "team": {}, "introduction": "  "},
    })
    assert build_sections(payload) == []


def test_section_has_content_rejects_unknown_type():
    with pytest.raises(TypeError):
        section_has_content(object())
