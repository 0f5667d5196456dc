import pytest

from proposal_export.models import ExportPayload


@pytest.fixture
def acme_payload() -> ExportPayload:
    return ExportPayload.model_validate({
        "title": "Acme RFP",
        "industry": "Tech",
        "questions": [{"question": "Timeline?", "answer": "6 months"}],
    })


@pytest.fixture
def full_payload() -> ExportPayload:
    return ExportPayload.model_validate({
        "title": "Acme Data Platform",
        "industry": "Tech",
        "budgetRange": "$50k - $100k",
        "timeline": "6 months",
        "dueDate": "2026-12-01",
        "status": "draft",
        "clientName": "Jane Doe",
        "clientEmail": "jane@acme.example",
        "content": {
            "fullDocument": (
                "<h2>Executive Summary</h2>"
                "<p>We deliver <strong>fast</strong> results.</p>"
                "<h2>Requirements</h2>"
                "<ul><li>Single sign-on</li><li><strong>Audit</strong> logging</li></ul>"
                "<h2>Next Steps</h2>"
                "<ol><li>Kickoff</li><li>Discovery</li></ol>"
            )
        },
        "questions": [
            {"question": "Timeline?", "answer": "6 months"},
            {"question": "Hosting?"},
        ],
    })
