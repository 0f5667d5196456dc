import pytest
from reportlab.pdfbase.pdfmetrics import stringWidth

from proposal_export.models import BasicInfoBox, BulletList, Heading, InfoItem, KeyValue, OrderedList, Text
from proposal_export.services.exporters.pdf_exporter import (
    BASELINE_LIMIT,
    BODY_FONT_SIZE,
    BODY_WIDTH,
    FONT,
    FONT_BOLD,
    MARGIN,
    RULE_WIDTH,
    LineOp,
    PageCursor,
    PdfExporter,
    RectOp,
    TextOp,
)


def _ops(cursor, kind):
    return [op for page in cursor.pages for op in page if isinstance(op, kind)]


def _five_item_box():
    return BasicInfoBox(tuple(
        InfoItem(label, value) for label, value in [
            ("Industry", "Tech"),
            ("Budget Range", "$50k"),
            ("Timeline", "6 months"),
            ("Due Date", "2026-12-01"),
            ("Status", "draft"),
        ]
    ))


def test_basic_info_grid_shape():
    cursor = PdfExporter().layout("Acme RFP", [Heading("Basic Information"), _five_item_box()])

    rects = _ops(cursor, RectOp)
    assert len(rects) == 1
    lines = _ops(cursor, LineOp)
    vertical = [op for op in lines if op.x1 == op.x2]
    horizontal = [op for op in lines if op.y1 == op.y2]
    assert len(vertical) == 1
    # 5 items -> 3 rows -> 2 internal dividers
    assert len(horizontal) == 2

    labels = [op.text for op in _ops(cursor, TextOp) if op.font == FONT_BOLD and op.size == BODY_FONT_SIZE]
    assert labels == ["Industry:", "Budget Range:", "Timeline:", "Due Date:", "Status:"]


def test_basic_info_value_follows_label():
    cursor = PdfExporter().layout("T", [BasicInfoBox((InfoItem("Industry", "Tech"),))])
    texts = _ops(cursor, TextOp)
    label = next(op for op in texts if op.text == "Industry:")
    value = next(op for op in texts if op.text == "Tech")
    assert value.y == label.y
    assert value.x >= label.x + stringWidth("Industry:", FONT_BOLD, BODY_FONT_SIZE)


def test_long_content_paginates_with_same_left_margin():
    body = "\n\n".join(f"Paragraph {i} of the proposal body with enough words to wrap." for i in range(150))
    cursor = PdfExporter().layout("Long", [Heading("Body"), Text(body)])

    assert len(cursor.pages) >= 2
    for page in cursor.pages:
        texts = [op for op in page if isinstance(op, TextOp)]
        assert texts
        assert min(op.x for op in texts) == MARGIN


def test_no_baseline_below_bottom_limit():
    items = tuple(f"Item number {i}" for i in range(120))
    sections = [
        Heading("Basic Information"),
        _five_item_box(),
        Heading("Scope"),
        BulletList(items),
        OrderedList(items),
        KeyValue("Notes", "word " * 400),
    ]
    cursor = PdfExporter().layout("Deep", sections)
    assert len(cursor.pages) >= 3
    for op in _ops(cursor, TextOp):
        assert op.y <= BASELINE_LIMIT


def test_ensure_space_breaks_only_when_needed():
    cursor = PageCursor()
    assert cursor.ensure_space(1000) is False  # fresh page never breaks
    cursor.advance(100)
    assert cursor.ensure_space(10) is False
    assert cursor.ensure_space(BASELINE_LIMIT) is True
    assert cursor.page_index == 1
    assert cursor.y == MARGIN


def test_rule_only_before_requirements():
    sections = [
        Heading("Scope"),
        Text("Intro."),
        Heading("Requirements"),
        BulletList(("SSO",)),
        Heading("Pricing"),
        Text("$10k"),
    ]
    cursor = PdfExporter().layout("T", sections)
    rules = [op for op in _ops(cursor, LineOp) if op.width == RULE_WIDTH]
    assert len(rules) == 1

    texts = _ops(cursor, TextOp)
    intro = next(op for op in texts if op.text == "Intro.")
    heading = next(op for op in texts if op.text == "Requirements")
    assert intro.y < rules[0].y1 < heading.y


def test_long_tokens_stay_inside_body_width():
    url = "https://example.com/" + "segment" * 40
    cursor = PdfExporter().layout("T", [Text(url)])
    for op in _ops(cursor, TextOp):
        if op.font == FONT:
            assert stringWidth(op.text, op.font, op.size) <= BODY_WIDTH


def test_list_prefixes():
    cursor = PdfExporter().layout("T", [OrderedList(("One", "Two")), BulletList(("Three",))])
    texts = [op.text for op in _ops(cursor, TextOp)]
    assert texts[1:] == ["1.", "One", "2.", "Two", "•", "Three"]


def test_key_value_label_is_bold_and_inline():
    cursor = PdfExporter().layout("T", [KeyValue("Client Name", "Jane Doe")])
    texts = _ops(cursor, TextOp)[1:]
    assert [(op.text, op.font) for op in texts] == [
        ("Client", FONT_BOLD),
        ("Name:", FONT_BOLD),
        ("Jane", FONT),
        ("Doe", FONT),
    ]
    assert len({op.y for op in texts}) == 1


def test_export_to_pdf_bytes(acme_payload):
    from proposal_export.services.sections import build_sections

    sections = build_sections(acme_payload)
    content, filename, content_type = PdfExporter().export_to_pdf("Acme RFP", sections)
    assert content.startswith(b"%PDF")
    assert filename == "Acme_RFP.pdf"
    assert content_type == "application/pdf"

    again, _, _ = PdfExporter().export_to_pdf("Acme RFP", sections)
    assert again == content


def test_filename_override():
    _, filename, _ = PdfExporter().export_to_pdf("Acme RFP", [], filename="custom")
    assert filename == "custom.pdf"


def test_unknown_section_type():
    with pytest.raises(TypeError):
        PdfExporter().layout("T", [object()])
