import pytest
from pydantic import ValidationError

from proposal_export.config import Settings
from proposal_export.models import Run
from proposal_export.utils.file_utils import sanitize_filename, save_export
from proposal_export.utils.text_utils import (
    break_long_tokens,
    has_bold_markers,
    humanize_key,
    looks_like_markup,
    normalize,
    parse_bold_runs,
    strip_markup,
)


# ---------- parse_bold_runs ----------
def test_bold_runs_alternate():
    assert parse_bold_runs("a **b** c") == [
        Run("a ", False),
        Run("b", True),
        Run(" c", False),
    ]


def test_bold_runs_whole_string():
    assert parse_bold_runs("**x**") == [Run("x", True)]


def test_bold_runs_unterminated_marker_stays_bold():
    assert parse_bold_runs("**x") == [Run("x", True)]


def test_bold_runs_empty_input():
    assert parse_bold_runs("") == []
    assert parse_bold_runs("****") == []


def test_has_bold_markers():
    assert has_bold_markers("a **b** c")
    assert not has_bold_markers("a ** c")
    assert not has_bold_markers("plain")


# ---------- normalize ----------
def test_normalize_ascii_punctuation():
    text = "“Hi” — it’s here…"
    assert normalize(text) == "\"Hi\" - it's here..."


def test_normalize_whitespace_and_line_endings():
    text = "  one\r\ntwo\t\t three\r\r\r\rfour  "
    assert normalize(text) == "one\ntwo three\n\nfour"


def test_normalize_keeps_edges_when_not_stripping():
    assert normalize(" a  b ", strip=False) == " a b "


def test_normalize_none_is_empty():
    assert normalize(None) == ""


def test_normalize_drops_control_characters():
    assert normalize("bell\x07 here\x00") == "bell here"
    assert normalize("a\x0bb\x0cc") == "a b c"
    assert normalize("tab\tnew\nline") == "tab new\nline"


# ---------- break_long_tokens ----------
def test_break_long_tokens_splits_only_long_tokens():
    long_token = "a" * 50
    result = break_long_tokens(f"short {long_token}", max_len=24)
    assert result == "short " + "a" * 24 + " " + "a" * 24 + " aa"
    assert all(len(token) <= 24 for token in result.split())


def test_break_long_tokens_default_limit():
    url = "https://example.com/" + "x" * 60
    assert all(len(token) <= 24 for token in break_long_tokens(url).split())


# ---------- markup helpers ----------
def test_looks_like_markup():
    assert looks_like_markup("<p>Hello</p>")
    assert looks_like_markup("&lt;p&gt;Hello&lt;/p&gt;")
    assert not looks_like_markup("## Heading\n\n- item")
    assert not looks_like_markup("a < b and c > d")


def test_strip_markup_html():
    raw = "<p>Hello <strong>world</strong></p><ul><li>One</li></ul>"
    assert strip_markup(raw) == "Hello world\nOne"


def test_strip_markup_markdown():
    assert strip_markup("## Title\n\n**Bold** text") == "Title\n\nBold text"


def test_humanize_key():
    assert humanize_key("totalCost") == "Total Cost"
    assert humanize_key("budget_range") == "Budget Range"


# ---------- filenames ----------
def test_sanitize_filename():
    assert sanitize_filename("Acme RFP: Phase #2") == "Acme_RFP_Phase_2"
    assert sanitize_filename("  spaced   out ") == "_spaced_out_"


def test_sanitize_filename_defaults_and_truncates():
    assert sanitize_filename("") == "proposal"
    assert sanitize_filename(None) == "proposal"
    assert sanitize_filename("!!!") == "proposal"
    assert len(sanitize_filename("x" * 200)) == 80


def test_save_export_writes_file(tmp_path):
    path = save_export(b"data", "out.json", tmp_path / "nested")
    assert path == tmp_path / "nested" / "out.json"
    assert path.read_bytes() == b"data"


# ---------- settings ----------
def test_settings_validation():
    assert Settings(log_level="debug").log_level == "DEBUG"
    with pytest.raises(ValidationError):
        Settings(long_token_max_len=0)


# ---------- logging ----------
def test_context_filter_fills_defaults():
    import logging

    from proposal_export.utils.logging import ContextFilter

    record = logging.LogRecord("proposal_export", logging.INFO, __file__, 1, "msg", None, None)
    assert ContextFilter().filter(record)
    assert record.export_id is None
    assert record.service == "proposal-export"
