# backend/proposal_export/utils/text_utils.py
"""Text helpers shared by the body parsers and every renderer.

- normalize: ASCII punctuation, unified line endings, collapsed whitespace
- break_long_tokens: keeps fixed-width wrapping from choking on URLs etc.
- strip_markup: tag soup -> plain text (fallback body)
- parse_bold_runs: ``**bold**`` markers -> list of Run
"""
import html
import re
from typing import List

from bs4 import BeautifulSoup

from proposal_export.config import settings
from proposal_export.models import Run

_CHAR_REPLACEMENTS = {
    "\u2018": "'",   # left single quote
    "\u2019": "'",   # right single quote
    "\u201a": "'",
    "\u201c": '"',   # left double quote
    "\u201d": '"',   # right double quote
    "\u201e": '"',
    "\u2013": "-",   # en dash
    "\u2014": "-",   # em dash
    "\u2212": "-",   # minus sign
    "\u2026": "...",
    "\u00a0": " ",   # nbsp
}
_CHAR_PATTERN = re.compile("|".join(re.escape(c) for c in _CHAR_REPLACEMENTS))

# C0 controls XML cannot carry (\f and \v are folded into spaces below)
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0e-\x1f\x7f]")
_HORIZONTAL_WS = re.compile(r"[ \t\f\v]+")
_BLANK_LINES = re.compile(r"\n(?:[ \t]*\n){2,}")
_SPACE_AROUND_NEWLINE = re.compile(r" ?\n ?")

TAG_PATTERN = re.compile(r"</?[a-zA-Z][a-zA-Z0-9]*(?:\s[^<>]*)?/?>")
_ENCODED_TAG_PATTERN = re.compile(r"&lt;/?[a-zA-Z][a-zA-Z0-9]*(?:\s.*?)?/?&gt;")

BLOCK_TAGS = ["p", "div", "li", "ul", "ol", "h1", "h2", "h3", "h4", "h5", "h6", "section", "article"]


def normalize(text: str, strip: bool = True) -> str:
    """Unify punctuation and whitespace.

    Curly quotes, en/em dashes and the ellipsis become ASCII; CRLF/CR become
    ``\\n``; 3+ consecutive line breaks collapse to one blank line; runs of
    horizontal whitespace collapse to one space. Control characters that
    XML cannot carry are dropped.

    Args:
        text: Any string (None is treated as empty)
        strip: Trim the result. Run texts pass ``strip=False`` so the
            spaces between adjacent runs survive.
    """
    if not text:
        return ""
    text = _CHAR_PATTERN.sub(lambda m: _CHAR_REPLACEMENTS[m.group(0)], text)
    text = _CONTROL_CHARS.sub("", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _HORIZONTAL_WS.sub(" ", text)
    text = _SPACE_AROUND_NEWLINE.sub("\n", text)
    text = _BLANK_LINES.sub("\n\n", text)
    return text.strip() if strip else text


def break_long_tokens(text: str, max_len: int = None) -> str:
    """Insert spaces inside whitespace-delimited tokens longer than max_len."""
    if not text:
        return ""
    if max_len is None:
        max_len = settings.long_token_max_len

    def _split(match: re.Match) -> str:
        token = match.group(0)
        return " ".join(token[i:i + max_len] for i in range(0, len(token), max_len))

    return re.sub(r"\S{%d,}" % (max_len + 1), _split, text)


def prepare_text(text: str, strip: bool = True) -> str:
    """normalize + break_long_tokens; every renderer calls this before wrapping."""
    return break_long_tokens(normalize(text, strip=strip))


def looks_like_markup(raw: str) -> bool:
    """Cheap sniff for tag-based content (literal or entity-encoded tags)."""
    if not raw:
        return False
    return bool(TAG_PATTERN.search(raw) or _ENCODED_TAG_PATTERN.search(raw))


def decode_entities(raw: str) -> str:
    """Turn ``&lt;strong&gt;`` style content back into real tags."""
    if _ENCODED_TAG_PATTERN.search(raw) and not TAG_PATTERN.search(raw):
        return html.unescape(raw)
    return raw


def strip_markup(raw: str) -> str:
    """Plain text of a tag-markup or Markdown-like string."""
    if not raw:
        return ""
    raw = decode_entities(raw)
    if looks_like_markup(raw):
        soup = BeautifulSoup(raw, "html.parser")
        for br in soup.find_all("br"):
            br.replace_with("\n")
        for block in soup.find_all(BLOCK_TAGS):
            block.append("\n")
        raw = soup.get_text()
    # drop Markdown emphasis / heading markers
    raw = raw.replace("**", "")
    raw = re.sub(r"^[ \t]*#+[ \t]*", "", raw, flags=re.MULTILINE)
    return normalize(raw)


def parse_bold_runs(text: str) -> List[Run]:
    """Split ``**``-delimited text into alternating plain/bold runs.

    Every ``**`` flips the bold state. An odd number of markers never
    raises: the trailing text just keeps whichever state is open.
    Empty runs are dropped, so "a **b** c" gives three runs and "**x"
    gives a single bold run.
    """
    runs: List[Run] = []
    bold = False
    for part in (text or "").split("**"):
        if part:
            runs.append(Run(text=part, bold=bold))
        bold = not bold
    return runs


def has_bold_markers(text: str) -> bool:
    return bool(text) and re.search(r"\*\*.+?\*\*", text, flags=re.DOTALL) is not None


def runs_to_text(runs) -> str:
    return "".join(run.text for run in runs)


def humanize_key(key: str) -> str:
    """``budgetRange`` / ``budget_range`` -> ``Budget Range``."""
    spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", key).replace("_", " ").strip()
    return " ".join(word[:1].upper() + word[1:] for word in spaced.split())
