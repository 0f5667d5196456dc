# backend/proposal_export/services/parsers/markdown_parser.py
"""Line strategy: Markdown-like text -> sections"""
import re
from typing import List, Optional

from proposal_export.models import BulletList, Heading, OrderedList, RichText, Section, Text
from proposal_export.utils.text_utils import has_bold_markers, normalize, parse_bold_runs
from .base import BodyParser, ParserType

HEADING_LINE = re.compile(r"^#{1,6}\s+")
BULLET_LINE = re.compile(r"^[-*•]\s+(.*)$")
NUMBERED_LINE = re.compile(r"^\d+[.)]\s+(.*)$")
_BLOCK_SPLIT = re.compile(r"\n(?=#{1,6}\s)")
_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")


class MarkdownBodyParser(BodyParser):
    """Parses the Markdown-like convention used by generated proposals.

    The body is cut into blocks at heading lines (``## Title``). A block's
    heading line becomes a Heading; the rest is split into paragraphs on
    blank lines. A paragraph whose every line is a bullet becomes a
    BulletList, every line numbered an OrderedList, otherwise RichText when
    it has ``**bold**`` spans and Text when it does not.
    """

    @property
    def name(self) -> str:
        return ParserType.MARKDOWN.value

    def parse(self, raw: str) -> List[Section]:
        text = normalize(raw)
        sections: List[Section] = []
        if not text:
            return sections

        for block in _BLOCK_SPLIT.split(text):
            lines = block.split("\n")
            if HEADING_LINE.match(lines[0]):
                title = lines[0].lstrip("#").replace("**", "").strip()
                sections.append(Heading(title=title))
                body = "\n".join(lines[1:])
            else:
                # text before the first heading has no heading of its own
                body = block

            for paragraph in _PARAGRAPH_SPLIT.split(body):
                section = self._paragraph_section(paragraph)
                if section is not None:
                    sections.append(section)

        return self._keep(sections)

    @staticmethod
    def _paragraph_section(paragraph: str) -> Optional[Section]:
        lines = [line.strip() for line in paragraph.split("\n") if line.strip()]
        if not lines:
            return None

        bullets = [BULLET_LINE.match(line) for line in lines]
        if all(bullets):
            return BulletList(items=tuple(m.group(1).strip() for m in bullets))

        numbered = [NUMBERED_LINE.match(line) for line in lines]
        if all(numbered):
            return OrderedList(items=tuple(m.group(1).strip() for m in numbered))

        joined = "\n".join(lines)
        if has_bold_markers(joined):
            return RichText(runs=tuple(parse_bold_runs(joined)))
        return Text(value=joined)
