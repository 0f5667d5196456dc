# backend/proposal_export/services/parsers/parser_factory.py
"""Factory for selecting the body parsing strategy from the content itself"""
from typing import List

from proposal_export.models import Section
from proposal_export.utils.logging import logger
from proposal_export.utils.text_utils import looks_like_markup
from .base import BodyParser, ParserType
from .html_parser import HtmlBodyParser
from .markdown_parser import MarkdownBodyParser


class ParserFactory:
    """Picks the strategy once per body with a cheap syntax sniff

    - Any tag-like token (``<p>``, ``</strong>``, or entity-encoded
      ``&lt;p&gt;``) → tree strategy (HtmlBodyParser)
    - Otherwise → line strategy (MarkdownBodyParser)
    """

    @classmethod
    def get_parser(cls, raw: str) -> BodyParser:
        """Get the parser for this body

        Args:
            raw: Body content

        Returns:
            BodyParser instance
        """
        if looks_like_markup(raw):
            return cls.create_parser(ParserType.HTML)
        return cls.create_parser(ParserType.MARKDOWN)

    @classmethod
    def create_parser(cls, parser_type: ParserType) -> BodyParser:
        """Create parser instance by type

        Raises:
            ValueError: If parser type is unknown
        """
        if parser_type == ParserType.HTML:
            return HtmlBodyParser()
        if parser_type == ParserType.MARKDOWN:
            return MarkdownBodyParser()
        raise ValueError(f"Unknown parser type: {parser_type}")


def parse_body(raw: str) -> List[Section]:
    """Parse a rich-text body into sections with the strategy its syntax calls for."""
    parser = ParserFactory.get_parser(raw)
    sections = parser.parse(raw)
    logger.debug(
        "Parsed proposal body",
        extra={"parser": parser.name, "sections": len(sections), "chars": len(raw or "")}
    )
    return sections
