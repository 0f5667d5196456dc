# backend/proposal_export/services/parsers/__init__.py
"""Proposal body parser implementations"""
from .base import BodyParser, ParserType
from .html_parser import HtmlBodyParser
from .markdown_parser import MarkdownBodyParser
from .parser_factory import ParserFactory, parse_body

__all__ = [
    "BodyParser",
    "ParserType",
    "HtmlBodyParser",
    "MarkdownBodyParser",
    "ParserFactory",
    "parse_body",
]
