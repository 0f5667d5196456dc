# backend/proposal_export/services/parsers/base.py
"""Base class for proposal body parsers"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import List

from proposal_export.models import Section, section_has_content


class ParserType(str, Enum):
    """Available body parsing strategies"""
    HTML = "html"
    MARKDOWN = "markdown"


class BodyParser(ABC):
    """Base class for body parsers

    Each parser implementation should:
    1. Accept the raw rich-text body of a proposal
    2. Emit the canonical Section list, in document order
    3. Never raise on malformed content (return fewer sections instead)

    Both strategies must produce the same Section shapes for equivalent
    content.
    """

    @abstractmethod
    def parse(self, raw: str) -> List[Section]:
        """Parse raw body text into sections

        Args:
            raw: Body content (tag markup or Markdown-like text)

        Returns:
            Ordered list of non-empty sections (may be empty)
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Parser identifier ('html' or 'markdown')"""
        pass

    def _keep(self, sections: List[Section]) -> List[Section]:
        return [section for section in sections if section_has_content(section)]
