# backend/proposal_export/services/parsers/html_parser.py
"""Tree strategy: tag markup (rich-text editor HTML) -> sections

Walks the top-level children of the parsed tree:
- h1..h6            -> Heading
- ul / ol           -> BulletList / OrderedList (one item per direct <li>)
- p / div / others  -> RichText if any run is bold, else Text
- div/section/article holding block children -> parsed as a nested container
"""
import re
from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag

from proposal_export.models import BulletList, Heading, OrderedList, RichText, Run, Section, Text
from proposal_export.utils.text_utils import decode_entities, normalize, runs_to_text
from .base import BodyParser, ParserType

HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}
LIST_TAGS = {"ul", "ol"}
BOLD_TAGS = {"strong", "b"}
CONTAINER_TAGS = {"html", "body", "main", "div", "section", "article"}
BLOCK_TAGS = HEADING_TAGS | LIST_TAGS | CONTAINER_TAGS | {"p", "blockquote", "pre", "table", "hr"}
SKIP_TAGS = {"script", "style", "head", "title"}
# block-ish tags met while walking inline content end the current line
LINE_BREAK_TAGS = {"p", "div", "li", "tr", "blockquote", "pre"} | HEADING_TAGS | LIST_TAGS

_NON_CONTENT = (Comment, Declaration, Doctype, ProcessingInstruction)
_BOLD_STYLE = re.compile(r"font-weight\s*:\s*(bold|[6-9]00)", re.IGNORECASE)


class HtmlBodyParser(BodyParser):
    """Parses tag markup with BeautifulSoup (html.parser builder, no DOM needed)."""

    @property
    def name(self) -> str:
        return ParserType.HTML.value

    def parse(self, raw: str) -> List[Section]:
        soup = BeautifulSoup(decode_entities(raw or ""), "html.parser")
        sections: List[Section] = []
        self._parse_blocks(soup, sections)
        return self._keep(sections)

    # ------------------------------------------------------------------
    # Block level
    # ------------------------------------------------------------------
    def _parse_blocks(self, root: Tag, sections: List[Section]) -> None:
        # one (children, pending inline nodes) frame per open container
        stack = [(iter(list(root.children)), [])]
        while stack:
            children, pending_inline = stack[-1]
            node = next(children, None)
            if node is None:
                self._flush_inline(pending_inline, sections)
                stack.pop()
                continue
            if isinstance(node, _NON_CONTENT):
                continue
            if isinstance(node, Tag) and node.name in SKIP_TAGS:
                continue
            if isinstance(node, NavigableString) or node.name not in BLOCK_TAGS:
                # bare text / inline tags directly under a container form a paragraph
                pending_inline.append(node)
                continue

            self._flush_inline(pending_inline, sections)
            pending_inline.clear()

            if node.name in HEADING_TAGS:
                sections.append(Heading(title=normalize(node.get_text())))
            elif node.name in LIST_TAGS:
                section = self._list_section(node)
                if section is not None:
                    sections.append(section)
            elif node.name in CONTAINER_TAGS and self._has_block_children(node):
                stack.append((iter(list(node.children)), []))
            elif node.name == "hr":
                continue
            else:
                section = self._paragraph_section(self._collect_runs(node.children))
                if section is not None:
                    sections.append(section)

    def _flush_inline(self, nodes, sections: List[Section]) -> None:
        if not nodes:
            return
        section = self._paragraph_section(self._collect_runs(nodes))
        if section is not None:
            sections.append(section)

    @staticmethod
    def _has_block_children(node: Tag) -> bool:
        return any(isinstance(child, Tag) and child.name in BLOCK_TAGS for child in node.children)

    def _list_section(self, node: Tag) -> Optional[Section]:
        items = node.find_all("li", recursive=False)
        texts = tuple(text for text in (self._item_text(li) for li in items) if text)
        if not texts:
            return None
        # rich-text editors encode bullet lists as <ol><li data-list="bullet">
        bullet_encoded = all(li.get("data-list") == "bullet" for li in items)
        if node.name == "ol" and not bullet_encoded:
            return OrderedList(items=texts)
        return BulletList(items=texts)

    def _item_text(self, li: Tag) -> str:
        """Item text with bold spans kept as ``**...**`` markers."""
        runs = self._collect_runs(li.children)
        return "".join(f"**{run.text}**" if run.bold else run.text for run in runs).strip()

    @staticmethod
    def _paragraph_section(runs: List[Run]) -> Optional[Section]:
        if not runs:
            return None
        if any(run.bold for run in runs):
            return RichText(runs=tuple(runs))
        return Text(value=runs_to_text(runs))

    # ------------------------------------------------------------------
    # Inline level
    # ------------------------------------------------------------------
    def _collect_runs(self, nodes) -> List[Run]:
        raw_runs: List[Run] = []
        for node in nodes:
            self._walk(node, False, raw_runs)
        return self._clean_runs(raw_runs)

    def _walk(self, node, bold: bool, runs: List[Run]) -> None:
        """Depth-first text walk with an explicit stack (no recursion limit).

        Stack entries are (node, bold, closing); ``closing`` is the separator
        emitted once all of the node's children are done.
        """
        stack = [(node, bold, None)]
        while stack:
            node, bold, closing = stack.pop()
            if closing is not None:
                runs.append(Run(text=closing, bold=False))
                continue
            if isinstance(node, _NON_CONTENT):
                continue
            if isinstance(node, NavigableString):
                runs.append(Run(text=re.sub(r"\s+", " ", str(node)), bold=bold))
                continue
            if node.name in SKIP_TAGS:
                continue
            if node.name == "br":
                runs.append(Run(text="\n", bold=False))
                continue

            if node.name in LINE_BREAK_TAGS:
                stack.append((None, False, "\n"))
            elif node.name in ("td", "th"):
                stack.append((None, False, " "))
            child_bold = bold or node.name in BOLD_TAGS or bool(_BOLD_STYLE.search(node.get("style", "")))
            stack.extend((child, child_bold, None) for child in reversed(list(node.children)))

    @staticmethod
    def _clean_runs(runs: List[Run]) -> List[Run]:
        # whitespace never counts as bold
        runs = [Run(run.text, run.bold and bool(run.text.strip())) for run in runs]

        merged: List[Run] = []
        for run in runs:
            if merged and merged[-1].bold == run.bold:
                merged[-1] = Run(merged[-1].text + run.text, run.bold)
            else:
                merged.append(run)

        cleaned = [Run(normalize(run.text, strip=False), run.bold) for run in merged]
        if cleaned:
            cleaned[0] = Run(cleaned[0].text.lstrip(), cleaned[0].bold)
            cleaned[-1] = Run(cleaned[-1].text.rstrip(), cleaned[-1].bold)
        return [run for run in cleaned if run.text]
