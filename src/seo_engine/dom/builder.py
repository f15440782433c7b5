# src/seo_engine/dom/builder.py
import logging
import re
from typing import List

from bs4 import BeautifulSoup, Doctype, PageElement, Tag

from .models import HTMLDocument
from .core import ElementBase
from .registry import DOMRegistry

logger = logging.getLogger(__name__)


class DOMBuilder:
    """
    Builder responsible for parsing raw HTML into a structured HTMLDocument model.

    Parsing is best effort: html.parser tolerates missing closing tags, stray
    markup and unknown elements, so malformed input still yields a document.
    """

    def __init__(self):
        """Initializes the builder and ensures the DOMRegistry is populated."""
        DOMRegistry.discover()

    def parse_doc(self, html: str) -> HTMLDocument:
        """
        Parses raw HTML content into an HTMLDocument.

        Args:
            html (str): The raw HTML string. None or "" give an empty document.

        Returns:
            HTMLDocument: A frozen, queryable representation of the page.

        Raises:
            TypeError: If `html` is not a string.
        """
        if html is None:
            html = ""
        if not isinstance(html, str):
            raise TypeError(f"HTML must be a string, got {type(html).__name__}")

        # Basic cleanup of potentially dirty HTML (e.g., BOM)
        clean_html = html.replace('\ufeff', '').strip()
        if not clean_html:
            return HTMLDocument()

        soup = BeautifulSoup(clean_html, 'html.parser')

        # --- Basic Validity Checks ---
        found_doctype = bool(re.search(r'<!doctype', clean_html[:1000], re.IGNORECASE))
        if not found_doctype:
            # Fallback check using BS4 structure
            found_doctype = any(isinstance(item, Doctype) for item in soup.contents)

        found_root = soup.find('html') is not None

        children = self._build_children(soup)
        root = ElementBase(tag="#document", children=children)

        logger.debug(
            "Parsed document: %d top-level elements, doctype=%s, html root=%s",
            len(children), found_doctype, found_root
        )

        return HTMLDocument(
            has_doctype=found_doctype,
            root_tag_valid=found_root,
            root=root,
        )

    def _build_children(self, root: Tag) -> List[ElementBase]:
        """
        Builds the element tree below `root` in post-order with an explicit stack.

        html.parser nests unclosed tags (`<p>`, `<font>`, `<div>`) instead of
        closing them, so legacy pages can be thousands of levels deep. Each
        node's text is assembled once from its direct strings and the text of
        its already built children, matching `get_text(" ", strip=True)`.
        """
        top: List[ElementBase] = []
        # Frame: (tag, remaining children, built child elements, text parts)
        stack = [(root, iter(root.children), top, [])]

        while stack:
            tag, remaining, built, parts = stack[-1]
            child = next(remaining, None)

            if child is None:
                stack.pop()
                if not stack:
                    break
                text = " ".join(parts)
                parent = stack[-1]
                parent[2].append(self._make_element(tag, built, text))
                if text and tag.interesting_string_types == parent[0].interesting_string_types:
                    parent[3].append(text)
            elif isinstance(child, Tag):
                stack.append((child, iter(child.children), [], []))
            elif self._is_text_of(tag, child):
                stripped = child.strip()
                if stripped:
                    parts.append(stripped)

        return top

    @staticmethod
    def _is_text_of(tag: Tag, node: PageElement) -> bool:
        # Same filter as Tag.get_text: skips comments, doctypes and script bodies outside <script>
        types = tag.interesting_string_types
        if isinstance(types, type):
            return type(node) is types
        return type(node) in types

    @staticmethod
    def _make_element(tag: Tag, children: List[ElementBase], text: str) -> ElementBase:
        # Retrieve specific parser from registry if available
        parser = DOMRegistry.get_parser(tag.name)
        if parser:
            return parser(tag, children, text)

        # Fallback for generic elements
        return ElementBase(tag=tag.name, attrs=tag.attrs, text=text, children=children)
