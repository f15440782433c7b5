# src/seo_engine/dom/models.py
from typing import Iterator, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from .core import ElementBase


class HTMLDocument(BaseModel):
    """
    Represents a parsed HTML document.

    Holds the element tree under a synthetic '#document' root and offers the
    query surface the analysis services rely on: ordered element enumeration,
    tag filtering, attribute lookup and text extraction. Documents are frozen
    and owned by the analysis call that built them.
    """
    model_config = ConfigDict(frozen=True)

    has_doctype: bool = False
    root_tag_valid: bool = False
    root: ElementBase = Field(default_factory=lambda: ElementBase(tag="#document"))

    @property
    def is_empty(self) -> bool:
        return not self.root.children

    # --- Enumeration & Filtering ---

    def iter_elements(self) -> Iterator[ElementBase]:
        """Yields every element in document order."""
        return self.root.iter_descendants()

    def find_all(self, *tags: str, **attrs: str) -> List[ElementBase]:
        """
        Returns all elements matching one of the tag names, in document order.

        Keyword arguments filter on attribute values (case-insensitive).
        Use `rel=` style tokens for multi-valued attributes; the value must be
        one of the tokens. Trailing underscores are dropped, so `type_=` can be
        used for the `type` attribute.
        """
        wanted = {t.lower() for t in tags}
        matches = []
        for el in self.iter_elements():
            if wanted and el.tag not in wanted:
                continue
            if all(self._attr_matches(el, name, value) for name, value in attrs.items()):
                matches.append(el)
        return matches

    def find(self, *tags: str, **attrs: str) -> Optional[ElementBase]:
        """Returns the first match of `find_all`, or None."""
        wanted = {t.lower() for t in tags}
        for el in self.iter_elements():
            if wanted and el.tag not in wanted:
                continue
            if all(self._attr_matches(el, name, value) for name, value in attrs.items()):
                return el
        return None

    # --- Attribute & Text Lookup ---

    def get_attr(self, tag: str, attr: str, default: Optional[str] = None, **match: str) -> Optional[str]:
        """
        Attribute lookup by tag + attribute name on the first matching element,
        e.g. get_attr('meta', 'content', name='description').
        """
        el = self.find(tag, **match)
        if el is None:
            return default
        return el.get_attr(attr, default)

    def text_of(self, tag: str) -> str:
        """Text content of the first element with the given tag."""
        el = self.find(tag)
        return el.text if el else ""

    @staticmethod
    def _attr_matches(el: ElementBase, name: str, expected: str) -> bool:
        name = name.rstrip('_')
        if name in ('rel', 'class'):
            return el.has_token(name, expected)
        value = el.get_attr(name)
        return value is not None and value.strip().lower() == expected.lower()
