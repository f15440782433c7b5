# src/seo_engine/dom/core.py
from typing import Any, Dict, Iterator, List, Callable, Type, Optional, Sequence, Set
from pydantic import BaseModel, ConfigDict, Field, field_validator
from bs4 import Tag


def audit_spec(codes: List[str]):
    """
    Decorator to declare which issue codes a specific audit check returns.
    Lets the TechnicalAuditService report every code it can emit.
    """
    def decorator(func):
        func.defined_codes = codes
        return func
    return decorator


class ElementBase(BaseModel):
    """
    Base data model representing a generic DOM element in the simplified tree.

    Elements are frozen once built; the tree is only ever read by the analysis
    services.
    """
    model_config = ConfigDict(frozen=True)

    tag: str
    attrs: Dict[str, str] = Field(default_factory=dict)
    text: str = ""
    children: List['ElementBase'] = Field(default_factory=list)

    @field_validator('attrs', mode='before')
    @classmethod
    def normalize_attrs(cls, v: Any) -> Dict[str, str]:
        """
        Flattens multi-valued attributes (bs4 returns rel/class as lists) into
        a single space separated string and lower-cases attribute names.
        """
        if not v:
            return {}
        out = {}
        for key, value in dict(v).items():
            if isinstance(value, (list, tuple)):
                value = " ".join(str(part) for part in value)
            out[str(key).lower()] = "" if value is None else str(value)
        return out

    @property
    def is_empty(self) -> bool:
        """Returns True if the element contains no text and no children."""
        return not self.text and not self.children

    def get_attr(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Attribute lookup; attribute names are stored lower-cased."""
        return self.attrs.get(name.lower(), default)

    def has_attr(self, name: str) -> bool:
        return name.lower() in self.attrs

    def has_token(self, name: str, token: str) -> bool:
        """True if a space separated attribute (e.g. rel) contains the token."""
        value = self.attrs.get(name.lower())
        if value is None:
            return False
        return token.lower() in value.lower().split()

    def iter_descendants(self) -> Iterator['ElementBase']:
        """Yields all descendants in document order (depth-first, pre-order)."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


# Signature of an element parser: (bs4 tag, already built children, full text)
ElementParser = Callable[[Tag, List[ElementBase], str], ElementBase]


class ElementDefinition:
    """
    Configuration object binding one or more HTML tags to their model and parser.
    """

    def __init__(
            self,
            tag_names: Sequence[str],
            model: Type[ElementBase],
            parser: ElementParser,
    ):
        self.tag_names: Set[str] = {name.lower() for name in tag_names}
        self.model = model
        self.parser = parser
