from typing import List
from bs4 import Tag
from ..core import ElementBase, ElementDefinition


class MetaElement(ElementBase):
    """
    Model for <meta> tags. Covers both name-based (description, robots,
    viewport, twitter:*) and property-based (og:*) metadata.
    """
    tag: str = "meta"

    @property
    def name(self) -> str:
        return (self.attrs.get('name') or '').strip().lower()

    @property
    def meta_property(self) -> str:
        return (self.attrs.get('property') or '').strip().lower()

    @property
    def content(self) -> str:
        return self.attrs.get('content') or ''


def parse_meta(tag: Tag, children: List[ElementBase], text: str) -> MetaElement:
    return MetaElement(tag="meta", attrs=tag.attrs, children=children)


DEFINITION = ElementDefinition(
    tag_names=("meta",),
    model=MetaElement,
    parser=parse_meta,
)
