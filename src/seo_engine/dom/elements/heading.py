from typing import List
from bs4 import Tag
from ..core import ElementBase, ElementDefinition


class HeadingElement(ElementBase):
    """
    Model representing a heading element (h1-h6).
    Stores the heading level for structural analysis.
    """
    level: int


def parse_heading(tag: Tag, children: List[ElementBase], text: str) -> HeadingElement:
    """
    Parses heading tags and determines their hierarchy level (e.g., h1 -> 1).
    """
    try:
        level = int(tag.name[1])
    except (ValueError, IndexError, TypeError):
        level = 0

    return HeadingElement(
        tag=tag.name,
        attrs=tag.attrs,
        text=text,
        children=children,
        level=level
    )


DEFINITION = ElementDefinition(
    tag_names=("h1", "h2", "h3", "h4", "h5", "h6"),
    model=HeadingElement,
    parser=parse_heading,
)
