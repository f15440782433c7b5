from typing import List, Optional
from bs4 import Tag
from ..core import ElementBase, ElementDefinition


class ImageElement(ElementBase):
    tag: str = "img"

    @property
    def src(self) -> str: return self.attrs.get('src', '')

    @property
    def alt(self) -> Optional[str]: return self.attrs.get('alt')

    @property
    def has_alt(self) -> bool:
        """alt=None means the attribute is missing, a blank alt counts as missing too."""
        return self.alt is not None and bool(self.alt.strip())


def parse_image(tag: Tag, children: List[ElementBase], text: str) -> ImageElement:
    return ImageElement(tag="img", attrs=tag.attrs, children=children)


DEFINITION = ElementDefinition(
    tag_names=("img",),
    model=ImageElement,
    parser=parse_image,
)
