from typing import List, Optional
from urllib.parse import urljoin, urlparse
from bs4 import Tag
from ..core import ElementBase, ElementDefinition


class LinkElement(ElementBase):
    """
    Data model for anchor (<a>) tags.
    """
    tag: str = "a"

    @property
    def href(self) -> Optional[str]:
        """Convenience property to access the href attribute."""
        return self.attrs.get('href')

    @property
    def has_href(self) -> bool:
        return bool(self.href and self.href.strip())

    def is_internal(self, source_url: str, source_host: str) -> bool:
        """
        A link is internal when its href is root-relative or when it resolves
        to the same hostname as the page it was found on.
        Hrefs that cannot be resolved count as external.
        """
        href = (self.href or "").strip()
        if href.startswith('/'):
            return True
        try:
            target_host = urlparse(urljoin(source_url, href)).hostname
        except ValueError:
            return False
        return bool(target_host) and target_host == source_host


def parse_link(tag: Tag, children: List[ElementBase], text: str) -> LinkElement:
    """Parses a <a> tag into the LinkElement model."""
    return LinkElement(
        tag="a",
        attrs=tag.attrs,
        text=text,
        children=children
    )


DEFINITION = ElementDefinition(
    tag_names=("a",),
    model=LinkElement,
    parser=parse_link,
)
