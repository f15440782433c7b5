from __future__ import annotations

import logging

from seo_engine.dom.models import HTMLDocument
from seo_engine.dom.elements.image import ImageElement
from seo_engine.dom.elements.link import LinkElement
from seo_engine.model import HeadingSet, ImageStats, LinkStats, SeoFeatures
from seo_engine.utils.url_utils import UrlUtils

logger = logging.getLogger(__name__)


class FeatureExtractService:
    """
    Pulls the on-page SEO features out of a parsed HTMLDocument.
    Stateless; one instance can serve any number of documents.
    """

    def extract(self, doc: HTMLDocument, url: str) -> SeoFeatures:
        """
        Extracts title, meta description, headings, image and link statistics.

        Raises:
            InvalidSourceUrlError: If `url` is not an absolute URL.
        """
        hostname = UrlUtils.get_hostname(url)

        features = SeoFeatures(
            title=self.extract_page_title(doc),
            meta_description=self.extract_meta_description(doc),
            headings=self.extract_headings(doc),
            images=self.extract_images(doc),
            links=self.extract_links(doc, url, hostname),
        )
        logger.debug(
            "Extracted features for %s: %d images, %d links",
            url, features.images.total, features.links.total
        )
        return features

    # -------- SEO & Meta Extraction --------

    @staticmethod
    def extract_page_title(doc: HTMLDocument) -> str:
        """Retrieves the text of the first <title> tag."""
        return doc.text_of("title")

    @staticmethod
    def extract_meta_description(doc: HTMLDocument) -> str:
        """Retrieves the content of the <meta name='description'> tag."""
        return (doc.get_attr("meta", "content", default="", name="description") or "").strip()

    @staticmethod
    def extract_headings(doc: HTMLDocument) -> HeadingSet:
        """Groups h1-h3 texts per level, keeping document order."""
        grouped = {"h1": [], "h2": [], "h3": []}
        for el in doc.find_all("h1", "h2", "h3"):
            grouped[el.tag].append(el.text)
        return HeadingSet(**grouped)

    # -------- Images & Links --------

    @staticmethod
    def extract_images(doc: HTMLDocument) -> ImageStats:
        images = [el for el in doc.find_all("img") if isinstance(el, ImageElement)]
        with_alt = sum(1 for img in images if img.has_alt)
        return ImageStats(total=len(images), with_alt=with_alt, without_alt=len(images) - with_alt)

    @staticmethod
    def extract_links(doc: HTMLDocument, url: str, source_host: str) -> LinkStats:
        """Counts anchors with a non-empty href, split into internal and external."""
        links = [el for el in doc.find_all("a") if isinstance(el, LinkElement) and el.has_href]
        internal = sum(1 for link in links if link.is_internal(url, source_host))
        return LinkStats(internal=internal, external=len(links) - internal, total=len(links))
