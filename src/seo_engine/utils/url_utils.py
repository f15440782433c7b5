# src/seo_engine/utils/url_utils.py
from urllib.parse import urlparse, ParseResult


class InvalidSourceUrlError(ValueError):
    """Raised when the URL a document was fetched from is not an absolute URL."""


class UrlUtils:
    """A collection of static methods for source URL handling."""

    @staticmethod
    def parse_source_url(url: str) -> ParseResult:
        """
        Parses and validates the source URL of a document.
        A scheme and a hostname are required.
        """
        if not isinstance(url, str) or not url.strip():
            raise InvalidSourceUrlError(f"Source URL must be a non-empty string, got {url!r}")

        try:
            parsed = urlparse(url.strip())
            hostname = parsed.hostname
        except ValueError as e:
            raise InvalidSourceUrlError(f"Could not parse source URL {url!r}: {e}") from e

        if not parsed.scheme or not hostname:
            raise InvalidSourceUrlError(f"Source URL must be absolute (scheme and host): {url!r}")
        return parsed

    @staticmethod
    def get_hostname(url: str) -> str:
        """Lower-cased hostname of a validated source URL."""
        return UrlUtils.parse_source_url(url).hostname

    @staticmethod
    def is_https(url: str) -> bool:
        return UrlUtils.parse_source_url(url).scheme.lower() == "https"
