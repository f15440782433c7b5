"""
Technical SEO audit.

Each check is a small function over the parsed document (and, where needed,
the source URL) returning zero or more TechnicalIssue objects. The checks are
independent; TechnicalAuditService runs them in a fixed order so the same
document always produces the same issues in the same sequence.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional, Set

from seo_engine.dom.core import audit_spec
from seo_engine.dom.elements.heading import HeadingElement
from seo_engine.dom.elements.meta import MetaElement
from seo_engine.dom.models import HTMLDocument
from seo_engine.model import Severity, TechnicalIssue
from seo_engine.utils.config_loader import PerformanceSettings
from seo_engine.utils.url_utils import UrlUtils

logger = logging.getLogger(__name__)

PIXEL_STYLE_WIDTH_RE = re.compile(r'width:\s*\d+px')
PIXEL_ATTR_WIDTH_RE = re.compile(r'^\s*\d+\s*(px)?\s*$', re.IGNORECASE)

AuditCheck = Callable[[HTMLDocument, str], List[TechnicalIssue]]


def _meta(doc: HTMLDocument, name: str = "", prop: str = "") -> Optional[MetaElement]:
    """First <meta> matching a name (or og: property)."""
    for el in doc.find_all("meta"):
        if not isinstance(el, MetaElement):
            continue
        if name and el.name == name:
            return el
        if prop and el.meta_property == prop:
            return el
    return None


def _meta_content(doc: HTMLDocument, name: str = "", prop: str = "") -> str:
    el = _meta(doc, name=name, prop=prop)
    return el.content.strip() if el else ""


# --- AUDIT CHECKS ---

@audit_spec(codes=["NOT_HTTPS"])
def check_https(doc: HTMLDocument, url: str) -> List[TechnicalIssue]:
    if UrlUtils.is_https(url):
        return []
    return [TechnicalIssue(
        code="NOT_HTTPS",
        severity=Severity.ERROR,
        category="Security",
        description="Website is not using HTTPS",
        recommendation="Implement SSL certificate to secure your website",
    )]


@audit_spec(codes=["NOINDEX"])
def check_robots_meta(doc: HTMLDocument, url: str) -> List[TechnicalIssue]:
    robots = _meta(doc, name="robots")
    if robots is None or "noindex" not in robots.content.lower():
        return []
    return [TechnicalIssue(
        code="NOINDEX",
        severity=Severity.WARNING,
        category="Indexing",
        description="Page is set to noindex",
        element=f'<meta name="robots" content="{robots.content}">',
        recommendation="Remove noindex if you want this page to be indexed",
    )]


@audit_spec(codes=["MISSING_CANONICAL"])
def check_canonical(doc: HTMLDocument, url: str) -> List[TechnicalIssue]:
    """Ensures a canonical URL is defined to prevent duplicate content issues."""
    if (doc.get_attr("link", "href", default="", rel="canonical") or "").strip():
        return []
    return [TechnicalIssue(
        code="MISSING_CANONICAL",
        severity=Severity.WARNING,
        category="Duplicate Content",
        description="Missing canonical tag",
        recommendation="Add a canonical tag to prevent duplicate content issues",
    )]


OPEN_GRAPH_TAGS = (
    ("og:title", "MISSING_OG_TITLE", "title"),
    ("og:description", "MISSING_OG_DESCRIPTION", "description"),
    ("og:image", "MISSING_OG_IMAGE", "image"),
)


@audit_spec(codes=[code for _, code, _ in OPEN_GRAPH_TAGS])
def check_open_graph(doc: HTMLDocument, url: str) -> List[TechnicalIssue]:
    res = []
    for prop, code, label in OPEN_GRAPH_TAGS:
        if _meta_content(doc, prop=prop):
            continue
        res.append(TechnicalIssue(
            code=code,
            severity=Severity.INFO,
            category="Social Media",
            description=f"Missing Open Graph {label}",
            recommendation=f"Add {prop} meta tag for better social media sharing",
        ))
    return res


@audit_spec(codes=["MISSING_TWITTER_CARD"])
def check_twitter_card(doc: HTMLDocument, url: str) -> List[TechnicalIssue]:
    if _meta_content(doc, name="twitter:card"):
        return []
    return [TechnicalIssue(
        code="MISSING_TWITTER_CARD",
        severity=Severity.INFO,
        category="Social Media",
        description="Missing Twitter Card markup",
        recommendation="Add Twitter Card meta tags for better Twitter sharing",
    )]


@audit_spec(codes=["MISSING_STRUCTURED_DATA"])
def check_structured_data(doc: HTMLDocument, url: str) -> List[TechnicalIssue]:
    if doc.find("script", type_="application/ld+json") is not None:
        return []
    return [TechnicalIssue(
        code="MISSING_STRUCTURED_DATA",
        severity=Severity.INFO,
        category="Structured Data",
        description="No structured data found",
        recommendation="Add JSON-LD structured data to help search engines understand your content",
    )]


@audit_spec(codes=["MISSING_SITEMAP_LINK"])
def check_sitemap_link(doc: HTMLDocument, url: str) -> List[TechnicalIssue]:
    if (doc.get_attr("link", "href", default="", rel="sitemap") or "").strip():
        return []
    return [TechnicalIssue(
        code="MISSING_SITEMAP_LINK",
        severity=Severity.INFO,
        category="Indexing",
        description="No sitemap reference found",
        recommendation="Add a link to your XML sitemap in the HTML head",
    )]


@audit_spec(codes=["MISSING_VIEWPORT"])
def check_viewport(doc: HTMLDocument, url: str) -> List[TechnicalIssue]:
    if _meta_content(doc, name="viewport"):
        return []
    return [TechnicalIssue(
        code="MISSING_VIEWPORT",
        severity=Severity.WARNING,
        category="Mobile",
        description="Missing viewport meta tag",
        recommendation="Add viewport meta tag for mobile responsiveness",
    )]


@audit_spec(codes=["MISSING_LANG"])
def check_language(doc: HTMLDocument, url: str) -> List[TechnicalIssue]:
    if (doc.get_attr("html", "lang", default="") or "").strip():
        return []
    return [TechnicalIssue(
        code="MISSING_LANG",
        severity=Severity.WARNING,
        category="Accessibility",
        description="Missing language declaration",
        element="<html>",
        recommendation='Add lang attribute to HTML tag (e.g., <html lang="en">)',
    )]


@audit_spec(codes=["HEADING_SKIP"])
def check_heading_hierarchy(doc: HTMLDocument, url: str) -> List[TechnicalIssue]:
    """
    Reports the first heading that skips a level (e.g. h1 followed by h3).
    Only the first violation is reported.
    """
    previous_level = 0
    for heading in doc.find_all("h1", "h2", "h3", "h4", "h5", "h6"):
        if not isinstance(heading, HeadingElement):
            continue
        if previous_level > 0 and heading.level > previous_level + 1:
            return [TechnicalIssue(
                code="HEADING_SKIP",
                severity=Severity.WARNING,
                category="Content Structure",
                description=f"Heading hierarchy skip detected: {heading.tag.upper()}",
                element=heading.text,
                recommendation="Maintain proper heading hierarchy (h1 → h2 → h3, etc.)",
            )]
        previous_level = heading.level
    return []


# Execution order of the document audit.
AUDIT_CHECKS: List[AuditCheck] = [
    check_https,
    check_robots_meta,
    check_canonical,
    check_open_graph,
    check_twitter_card,
    check_structured_data,
    check_sitemap_link,
    check_viewport,
    check_language,
    check_heading_hierarchy,
]


class TechnicalAuditService:
    """
    Runs the technical SEO checks over a parsed document.
    """

    def __init__(
            self,
            checks: Optional[List[AuditCheck]] = None,
            performance_settings: Optional[PerformanceSettings] = None
    ):
        self.checks = list(checks) if checks is not None else list(AUDIT_CHECKS)
        self.performance_settings = performance_settings or PerformanceSettings()

    def run_audit(self, doc: HTMLDocument, url: str) -> List[TechnicalIssue]:
        """
        Runs every check in order and returns the findings.

        Raises:
            InvalidSourceUrlError: If `url` has no scheme or host.
        """
        UrlUtils.parse_source_url(url)

        issues: List[TechnicalIssue] = []
        for check in self.checks:
            issues.extend(check(doc, url))

        logger.debug("Technical audit of %s: %d issues", url, len(issues))
        return issues

    def get_all_possible_codes(self) -> List[str]:
        codes: Set[str] = set()
        for check in self.checks:
            codes.update(getattr(check, "defined_codes", []))
        codes.update(check_mobile_readiness.defined_codes)
        codes.update(check_page_speed.defined_codes)
        return sorted(codes)

    def check_mobile_readiness(self, doc: HTMLDocument) -> List[TechnicalIssue]:
        return check_mobile_readiness(doc)

    def check_page_speed(self, load_time_ms: int) -> List[TechnicalIssue]:
        return check_page_speed(load_time_ms, self.performance_settings)


# --- STANDALONE CHECKS ---

def _has_pixel_width(el) -> bool:
    width = el.get_attr("width")
    if width is not None and PIXEL_ATTR_WIDTH_RE.match(width):
        return True
    style = el.get_attr("style")
    return style is not None and PIXEL_STYLE_WIDTH_RE.search(style) is not None


@audit_spec(codes=["MISSING_VIEWPORT", "VIEWPORT_NOT_RESPONSIVE", "FIXED_WIDTH_ELEMENTS"])
def check_mobile_readiness(doc: HTMLDocument) -> List[TechnicalIssue]:
    """Viewport configuration and fixed pixel widths that break small screens."""
    res = []
    viewport = _meta_content(doc, name="viewport")

    if not viewport:
        res.append(TechnicalIssue(
            code="MISSING_VIEWPORT",
            severity=Severity.ERROR,
            category="Mobile",
            description="Missing viewport meta tag",
            recommendation='Add <meta name="viewport" content="width=device-width, initial-scale=1">',
        ))
    elif "width=device-width" not in viewport.replace(" ", "").lower():
        res.append(TechnicalIssue(
            code="VIEWPORT_NOT_RESPONSIVE",
            severity=Severity.WARNING,
            category="Mobile",
            description="Viewport may not be optimized for mobile",
            element=f'<meta name="viewport" content="{viewport}">',
            recommendation="Ensure viewport includes width=device-width",
        ))

    fixed = sum(1 for el in doc.iter_elements() if _has_pixel_width(el))
    if fixed:
        res.append(TechnicalIssue(
            code="FIXED_WIDTH_ELEMENTS",
            severity=Severity.WARNING,
            category="Mobile",
            description=f"{fixed} elements with fixed pixel widths found",
            recommendation="Use responsive units (%, em, rem, vw) instead of fixed pixel widths",
        ))
    return res


@audit_spec(codes=["SLOW_PAGE_LOAD", "MODERATE_PAGE_LOAD"])
def check_page_speed(load_time_ms: int, settings: Optional[PerformanceSettings] = None) -> List[TechnicalIssue]:
    """Classifies a measured load time."""
    settings = settings or PerformanceSettings()
    if load_time_ms > settings.slow_load_ms:
        return [TechnicalIssue(
            code="SLOW_PAGE_LOAD",
            severity=Severity.ERROR,
            category="Performance",
            description=f"Slow page load time: {load_time_ms}ms",
            recommendation="Optimize images, minify CSS/JS, enable compression, use CDN",
        )]
    if load_time_ms > settings.moderate_load_ms:
        return [TechnicalIssue(
            code="MODERATE_PAGE_LOAD",
            severity=Severity.WARNING,
            category="Performance",
            description=f"Moderate page load time: {load_time_ms}ms",
            recommendation="Consider optimizing images and reducing server response time",
        )]
    return []
