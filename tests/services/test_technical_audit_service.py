# tests/services/test_technical_audit_service.py
import pytest

from seo_engine.dom.builder import DOMBuilder
from seo_engine.model import Severity
from seo_engine.services.technical_audit_service import (
    TechnicalAuditService,
    check_heading_hierarchy,
    check_mobile_readiness,
    check_page_speed,
)
from seo_engine.utils.url_utils import InvalidSourceUrlError

COMPLETE_HEAD = """<!DOCTYPE html><html lang="en"><head>
<meta name="viewport" content="width=device-width, initial-scale=1">
<link rel="canonical" href="https://example.com/">
<link rel="sitemap" type="application/xml" href="/sitemap.xml">
<meta property="og:title" content="Title">
<meta property="og:description" content="Description">
<meta property="og:image" content="https://example.com/image.png">
<meta name="twitter:card" content="summary">
<script type="application/ld+json">{"@context": "https://schema.org", "@type": "WebPage"}</script>
</head><body>{body}</body></html>"""


@pytest.fixture
def builder():
    return DOMBuilder()


@pytest.fixture
def auditor():
    return TechnicalAuditService()


def codes(issues):
    return [issue.code for issue in issues]


def test_bare_page_on_http_fails_every_check_in_order(builder, auditor):
    """Alle checks falen, in vaste volgorde."""
    doc = builder.parse_doc("<html><head><title>x</title></head><body><h1>A</h1><h3>B</h3></body></html>")
    issues = auditor.run_audit(doc, "http://example.com")

    assert codes(issues) == [
        "NOT_HTTPS",
        "MISSING_CANONICAL",
        "MISSING_OG_TITLE",
        "MISSING_OG_DESCRIPTION",
        "MISSING_OG_IMAGE",
        "MISSING_TWITTER_CARD",
        "MISSING_STRUCTURED_DATA",
        "MISSING_SITEMAP_LINK",
        "MISSING_VIEWPORT",
        "MISSING_LANG",
        "HEADING_SKIP",
    ]
    assert issues[0].severity == Severity.ERROR
    assert [i.severity for i in issues[2:8]] == [Severity.INFO] * 6
    assert issues[8].severity == Severity.WARNING
    assert issues[9].element == "<html>"


def test_complete_page_has_no_issues(builder, auditor):
    doc = builder.parse_doc(COMPLETE_HEAD.replace("{body}", "<h1>A</h1><h2>B</h2><h3>C</h3><h2>D</h2>"))
    assert auditor.run_audit(doc, "https://example.com/") == []


def test_noindex_is_reported_with_element(builder, auditor):
    html = COMPLETE_HEAD.replace("<head>", '<head><meta name="robots" content="noindex, nofollow">')
    issues = auditor.run_audit(builder.parse_doc(html.replace("{body}", "")), "https://example.com/")
    assert codes(issues) == ["NOINDEX"]
    assert issues[0].severity == Severity.WARNING
    assert issues[0].element == '<meta name="robots" content="noindex, nofollow">'


def test_index_follow_robots_is_fine(builder, auditor):
    html = COMPLETE_HEAD.replace("<head>", '<head><meta name="robots" content="index, follow">')
    assert auditor.run_audit(builder.parse_doc(html.replace("{body}", "")), "https://example.com/") == []


def test_missing_open_graph_tags_are_reported_individually(builder, auditor):
    html = COMPLETE_HEAD.replace('<meta property="og:description" content="Description">', "")
    issues = auditor.run_audit(builder.parse_doc(html.replace("{body}", "")), "https://example.com/")
    assert codes(issues) == ["MISSING_OG_DESCRIPTION"]


def test_heading_hierarchy_reports_first_skip_only(builder):
    doc = builder.parse_doc("<h1>Top</h1><h3>Skipped</h3><h6>Again</h6>")
    issues = check_heading_hierarchy(doc, "https://example.com/")
    assert len(issues) == 1
    assert issues[0].description == "Heading hierarchy skip detected: H3"
    assert issues[0].element == "Skipped"


def test_heading_hierarchy_allows_going_back_up(builder):
    doc = builder.parse_doc("<h2>Start</h2><h3>a</h3><h4>b</h4><h2>c</h2><h3>d</h3>")
    assert check_heading_hierarchy(doc, "https://example.com/") == []


def test_audit_requires_valid_url(builder, auditor):
    with pytest.raises(InvalidSourceUrlError):
        auditor.run_audit(builder.parse_doc("<html></html>"), "www.example.com")


def test_audit_is_idempotent(builder, auditor):
    html = "<html><body><h1>A</h1><h4>B</h4></body></html>"
    first = auditor.run_audit(builder.parse_doc(html), "http://example.com")
    second = auditor.run_audit(builder.parse_doc(html), "http://example.com")
    assert first == second


def test_possible_codes_include_standalone_checks(auditor):
    all_codes = auditor.get_all_possible_codes()
    assert {"NOT_HTTPS", "HEADING_SKIP", "FIXED_WIDTH_ELEMENTS", "SLOW_PAGE_LOAD"} <= set(all_codes)
    assert all_codes == sorted(all_codes)


# --- Mobile readiness ---

def test_mobile_readiness_without_viewport_is_error(builder):
    issues = check_mobile_readiness(builder.parse_doc("<html><body><p>x</p></body></html>"))
    assert codes(issues) == ["MISSING_VIEWPORT"]
    assert issues[0].severity == Severity.ERROR


def test_mobile_readiness_non_responsive_viewport(builder):
    issues = check_mobile_readiness(builder.parse_doc('<meta name="viewport" content="initial-scale=1">'))
    assert codes(issues) == ["VIEWPORT_NOT_RESPONSIVE"]
    assert issues[0].severity == Severity.WARNING


def test_mobile_readiness_counts_fixed_pixel_widths(builder):
    html = (
        '<meta name="viewport" content="width=device-width, initial-scale=1">'
        '<img src="x.png" width="600"><div style="width: 300px">a</div>'
        '<table width="100%"></table><div style="max-width:50%">b</div><p>c</p>'
    )
    issues = check_mobile_readiness(builder.parse_doc(html))
    assert codes(issues) == ["FIXED_WIDTH_ELEMENTS"]
    assert issues[0].description == "2 elements with fixed pixel widths found"


def test_service_exposes_mobile_readiness(builder, auditor):
    doc = builder.parse_doc('<meta name="viewport" content="width=device-width">')
    assert auditor.check_mobile_readiness(doc) == []


# --- Page speed ---

@pytest.mark.parametrize("load_time,expected", [
    (3500, ["SLOW_PAGE_LOAD"]),
    (3001, ["SLOW_PAGE_LOAD"]),
    (3000, ["MODERATE_PAGE_LOAD"]),
    (2000, ["MODERATE_PAGE_LOAD"]),
    (1500, []),
    (200, []),
])
def test_page_speed_thresholds(load_time, expected):
    assert codes(check_page_speed(load_time)) == expected


def test_page_speed_names_measured_value(auditor):
    slow = auditor.check_page_speed(4200)[0]
    assert slow.severity == Severity.ERROR
    assert "4200ms" in slow.description
    moderate = auditor.check_page_speed(1800)[0]
    assert moderate.severity == Severity.WARNING
    assert "1800ms" in moderate.description
