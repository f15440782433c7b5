# tests/services/test_scoring_service.py
import pytest

from seo_engine.dom.builder import DOMBuilder
from seo_engine.model import ContentMetrics, HeadingSet, ImageStats, SeoFeatures
from seo_engine.services.feature_extract_service import FeatureExtractService
from seo_engine.services.scoring_service import ScoringService
from seo_engine.utils.config_loader import ScoringSettings

SOURCE_URL = "https://example.com/"
TITLE_45 = "Python packaging guide for teams and startups"
TITLE_10 = "Short page"
DESCRIPTION_140 = ("Practical advice for better search results. " * 4)[:140]


@pytest.fixture
def service():
    return ScoringService()


def score_html(service, html):
    features = FeatureExtractService().extract(DOMBuilder().parse_doc(html), SOURCE_URL)
    return service.evaluate(features)


def test_fixture_lengths():
    assert len(TITLE_45) == 45
    assert len(TITLE_10) == 10
    assert len(DESCRIPTION_140) == 140


def test_only_missing_meta_description(service):
    """Titel van 45 tekens, geen meta description, 1 H1, alle images met alt -> 80."""
    html = (
        f"<html><head><title>{TITLE_45}</title></head><body>"
        "<h1>Guide</h1>"
        '<img src="1.png" alt="One"><img src="2.png" alt="Two"><img src="3.png" alt="Three">'
        "</body></html>"
    )
    result = score_html(service, html)
    assert result.score == 80
    assert result.recommendations == ["Add a meta description to your page"]


def test_short_title_two_h1_and_missing_alts(service):
    """-10 (titel) -10 (twee H1) -12 (4 images zonder alt) -> 68."""
    html = (
        f'<html><head><title>{TITLE_10}</title><meta name="description" content="{DESCRIPTION_140}">'
        "</head><body><h1>One</h1><h1>Two</h1>"
        '<img src="1.png"><img src="2.png"><img src="3.png" alt=""><img src="4.png">'
        "</body></html>"
    )
    result = score_html(service, html)
    assert result.score == 68
    assert result.recommendations == [
        "Title should be between 30-60 characters (currently 10)",
        "Use only one H1 heading per page (found 2)",
        "Add alt text to 4 images missing descriptions",
    ]


def test_perfect_page_scores_100(service):
    features = SeoFeatures(
        title=TITLE_45,
        meta_description=DESCRIPTION_140,
        headings=HeadingSet(h1=["Only one"]),
        images=ImageStats(total=2, with_alt=2, without_alt=0),
    )
    result = service.evaluate(features)
    assert result.score == 100
    assert result.recommendations == []


def test_everything_missing(service):
    features = SeoFeatures(images=ImageStats(total=10, with_alt=0, without_alt=10))
    result = service.evaluate(features)
    assert result.score == 100 - 20 - 20 - 15 - 15
    assert result.recommendations == [
        "Add a title tag to your page",
        "Add a meta description to your page",
        "Add at least one H1 heading",
        "Add alt text to 10 images missing descriptions",
    ]


@pytest.mark.parametrize("length,penalized", [(29, True), (30, False), (60, False), (61, True)])
def test_title_length_bounds(service, length, penalized):
    features = SeoFeatures(
        title="t" * length,
        meta_description=DESCRIPTION_140,
        headings=HeadingSet(h1=["h"]),
    )
    assert service.score(features) == (90 if penalized else 100)


@pytest.mark.parametrize("length,penalized", [(119, True), (120, False), (160, False), (161, True)])
def test_meta_description_length_bounds(service, length, penalized):
    features = SeoFeatures(title=TITLE_45, meta_description="d" * length, headings=HeadingSet(h1=["h"]))
    assert service.score(features) == (90 if penalized else 100)


def test_score_is_floored_at_zero():
    harsh = ScoringService(ScoringSettings(missing_title_penalty=60, missing_meta_desc_penalty=60))
    result = harsh.evaluate(SeoFeatures())
    assert result.score == 0


def test_content_metrics_add_advice_without_changing_score(service):
    features = SeoFeatures(title=TITLE_45, meta_description=DESCRIPTION_140, headings=HeadingSet(h1=["h"]))
    content = ContentMetrics(word_count=120, readability_score=70)

    without = service.evaluate(features)
    with_content = service.evaluate(features, content)

    assert with_content.score == without.score == 100
    assert with_content.recommendations == [
        "Increase content length (current: 120 words, recommended: 300+)"
    ]


def test_result_carries_the_features(service):
    features = SeoFeatures(title=TITLE_45, headings=HeadingSet(h1=["a"], h2=["b"]))
    result = service.evaluate(features)
    assert result.title == TITLE_45
    assert result.headings.h2 == ["b"]
    assert result.is_synthetic is False
