# tests/services/test_performance_service.py
import random

import pytest

from seo_engine.services.performance_service import PerformanceService
from seo_engine.services.placeholder_service import (
    SYNTHETIC_NOTICE,
    build_placeholder_analysis,
    build_placeholder_performance,
    is_synthetic,
    mark_as_synthetic,
)
from seo_engine.model import AnalysisResult


@pytest.fixture
def service():
    return PerformanceService(rng=random.Random(42))


def test_estimate_with_injected_cls(service):
    result = service.estimate(1000, cumulative_layout_shift=0.05)
    assert result.load_time_ms == 1000
    assert result.first_contentful_paint_ms == pytest.approx(400)
    assert result.largest_contentful_paint_ms == pytest.approx(800)
    assert result.cumulative_layout_shift == 0.05
    assert result.score == pytest.approx(80)
    assert result.is_estimate is True


def test_estimated_cls_is_bounded(service):
    for _ in range(50):
        assert 0 <= service.estimate(500).cumulative_layout_shift < 0.1


def test_seeded_rng_is_reproducible():
    first = PerformanceService(rng=random.Random(7)).estimate(800)
    second = PerformanceService(rng=random.Random(7)).estimate(800)
    assert first == second


@pytest.mark.parametrize("load_time", [0, 1, 2500, 4999, 5000, 10_000, 10**7])
def test_score_is_bounded(service, load_time):
    score = service.estimate(load_time, cumulative_layout_shift=0).score
    assert 0 <= score <= 100


def test_zero_load_time_scores_100(service):
    assert service.estimate(0, cumulative_layout_shift=0).score == 100


def test_negative_load_time_is_rejected(service):
    with pytest.raises(ValueError):
        service.estimate(-1)
    with pytest.raises(ValueError):
        service.estimate(float("inf"))
    with pytest.raises(TypeError):
        service.estimate("1000")


def test_recommendations(service):
    slow = service.estimate(5000, cumulative_layout_shift=0.05)
    assert service.get_recommendations(slow) == [
        "Improve server response time - page loads slowly",
        "Optimize for faster First Contentful Paint",
        "Optimize Largest Contentful Paint - consider image optimization",
    ]
    assert service.get_recommendations(service.estimate(1000, cumulative_layout_shift=0.01)) == []


# --- Placeholder data ---

def test_mark_as_synthetic_prepends_notice():
    result = AnalysisResult(score=90, recommendations=["Add a meta description to your page"])
    marked = mark_as_synthetic(result)

    assert marked.is_synthetic is True
    assert marked.recommendations == [SYNTHETIC_NOTICE, "Add a meta description to your page"]
    assert result.is_synthetic is False
    assert mark_as_synthetic(marked) == marked


def test_placeholder_results_are_flagged():
    analysis = build_placeholder_analysis("https://example.com/")
    assert is_synthetic(analysis)
    assert analysis.recommendations[0] == SYNTHETIC_NOTICE
    assert analysis.images.with_alt + analysis.images.without_alt == analysis.images.total

    performance = build_placeholder_performance()
    assert is_synthetic(performance)
