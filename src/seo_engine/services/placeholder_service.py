"""
Placeholder results for hosts that choose to show demo data when a page
cannot be fetched. The engine never does this on its own; these helpers only
make sure such data is always visibly marked as synthetic.
"""
from __future__ import annotations

from typing import Union

from seo_engine.model import AnalysisResult, HeadingSet, ImageStats, LinkStats, PerformanceResult

SYNTHETIC_NOTICE = (
    "⚠️ Demo Mode: Using sample data as external fetch failed. "
    "In production, this would analyze the actual website."
)


def mark_as_synthetic(result: AnalysisResult) -> AnalysisResult:
    """Returns a copy flagged as synthetic with the notice as first recommendation."""
    if result.is_synthetic:
        return result
    return result.model_copy(update={
        "is_synthetic": True,
        "recommendations": [SYNTHETIC_NOTICE, *result.recommendations],
    })


def build_placeholder_analysis(url: str) -> AnalysisResult:
    """Sample analysis for `url`, already marked as synthetic."""
    sample = AnalysisResult(
        title="Example Website - Your Gateway to Quality Content",
        meta_description=(
            "Welcome to Example.com, your premier destination for quality content, "
            "resources, and information. Discover what makes us unique."
        ),
        headings=HeadingSet(
            h1=["Welcome to Example.com"],
            h2=["About Our Services", "Why Choose Us", "Get Started Today"],
            h3=["Quality Content", "Expert Team", "24/7 Support", "Free Resources", "Customer Testimonials"],
        ),
        images=ImageStats(total=8, with_alt=6, without_alt=2),
        links=LinkStats(internal=12, external=4, total=16),
        score=78,
        recommendations=[
            "Add alt text to 2 images missing descriptions",
            "Consider adding more internal links to improve site navigation",
            f"Verify the analysis of {url} once the page can be fetched",
        ],
    )
    return mark_as_synthetic(sample)


def build_placeholder_performance() -> PerformanceResult:
    return PerformanceResult(
        load_time_ms=1240,
        first_contentful_paint_ms=620,
        largest_contentful_paint_ms=980,
        cumulative_layout_shift=0.045,
        score=85,
    )


def is_synthetic(result: Union[AnalysisResult, PerformanceResult]) -> bool:
    """Performance results are always estimates; analyses only when marked."""
    if isinstance(result, PerformanceResult):
        return result.is_estimate
    return result.is_synthetic
