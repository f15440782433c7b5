from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from seo_engine.model import AnalysisResult, ContentMetrics, SeoFeatures
from seo_engine.services.content_analysis_service import ContentAnalysisService
from seo_engine.utils.config_loader import ContentSettings, ScoringSettings

logger = logging.getLogger(__name__)


class ScoringService:
    """
    Maps SeoFeatures to a 0-100 score and ordered recommendations.

    Every rule contributes one deduction and one recommendation, evaluated in
    the order title, meta description, H1 count, missing alt text. Content
    metrics only add advice; they never change the score.
    """

    def __init__(
            self,
            settings: Optional[ScoringSettings] = None,
            content_settings: Optional[ContentSettings] = None
    ):
        self.settings = settings or ScoringSettings()
        self.content_service = ContentAnalysisService(content_settings)

    def evaluate(self, features: SeoFeatures, content: Optional[ContentMetrics] = None) -> AnalysisResult:
        deductions, recommendations = self._apply_rules(features)
        score = self._clamp(100 - sum(deductions))

        if content is not None:
            recommendations.extend(self.content_service.generate_recommendations(content))

        logger.debug("Scored page: %d (%d recommendations)", score, len(recommendations))
        return AnalysisResult(
            **{name: getattr(features, name) for name in SeoFeatures.model_fields},
            score=score,
            recommendations=recommendations,
        )

    def score(self, features: SeoFeatures) -> int:
        deductions, _ = self._apply_rules(features)
        return self._clamp(100 - sum(deductions))

    @staticmethod
    def _clamp(score: int) -> int:
        return max(0, min(100, score))

    def _apply_rules(self, features: SeoFeatures) -> Tuple[List[int], List[str]]:
        s = self.settings
        deductions: List[int] = []
        recommendations: List[str] = []

        title_len = len(features.title)
        if not features.title:
            deductions.append(s.missing_title_penalty)
            recommendations.append("Add a title tag to your page")
        elif not s.title_min_len <= title_len <= s.title_max_len:
            deductions.append(s.title_length_penalty)
            recommendations.append(
                f"Title should be between {s.title_min_len}-{s.title_max_len} characters "
                f"(currently {title_len})"
            )

        desc_len = len(features.meta_description)
        if not features.meta_description:
            deductions.append(s.missing_meta_desc_penalty)
            recommendations.append("Add a meta description to your page")
        elif not s.meta_desc_min_len <= desc_len <= s.meta_desc_max_len:
            deductions.append(s.meta_desc_length_penalty)
            recommendations.append(
                f"Meta description should be between {s.meta_desc_min_len}-{s.meta_desc_max_len} characters "
                f"(currently {desc_len})"
            )

        h1_count = len(features.headings.h1)
        if h1_count == 0:
            deductions.append(s.missing_h1_penalty)
            recommendations.append("Add at least one H1 heading")
        elif h1_count > 1:
            deductions.append(s.multiple_h1_penalty)
            recommendations.append(f"Use only one H1 heading per page (found {h1_count})")

        missing_alt = features.images.without_alt
        if missing_alt > 0:
            deductions.append(min(s.missing_alt_penalty_cap, s.missing_alt_penalty_per_image * missing_alt))
            recommendations.append(f"Add alt text to {missing_alt} images missing descriptions")

        return deductions, recommendations
