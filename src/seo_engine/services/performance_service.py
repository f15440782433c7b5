from __future__ import annotations

import logging
import math
import random
from typing import List, Optional

from seo_engine.model import PerformanceResult
from seo_engine.utils.config_loader import PerformanceSettings

logger = logging.getLogger(__name__)


class PerformanceService:
    """
    Derives a performance estimate from one measured load time.

    This is an approximation, not a performance trace: FCP and LCP are fixed
    fractions of the load time and CLS is a pseudo-random value unless one is
    injected. Results carry `is_estimate=True` and must not be presented as
    measured Web Vitals.
    """

    def __init__(self, settings: Optional[PerformanceSettings] = None, rng: Optional[random.Random] = None):
        self.settings = settings or PerformanceSettings()
        self.rng = rng or random.Random()

    def estimate(self, load_time_ms: int, cumulative_layout_shift: Optional[float] = None) -> PerformanceResult:
        """
        Args:
            load_time_ms (int): Measured load time in milliseconds.
            cumulative_layout_shift (Optional[float]): Inject a CLS value for
                deterministic results; drawn from [0, 0.1) when omitted.

        Raises:
            TypeError: If the load time is not a number.
            ValueError: If the load time is negative or not finite.
        """
        if isinstance(load_time_ms, bool) or not isinstance(load_time_ms, (int, float)):
            raise TypeError(f"load_time_ms must be a number, got {type(load_time_ms).__name__}")
        if not math.isfinite(load_time_ms) or load_time_ms < 0:
            raise ValueError(f"load_time_ms must be a finite value >= 0, got {load_time_ms}")

        s = self.settings
        if cumulative_layout_shift is None:
            cumulative_layout_shift = self.rng.random() * s.max_estimated_cls

        score = max(0.0, 100 - (load_time_ms / s.score_ms_per_point))

        result = PerformanceResult(
            load_time_ms=int(load_time_ms),
            first_contentful_paint_ms=load_time_ms * s.fcp_ratio,
            largest_contentful_paint_ms=load_time_ms * s.lcp_ratio,
            cumulative_layout_shift=cumulative_layout_shift,
            score=min(100.0, score),
        )
        logger.debug("Performance estimate for %dms: score %.1f", result.load_time_ms, result.score)
        return result

    def get_recommendations(self, result: PerformanceResult) -> List[str]:
        s = self.settings
        recommendations = []

        if result.load_time_ms > s.slow_load_ms:
            recommendations.append("Improve server response time - page loads slowly")

        if result.first_contentful_paint_ms > s.fcp_warning_ms:
            recommendations.append("Optimize for faster First Contentful Paint")

        if result.largest_contentful_paint_ms > s.lcp_warning_ms:
            recommendations.append("Optimize Largest Contentful Paint - consider image optimization")

        if result.cumulative_layout_shift > s.cls_warning:
            recommendations.append("Reduce Cumulative Layout Shift - avoid layout shifts during loading")

        return recommendations
