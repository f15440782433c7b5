from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class HeadingSet(BaseModel):
    """Heading texts grouped per level, in document order."""
    model_config = ConfigDict(frozen=True)

    h1: List[str] = Field(default_factory=list)
    h2: List[str] = Field(default_factory=list)
    h3: List[str] = Field(default_factory=list)


class ImageStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: int = Field(default=0, ge=0)
    with_alt: int = Field(default=0, ge=0)
    without_alt: int = Field(default=0, ge=0)

    @model_validator(mode='after')
    def check_totals(self):
        if self.with_alt + self.without_alt != self.total:
            raise ValueError("with_alt + without_alt must equal total")
        return self


class LinkStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    internal: int = Field(default=0, ge=0)
    external: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)

    @model_validator(mode='after')
    def check_totals(self):
        if self.internal + self.external != self.total:
            raise ValueError("internal + external must equal total")
        return self


class SeoFeatures(BaseModel):
    """
    On-page SEO features extracted from a single document.
    """
    model_config = ConfigDict(frozen=True)

    title: str = ""
    meta_description: str = ""
    headings: HeadingSet = Field(default_factory=HeadingSet)
    images: ImageStats = Field(default_factory=ImageStats)
    links: LinkStats = Field(default_factory=LinkStats)


class AnalysisResult(SeoFeatures):
    """
    SeoFeatures plus the rule-based score and the ordered recommendations.
    `is_synthetic` is only ever True for placeholder data substituted by a caller.
    """
    score: int = Field(ge=0, le=100)
    recommendations: List[str] = Field(default_factory=list)
    is_synthetic: bool = False


class ContentMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    word_count: int = Field(default=0, ge=0)
    readability_score: float = Field(default=0, ge=0, le=100)
    keyword_density: Dict[str, float] = Field(default_factory=dict)
    duplicate_content: bool = False
    content_gaps: List[str] = Field(default_factory=list)


class TechnicalIssue(BaseModel):
    """
    A single finding of the technical audit.

    `code` is the stable identifier (e.g. 'MISSING_CANONICAL'); `severity`,
    `category`, `description` and `recommendation` are meant for humans.
    """
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    code: str
    severity: Severity
    category: str
    description: str
    element: Optional[str] = None
    recommendation: str


class PerformanceResult(BaseModel):
    """
    Load-time based performance estimate.

    Only `load_time_ms` is measured. FCP, LCP and CLS are synthetic values
    derived from it (or injected) and must never be presented as real Web Vitals.
    """
    model_config = ConfigDict(frozen=True)

    load_time_ms: int = Field(ge=0)
    first_contentful_paint_ms: float = Field(ge=0)
    largest_contentful_paint_ms: float = Field(ge=0)
    cumulative_layout_shift: float = Field(ge=0, lt=1)
    score: float = Field(ge=0, le=100)
    is_estimate: bool = True


class PageReport(BaseModel):
    """Convenience bundle of the independently computed results for one page."""
    model_config = ConfigDict(frozen=True)

    url: str
    analysis: AnalysisResult
    issues: List[TechnicalIssue] = Field(default_factory=list)
    content: ContentMetrics
    performance: Optional[PerformanceResult] = None
