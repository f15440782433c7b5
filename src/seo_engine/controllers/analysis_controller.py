import logging
from collections import Counter, defaultdict
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
from tqdm.auto import tqdm

from seo_engine.dom.builder import DOMBuilder
from seo_engine.model import AnalysisResult, ContentMetrics, PageReport, PerformanceResult, TechnicalIssue
from seo_engine.services.content_analysis_service import ContentAnalysisService
from seo_engine.services.feature_extract_service import FeatureExtractService
from seo_engine.services.performance_service import PerformanceService
from seo_engine.services.scoring_service import ScoringService
from seo_engine.services.technical_audit_service import TechnicalAuditService
from seo_engine.utils.config_loader import EngineSettings
from seo_engine.utils.url_utils import UrlUtils

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ["URL", "Score", "Category", "Code", "Severity", "Message"]


def _worker_analyze_page(
        page_data: Tuple[str, str, Optional[float]],
        settings_data: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Worker function analyzing a single page in a separate process.
    Returns a plain dict so results pickle cheaply.
    """
    url, html, load_time_ms = page_data
    try:
        controller = AnalysisController(EngineSettings.model_validate(settings_data))
        report = controller.analyze(url, html, load_time_ms)
        return {"url": url, "report": report.model_dump(mode="json")}
    except Exception as e:
        logger.error("Worker failed on %s: %s", url, e, exc_info=True)
        return {"url": url, "error": str(e)}


class AnalysisController:
    """
    Entry point for hosts. Exposes each analysis as an independent call and
    offers a batch mode that fans pages out over worker processes.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings()

        self.builder = DOMBuilder()
        self.feature_service = FeatureExtractService()
        self.content_service = ContentAnalysisService(self.settings.content)
        self.audit_service = TechnicalAuditService(performance_settings=self.settings.performance)
        self.scoring_service = ScoringService(self.settings.scoring, self.settings.content)
        self.performance_service = PerformanceService(self.settings.performance)

        # Batch result buffers
        self.reports: List[PageReport] = []
        self.failures: List[Dict[str, str]] = []
        self.export_rows: List[Dict[str, Any]] = []
        self.stats = defaultdict(Counter)

    # --- Independent operations ---

    def analyze_page(self, url: str, html: str, include_content: bool = False) -> AnalysisResult:
        """Feature extraction + score. Content advice is appended on request."""
        UrlUtils.parse_source_url(url)
        doc = self.builder.parse_doc(html)
        features = self.feature_service.extract(doc, url)
        content = self.content_service.analyze(html) if include_content else None
        return self.scoring_service.evaluate(features, content)

    def audit(self, url: str, html: str) -> List[TechnicalIssue]:
        UrlUtils.parse_source_url(url)
        return self.audit_service.run_audit(self.builder.parse_doc(html), url)

    def check_mobile_readiness(self, html: str) -> List[TechnicalIssue]:
        return self.audit_service.check_mobile_readiness(self.builder.parse_doc(html))

    def check_page_speed(self, load_time_ms: int) -> List[TechnicalIssue]:
        return self.audit_service.check_page_speed(load_time_ms)

    def analyze_content(self, html: str) -> ContentMetrics:
        return self.content_service.analyze(html)

    def estimate_performance(
            self, load_time_ms: int, cumulative_layout_shift: Optional[float] = None
    ) -> PerformanceResult:
        return self.performance_service.estimate(load_time_ms, cumulative_layout_shift)

    def analyze(self, url: str, html: str, load_time_ms: Optional[float] = None) -> PageReport:
        """
        Runs every analysis for one page. The document tree is built once and
        shared by the feature extraction and the audit.
        """
        UrlUtils.parse_source_url(url)
        doc = self.builder.parse_doc(html)

        features = self.feature_service.extract(doc, url)
        issues = self.audit_service.run_audit(doc, url)
        content = self.content_service.analyze(html)
        performance = None
        if load_time_ms is not None:
            performance = self.performance_service.estimate(load_time_ms)
            issues.extend(self.audit_service.check_page_speed(load_time_ms))

        return PageReport(
            url=url,
            analysis=self.scoring_service.evaluate(features),
            issues=issues,
            content=content,
            performance=performance,
        )

    # --- Batch mode ---

    def run_batch(
            self,
            df: pd.DataFrame,
            workers: Optional[int] = None,
            progress_callback=None
    ) -> Dict[str, Any]:
        """
        Analyzes every row of a DataFrame with columns `url`, `html` (or
        `content`) and optionally `load_time_ms`. Pages are independent; a
        failing page is logged and counted, never aborting the batch.
        """
        workers = workers if workers is not None else self.settings.batch.workers
        self._reset_buffers()

        tasks = [self._row_to_task(row) for row in df.to_dict("records")]
        worker = partial(_worker_analyze_page, settings_data=self.settings.model_dump())

        if workers <= 1:
            results = self._collect(map(worker, tasks), len(tasks), progress_callback)
        else:
            with ProcessPoolExecutor(max_workers=workers) as executor:
                results = self._collect(executor.map(worker, tasks), len(tasks), progress_callback)

        for result in results:
            if "error" in result:
                self.failures.append({"url": result["url"], "error": result["error"]})
                continue
            self._add_report(PageReport.model_validate(result["report"]))

        summary = self.get_summary(len(tasks))
        logger.info(
            "Batch analysis finished: %d pages, %d failed, %d issues",
            summary["total_pages"], summary["failed_pages"], summary["total_issues"]
        )
        return summary

    def _collect(self, results_iter, total: int, progress_callback=None) -> List[Dict[str, Any]]:
        collected = []
        bar = tqdm(total=total, desc="Analyzing", disable=not self.settings.batch.show_progress)
        try:
            for i, result in enumerate(results_iter):
                collected.append(result)
                bar.update(1)
                if progress_callback:
                    progress_callback(i + 1, total)
        finally:
            bar.close()
        return collected

    @staticmethod
    def _row_to_task(row: Dict[str, Any]) -> Tuple[str, str, Optional[float]]:
        html = row.get("html", row.get("content"))
        load_time = row.get("load_time_ms")
        if load_time is not None and pd.isna(load_time):
            load_time = None
        if html is not None and not isinstance(html, str) and pd.isna(html):
            html = ""
        return row["url"], html, load_time

    def _reset_buffers(self) -> None:
        self.reports = []
        self.failures = []
        self.export_rows = []
        self.stats = defaultdict(Counter)

    def _add_report(self, report: PageReport) -> None:
        self.reports.append(report)
        for issue in report.issues:
            self.stats[issue.category][issue.code] += 1
            self.export_rows.append({
                "URL": report.url,
                "Score": report.analysis.score,
                "Category": issue.category,
                "Code": issue.code,
                "Severity": issue.severity,
                "Message": issue.description,
            })

    # --- Result Getters ---

    def get_summary(self, total_pages: int) -> Dict[str, Any]:
        scores = [r.analysis.score for r in self.reports]
        return {
            "total_pages": total_pages,
            "analyzed_pages": len(self.reports),
            "failed_pages": len(self.failures),
            "pages_with_issues": sum(1 for r in self.reports if r.issues),
            "total_issues": sum(len(r.issues) for r in self.reports),
            "average_score": round(sum(scores) / len(scores), 2) if scores else None,
            "breakdown": [
                {"category": cat, "code": code, "count": count}
                for cat, codes in self.stats.items()
                for code, count in codes.items()
            ],
        }

    def get_export_frame(self) -> pd.DataFrame:
        """Issues of the last batch, one row per issue."""
        return pd.DataFrame(self.export_rows, columns=EXPORT_COLUMNS)
