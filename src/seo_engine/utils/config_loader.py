# src/seo_engine/utils/config_loader.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parent.parent / "settings.json"


class ScoringSettings(BaseModel):
    """Thresholds and deductions of the on-page score."""
    title_min_len: int = 30
    title_max_len: int = 60
    meta_desc_min_len: int = 120
    meta_desc_max_len: int = 160

    missing_title_penalty: int = 20
    title_length_penalty: int = 10
    missing_meta_desc_penalty: int = 20
    meta_desc_length_penalty: int = 10
    missing_h1_penalty: int = 15
    multiple_h1_penalty: int = 10
    missing_alt_penalty_per_image: int = 3
    missing_alt_penalty_cap: int = 15


class ContentSettings(BaseModel):
    min_words: int = 300
    max_words: int = 2500
    max_keywords: int = 20
    min_keyword_len: int = 3
    keyword_density_warning: float = 3.0
    gap_missing_ratio: float = 0.7
    duplicate_unique_ratio: float = 0.8
    min_sentence_len: int = 10
    readability_low: float = 60
    readability_high: float = 90
    seed_terms: List[str] = Field(default_factory=lambda: [
        'how', 'what', 'why', 'where', 'when', 'who',
        'guide', 'tutorial', 'tips', 'best', 'top',
        'review', 'comparison', 'vs', 'benefits',
        'solution', 'problem', 'help', 'learn',
    ])


class PerformanceSettings(BaseModel):
    slow_load_ms: int = 3000
    moderate_load_ms: int = 1500
    fcp_ratio: float = 0.4
    lcp_ratio: float = 0.8
    max_estimated_cls: float = 0.1
    score_ms_per_point: float = 50
    fcp_warning_ms: float = 1800
    lcp_warning_ms: float = 2500
    cls_warning: float = 0.1


class BatchSettings(BaseModel):
    workers: int = 4
    show_progress: bool = True


class LoggingSettings(BaseModel):
    level: str = "INFO"
    module_levels: Dict[str, str] = Field(default_factory=dict)
    silenced: Dict[str, str] = Field(default_factory=dict)


class EngineSettings(BaseModel):
    """
    All tunables of the engine. The defaults are the canonical rule set;
    settings are always passed explicitly, never read from a global.
    """
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    content: ContentSettings = Field(default_factory=ContentSettings)
    performance: PerformanceSettings = Field(default_factory=PerformanceSettings)
    batch: BatchSettings = Field(default_factory=BatchSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def read_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Reads a JSON settings file into a dict. Missing or invalid files give {}."""
    config_path = Path(path) if path else DEFAULT_SETTINGS_PATH

    if not config_path.exists():
        logger.warning("Settings file not found at %s. Using defaults.", config_path)
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Failed to load settings from %s: %s", config_path, e)
        return {}

    if not isinstance(data, dict):
        logger.error("Settings file %s does not contain a JSON object.", config_path)
        return {}
    return data


def load_settings(path: Optional[Union[str, Path]] = None) -> EngineSettings:
    """
    Loads EngineSettings from a JSON file (default: the packaged settings.json).
    Falls back to the defaults when the file is missing or does not validate.
    """
    raw = read_config(path)
    try:
        return EngineSettings.model_validate(raw)
    except ValidationError as e:
        logger.error("Invalid settings, using defaults: %s", e)
        return EngineSettings()


def get_nested(config: Dict[str, Any], key_path: str, default: Optional[Any] = None) -> Any:
    """
    Safely retrieves a nested value from a configuration dictionary.

    Uses a dot as a separator, e.g., 'scoring.title_min_len'.
    """
    value: Any = config
    for key in key_path.split('.'):
        if isinstance(value, dict):
            value = value.get(key)
        else:
            return default
    return value if value is not None else default
