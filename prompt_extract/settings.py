"""Extraction settings using Pydantic for configuration management."""

import logging
import os
from pathlib import Path
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field, field_validator
import yaml

logger = logging.getLogger(__name__)


class PositiveMarker(BaseModel):
    """One row of the table deciding whether a workflow node looks like a positive prompt node."""

    field: Literal["class_type", "title"] = Field(description="Node attribute the marker is matched against")
    match: Literal["contains", "equals"] = Field(default="contains", description="Substring or exact match")
    value: str = Field(description="Text to look for")
    case_sensitive: bool = Field(default=False, description="Compare case-sensitively")

    def matches(self, text: str) -> bool:
        needle, haystack = self.value, text
        if not self.case_sensitive:
            needle, haystack = needle.lower(), haystack.lower()
        if self.match == "equals":
            return haystack == needle
        return needle in haystack


def _default_positive_markers() -> List[PositiveMarker]:
    return [
        PositiveMarker(field="class_type", match="contains", value="positive"),
        PositiveMarker(field="title", match="contains", value="positive"),
        PositiveMarker(field="title", match="equals", value="Positive", case_sensitive=True),
    ]


class Settings(BaseModel):
    """Extraction settings with validation."""

    # Heuristic thresholds
    metadata_prompt_min_length: int = Field(default=50, description="A metadata 'prompt' field must be longer than this")
    fallback_min_length: int = Field(default=200, description="Free text must be longer than this to be a fallback prompt")

    # Key and keyword tables
    metadata_prompt_keys: List[str] = Field(
        default=["positive", "positive_prompt", "Prompt", "Positive prompt"],
        description="Metadata keys scanned in order for a prompt string",
    )
    keyword_scores: Dict[str, int] = Field(
        default={"workflow": 3, "prompt": 2, "parameters": 1},
        description="Chunk keyword substrings and their relevance, checked in order",
    )
    positive_markers: List[PositiveMarker] = Field(
        default_factory=_default_positive_markers,
        description="Rules that mark a workflow node as a positive prompt node",
    )

    # Input limits
    max_file_bytes: int = Field(default=50_000_000, description="Largest PNG file read from disk")

    # Logging
    log_level: str = Field(default="INFO", description="Log level for the prompt_extract logger")

    @field_validator('metadata_prompt_min_length', 'fallback_min_length')
    @classmethod
    def validate_lengths(cls, v):
        """Validate length thresholds."""
        if v < 0:
            raise ValueError(f"Length thresholds must be non-negative, got {v}")
        return v

    @field_validator('max_file_bytes')
    @classmethod
    def validate_max_file_bytes(cls, v):
        """Validate file size cap."""
        if v <= 0:
            raise ValueError(f"max_file_bytes must be positive, got {v}")
        return v

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        """Normalize and validate the log level name."""
        level = str(v).strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def load_from_yaml(cls, config_file: Optional[Path] = None) -> 'Settings':
        """Load settings from YAML file with env var override capability."""
        config_file = config_file or Path("config/prompt_extract.yml")

        config_data = {}
        if config_file.exists():
            try:
                with open(config_file, 'r', encoding='utf-8') as f:
                    config_data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Could not load {config_file}: {e}")

        env_log_level = os.getenv('PROMPT_EXTRACT_LOG_LEVEL')
        if env_log_level:
            config_data['log_level'] = env_log_level

        env_max_bytes = os.getenv('PROMPT_EXTRACT_MAX_BYTES')
        if env_max_bytes:
            config_data['max_file_bytes'] = int(env_max_bytes)

        return cls(**config_data)

    def keyword_relevance(self, keyword: str) -> int:
        """Score a chunk keyword; the first matching table entry wins."""
        lowered = keyword.lower()
        for needle, score in self.keyword_scores.items():
            if needle.lower() in lowered:
                return score
        return 0


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the default settings, created on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
