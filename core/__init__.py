# ========================================
# core/__init__.py
# ========================================
"""
Core functionality: розпізнавач артефактів та конфігурація.

Public API для імпорту з інших модулів. Аналізатор (core.analyzer)
імпортується окремо: він тягне за собою Presidio.
"""
from core.config import config, AppConfig, EntityConfig
from core.recognizer import (
    ArtifactRecognizer,
    configure_tlds,
    get_recognizer,
    is_match,
    match,
    pattern_names,
    scan,
)
from recognizers.errors import ConfigurationError, UnknownPatternError

__all__ = [
    "config",
    "AppConfig",
    "EntityConfig",
    "ArtifactRecognizer",
    "configure_tlds",
    "get_recognizer",
    "is_match",
    "match",
    "pattern_names",
    "scan",
    "ConfigurationError",
    "UnknownPatternError",
]
