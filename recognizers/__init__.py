# ========================================
# recognizers/__init__.py
# ========================================
"""
Recognizers: граматика артефактів та TLD таблиця.

Presidio адаптер (recognizers.presidio_patterns) імпортується окремо,
щоб граматика не залежала від Presidio.
"""
from recognizers.artifact_patterns import (
    ArtifactMatch,
    ArtifactPattern,
    PATTERN_ORDER,
    build_patterns,
)
from recognizers.tld_table import TLDTable, DEFAULT_TLDS

__all__ = [
    "ArtifactMatch",
    "ArtifactPattern",
    "PATTERN_ORDER",
    "build_patterns",
    "TLDTable",
    "DEFAULT_TLDS",
]
