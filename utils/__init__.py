# ========================================
# utils/__init__.py
# ========================================
"""
Utilities: розв'язання перетинів, рядкові хелпери, файловий I/O.

file_handlers та file_exporters імпортуються напряму (залежать від chardet,
python-docx та core.analyzer).
"""
from utils.conflict_resolution import (
    remove_overlapping_entities,
    ScoreBasedResolver,
    PriorityBasedResolver,
    LengthBasedResolver
)
from utils.text_helpers import (
    common_prefix,
    common_suffix,
    each_substring,
    each_unique_substring,
    uncommon_substring
)

__all__ = [
    "remove_overlapping_entities",
    "ScoreBasedResolver",
    "PriorityBasedResolver",
    "LengthBasedResolver",
    "common_prefix",
    "common_suffix",
    "each_substring",
    "each_unique_substring",
    "uncommon_substring"
]
