from .types import (
    ADDITION,
    CONTEXT,
    DELETION,
    NEW_FILE,
    SIMPLE_REPLACEMENT,
    STANDARD,
    FilePatch,
    Hunk,
    PatchLine,
    PatchStats,
)
from .extract import extract_hunks, find_best_position, parse_hunk_header
from .apply import apply_hunks, apply_patch, split_content
from .stats import classify_patch, compute_patch_stats, has_content_changes, patch_stats
from .files import split_file_patches

__all__ = [
    "ADDITION", "CONTEXT", "DELETION",
    "NEW_FILE", "SIMPLE_REPLACEMENT", "STANDARD",
    "FilePatch", "Hunk", "PatchLine", "PatchStats",
    "extract_hunks", "find_best_position", "parse_hunk_header",
    "apply_hunks", "apply_patch", "split_content",
    "classify_patch", "compute_patch_stats", "has_content_changes", "patch_stats",
    "split_file_patches",
]
