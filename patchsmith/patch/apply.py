from __future__ import annotations
import logging
from typing import List, Sequence

from .extract import extract_hunks
from .types import Hunk

logger = logging.getLogger(__name__)

def split_content(content: str) -> List[str]:
    """Split file content into lines; an empty file has no lines."""
    if content == "":
        return []
    return content.split("\n")

def apply_hunks(original_lines: Sequence[str], hunks: Sequence[Hunk]) -> List[str]:
    """
    Apply hunks (sorted by original start) to a copy of original_lines.

    Positions come from modified_start, shifted by the net number of lines
    added by the hunks already applied. Deletions past the end of the
    content are skipped.
    """
    modified = list(original_lines)
    offset = 0
    for h in hunks:
        current = max(0, h.modified_start - 1 + offset)
        added = 0
        removed = 0
        for pl in h.lines:
            if pl.is_addition:
                modified.insert(current, pl.text)
                current += 1
                added += 1
            elif pl.is_deletion:
                if current < len(modified):
                    del modified[current]
                    removed += 1
                else:
                    logger.debug("deletion past end of content skipped (%s): %r", h.header, pl.text)
            elif pl.is_context:
                current += 1
        offset += added - removed
    return modified

def apply_patch(original_content: str, patch_text: str) -> str:
    """Return original_content with patch_text applied (best effort, never raises)."""
    if not patch_text or not patch_text.strip():
        return original_content
    original_lines = split_content(original_content)
    hunks = extract_hunks(patch_text, original_lines)
    if not hunks:
        return original_content
    return "\n".join(apply_hunks(original_lines, hunks))
