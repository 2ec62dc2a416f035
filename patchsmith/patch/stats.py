from __future__ import annotations
import logging
import re
from typing import Iterable, List, Optional

from .types import NEW_FILE, SIMPLE_REPLACEMENT, STANDARD, PatchStats

logger = logging.getLogger(__name__)

NEW_FILE_MARKER = "@@ -0,0 +1,"
# shape detection also accepts non-numeric counts ("@@ -1,N +1,M @@"); such
# patches are counted line by line, while the applier positions them fuzzily
SIMPLE_HEADER_RE = re.compile(r"@@\s*-1,\S+\s+\+1,\S+\s*@@")
SIMPLE_COUNTS_RE = re.compile(r"@@\s*-1,(\d+)\s+\+1,(\d+)\s*@@")

def _is_header(line: str) -> bool:
    return line.startswith(("---", "+++", "@@"))

def _body_lines(lines: List[str]) -> List[str]:
    for i, line in enumerate(lines):
        if line.startswith("@@"):
            return lines[i + 1:]
    return []

def has_content_changes(patch: str) -> bool:
    """True when some text follows the first @@ header line (or there is no header)."""
    start = patch.find("@@")
    if start == -1:
        return True
    eol = patch.find("\n", start)
    if eol == -1:
        return False
    return eol < len(patch) - 1

def classify_patch(patch: str) -> str:
    if NEW_FILE_MARKER in patch:
        return NEW_FILE
    if SIMPLE_HEADER_RE.search(patch):
        lines = patch.splitlines()
        headers = [l for l in lines if l.startswith("@@")]
        marked = any(l.startswith(("+", "-")) for l in _body_lines(lines))
        if len(headers) == 1 and not marked:
            return SIMPLE_REPLACEMENT
    return STANDARD

def _count_non_header(lines: List[str]) -> int:
    return sum(1 for l in lines if not _is_header(l))

def patch_stats(patch: str) -> PatchStats:
    """
    Count additions and deletions of a single patch.

    Whole-new-file patches count every non-header line, "+" or not. Simple
    replacements without markers are sized from their header counts, with
    {1, 1} reported when the counts match but the body is not empty.
    """
    lines = patch.splitlines()
    shape = classify_patch(patch)
    logger.debug("patch classified as %s", shape)

    if shape == NEW_FILE:
        return PatchStats(additions=_count_non_header(lines))

    if shape == SIMPLE_REPLACEMENT:
        m = SIMPLE_COUNTS_RE.search(patch)
        if not m:
            return PatchStats(additions=_count_non_header(lines))
        old_count = int(m.group(1))
        new_count = int(m.group(2))
        if new_count > old_count:
            return PatchStats(additions=new_count - old_count)
        if old_count > new_count:
            return PatchStats(deletions=old_count - new_count)
        if has_content_changes(patch):
            return PatchStats(additions=1, deletions=1)
        return PatchStats()

    stats = PatchStats()
    started = False
    for line in lines:
        if not started:
            started = line.startswith("@")
            continue
        if line.startswith("+"):
            stats.additions += 1
        elif line.startswith("-"):
            stats.deletions += 1
    return stats

def compute_patch_stats(patches: Optional[Iterable[str]]) -> Optional[PatchStats]:
    """Sum the stats of every patch; None when no patch was supplied."""
    if patches is None:
        return None
    items = list(patches)
    if not items:
        return None
    total = PatchStats()
    for p in items:
        total = total + patch_stats(p)
    return total
