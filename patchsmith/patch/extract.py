from __future__ import annotations
import logging
import re
from typing import List, Optional, Sequence, Tuple

from .types import ADDITION, CONTEXT, DELETION, Hunk, PatchLine

logger = logging.getLogger(__name__)

# @@ -A,B +C,D @@ (counts may be omitted, spacing is not checked)
HUNK_HEADER_RE = re.compile(r"@@\s*-(\d+)(?:,(\d+))?\s+\+(\d+)(?:,(\d+))?\s*@@")

CONTEXT_SCAN_LINES = 10
MATCH_THRESHOLD = 0.6
EXACT_SCORE = 1.0
WHITESPACE_SCORE = 0.8
PARTIAL_SCORE = 0.5

_RAW = "raw"  # body line without any diff marker
_WS_RE = re.compile(r"\s+")

def parse_hunk_header(line: str) -> Optional[Tuple[int, int, int, int]]:
    m = HUNK_HEADER_RE.search(line)
    if not m:
        return None
    return (
        int(m.group(1)),
        int(m.group(2) or "1"),
        int(m.group(3)),
        int(m.group(4) or "1"),
    )

def _line_score(context: str, original: str) -> float:
    ctx = context.strip()
    orig = original.strip()
    if ctx == orig:
        return EXACT_SCORE
    if _WS_RE.sub("", ctx) == _WS_RE.sub("", orig):
        return WHITESPACE_SCORE
    if ctx in orig or orig in ctx:
        return PARTIAL_SCORE
    return 0.0

def find_best_position(original_lines: Sequence[str], context_lines: Sequence[str]) -> int:
    """
    Slide the context lines over the original content and return the 1-based
    start of the best scoring window.

    Each line pair scores 1.0 (equal once trimmed), 0.8 (equal without any
    whitespace) or 0.5 (one contains the other). The window score is the mean
    over the context lines; the first best window wins. Anything not above 0.6
    falls back to 1 (top of file).
    """
    if not context_lines:
        return 1
    n = len(context_lines)
    best_pos = 1
    best_score = 0.0
    for pos in range(len(original_lines) - n + 1):
        score = 0.0
        for i, ctx in enumerate(context_lines):
            score += _line_score(ctx, original_lines[pos + i])
        normalized = score / n
        if normalized > best_score:
            best_score = normalized
            best_pos = pos + 1
    return best_pos if best_score > MATCH_THRESHOLD else 1

def _collect_context(lines: Sequence[str], header_idx: int) -> List[str]:
    out: List[str] = []
    stop = min(header_idx + 1 + CONTEXT_SCAN_LINES, len(lines))
    for line in lines[header_idx + 1:stop]:
        if line == "":
            out.append("")
        elif line.startswith(CONTEXT):
            out.append(line[1:])
        elif not (line.startswith(ADDITION) or line.startswith(DELETION)):
            break
    return out

def _classify(line: str) -> Tuple[str, str]:
    if line == "":
        return CONTEXT, ""
    tag = line[0]
    if tag in (CONTEXT, ADDITION, DELETION):
        return tag, line[1:]
    return _RAW, line

class _HunkBuilder:
    """Accumulates one hunk's body; recovery rules run in finish()."""

    def __init__(self, hunk: Hunk, parsed: bool) -> None:
        self.hunk = hunk
        self.parsed = parsed
        self.body: List[Tuple[str, str]] = []
        self.verbatim: List[str] = []

    def add(self, line: str) -> None:
        self.body.append(_classify(line))
        self.verbatim.append(line)

    def _is_new_file(self) -> bool:
        return self.hunk.original_start == 0 and self.hunk.original_count == 0

    def _is_simple_replacement(self) -> bool:
        if self.hunk.original_start != 1 or self.hunk.modified_start != 1:
            return False
        return not any(kind in (ADDITION, DELETION) for kind, _ in self.body)

    def finish(self, original_lines: Sequence[str]) -> Hunk:
        h = self.hunk
        has_raw = any(kind == _RAW for kind, _ in self.body)
        if self.parsed and has_raw and self._is_new_file():
            # whole file content, "+" markers are optional
            logger.debug("new-file hunk with unmarked lines, treating them as additions")
            h.lines = [
                PatchLine(ADDITION, text if kind == ADDITION else raw)
                for (kind, text), raw in zip(self.body, self.verbatim)
            ]
        elif self.parsed and has_raw and self._is_simple_replacement():
            # body is the replacement text for the first original_count lines
            logger.debug("simple replacement hunk without markers (%s)", h.header)
            removed = [
                PatchLine(DELETION, original_lines[i])
                for i in range(min(h.original_count, len(original_lines)))
            ]
            h.lines = removed + [PatchLine(ADDITION, raw) for raw in self.verbatim]
        else:
            h.lines = [PatchLine(kind, text) for kind, text in self.body if kind != _RAW]
        return h

def extract_hunks(patch_text: str, original_lines: Sequence[str]) -> List[Hunk]:
    """
    Parse patch text into hunks sorted by original start.

    Malformed headers do not raise: their position defaults to 1 and is then
    recovered from the context lines that follow them.
    """
    lines = patch_text.strip().split("\n")
    i = 0
    while i < len(lines) and not lines[i].startswith(("---", "+++", "@@")):
        i += 1

    hunks: List[Hunk] = []
    current: Optional[_HunkBuilder] = None
    for idx in range(i, len(lines)):
        line = lines[idx]
        if line.startswith("@@"):
            if current is not None:
                hunks.append(current.finish(original_lines))
            header = parse_hunk_header(line)
            if header is not None:
                current = _HunkBuilder(Hunk(*header), parsed=True)
                continue
            hunk = Hunk(1, 1, 1, 1)
            context = _collect_context(lines, idx)
            if context:
                pos = find_best_position(original_lines, context)
                hunk.original_start = pos
                hunk.modified_start = pos
                logger.debug("unparsable header %r, recovered position %d", line, pos)
            else:
                logger.debug("unparsable header %r without context, using line 1", line)
            current = _HunkBuilder(hunk, parsed=False)
            continue
        if line.startswith("---") or line.startswith("+++"):
            continue
        if line.startswith("\\"):
            # "\ No newline at end of file"
            continue
        if current is not None:
            current.add(line)

    if current is not None:
        hunks.append(current.finish(original_lines))

    hunks.sort(key=lambda h: h.original_start)
    return hunks
