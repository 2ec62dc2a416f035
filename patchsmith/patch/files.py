from __future__ import annotations
from typing import List, Optional

from .types import FilePatch

def _strip_prefix(path: str, prefix: str) -> str:
    path = path.split("\t", 1)[0].strip()
    if path.startswith(prefix):
        return path[len(prefix):]
    return path

def split_file_patches(patch_text: str) -> List[FilePatch]:
    """
    Split a multi-file patch into one FilePatch per file.

    A file starts at a "--- " line directly followed by "+++ ". The path is
    read from "+++ b/path" (or from "--- a/path" when the file is deleted).
    A patch with hunks but no file header gives a single entry with an empty
    path.
    """
    lines = patch_text.splitlines()
    out: List[FilePatch] = []
    cur_path: Optional[str] = None
    cur_lines: List[str] = []
    preamble: List[str] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("--- ") and i + 1 < len(lines) and lines[i + 1].startswith("+++ "):
            if cur_path is not None:
                out.append(FilePatch(cur_path, "\n".join(cur_lines)))
            old = _strip_prefix(line[4:], "a/")
            new = _strip_prefix(lines[i + 1][4:], "b/")
            cur_path = old if new == "/dev/null" else new
            cur_lines = [line, lines[i + 1]]
            i += 2
            continue
        if cur_path is None:
            preamble.append(line)
        else:
            cur_lines.append(line)
        i += 1
    if cur_path is not None:
        out.append(FilePatch(cur_path, "\n".join(cur_lines)))
    elif any(l.startswith("@@") for l in preamble):
        out.append(FilePatch("", "\n".join(preamble)))
    return out
