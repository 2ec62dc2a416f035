from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import List

# Line kinds carry the diff marker they are parsed from.
CONTEXT = " "
ADDITION = "+"
DELETION = "-"

# Patch shapes recognised by the statistics summarizer
NEW_FILE = "new_file"
SIMPLE_REPLACEMENT = "simple_replacement"
STANDARD = "standard"

@dataclass(frozen=True)
class PatchLine:
    kind: str  # CONTEXT | ADDITION | DELETION
    text: str

    @property
    def is_context(self) -> bool:
        return self.kind == CONTEXT

    @property
    def is_addition(self) -> bool:
        return self.kind == ADDITION

    @property
    def is_deletion(self) -> bool:
        return self.kind == DELETION

@dataclass
class Hunk:
    original_start: int
    original_count: int
    modified_start: int
    modified_count: int
    lines: List[PatchLine] = field(default_factory=list)

    @property
    def header(self) -> str:
        return (
            f"@@ -{self.original_start},{self.original_count} "
            f"+{self.modified_start},{self.modified_count} @@"
        )

    def to_dict(self) -> dict:
        return asdict(self)

@dataclass
class PatchStats:
    additions: int = 0
    deletions: int = 0

    def __add__(self, other: PatchStats) -> PatchStats:
        return PatchStats(self.additions + other.additions, self.deletions + other.deletions)

    def to_dict(self) -> dict:
        return {"additions": self.additions, "deletions": self.deletions}

@dataclass
class FilePatch:
    path: str
    text: str
