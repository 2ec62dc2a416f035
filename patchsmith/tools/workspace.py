from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence
import shutil, time

from ..patch import apply_patch, compute_patch_stats, split_file_patches, PatchStats
from .errors import PatchInputError, PatchSecurityError

@dataclass
class PatchResult:
    path: Path
    content: str
    size: int  # octets UTF-8 du résultat
    stats: PatchStats
    backup: Optional[Path]  # None si nouveau fichier ou dry-run

def _norm(p: Path) -> Path:
    return p.resolve()

def _is_under(target: Path, roots: Sequence[Path]) -> bool:
    t = _norm(target)
    for r in roots:
        try:
            t.relative_to(_norm(r))
            return True
        except ValueError:
            continue
    return False

def _backup_name(base_dir: Path, target: Path) -> Path:
    try:
        return target.relative_to(_norm(base_dir))
    except ValueError:
        return Path(target.name)

def resolve_target(base_dir: Path, rel_path: str | Path, allow_roots: Sequence[str | Path]) -> Path:
    target = _norm(base_dir / Path(rel_path))
    if not _is_under(target, [base_dir / r for r in allow_roots]):
        raise PatchSecurityError(f"Chemin non autorisé: {rel_path}")
    return target

def read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PatchInputError(f"Lecture impossible: {path} ({e})") from e

def _select_file_patch(patch_text: str, rel_path: str | Path) -> str:
    """Keep only the part of a multi-file patch that targets rel_path."""
    parts = split_file_patches(patch_text)
    if not parts:
        return patch_text
    for fp in parts:
        if fp.path and Path(fp.path) == Path(rel_path):
            return fp.text
    if len(parts) == 1:
        return parts[0].text
    return ""

def _backup_dir(base_dir: Path) -> Path:
    root = base_dir / ".patch_backups"
    ts = time.strftime("%Y%m%d-%H%M%S")
    d = root / ts
    n = 1
    while d.exists():
        d = root / f"{ts}-{n}"
        n += 1
    return d

def apply_patch_to_file(
    base_dir: Path,
    rel_path: str | Path,
    patch_text: str,
    *,
    allow_roots: Sequence[str | Path],
    max_total_bytes: int = 512_000,  # 500 KB
    dry_run: bool = False,
) -> PatchResult:
    """
    Apply a pending patch to base_dir/rel_path, restricted to allow_roots.
    A missing file is patched from empty content (new file).
    Only the section of a multi-file patch aimed at rel_path is used.
    Backups go to .patch_backups/<timestamp>[-n]/
    """
    target = resolve_target(base_dir, rel_path, allow_roots)
    original = read_text(target) if target.exists() else ""
    own_patch = _select_file_patch(patch_text, rel_path)
    new_text = apply_patch(original, own_patch)
    b = new_text.encode("utf-8")
    if len(b) > max_total_bytes:
        raise PatchSecurityError("Le résultat dépasse la limite de taille autorisée")

    stats = compute_patch_stats([own_patch]) if own_patch else None
    stats = stats or PatchStats()
    backup: Optional[Path] = None
    if not dry_run:
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.exists():
            backup = _backup_dir(base_dir) / _backup_name(base_dir, target)
            backup.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(target, backup)
        target.write_text(new_text, encoding="utf-8")
    return PatchResult(path=target, content=new_text, size=len(b), stats=stats, backup=backup)
