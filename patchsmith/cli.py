from __future__ import annotations
import argparse
import json
import sys
from pathlib import Path
from . import __version__
from .config import PROFILES, Settings, load_settings
from .patch import (
    compute_patch_stats,
    apply_patch,
    extract_hunks,
    split_content,
    split_file_patches,
    PatchStats,
)
from .tools.errors import PatchInputError, PatchsmithError, PatchSecurityError
from .tools.logs import log_event
from .tools.workspace import apply_patch_to_file, read_text

# === Entrées ==================================================================
def _read_input(path: str) -> str:
    p = Path(path)
    if not p.is_file():
        raise PatchInputError(f"Fichier introuvable: {path}")
    return read_text(p)

def _read_patch(s: Settings, path: str) -> str:
    text = _read_input(path)
    size = len(text.encode("utf-8"))
    if size > s.limits.max_patch_bytes:
        raise PatchSecurityError(f"Patch trop volumineux: {path} ({size} octets)")
    return text

def _format_stats(stats: PatchStats | None) -> str:
    if stats is None:
        return "(aucun patch)"
    return f"+{stats.additions} -{stats.deletions}"

# === Commandes ================================================================
def _cmd_apply(s: Settings, args) -> int:
    patch_text = _read_patch(s, args.patch)
    if not args.in_place:
        original = _read_input(args.file) if Path(args.file).exists() else ""
        sys.stdout.write(apply_patch(original, patch_text))
        log_event(s, f"apply {args.file} (stdout)")
        return 0

    base = Path(args.base)
    res = apply_patch_to_file(
        base,
        args.file,
        patch_text,
        allow_roots=s.workspace.allow_roots,
        max_total_bytes=s.limits.max_total_bytes,
        dry_run=s.general.dry_run,
    )
    mode = "DRY-RUN" if s.general.dry_run else "WRITE"
    print(f"{res.path} {_format_stats(res.stats)} :: {mode}")
    if res.backup:
        print(f"backup = {res.backup}")
    log_event(s, f"apply {res.path} {_format_stats(res.stats)} {mode}")
    return 0

def _cmd_stats(s: Settings, args) -> int:
    patches = [_read_patch(s, p) for p in args.patches]
    rows: list[tuple[str, PatchStats | None]] = []
    if args.per_file:
        for text in patches:
            for fp in split_file_patches(text):
                rows.append((fp.path or "-", compute_patch_stats([fp.text])))
    total = compute_patch_stats(patches)

    if args.json:
        out = {
            "total": total.to_dict() if total else None,
            "files": [{"path": p, **(st.to_dict() if st else {})} for p, st in rows],
        }
        print(json.dumps(out, ensure_ascii=False))
    else:
        for path, st in rows:
            print(f"{path}\t{_format_stats(st)}")
        print(f"total\t{_format_stats(total)}")
    log_event(s, f"stats {len(patches)} patch(es) {_format_stats(total)}")
    return 0

def _cmd_hunks(s: Settings, args) -> int:
    patch_text = _read_patch(s, args.patch)
    original = _read_input(args.file) if Path(args.file).exists() else ""
    hunks = extract_hunks(patch_text, split_content(original))
    for h in hunks:
        adds = sum(1 for l in h.lines if l.is_addition)
        dels = sum(1 for l in h.lines if l.is_deletion)
        print(f"{h.header} +{adds} -{dels}")
    log_event(s, f"hunks {args.file} ({len(hunks)} hunks)")
    return 0

# === Arguments ================================================================
def _argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser("patchsmith", description="patchsmith: application tolérante de patchs unified diff")
    ap.add_argument("--config", default="config", help="Chemin vers le dossier de configuration.")
    ap.add_argument("--profile", choices=PROFILES, default="default", help="Profil de configuration.")
    ap.add_argument("--dry-run", action="store_true", help="Ne rien écrire sur disque (apply --in-place).")
    ap.add_argument("--version", action="store_true", help="Afficher la version et quitter.")
    sub = ap.add_subparsers(dest="command")

    p_apply = sub.add_parser("apply", help="Appliquer un patch à un fichier.")
    p_apply.add_argument("file", help="Fichier d'origine (absent = nouveau fichier).")
    p_apply.add_argument("patch", help="Fichier patch.")
    p_apply.add_argument("--in-place", action="store_true", help="Réécrire le fichier (avec sauvegarde).")
    p_apply.add_argument("--base", default=".", help="Dossier de base pour --in-place.")
    p_apply.set_defaults(func=_cmd_apply)

    p_stats = sub.add_parser("stats", help="Compter ajouts/suppressions.")
    p_stats.add_argument("patches", nargs="+", help="Fichiers patch.")
    p_stats.add_argument("--per-file", action="store_true", help="Détail par fichier cible.")
    p_stats.add_argument("--json", action="store_true", help="Sortie JSON.")
    p_stats.set_defaults(func=_cmd_stats)

    p_hunks = sub.add_parser("hunks", help="Afficher les hunks extraits (positions après récupération).")
    p_hunks.add_argument("file", help="Fichier d'origine.")
    p_hunks.add_argument("patch", help="Fichier patch.")
    p_hunks.set_defaults(func=_cmd_hunks)
    return ap

def build_parser() -> argparse.ArgumentParser:
    return _argparser()

# === Main ====================================================================
def main(argv: list[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if args.version:
        print(__version__)
        return 0
    if not args.command:
        ap.print_help()
        return 2

    overrides = {"dry_run": True} if args.dry_run else None
    s = load_settings(config=args.config, profile=args.profile, overrides=overrides)
    try:
        return args.func(s, args)
    except PatchsmithError as e:
        print(f"ERR: {e}", file=sys.stderr)
        log_event(s, f"{args.command} error: {e}")
        return 2

if __name__ == "__main__":
    raise SystemExit(main())
