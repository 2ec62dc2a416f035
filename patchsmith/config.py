from __future__ import annotations
from dataclasses import dataclass, field, fields
from pathlib import Path
import tomllib, os

PROFILES = ["default", "strict"]

@dataclass
class General:
    profile: str = "default"
    log_dir: str = "data/logs"
    dry_run: bool = False

@dataclass
class Limits:
    # taille max d'un patch reçu (CLI / API)
    max_patch_bytes: int = 512_000
    # taille max du fichier produit par le workspace
    max_total_bytes: int = 512_000

@dataclass
class Workspace:
    allow_roots: list[str] = field(default_factory=lambda: ["."])

@dataclass
class Web:
    host: str = "127.0.0.1"
    port: int = 8765

@dataclass
class Settings:
    general: General
    limits: Limits
    workspace: Workspace
    web: Web

def _load_toml_if_exists(path: Path) -> dict:
    if path.exists():
        with path.open("rb") as f:
            return tomllib.load(f)
    return {}

def _read_profile_toml(config_path: Path, profile: str) -> dict:
    """
    Cherche dans:
      - config/defaults.toml et config/<profile>.toml
      - puis fallback: config/profiles/defaults.toml et config/profiles/<profile>.toml
    """
    cfg_dir = config_path if config_path.is_dir() else config_path.parent

    data = _load_toml_if_exists(cfg_dir / "defaults.toml")
    if not data:
        data = _load_toml_if_exists(cfg_dir / "profiles" / "defaults.toml")

    prof = _load_toml_if_exists(cfg_dir / f"{profile}.toml")
    if not prof:
        prof = _load_toml_if_exists(cfg_dir / "profiles" / f"{profile}.toml")

    # Fusion superficielle defaults <- profil
    base = data or {}
    for k, v in prof.items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            base[k].update(v)
        else:
            base[k] = v
    return base

def _filter_for_dataclass(cls, data: dict) -> dict:
    """Ne garde que les clés connues du dataclass (évite TypeError sur clés en trop)."""
    allowed = {f.name for f in fields(cls)}
    return {k: v for k, v in (data or {}).items() if k in allowed}

def load_settings(config: str | None, profile: str = "default", overrides: dict | None = None) -> Settings:
    config_path = Path(config) if config else Path("config")
    raw = _read_profile_toml(config_path, profile)

    if "general" not in raw:
        raw["general"] = {}
    raw["general"]["profile"] = profile
    env_log_dir = os.environ.get("PATCHSMITH_LOG_DIR")
    if env_log_dir:
        raw["general"]["log_dir"] = env_log_dir

    g = General(**_filter_for_dataclass(General, raw.get("general")))
    lim = Limits(**_filter_for_dataclass(Limits, raw.get("limits")))
    ws = Workspace(**_filter_for_dataclass(Workspace, raw.get("workspace")))
    w = Web(**_filter_for_dataclass(Web, raw.get("web")))

    # Overrides (seulement sur General)
    if overrides:
        for k, v in overrides.items():
            if hasattr(g, k):
                setattr(g, k, v)

    return Settings(general=g, limits=lim, workspace=ws, web=w)
