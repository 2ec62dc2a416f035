from __future__ import annotations
from datetime import datetime, timezone
from pathlib import Path
from ..config import Settings

def log_event(target: Settings | str | Path, message: str) -> Path:
    """Append one timestamped line to <log_dir>/patchsmith.log."""
    log_dir = Path(target.general.log_dir) if isinstance(target, Settings) else Path(target)
    log_dir.mkdir(parents=True, exist_ok=True)
    path = log_dir / "patchsmith.log"
    ts = datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")
    with path.open("a", encoding="utf-8") as f:
        f.write(f"{ts} | {message}\n")
    return path
