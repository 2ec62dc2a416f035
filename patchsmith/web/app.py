from __future__ import annotations
from pathlib import Path
from typing import List, Optional
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .. import __version__
from ..patch import apply_patch, compute_patch_stats, extract_hunks, split_content
from ..tools.logs import log_event

class ApplyRequest(BaseModel):
    original: str = ""
    patch: str = ""

class StatsRequest(BaseModel):
    patches: Optional[List[str]] = None

def create_app(log_dir: str, *, profile: str = "default", max_patch_bytes: int = 512_000) -> FastAPI:
    app = FastAPI(title="patchsmith", docs_url=None, redoc_url=None)

    app.state.log_dir = Path(log_dir).resolve()
    app.state.profile = profile
    app.state.max_patch_bytes = max_patch_bytes

    def _check_size(*patches: str) -> None:
        total = sum(len(p.encode("utf-8")) for p in patches)
        if total > app.state.max_patch_bytes:
            log_event(app.state.log_dir, f"api refused patch ({total} bytes)")
            raise HTTPException(status_code=413, detail="Patch trop volumineux")

    @app.get("/api/health")
    def health() -> dict:
        return {"status": "ok", "version": __version__, "profile": app.state.profile}

    @app.post("/api/patch/apply")
    def patch_apply(req: ApplyRequest) -> dict:
        _check_size(req.patch)
        content = apply_patch(req.original, req.patch)
        log_event(app.state.log_dir, f"api apply ({len(req.patch)} chars)")
        return {"content": content}

    @app.post("/api/patch/stats")
    def patch_stats(req: StatsRequest) -> Optional[dict]:
        _check_size(*(req.patches or []))
        stats = compute_patch_stats(req.patches)
        log_event(app.state.log_dir, f"api stats ({len(req.patches or [])} patches)")
        return stats.to_dict() if stats is not None else None

    @app.post("/api/patch/hunks")
    def patch_hunks(req: ApplyRequest) -> list[dict]:
        _check_size(req.patch)
        hunks = extract_hunks(req.patch, split_content(req.original))
        log_event(app.state.log_dir, f"api hunks ({len(hunks)} hunks)")
        return [h.to_dict() for h in hunks]

    return app
