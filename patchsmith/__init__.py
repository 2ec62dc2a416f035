"""patchsmith: tolerant unified-diff application and patch statistics."""
__version__ = "0.3.0"

from .patch import apply_patch, compute_patch_stats, PatchStats

__all__ = ["__version__", "apply_patch", "compute_patch_stats", "PatchStats"]
