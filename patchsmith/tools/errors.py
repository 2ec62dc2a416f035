from __future__ import annotations

class PatchsmithError(Exception):
    """Base des erreurs levées autour du moteur (CLI, API, workspace)."""

class PatchSecurityError(PatchsmithError):
    """Chemin hors des racines autorisées ou taille limite dépassée."""

class PatchInputError(PatchsmithError):
    """Fichier d'entrée (contenu ou patch) illisible."""
