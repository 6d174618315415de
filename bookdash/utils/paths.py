"""
Gestion centralisée des chemins de fichiers de l'application.

Ce module fournit des fonctions pour obtenir les chemins d'accès aux
répertoires et fichiers de données de l'application de manière
fiable et multi-plateforme, en utilisant le dossier de données de
l'utilisateur (ex: %LOCALAPPDATA% sur Windows, ~/.local/share sur Linux).
"""

from __future__ import annotations

import os
from pathlib import Path

_APP_NAME = "BookDash"
_AUTHOR = "6f4Software"


def _get_app_dir() -> Path:
    """
    Détermine le dossier de données de l'application en fonction de l'OS.

    Returns:
        Path: Le chemin vers le dossier de données de l'application.
    """
    if os.name == "nt":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
    else:
        # Suit la spécification XDG pour Linux
        base = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))

    return base / _AUTHOR / _APP_NAME


def user_data_dir() -> Path:
    """Retourne le chemin vers le dossier principal des données utilisateur."""
    p = _get_app_dir()
    p.mkdir(parents=True, exist_ok=True)
    return p


def config_file() -> Path:
    """Retourne le chemin vers le fichier de configuration JSON."""
    return user_data_dir() / "config.json"


def logs_path() -> Path:
    """Retourne le chemin vers le dossier destiné à stocker les logs."""
    p = user_data_dir() / "logs"
    p.mkdir(parents=True, exist_ok=True)
    return p


def translations_path() -> Path:
    """Retourne le dossier contenant les fichiers de traduction YAML."""
    return Path(__file__).resolve().parent.parent / "lang"
