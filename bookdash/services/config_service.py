"""
Service de gestion de la configuration de l'application.

Ce module centralise les paramètres dont dépendent les services : adresse de
l'API catalogue, sujet interrogé, délais réseau, taille de page initiale,
langue et niveau de log. Seule la taille de page est réécrite par
l'application (dernière taille choisie, sauvegardée à la fermeture).

L'idée est d'avoir une "source de vérité" unique pour ces paramètres.
"""

import json
import logging
from dataclasses import asdict, dataclass

from ..utils.paths import config_file
from .dashboard_state import PAGE_SIZES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppConfig:
    """Holds the application's settings."""

    base_url: str = "https://openlibrary.org"
    subject: str = "science_fiction"
    request_timeout: float = 10.0  # secondes, par requête HTTP
    max_workers: int = 8  # requêtes auteur simultanées
    default_page_size: int = 10  # 10, 50 ou 100
    language: str = "en"  # "en" or "fr"
    log_level: str = "INFO"
    console_logging: bool = False


def get_config_path():
    return config_file()


def validate_config(config: AppConfig) -> AppConfig:
    """Vérifie les valeurs que les services ne peuvent pas corriger eux-mêmes.

    Raises:
        ValueError: Si une valeur est hors des bornes acceptées.
    """
    if config.default_page_size not in PAGE_SIZES:
        raise ValueError(f"default_page_size must be one of {PAGE_SIZES}")
    if not isinstance(config.max_workers, int) or config.max_workers < 1:
        raise ValueError("max_workers must be a positive integer")
    if not isinstance(config.request_timeout, (int, float)) or config.request_timeout <= 0:
        raise ValueError("request_timeout must be a positive number")
    return config


def load_config() -> AppConfig:
    """Loads config from file, or returns defaults if it doesn't exist or is invalid."""
    config_path = get_config_path()
    if not config_path.exists():
        logger.info("Config file not found. Using default configuration.")
        return AppConfig()

    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
        # Les clés absentes du fichier gardent leur valeur par défaut
        return validate_config(AppConfig(**data))
    except (OSError, TypeError, ValueError) as e:
        # ValueError couvre aussi json.JSONDecodeError
        logger.error(
            f"Could not read, parse, or validate config file at {config_path}: {e}. Using defaults."
        )
        return AppConfig()


def save_config(config: AppConfig) -> None:
    """Saves the given configuration object to the file."""
    config_path = get_config_path()
    try:
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(asdict(config), f, indent=4)
        logger.info(f"Configuration saved to {config_path}")
    except OSError as e:
        logger.error(f"Could not write to config file at {config_path}: {e}")
