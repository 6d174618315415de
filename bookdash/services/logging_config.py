"""Logging de BookDash : un fichier tournant dans le dossier utilisateur."""

import logging
import logging.handlers

from ..utils.paths import logs_path

LOG_FILENAME = "bookdash.log"
# Le nom du thread distingue l'interface, le chargement de page et les requêtes auteur
LOG_FORMAT = "%(asctime)s - %(name)s [%(threadName)s] - %(levelname)s - %(message)s"
# Bibliothèques qui journalisent chaque requête HTTP en DEBUG
QUIET_LOGGERS = ("urllib3",)


def setup_app_logging(log_level: str = "INFO", console_output: bool = False) -> logging.Logger:
    """Configure le root logger une fois au démarrage.

    Args:
        log_level: Niveau de log (DEBUG, INFO, WARNING, ERROR)
        console_output: Si True, affiche aussi en console (pour debug)

    Returns:
        Logger racine configuré
    """
    log_file = logs_path() / LOG_FILENAME

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    handlers: list[logging.Handler] = [
        logging.handlers.RotatingFileHandler(
            log_file, maxBytes=10_000_000, backupCount=5, encoding="utf-8"  # 10MB x 5
        )
    ]
    if console_output:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    # Une page de 100 notices = 101 requêtes : on garde le DEBUG pour BookDash
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.info("✅ Logging configuré - fichier: %s", log_file)
    return root
