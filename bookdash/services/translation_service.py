"""Traductions de l'interface, lues depuis les fichiers YAML de `bookdash/lang`."""

from __future__ import annotations

import logging
from typing import Any

import yaml

from ..utils.paths import translations_path

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"

_translation_service: TranslationService | None = None


class TranslationService:
    """Charge les langues à la demande et résout les clés pointées ('dashboard.column.title')."""

    def __init__(self) -> None:
        self.current_language: str = DEFAULT_LANGUAGE
        self.translations: dict[str, dict[str, Any]] = {}
        self.load_language(DEFAULT_LANGUAGE)

    def load_language(self, language_code: str) -> bool:
        lang_file = translations_path() / f"{language_code}.yaml"
        if not lang_file.exists():
            logger.warning("Fichier de langue manquant : %s", lang_file)
            return False
        try:
            with open(lang_file, encoding="utf-8") as f:
                self.translations[language_code] = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error("Erreur lors du chargement du fichier de langue %s: %s", lang_file, e)
            return False
        return True

    def set_language(self, language_code: str) -> None:
        """Change de langue ; une langue introuvable laisse la langue courante."""
        if language_code in self.translations or self.load_language(language_code):
            self.current_language = language_code
        else:
            logger.error(
                "Langue indisponible, on garde '%s' : %s", self.current_language, language_code
            )

    def translate(self, key: str, **kwargs: Any) -> str:
        """Texte de la clé, formaté avec `kwargs` ; la clé elle-même si elle est inconnue."""
        value: Any = self.translations.get(self.current_language) or {}
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return key
            value = value[part]

        if isinstance(value, str):
            return value.format(**kwargs) if kwargs else value
        return str(value)


def get_translation_service() -> TranslationService:
    global _translation_service
    if _translation_service is None:
        _translation_service = TranslationService()
    return _translation_service


def set_language(language_code: str) -> None:
    get_translation_service().set_language(language_code)


def translate(key: str, **kwargs: Any) -> str:
    return get_translation_service().translate(key, **kwargs)
