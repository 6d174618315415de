"""
Définitions des types de données et des DTOs (Data Transfer Objects).

Ce module centralise les structures échangées entre le service catalogue
et la vue du tableau de bord.
"""

from __future__ import annotations

from dataclasses import dataclass, field

UNKNOWN = "Unknown"
NOT_AVAILABLE = "N/A"
MAX_SUBJECTS = 3

Rating = float | int | str  # nombre ou NOT_AVAILABLE


@dataclass(frozen=True, slots=True)
class AuthorInfo:
    """Fiche auteur résolue depuis la clé `/authors/...`."""

    name: str | None
    birth_date: str | None
    top_work: str | None

    @classmethod
    def unknown(cls) -> AuthorInfo:
        return cls(name=UNKNOWN, birth_date=UNKNOWN, top_work=UNKNOWN)


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """Notice enrichie affichée dans une ligne du tableau."""

    key: str
    title: str
    first_publish_year: int | str | None = None
    ratings_average: Rating = NOT_AVAILABLE
    subject: tuple[str, ...] = ()
    author_key: str | None = None
    author_name: str | None = UNKNOWN
    author_birth_date: str | None = UNKNOWN
    author_top_work: str | None = UNKNOWN

    @property
    def subject_text(self) -> str:
        """Sujets joints pour l'affichage ("a, b, c")."""
        return ", ".join(self.subject)


@dataclass(frozen=True, slots=True)
class PageResult:
    """Résultat d'un chargement de page : notices + total annoncé par l'API."""

    entries: tuple[CatalogEntry, ...] = field(default_factory=tuple)
    total_count: int = 0
