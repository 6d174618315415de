"""
État du tableau de bord et fonctions de transition (reducers).

Toute la logique du tableau de bord vit ici, sans dépendance à Qt :
- `DashboardState` est un enregistrement immuable (page, taille de page,
  recherche, notices chargées, statut du chargement, ligne en édition, époque) ;
- chaque action utilisateur ou fin de chargement est une fonction pure
  `état -> nouvel état`.

La vue se contente d'appliquer ces fonctions et d'afficher le résultat.

Chargements concurrents : chaque chargement reçoit une époque croissante
(`begin_fetch`). Un résultat dont l'époque n'est plus la courante est ignoré,
quel que soit son ordre d'arrivée.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum

from .types import MAX_SUBJECTS, NOT_AVAILABLE, CatalogEntry, PageResult, Rating

PAGE_SIZES: tuple[int, ...] = (10, 50, 100)
VISIBLE_PAGES = 5

# Colonnes éditables, dans l'ordre d'affichage
EDITABLE_FIELDS: tuple[str, ...] = (
    "ratings_average",
    "author_name",
    "title",
    "first_publish_year",
    "subject",
    "author_birth_date",
    "author_top_work",
)


class FetchStatus(Enum):
    """Étapes du cycle de chargement d'une page."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class EditBuffer:
    """Copie de travail de la ligne en cours d'édition (valeurs texte)."""

    row: int
    draft: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class DashboardState:
    """Enregistrement immuable de l'état de la vue."""

    page: int = 1
    page_size: int = PAGE_SIZES[0]
    search_query: str = ""
    entries: tuple[CatalogEntry, ...] = ()
    total_count: int = 0
    status: FetchStatus = FetchStatus.IDLE
    error: str | None = None
    edit: EditBuffer | None = None
    epoch: int = 0

    @property
    def total_pages(self) -> int:
        return total_pages(self.total_count, self.page_size)

    @property
    def fetch_key(self) -> tuple[int, int, str]:
        """Paramètres dont tout changement déclenche un nouveau chargement."""
        return (self.page, self.page_size, self.search_query)

    @property
    def can_go_back(self) -> bool:
        """First/Prev actifs."""
        return self.page > 1

    @property
    def can_go_forward(self) -> bool:
        """Next/Last actifs."""
        return self.page < self.total_pages

    @property
    def page_window(self) -> range:
        return page_window(self.page, self.total_pages)


# --- Pagination ---


def total_pages(total_count: int, page_size: int) -> int:
    """Nombre de pages : ceil(total / taille), 0 si le catalogue est vide."""
    if total_count <= 0:
        return 0
    return math.ceil(total_count / page_size)


def clamp_page(page: int, pages: int) -> int:
    """Ramène un numéro de page dans [1, pages] (1 s'il n'y a aucune page)."""
    return max(1, min(page, pages))


def page_window(page: int, pages: int, visible: int = VISIBLE_PAGES) -> range:
    """Boutons numérotés : au plus `visible` pages à partir de page - visible // 2."""
    start = max(1, page - visible // 2)
    end = min(pages, start + visible - 1)
    return range(start, end + 1)


def needs_fetch(old: DashboardState, new: DashboardState) -> bool:
    return old.fetch_key != new.fetch_key


# --- Actions utilisateur ---


def initial_state(page_size: int = PAGE_SIZES[0]) -> DashboardState:
    if page_size not in PAGE_SIZES:
        raise ValueError(f"Unsupported page size: {page_size}")
    return DashboardState(page_size=page_size)


def set_page_size(state: DashboardState, page_size: int) -> DashboardState:
    """Change la taille de page et revient toujours à la page 1."""
    if page_size not in PAGE_SIZES:
        raise ValueError(f"Unsupported page size: {page_size}")
    return replace(state, page_size=page_size, page=1)


def set_search_query(state: DashboardState, text: str) -> DashboardState:
    """Met à jour la recherche auteur telle quelle, sans changer de page."""
    return replace(state, search_query=text)


def go_to_page(state: DashboardState, page: int) -> DashboardState:
    return replace(state, page=clamp_page(page, state.total_pages))


def first_page(state: DashboardState) -> DashboardState:
    return go_to_page(state, 1)


def previous_page(state: DashboardState) -> DashboardState:
    return go_to_page(state, state.page - 1)


def next_page(state: DashboardState) -> DashboardState:
    return go_to_page(state, state.page + 1)


def last_page(state: DashboardState) -> DashboardState:
    return go_to_page(state, state.total_pages)


# --- Cycle de chargement ---


def begin_fetch(state: DashboardState) -> DashboardState:
    """Passe en chargement avec une nouvelle époque ; efface l'erreur affichée."""
    return replace(state, status=FetchStatus.LOADING, error=None, epoch=state.epoch + 1)


def fetch_succeeded(state: DashboardState, epoch: int, result: PageResult) -> DashboardState:
    """Enregistre une page chargée, sauf si un chargement plus récent a démarré."""
    if epoch != state.epoch:
        return state
    return replace(
        state,
        entries=tuple(result.entries),
        total_count=result.total_count,
        status=FetchStatus.READY,
        error=None,
        edit=None,
    )


def fetch_failed(state: DashboardState, epoch: int, message: str) -> DashboardState:
    """Enregistre l'échec du chargement courant ; aucune notice n'est conservée."""
    if epoch != state.epoch:
        return state
    return replace(
        state,
        entries=(),
        status=FetchStatus.FAILED,
        error=message,
        edit=None,
    )


# --- Édition en ligne ---


def begin_edit(state: DashboardState, row: int) -> DashboardState:
    """Ouvre l'édition d'une ligne ; une édition déjà ouverte est remplacée."""
    if not 0 <= row < len(state.entries):
        raise IndexError(f"No row {row} on the current page")
    return replace(state, edit=EditBuffer(row=row, draft=entry_to_draft(state.entries[row])))


def edit_field(state: DashboardState, name: str, value: str) -> DashboardState:
    """Modifie un champ de la copie de travail (sans effet hors édition)."""
    if name not in EDITABLE_FIELDS:
        raise ValueError(f"Field is not editable: {name}")
    if state.edit is None:
        return state
    draft = {**state.edit.draft, name: value}
    return replace(state, edit=replace(state.edit, draft=draft))


def save_edit(state: DashboardState) -> DashboardState:
    """Remplace la notice éditée par sa copie de travail et ferme l'édition."""
    if state.edit is None:
        return state
    row = state.edit.row
    entries = list(state.entries)
    entries[row] = draft_to_entry(entries[row], state.edit.draft)
    return replace(state, entries=tuple(entries), edit=None)


# --- Conversions notice <-> copie de travail ---


def _text(value: object) -> str:
    return "" if value is None else str(value)


def entry_to_draft(entry: CatalogEntry) -> dict[str, str]:
    """Forme texte des champs éditables ; les sujets sont joints par ', '."""
    draft = {name: _text(getattr(entry, name)) for name in EDITABLE_FIELDS}
    draft["subject"] = entry.subject_text
    return draft


def split_subjects(text: str) -> tuple[str, ...]:
    """'a, b, c' -> ('a', 'b', 'c') ; vides ignorés, 3 sujets au plus."""
    tags = [tag.strip() for tag in text.split(",")]
    return tuple(tag for tag in tags if tag)[:MAX_SUBJECTS]


def parse_rating(text: str) -> Rating:
    """Nombre saisi, ou 'N/A' si le champ est vide ou non numérique."""
    text = text.strip()
    for cast in (int, float):
        try:
            return cast(text)
        except ValueError:
            continue
    return NOT_AVAILABLE


def parse_year(text: str) -> int | str | None:
    text = text.strip()
    if not text:
        return None
    return int(text) if text.isdigit() else text


def _optional(text: str) -> str | None:
    """Champ auteur vide -> None (valeur absente de la fiche auteur)."""
    return text or None


def draft_to_entry(entry: CatalogEntry, draft: dict[str, str]) -> CatalogEntry:
    """Applique la copie de travail à la notice d'origine."""
    return replace(
        entry,
        ratings_average=parse_rating(draft.get("ratings_average", "")),
        author_name=_optional(draft.get("author_name", "")),
        title=draft.get("title", ""),
        first_publish_year=parse_year(draft.get("first_publish_year", "")),
        subject=split_subjects(draft.get("subject", "")),
        author_birth_date=_optional(draft.get("author_birth_date", "")),
        author_top_work=_optional(draft.get("author_top_work", "")),
    )
