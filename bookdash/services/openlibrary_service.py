"""
Service pour interroger l'API OpenLibrary.

Charge une page du catalogue d'un sujet (science-fiction par défaut), filtrée
par nom d'auteur, puis résout en parallèle la fiche de l'auteur principal de
chaque œuvre. Le résultat est une page de `CatalogEntry` prête à afficher et
le nombre total d'œuvres annoncé par l'API (pour la pagination).

Une page est chargée en entier ou pas du tout : le premier échec (réseau,
statut HTTP, JSON invalide) annule les recherches d'auteurs restantes et remonte
une seule `CatalogServiceError`.
"""

from __future__ import annotations

import concurrent.futures
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import requests

from .types import MAX_SUBJECTS, NOT_AVAILABLE, AuthorInfo, CatalogEntry, PageResult

logger = logging.getLogger(__name__)


class CatalogServiceError(Exception):
    """Exception levée quand une page du catalogue ne peut pas être chargée."""

    pass


def _author_key(work: dict) -> str | None:
    """Retourne la clé du premier auteur de l'œuvre, ou None."""
    authors = work.get("authors") or []
    if not authors or not isinstance(authors[0], dict):
        return None
    return authors[0].get("key") or None


def _to_entry(work: dict, author: AuthorInfo, author_key: str | None) -> CatalogEntry:
    """Mappe une œuvre brute + sa fiche auteur vers une CatalogEntry."""
    rating = work.get("ratings_average")
    subjects = work.get("subject") or []
    return CatalogEntry(
        key=str(work.get("key") or ""),
        title=str(work.get("title") or ""),
        first_publish_year=work.get("first_publish_year"),
        ratings_average=NOT_AVAILABLE if rating is None else rating,
        subject=tuple(str(s) for s in subjects[:MAX_SUBJECTS]),
        author_key=author_key,
        author_name=author.name,
        author_birth_date=author.birth_date,
        author_top_work=author.top_work,
    )


class OpenLibraryService:
    """Client du catalogue OpenLibrary par sujet."""

    BASE = "https://openlibrary.org"
    SUBJECT = "science_fiction"

    def __init__(
        self,
        session: requests.Session | None = None,
        base_url: str = BASE,
        subject: str = SUBJECT,
        timeout: float = 10,
        max_workers: int = 8,
    ):
        """
        Initialise le service.

        Args:
            session: Session HTTP partagée (injectable pour les tests).
            base_url: Racine de l'API OpenLibrary.
            subject: Sujet du catalogue interrogé.
            timeout: Timeout en secondes pour chaque requête HTTP.
            max_workers: Nombre maximal de recherches d'auteurs simultanées.
        """
        self.session = session or requests.Session()
        self.base_url = base_url.rstrip("/")
        self.subject = subject
        self.timeout = timeout
        self.max_workers = max(1, max_workers)

    def fetch_page(self, page: int, page_size: int, search_query: str = "") -> PageResult:
        """
        Charge une page du catalogue et enrichit chaque notice avec son auteur.

        Args:
            page: Numéro de page (1-indexé).
            page_size: Nombre de notices par page.
            search_query: Filtre sur le nom d'auteur, transmis tel quel à l'API.

        Returns:
            Un `PageResult` avec les notices dans l'ordre du catalogue et le
            `work_count` de l'API.

        Raises:
            CatalogServiceError: Si la page ou l'une des fiches auteur échoue.
        """
        offset = (page - 1) * page_size
        params = {"limit": page_size, "offset": offset, "author": search_query}
        url = f"{self.base_url}/subjects/{self.subject}.json"
        logger.info(
            "📚 Chargement page %s (limit=%s, offset=%s, author=%r)",
            page,
            page_size,
            offset,
            search_query,
        )

        data = self._get_json(url, params=params)
        try:
            works = list(data.get("works") or [])
            total_count = int(data.get("work_count") or 0)
        except (AttributeError, TypeError, ValueError) as e:
            logger.error("Réponse catalogue invalide pour %s: %s", url, e)
            raise CatalogServiceError(f"Invalid catalog response: {e}") from e

        entries = self._resolve_authors(works)
        logger.info("✅ Page %s • %d notice(s) • total annoncé: %d", page, len(entries), total_count)
        return PageResult(entries=tuple(entries), total_count=total_count)

    def _resolve_authors(self, works: list[dict]) -> list[CatalogEntry]:
        """Résout les auteurs en parallèle, échec global au premier problème."""
        keys = [_author_key(work) for work in works]
        authors: list[AuthorInfo | None] = [
            None if key else AuthorInfo.unknown() for key in keys
        ]

        pending = [i for i, key in enumerate(keys) if key]
        if pending:
            executor = ThreadPoolExecutor(
                max_workers=min(self.max_workers, len(pending)), thread_name_prefix="author"
            )
            try:
                future_to_index = {
                    executor.submit(self.fetch_author, keys[i]): i for i in pending
                }
                done, not_done = concurrent.futures.wait(
                    future_to_index.keys(), return_when=concurrent.futures.FIRST_EXCEPTION
                )
                for fut in not_done:
                    fut.cancel()

                # Première erreur dans l'ordre du catalogue
                for fut in sorted(done, key=future_to_index.__getitem__):
                    exc = fut.exception()
                    if exc is None:
                        continue
                    logger.error(
                        "❌ Fiche auteur %s en échec, page abandonnée (%d requête(s) annulée(s))",
                        keys[future_to_index[fut]],
                        len(not_done),
                    )
                    if isinstance(exc, CatalogServiceError):
                        raise exc
                    raise CatalogServiceError(str(exc)) from exc
                for fut, i in future_to_index.items():
                    authors[i] = fut.result()
            finally:
                executor.shutdown(wait=False, cancel_futures=True)

        return [
            _to_entry(work, author, key) for work, author, key in zip(works, authors, keys)
        ]

    def fetch_author(self, author_key: str) -> AuthorInfo:
        """
        Récupère la fiche d'un auteur par sa clé (ex: '/authors/OL23919A').

        Les champs absents de la fiche sont conservés tels quels (None).
        """
        logger.debug("👤 Fiche auteur %s", author_key)
        data = self._get_json(f"{self.base_url}{author_key}.json")
        if not isinstance(data, dict):
            raise CatalogServiceError(f"Invalid author response for {author_key}")
        return AuthorInfo(
            name=data.get("name"),
            birth_date=data.get("birth_date"),
            top_work=data.get("top_work"),
        )

    def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """GET + décodage JSON ; toute erreur devient une CatalogServiceError."""
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()  # Lève une exception pour les codes 4xx/5xx
            return response.json()
        except requests.RequestException as e:
            logger.error("Erreur de connexion à l'API OpenLibrary (%s): %s", url, e)
            raise CatalogServiceError(str(e)) from e
        except ValueError as e:
            logger.error("JSON invalide reçu de %s: %s", url, e)
            raise CatalogServiceError(f"Invalid JSON from {url}: {e}") from e

    def close(self) -> None:
        """Ferme la session HTTP."""
        self.session.close()
