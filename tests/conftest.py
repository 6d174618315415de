import os
import sys
import threading

import pytest
import requests

# Ajoute la racine du dépôt (celle qui contient bookdash/) au PYTHONPATH
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


class FakeResponse:
    """Réponse minimale compatible avec l'usage de `requests.Response`."""

    def __init__(self, payload=None, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Session HTTP factice : `handler(url, params)` fournit chaque réponse."""

    def __init__(self, handler):
        self._handler = handler
        self._lock = threading.Lock()
        self.calls: list[tuple[str, dict | None]] = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        with self._lock:
            self.calls.append((url, params))
        return self._handler(url, params)

    def close(self):
        self.closed = True

    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]


def make_work(key: str, title: str, author_key: str | None = None, **extra) -> dict:
    work = {"key": key, "title": title, "authors": []}
    if author_key:
        work["authors"] = [{"key": author_key, "name": f"name of {author_key}"}]
    work.update(extra)
    return work


@pytest.fixture
def isolated_data_dir(tmp_path, monkeypatch):
    # Isole config et logs dans un dossier temporaire
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path))
    return tmp_path
