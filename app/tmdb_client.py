"""Read-only access to the TMDB catalog used by the discovery UI."""

from typing import Any, Dict, Optional

import requests

from app.config.settings import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)

REQUEST_TIMEOUT_SECONDS = 10


class CatalogError(Exception):
    status_code = 502


class CatalogUnavailableError(CatalogError):
    status_code = 503


class CatalogNotFoundError(CatalogError):
    status_code = 404


def _get(path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    if not settings.TMDB_API_KEY:
        raise CatalogUnavailableError("TMDB_API_KEY is not configured")

    query = {"api_key": settings.TMDB_API_KEY}
    query.update(params or {})
    url = f"{settings.TMDB_API_URL}{path}"
    try:
        resp = requests.get(url, params=query, timeout=REQUEST_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        logger.error("TMDB request to %s failed: %s", path, repr(e))
        raise CatalogError(f"TMDB request failed: {e}") from e

    if resp.status_code == 404:
        raise CatalogNotFoundError(f"TMDB resource not found: {path}")
    if resp.status_code != 200:
        logger.error("TMDB %s responded %s: %s", path, resp.status_code, resp.text[:500])
        raise CatalogError(f"TMDB responded {resp.status_code}")
    try:
        return resp.json()
    except ValueError as e:
        raise CatalogError("TMDB returned invalid JSON") from e


def search_movies(query: str = "", page: int = 1) -> Dict[str, Any]:
    """Search by title, or list popular movies when no query is given."""
    if query:
        return _get("/search/movie", {"query": query, "page": page})
    return _get("/discover/movie", {"sort_by": "popularity.desc", "page": page})


def get_movie_details(movie_id: int) -> Dict[str, Any]:
    """Movie metadata with credits and watch providers attached."""
    details = _get(f"/movie/{movie_id}")
    details["credits"] = _get(f"/movie/{movie_id}/credits")
    details["watch_providers"] = _get(f"/movie/{movie_id}/watch/providers").get("results", {})
    return details


def get_person_details(person_id: int) -> Dict[str, Any]:
    details = _get(f"/person/{person_id}")
    details["movie_credits"] = _get(f"/person/{person_id}/movie_credits")
    return details
