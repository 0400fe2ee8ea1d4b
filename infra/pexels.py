from __future__ import annotations

import json
import logging
import re
from threading import Lock
from typing import Any, Callable, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from core.interfaces import ImageSearchClient
from core.models import TaskImage
from infra.operational_support import redact_text

logger = logging.getLogger(__name__)

_DEFAULT_BASE_URL = "https://api.pexels.com/v1"
_FALLBACK_QUERY = "productivity task organization"

_LEADING_VERBS = re.compile(
    r"^(buy|get|do|make|call|email|schedule|plan|finish|complete)\s+", re.IGNORECASE
)

# first matching keyword wins
_VISUAL_KEYWORDS: dict[str, str] = {
    "grocery": "grocery shopping supermarket",
    "groceries": "grocery shopping supermarket",
    "meeting": "business meeting office",
    "workout": "fitness exercise gym",
    "exercise": "fitness exercise gym",
    "doctor": "medical healthcare hospital",
    "dentist": "dental healthcare clinic",
    "vacation": "travel destination beach",
    "trip": "travel destination",
    "birthday": "birthday party celebration",
    "cleaning": "house cleaning organized",
    "laundry": "laundry washing clothes",
    "cooking": "cooking kitchen food",
    "study": "studying books education",
    "work": "office work productivity",
}


def optimize_query(title: str) -> str:
    """Turn a task title into a search query that tends to return a relevant photo."""
    optimized = re.sub(r"\s+", " ", (title or "").lower()).strip()
    optimized = _LEADING_VERBS.sub("", optimized).strip()

    for keyword, visual in _VISUAL_KEYWORDS.items():
        if keyword in optimized:
            optimized = visual
            break

    return optimized or _FALLBACK_QUERY


def _photo_to_image(photo: Any) -> Optional[TaskImage]:
    if not isinstance(photo, dict):
        return None
    src = photo.get("src")
    url = src.get("medium") if isinstance(src, dict) else None
    if not url:
        return None
    return TaskImage(url=str(url), alt=str(photo.get("alt") or ""))


class PexelsImageClient(ImageSearchClient):
    """
    Pexels photo search. Results are cached per normalised title for the lifetime of
    the client; rate limiting and transport errors degrade to "no image".
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = _DEFAULT_BASE_URL,
        timeout: float = 10.0,
        opener: Callable[..., Any] = urlopen,
    ):
        if not (api_key or "").strip():
            raise ValueError("A Pexels API key is required.")
        self._api_key = api_key.strip()
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._opener = opener
        self._cache: dict[str, TaskImage] = {}
        self._lock = Lock()

    def search_image(self, text: str) -> Optional[TaskImage]:
        cache_key = (text or "").lower().strip()
        with self._lock:
            cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        query = optimize_query(text)
        try:
            payload = self._fetch(query)
        except HTTPError as exc:
            if exc.code == 429:
                logger.warning("Pexels API rate limit reached")
            else:
                logger.error("Pexels API error: %s", exc.code)
            return None
        except (URLError, OSError, ValueError) as exc:
            logger.error("Error fetching image from Pexels: %s", redact_text(str(exc)))
            return None

        photos = payload.get("photos") if isinstance(payload, dict) else None
        best = _photo_to_image(photos[0]) if photos else None
        if best is not None:
            with self._lock:
                self._cache[cache_key] = best
        return best

    def _fetch(self, query: str) -> Any:
        params = urlencode({"query": query, "per_page": 3, "orientation": "landscape"})
        request = Request(
            f"{self._base_url}/search?{params}",
            headers={"Authorization": self._api_key},
        )
        with self._opener(request, timeout=self._timeout) as response:  # noqa: S310
            return json.loads(response.read().decode("utf-8"))


__all__ = ["PexelsImageClient", "optimize_query"]
