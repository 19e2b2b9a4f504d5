"""Recommendation processing module.

Titles come from the chat-completion API when a key is configured. Otherwise,
or whenever that call fails, they are picked deterministically from fixed
genre pools.
"""

import json
import re
from types import MappingProxyType
from typing import Callable, List, Optional, Sequence

from app.config.settings import settings
from app.schemas.ai import RecommendRequest
from app.utils.helpers import flatten
from app.utils.logger import get_logger
from app.utils.openai_client import CompletionOk, get_openai_chat_completion
from app.utils.prompt_registry import PromptRegistry

logger = get_logger(__name__)

RECOMMEND_COUNT = 5
MAX_RECENT_IN_PROMPT = 3

GENRE_POOLS = MappingProxyType({
    "drama": ("Moonlight", "Lady Bird", "Marriage Story", "Manchester by the Sea", "The Florida Project"),
    "comedy": (
        "The Grand Budapest Hotel",
        "Little Miss Sunshine",
        "The Big Sick",
        "Napoleon Dynamite",
        "What We Do in the Shadows",
    ),
    "thriller": ("Prisoners", "Nocturnal Animals", "Wind River", "Zodiac", "Sicario"),
    "action": ("Mad Max: Fury Road", "John Wick", "The Raid", "Skyfall", "Logan"),
    "romance": ("Before Sunrise", "La La Land", "Eternal Sunshine of the Spotless Mind", "Her", "Once"),
})

GENERAL_POOL = (
    "Parasite",
    "The Social Network",
    "Inception",
    "The Shawshank Redemption",
    "Spirited Away",
    "The Godfather",
    "Interstellar",
    "The Matrix",
    "Whiplash",
    "Get Out",
)


def pick_unique(pools: Sequence[Sequence[str]], count: int, backstop: Sequence[str] = GENERAL_POOL) -> List[str]:
    """Collect up to `count` first-seen unique titles across pools, then the backstop."""
    out: List[str] = []
    seen = set()
    for title in flatten([*pools, backstop]):
        if len(out) >= count:
            break
        if title not in seen:
            out.append(title)
            seen.add(title)
    return out


def build_pools(request: RecommendRequest) -> List[Sequence[str]]:
    """Ordered candidate pools for the request context."""
    pools: List[Sequence[str]] = []
    for key in request.genre_keys:
        if key in GENRE_POOLS:
            pools.append(GENRE_POOLS[key])

    if request.recently_viewed:
        recent = set(request.recent_titles)
        pools.append([t for t in GENERAL_POOL if t not in recent])

    if request.query:
        pools.append(GENERAL_POOL)

    if not pools:
        pools.append(GENERAL_POOL)
    return pools


def deterministic_recommendations(request: RecommendRequest, count: int = RECOMMEND_COUNT) -> List[str]:
    return pick_unique(build_pools(request), count)


# --- AI output parsing -----------------------------------------------------

_LINE_SPLIT = re.compile(r"\r?\n|\t|;")
_LEADING_MARKER = re.compile(r"^\d+\.|^[-*•]\s*")
_TRAILING_COMMENTARY = re.compile(r"^[\"'“”]?(.+?)[\"'“”]?\s*[-–:].*$")
_SURROUNDING_QUOTES = re.compile(r"^['\"]|['\"]$")


def parse_json_titles(raw: str) -> Optional[List[str]]:
    """Return the string and numeric elements if raw is a JSON array, else None.

    null, booleans and nested containers are dropped; they are never titles.
    """
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError):
        return None
    if not isinstance(data, list):
        return None
    return [
        str(item).strip()
        for item in data
        if isinstance(item, (str, int, float)) and not isinstance(item, bool)
    ]


def split_lines(raw: str) -> List[str]:
    return [line.strip() for line in _LINE_SPLIT.split(raw) if line.strip()]


def strip_leading_marker(line: str) -> str:
    return _LEADING_MARKER.sub("", line, count=1).strip()


def strip_trailing_commentary(line: str) -> str:
    return _TRAILING_COMMENTARY.sub(r"\1", line, count=1)


def strip_surrounding_quotes(line: str) -> str:
    return _SURROUNDING_QUOTES.sub("", line)


LINE_STEPS: Sequence[Callable[[str], str]] = (
    strip_leading_marker,
    strip_trailing_commentary,
    strip_surrounding_quotes,
)


def normalize_line(line: str) -> str:
    for step in LINE_STEPS:
        line = step(line)
    return line


def parse_titles(raw: str, fallback: Sequence[str] = (), limit: int = RECOMMEND_COUNT) -> List[str]:
    """Permissively turn model output into at most `limit` titles.

    Accepts a JSON array or numbered/bulleted lines. Never raises; when
    nothing usable survives, returns `fallback`.
    """
    raw = raw or ""
    candidates = parse_json_titles(raw)
    if candidates is None:
        candidates = [normalize_line(line) for line in split_lines(raw)]

    titles: List[str] = []
    for title in candidates:
        if title and title not in titles:
            titles.append(title)
        if len(titles) >= limit:
            break
    return titles if titles else list(fallback)


class MovieRecommender:
    """Generates a short list of movie titles for the request context."""

    def __init__(self):
        self.prompt_registry = PromptRegistry("recommend")

    def build_messages(self, request: RecommendRequest, prompt_version: int = 1):
        system_prompt = self.prompt_registry.render(
            "recommend_system", prompt_version, recommend_count=RECOMMEND_COUNT
        )
        user_prompt = self.prompt_registry.render(
            "recommend_user",
            prompt_version,
            mood=request.mood,
            genres=request.selected_genres or [],
            recent_titles=request.recent_titles[:MAX_RECENT_IN_PROMPT],
            recommend_count=RECOMMEND_COUNT,
        )
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

    def recommend(self, request: RecommendRequest) -> List[str]:
        recommendations = deterministic_recommendations(request)
        if not settings.ai_enabled:
            logger.info("No OpenAI key configured; returning %s pool recommendations", len(recommendations))
            return recommendations

        result = get_openai_chat_completion(
            settings.OPENAI_MODEL,
            messages=self.build_messages(request),
            max_tokens=200,
            temperature=0.7,
            n=1,
        )
        if isinstance(result, CompletionOk):
            titles = parse_titles(result.text, fallback=recommendations)
            logger.info("Generated %s AI recommendations: %s", len(titles), titles)
            return titles

        logger.warning("AI recommend unavailable, using pool recommendations: %s", result.reason)
        return recommendations
