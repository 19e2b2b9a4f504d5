"""Request/response schemas for the AI endpoints.

Every field is optional and coerced leniently so that whatever JSON a browser
posts, a usable request object comes out the other side.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _coerce_text(value: Any) -> str:
    # falsy values (None, "", 0, False, empty containers) mean "not provided"
    return str(value) if value else ""


def _coerce_list(value: Any) -> Optional[list]:
    if isinstance(value, list) and value:
        return value
    return None


class SummaryRequest(BaseModel):
    """Body for POST /api/ai/movie-summary."""

    title: str = ""
    overview: str = ""

    @field_validator("title", "overview", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _coerce_text(v)


class RecommendRequest(BaseModel):
    """Body for POST /api/ai/recommend."""

    model_config = ConfigDict(populate_by_name=True)

    query: str = ""
    mood: str = ""
    selected_genres: Optional[List[Any]] = Field(None, alias="selectedGenres")
    recently_viewed: Optional[List[Any]] = Field(None, alias="recentlyViewed")

    @field_validator("query", "mood", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _coerce_text(v)

    @field_validator("selected_genres", "recently_viewed", mode="before")
    @classmethod
    def coerce_list(cls, v):
        return _coerce_list(v)

    @property
    def genre_keys(self) -> List[str]:
        return [str(g).lower() for g in self.selected_genres or []]

    @property
    def recent_titles(self) -> List[str]:
        """Titles from recentlyViewed; entries are {"title": ...} objects or bare strings."""
        titles = []
        for item in self.recently_viewed or []:
            if isinstance(item, dict):
                title = item.get("title")
                if title:
                    titles.append(str(title))
            elif item is not None and str(item):
                titles.append(str(item))
        return titles


class RecommendationsResponse(BaseModel):
    recommendations: List[str]
