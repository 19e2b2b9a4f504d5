from fastapi import APIRouter, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from app.config.settings import settings
from app.process.recommendation import MovieRecommender
from app.process.summary import MovieSummarizer
from app.schemas.ai import RecommendationsResponse, RecommendRequest, SummaryRequest
from app.tmdb_client import CatalogError, get_movie_details, get_person_details, search_movies
from app.utils.helpers import read_json_body, wants_plain_text
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
TEXT_MEDIA_TYPE = "text/plain; charset=utf-8"


@router.get("/health")
def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "ok", "service": "reelmate", "ai_enabled": settings.ai_enabled}


@router.api_route("/api/ai/movie-summary", methods=ALL_METHODS)
async def movie_summary(request: Request):
    """Spoiler-free summary of a movie as plain text.

    Upstream failures never surface here; the caller always gets a 200 with
    either the AI text or the deterministic fallback.
    """
    if request.method != "POST":
        return PlainTextResponse(
            "Method Not Allowed",
            status_code=405,
            headers={"Allow": "POST"},
            media_type=TEXT_MEDIA_TYPE,
        )

    body = await read_json_body(request)
    try:
        payload = SummaryRequest.model_validate(body)
    except ValidationError:
        payload = SummaryRequest()

    summary = await run_in_threadpool(MovieSummarizer().summarize, payload)
    return PlainTextResponse(summary, status_code=200, media_type=TEXT_MEDIA_TYPE)


@router.api_route("/api/ai/recommend", methods=ALL_METHODS)
async def recommend(request: Request):
    """Five movie titles for the given mood/genres/recently viewed context.

    Returns JSON {"recommendations": [...]} or newline text when the caller
    sends Accept: text/plain or ?format=text.
    """
    if request.method != "POST":
        return JSONResponse(
            {"error": "Method Not Allowed"},
            status_code=405,
            headers={"Allow": "POST"},
        )

    body = await read_json_body(request)
    try:
        payload = RecommendRequest.model_validate(body)
    except ValidationError:
        payload = RecommendRequest()

    titles = await run_in_threadpool(MovieRecommender().recommend, payload)
    if wants_plain_text(request):
        return PlainTextResponse("\n".join(titles), status_code=200, media_type=TEXT_MEDIA_TYPE)
    return JSONResponse(RecommendationsResponse(recommendations=titles).model_dump(), status_code=200)


@router.get("/api/movies")
def list_movies(query: str = "", page: int = 1):
    """Search the catalog by title, or list popular movies when no query is given."""
    try:
        return search_movies(query=query.strip(), page=page)
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/api/movies/{movie_id}")
def movie_details(movie_id: int):
    try:
        return get_movie_details(movie_id)
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/api/people/{person_id}")
def person_details(person_id: int):
    try:
        return get_person_details(person_id)
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
