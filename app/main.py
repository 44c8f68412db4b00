import os
from pathlib import Path
from typing import Optional

import asyncpg
import httpx
from fastapi import FastAPI, Query, Request
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, Field
from starlette import status
from starlette.responses import JSONResponse

from app.controller import MovieController, RecommendationInProgressError
from app.db.postgres import PostgresStore
from app.logger import logger
from app.models import ScoredCandidate, SearchResult, Title
from app.omdb.client import OMDB_URL, OmdbClient
from app.utils import format_timestamp, timed

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

app = FastAPI()
app.mount("/static", StaticFiles(directory=TEMPLATES_DIR), name="static")

templates = Jinja2Templates(directory=TEMPLATES_DIR)
templates.env.filters["ago"] = format_timestamp


class RateParams(BaseModel):
    movie_id: str = Field(min_length=1)
    rating: int = Field(ge=1, le=5)


class WatchParams(BaseModel):
    id: str = Field(min_length=1)
    title: str
    year: str = ""
    poster: Optional[str] = None


def _title_to_dict(title: Title) -> dict:
    return {
        "id": title.id,
        "title": title.title,
        "genre": title.genre,
        "year": title.year,
        "rating": title.rating,
        "poster": title.poster,
        "plot": title.plot,
    }


def _scored_to_dict(candidate: ScoredCandidate) -> dict:
    return {**_title_to_dict(candidate.title), "score": candidate.score}


def _result_to_dict(result: SearchResult) -> dict:
    return result._asdict()


@app.on_event("startup")
@timed
async def startup_event():
    app.state.pool = await asyncpg.create_pool(os.environ["POSTGRES_URI"])
    app.state.http_client = httpx.AsyncClient(
        timeout=float(os.environ.get("OMDB_TIMEOUT") or 10)
    )
    client = OmdbClient(
        api_key=os.environ["OMDB_API_KEY"],
        http_client=app.state.http_client,
        base_url=os.environ.get("OMDB_URL") or OMDB_URL,
    )
    app.state.controller = MovieController(PostgresStore(app.state.pool), client)
    await app.state.controller.load()


@app.on_event("shutdown")
async def shutdown_event():
    await app.state.http_client.aclose()
    await app.state.pool.close()


@app.get("/")
async def home(request: Request):
    controller: MovieController = request.app.state.controller
    return templates.TemplateResponse(
        request,
        "search.html",
        {"state": controller.state, "recommending": controller.recommending},
    )


@app.get("/search")
async def search(request: Request, query: str = ""):
    controller: MovieController = request.app.state.controller
    movies = await controller.search(query)
    return templates.TemplateResponse(
        request,
        "search_results.html",
        {"movies": movies, "ratings": controller.state.ratings},
    )


@app.get("/search_json")
@timed
async def search_json(request: Request, query: str = "") -> JSONResponse:
    controller: MovieController = request.app.state.controller
    movies = await controller.search(query)
    return JSONResponse([_result_to_dict(movie) for movie in movies])


@app.get("/search_suggestions")
async def search_suggestions(
    request: Request, query: str = "", limit: int = Query(ge=1, le=20, default=5)
) -> JSONResponse:
    controller: MovieController = request.app.state.controller
    return JSONResponse(controller.suggest(query, limit=limit))


@app.get("/movie/{movie_id}")
async def movie_details(request: Request, movie_id: str) -> JSONResponse:
    controller: MovieController = request.app.state.controller
    title = await controller.client.get_details(movie_id)
    if title is None:
        return JSONResponse(
            {"error": f"movie ID {movie_id} not found"}, status_code=status.HTTP_404_NOT_FOUND
        )
    return JSONResponse({
        **_title_to_dict(title),
        "director": title.director,
        "actors": title.actors,
        "features": list(title.features),
        "rating_given": controller.state.ratings.get(movie_id),
    })


@app.post("/rate_movie")
async def rate_movie(request: Request, body: RateParams) -> JSONResponse:
    controller: MovieController = request.app.state.controller
    try:
        await controller.rate(body.movie_id, body.rating)
    except ValueError as exc:
        return JSONResponse({"error": str(exc)}, status_code=status.HTTP_400_BAD_REQUEST)
    except Exception as exc:
        logger.error(f"failed to rate movie {body.movie_id}: {exc}")
        return JSONResponse({"error": "unknown internal exception"}, status_code=500)
    return JSONResponse({"status": "ok"}, status_code=200)


@app.get("/ratings")
async def ratings(request: Request) -> JSONResponse:
    return JSONResponse(request.app.state.controller.state.ratings)


@app.post("/watch")
async def watch(request: Request, body: WatchParams) -> JSONResponse:
    controller: MovieController = request.app.state.controller
    movie = SearchResult(id=body.id, title=body.title, year=body.year, poster=body.poster, type="movie")
    await controller.add_to_watch_history(movie)
    return JSONResponse({"status": "ok"}, status_code=200)


@app.get("/history")
async def history(request: Request):
    controller: MovieController = request.app.state.controller
    return templates.TemplateResponse(
        request,
        "history.html",
        {
            "search_history": controller.state.search_history,
            "watch_history": controller.state.watch_history,
        },
    )


@app.delete("/search_history")
async def clear_search_history(request: Request) -> JSONResponse:
    await request.app.state.controller.clear_search_history()
    return JSONResponse({"status": "ok"}, status_code=200)


@app.delete("/watch_history")
async def clear_watch_history(request: Request) -> JSONResponse:
    await request.app.state.controller.clear_watch_history()
    return JSONResponse({"status": "ok"}, status_code=200)


@app.get("/recommend_json")
@timed
async def recommend_json(request: Request) -> JSONResponse:
    controller: MovieController = request.app.state.controller
    try:
        recos = await controller.generate_recommendations()
    except RecommendationInProgressError as exc:
        logger.warning(str(exc))
        return JSONResponse({"error": str(exc)}, status_code=status.HTTP_409_CONFLICT)
    except Exception as exc:
        logger.error(f"recommendation crashed: {exc}")
        return JSONResponse({"error": "unknown internal exception"}, status_code=500)
    return JSONResponse([_scored_to_dict(reco) for reco in recos])


@app.get("/recommend_html")
async def recommend_html(request: Request):
    response = await recommend_json(request)
    if response.status_code != 200:
        return response
    controller: MovieController = request.app.state.controller
    return templates.TemplateResponse(
        request, "recommendations.html", {"movies": controller.state.recommendations}
    )
