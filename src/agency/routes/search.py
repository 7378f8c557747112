"""Search API endpoints: query, static index generation and reindexing."""

import asyncio
import sqlite3

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from agency.config import Settings
from agency.locale import validate_locale
from agency.search.indexer import SearchIndexer
from agency.search.query import SearchBackendError, search_records
from agency.search.schemas import ErrorResponse, SearchResponse
from agency.search.static_index import StaticIndexError, generate_static_index

logger = structlog.get_logger()

router = APIRouter(tags=["search"])


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the ``{"error": ...}`` body used for every failed request."""
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get(
    "/search",
    response_model=SearchResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Search artists, employees, posts, repertoire and pages",
)
async def search(
    request: Request,
    q: str | None = Query(default=None, max_length=200, description="Search query"),
    locale: str | None = Query(default=None, description="Locale, 'de' or 'en'"),
    limit: int | None = Query(default=None, description="Results per page"),
    offset: int = Query(default=0, description="Results to skip"),
) -> SearchResponse | JSONResponse:
    """Substring search over the normalized titles of one locale.

    Args:
        request: FastAPI request (provides access to app state).
        q: Search query; required and non-blank.
        locale: Locale to search; unsupported values fall back to "de".
        limit: Page size, capped at the configured maximum.
        offset: Pagination offset.

    Returns:
        Paginated results, or an error body.
    """
    if q is None or not q.strip():
        return error_response(400, 'Query parameter "q" is required')

    settings: Settings = request.app.state.settings
    page_size = settings.search_default_limit if limit is None else limit
    if page_size < 1:
        return error_response(400, 'Query parameter "limit" must be at least 1')
    if offset < 0:
        return error_response(400, 'Query parameter "offset" must not be negative')
    page_size = min(page_size, settings.search_max_limit)

    try:
        return search_records(
            store=request.app.state.store,
            repository=request.app.state.repository,
            query=q,
            locale=validate_locale(locale),
            limit=page_size,
            offset=offset,
        )
    except SearchBackendError:
        logger.exception("search_failed", query=q, locale=locale)
        return error_response(500, "Internal server error")


@router.get("/search/generate-index", summary="Write the static fallback search indexes")
async def generate_index(request: Request) -> JSONResponse:
    """Write ``search-index-{locale}.json`` for every configured locale.

    Returns:
        Generated file names and per-locale statistics, or 500 with
        ``success: false``.
    """
    settings: Settings = request.app.state.settings

    try:
        summary = await asyncio.to_thread(
            generate_static_index,
            request.app.state.store,
            settings.public_dir,
            settings.locales,
            settings.static_index_format,
        )
    except StaticIndexError as e:
        logger.exception("static_index_failed")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Failed to generate search index",
                "message": str(e),
            },
        )

    return JSONResponse(
        content={
            "success": True,
            "message": "Static search index generated successfully",
            "files": summary["files"],
            "stats": summary["stats"],
        }
    )


@router.post("/search/reindex", summary="Rebuild all search records")
async def reindex(request: Request) -> JSONResponse:
    """Rebuild the search record store from the content repository.

    Returns:
        Number of records written, or 500 if the store fails.
    """
    indexer: SearchIndexer = request.app.state.indexer

    try:
        count = await asyncio.to_thread(indexer.reindex)
    except sqlite3.Error:
        logger.exception("search_reindex_failed")
        return error_response(500, "Internal server error")

    return JSONResponse(content={"success": True, "records": count})
