# main.py

import logging
from datetime import date
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.middleware.sessions import SessionMiddleware
from contextlib import asynccontextmanager

from config import settings
from database import get_db, create_tables, dispose_engine
from processing import (
    CATEGORIES,
    add_post,
    category_css_class,
    category_label,
    get_processed_posts,
    list_posts,
    sum_numbers,
    total_words,
    word_count,
)
from schemas import PostForm, PaginatedPostsResponse

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_ERROR = "All fields are required."
POST_ADDED_MESSAGE = "Post added successfully."
STORE_FAILURE_ERROR = "The post could not be saved. Please try again."
LISTING_FAILURE_ERROR = "Posts are unavailable right now."

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
templates.env.globals.update(
    category_label=category_label,
    category_css_class=category_css_class,
    word_count=word_count,
)

# --- Lifespan Management (for DB setup/teardown) ---

@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=settings.log_level)
    logger.info("Application startup: creating post tables")
    await create_tables()
    yield
    logger.info("Application shutdown")
    await dispose_engine()

# --- FastAPI App ---

app = FastAPI(lifespan=lifespan, title=settings.site_name, version="1.0.0")
app.add_middleware(SessionMiddleware, secret_key=settings.session_secret)


async def render_page(
    request: Request,
    session: AsyncSession,
    error: Optional[str] = None,
    success: Optional[str] = None,
) -> HTMLResponse:
    # Placeholder visitor, kept in the session only for the greeting
    user = request.session.setdefault("user", settings.default_user)
    try:
        posts = await list_posts(session)
    except Exception:
        logger.exception("Failed to load posts for rendering")
        await session.rollback()
        posts = []
        error = error or LISTING_FAILURE_ERROR
    context = {
        "page_title": settings.page_title,
        "site_name": settings.site_name,
        "admin_email": settings.admin_email,
        "user": user,
        "client_address": request.client.host if request.client else "unknown",
        "error": error,
        "success": success,
        "categories": CATEGORIES,
        "posts": posts,
        "total_words": total_words(posts),
        "demo_numbers": (1, 2, 3, 4, 5),
        "demo_sum": sum_numbers(1, 2, 3, 4, 5),
        "year": date.today().year,
    }
    return templates.TemplateResponse(request, "index.html", context)

# --- Page Endpoints ---

@app.get("/", response_class=HTMLResponse)
async def show_page(request: Request, session: AsyncSession = Depends(get_db)):
    return await render_page(request, session)


@app.post("/", response_class=HTMLResponse)
async def submit_post(
    request: Request,
    title: str = Form(""),
    content: str = Form(""),
    category: str = Form(""),
    session: AsyncSession = Depends(get_db),
):
    """
    Validate the submitted post and store it; the page is rendered either way.
    """
    try:
        form = PostForm(title=title, content=content, category=category)
    except ValidationError as exc:
        logger.info("Rejected post submission: %d invalid field(s)", exc.error_count())
        return await render_page(request, session, error=REQUIRED_FIELDS_ERROR)

    try:
        await add_post(session, form)
    except Exception:
        logger.exception("Failed to store post titled %r", form.title)
        await session.rollback()
        return await render_page(request, session, error=STORE_FAILURE_ERROR)
    return await render_page(request, session, success=POST_ADDED_MESSAGE)

# --- JSON Listing ---

@app.get("/posts/", response_model=PaginatedPostsResponse)
async def read_posts(
    category: Optional[str] = Query(None, description="Filter by category key"),
    offset: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(10, ge=1, le=100, description="Pagination limit"),
    session: AsyncSession = Depends(get_db)
):
    """
    Retrieve posts with word counts, optionally filtered by category, paginated.
    """
    total_count, words, processed_posts_data = await get_processed_posts(
        session=session,
        category=category,
        limit=limit,
        offset=offset
    )

    return PaginatedPostsResponse(
        total_count=total_count,
        total_words=words,
        posts=processed_posts_data,
    )

# --- Run with Uvicorn (for local testing) ---
# Use: uvicorn main:app --reload
