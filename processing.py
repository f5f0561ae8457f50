# processing.py

import logging
from types import MappingProxyType
from typing import Optional, List, Dict, Any, Iterable, Mapping, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models import Post
from schemas import PostForm

logger = logging.getLogger(__name__)

# Fixed category catalog: key -> display label
CATEGORIES: Mapping[str, str] = MappingProxyType({
    "php": "PHP",
    "web": "Web Development",
    "db": "Databases",
})

OTHER_CATEGORY = "other"
OTHER_LABEL = "Other"


def category_label(key: str) -> str:
    return CATEGORIES.get(key, OTHER_LABEL)


def category_css_class(key: str) -> str:
    return key if key in CATEGORIES else OTHER_CATEGORY


# Helper functions for the word statistics
def word_count(text: str) -> int:
    if not text:
        return 0
    return len(text.split())


def total_words(posts: Iterable[Post]) -> int:
    return sum(map(word_count, (post.content for post in posts)))


def sum_numbers(*numbers: float) -> float:
    return sum(numbers)


async def add_post(session: AsyncSession, form: PostForm) -> Post:
    """Stores a validated post and returns it."""
    post = Post(title=form.title, content=form.content, category=form.category)
    session.add(post)
    await session.commit()
    logger.info("Added post id=%s category=%s", post.id, post.category)
    return post


async def list_posts(session: AsyncSession) -> List[Post]:
    result = await session.execute(select(Post).order_by(Post.id))
    return list(result.scalars().all())


# Core function for filtering, processing, and paginating posts
async def get_processed_posts(
    session: AsyncSession,
    category: Optional[str] = None,
    limit: int = 10, # Default page size
    offset: int = 0  # Default starting point
) -> Tuple[int, int, List[Dict[str, Any]]]:
    """Fetches posts for one page with per-post word counts.

    Returns the total number of matching posts, the total word count across
    all of them (not just the page), and the processed page.
    """

    base_stmt = select(Post)
    if category:
        base_stmt = base_stmt.where(Post.category == category)

    # --- Get Total Count ---
    count_stmt = select(func.count()).select_from(base_stmt.subquery())
    total_count_result = await session.execute(count_stmt)
    total_count = total_count_result.scalar_one_or_none() or 0

    # Word totals cover every matching post
    all_contents = await session.execute(base_stmt.with_only_columns(Post.content))
    words = sum(word_count(content) for content in all_contents.scalars())

    # --- Get Paginated Results ---
    paginated_stmt = base_stmt.order_by(Post.id).offset(offset).limit(limit)
    result = await session.execute(paginated_stmt)
    posts_on_page = result.scalars().all()

    processed_results = []
    for post in posts_on_page:
        processed_results.append({
            "id": post.id,
            "title": post.title,
            "category": post.category,
            "category_label": category_label(post.category),
            "word_count": word_count(post.content),
        })

    return total_count, words, processed_results
