# schemas.py

from typing import Annotated, List

from pydantic import BaseModel, ConfigDict, StringConstraints

# Trimmed, required text field
RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# --- Form Input ---

class PostForm(BaseModel):
    """Submitted post, validated once at the request boundary."""
    model_config = ConfigDict(frozen=True)

    title: RequiredText
    content: RequiredText
    category: RequiredText

# --- Response Models ---

class ProcessedPost(BaseModel):
    id: int
    title: str
    category: str
    category_label: str
    word_count: int

class PaginatedPostsResponse(BaseModel):
    total_count: int
    total_words: int
    posts: List[ProcessedPost]
