from dataclasses import dataclass
from typing import List, Optional
from flask import current_app
from sqlalchemy import func, or_
from knowledge_base.models.page import Page
from knowledge_base.domain.search import excerpt, normalize_query


@dataclass
class SearchResult:
    page: Page
    snippet: str


def search_pages(*, query: Optional[str], limit: Optional[int] = None) -> List[SearchResult]:
    """
    Command-palette search: title OR content substring, case-insensitive,
    most recently updated first. A blank query matches nothing.
    """
    needle = normalize_query(query)
    if not needle:
        return []

    config = current_app.config
    limit = limit or config["SEARCH_RESULT_LIMIT"]
    lowered = needle.lower()

    rows = (
        Page.query
        .filter(
            or_(
                func.lower(Page.title).contains(lowered, autoescape=True),
                func.lower(Page.content).contains(lowered, autoescape=True),
            )
        )
        .order_by(Page.updated_at.desc(), Page.created_at.desc())
        .limit(limit)
        .all()
    )

    snippet_length = config["SEARCH_SNIPPET_LENGTH"]
    return [SearchResult(page=row, snippet=excerpt(row.content, snippet_length)) for row in rows]
