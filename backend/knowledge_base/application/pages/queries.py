from typing import List, Optional
from knowledge_base.extensions import db
from knowledge_base.exceptions import NotFound
from knowledge_base.models.page import Page
from knowledge_base.domain.tree import TreeNode, breadcrumb_trail, sidebar_tree


def list_pages() -> List[Page]:
    """Flat page list in sibling render order."""
    return (
        Page.query
        .order_by(Page.position.asc(), Page.created_at.asc())
        .all()
    )


def get_page(*, page_id: str) -> Page:
    page = db.session.get(Page, page_id)
    if page is None:
        raise NotFound("Page not found")
    return page


def page_tree(*, query: Optional[str] = None) -> List[TreeNode]:
    return sidebar_tree(list_pages(), query)


def page_breadcrumbs(*, page_id: str) -> List[Page]:
    get_page(page_id=page_id)
    return breadcrumb_trail(list_pages(), page_id)
