from .create_page import create_page
from .update_page import update_page
from .delete_page import delete_page
from .reorder_pages import reorder_pages
from .search_pages import search_pages, SearchResult
from .queries import list_pages, get_page, page_tree, page_breadcrumbs
from .versions import list_versions, get_version, restore_version

__all__ = [
    "create_page",
    "update_page",
    "delete_page",
    "reorder_pages",
    "search_pages",
    "SearchResult",
    "list_pages",
    "get_page",
    "page_tree",
    "page_breadcrumbs",
    "list_versions",
    "get_version",
    "restore_version",
]
