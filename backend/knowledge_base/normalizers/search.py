from .page import _timestamp


def normalize_search_result(result):
    page = result.page
    return {
        "id": page.id,
        "title": page.title,
        "parent_id": page.parent_id,
        "icon": page.icon,
        "updated_at": _timestamp(page.updated_at),
        "snippet": result.snippet,
    }
