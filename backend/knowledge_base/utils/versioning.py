from typing import Any, Dict, Optional
from knowledge_base.extensions import db

SNAPSHOT_FIELDS = ("title", "content")


def changes_snapshot_fields(page, data: Dict[str, Any]) -> bool:
    """True when the patch changes title or content relative to the stored row."""
    return any(
        field in data and data[field] != getattr(page, field)
        for field in SNAPSHOT_FIELDS
    )


def snapshot_page(page):
    """
    Append a PageVersion holding the page's *current* title/content.

    Must run before the new values are written onto ``page``.
    """
    from knowledge_base.models.page_version import PageVersion

    version = PageVersion()
    version.page_id = page.id
    version.title = page.title
    version.content = page.content or ""

    db.session.add(version)
    return version


def snapshot_if_changed(page, data: Dict[str, Any]) -> Optional[Any]:
    if not changes_snapshot_fields(page, data):
        return None
    return snapshot_page(page)
