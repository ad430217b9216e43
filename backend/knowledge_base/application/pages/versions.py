from typing import List, Optional
from flask import current_app
from knowledge_base.exceptions import NotFound
from knowledge_base.models.page import Page
from knowledge_base.models.page_version import PageVersion
from knowledge_base.utils.audit import log_action
from knowledge_base.utils.transaction import transactional
from .queries import get_page
from .update_page import apply_patch, lock_page


def list_versions(*, page_id: str, limit: Optional[int] = None) -> List[PageVersion]:
    """Newest first; ``limit`` is clamped to VERSION_LIST_MAX."""
    config = current_app.config
    get_page(page_id=page_id)

    limit = min(limit or config["VERSION_LIST_LIMIT"], config["VERSION_LIST_MAX"])

    return (
        PageVersion.query
        .filter_by(page_id=page_id)
        .order_by(PageVersion.id.desc())
        .limit(limit)
        .all()
    )


def get_version(*, page_id: str, version_id: int) -> PageVersion:
    version = PageVersion.query.filter_by(id=version_id, page_id=page_id).first()
    if version is None:
        raise NotFound("Version not found")
    return version


def restore_version(*, page_id: str, version_id: int) -> Page:
    """
    Bring a past title/content back as a regular update, so the state being
    replaced is itself snapshotted first. Audited once, as ``page.restore``.
    """
    with transactional():
        page = lock_page(page_id)
        version = get_version(page_id=page_id, version_id=version_id)

        changed_fields, snapshot = apply_patch(
            page,
            {"title": version.title, "content": version.content},
            audit=False,
        )

        log_action(
            action="page.restore",
            entity_type="page",
            entity_id=page.id,
            payload={
                "version_id": version.id,
                "fields": changed_fields,
                "snapshot_version_id": snapshot.id if snapshot is not None else None,
            },
        )

    current_app.logger.info("Restored page %s to version %s", page_id, version_id)
    return page
