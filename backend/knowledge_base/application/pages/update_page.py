from typing import Any, Dict, List, Optional, Tuple
from flask import current_app
from sqlalchemy import select
from knowledge_base.extensions import db
from knowledge_base.exceptions import NotFound
from knowledge_base.models.page import Page
from knowledge_base.models.page_version import PageVersion
from knowledge_base.domain.invariants.page import assert_page_fields, normalize_parent_id
from knowledge_base.utils.audit import log_action
from knowledge_base.utils.transaction import transactional
from knowledge_base.utils.versioning import snapshot_if_changed
from .hierarchy import assert_moves_allowed


ALLOWED_UPDATE_FIELDS = ("title", "content", "parent_id", "position", "icon")


def lock_page(page_id: str) -> Page:
    page = (
        db.session.execute(
            select(Page).where(Page.id == page_id).with_for_update()
        )
        .scalar_one_or_none()
    )
    if page is None:
        raise NotFound("Page not found")
    return page


def apply_patch(
    page: Page,
    patch: Dict[str, Any],
    *,
    audit: bool = True,
) -> Tuple[List[str], Optional[PageVersion]]:
    """
    Apply a sparse patch to a locked page inside the caller's transaction.

    A PageVersion with the prior title/content is staged first when the
    patch changes either of them. Returns the changed fields and that
    snapshot. With ``audit=False`` the caller writes its own audit row.
    """
    if "parent_id" in patch and patch["parent_id"] != page.parent_id:
        assert_moves_allowed({page.id: patch["parent_id"]})

    version = snapshot_if_changed(page, patch)

    changed_fields = [
        field for field in ALLOWED_UPDATE_FIELDS
        if field in patch and getattr(page, field) != patch[field]
    ]
    for field in changed_fields:
        setattr(page, field, patch[field])

    if changed_fields:
        db.session.flush()

    if changed_fields and audit:
        log_action(
            action="page.update",
            entity_type="page",
            entity_id=page.id,
            payload={
                "fields": changed_fields,
                "version_id": version.id if version is not None else None,
            },
        )

    return changed_fields, version


def update_page(*, page_id: str, data: Dict[str, Any]) -> Page:
    """
    Partially update a page. Fields absent from ``data`` are left alone;
    unknown fields are ignored.

    Read, snapshot and write share one transaction so concurrent writers
    resolve as last-write-wins without losing version history.
    """
    patch = {field: data[field] for field in ALLOWED_UPDATE_FIELDS if field in data}
    if "parent_id" in patch:
        patch["parent_id"] = normalize_parent_id(patch["parent_id"])

    assert_page_fields(patch)

    with transactional():
        page = lock_page(page_id)
        changed_fields, _ = apply_patch(page, patch)

    if changed_fields:
        current_app.logger.debug("Updated page %s fields=%s", page_id, changed_fields)
    return page
