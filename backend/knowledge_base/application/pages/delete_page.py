from flask import current_app
from knowledge_base.extensions import db
from knowledge_base.exceptions import NotFound
from knowledge_base.models.base import utc_now
from knowledge_base.models.page import Page
from knowledge_base.models.page_version import PageVersion
from knowledge_base.utils.audit import log_action
from knowledge_base.utils.transaction import transactional


def delete_page(*, page_id: str) -> None:
    """
    Delete a page and its version history.

    Notes:
    - Direct children are promoted to roots (parent_id = NULL), never deleted
    - Grandchildren keep their parent, so subtrees below the children survive intact
    """
    with transactional():
        page = db.session.get(Page, page_id)
        if page is None:
            raise NotFound("Page not found")

        children = Page.query.filter_by(parent_id=page.id)
        promoted = [child_id for (child_id,) in children.with_entities(Page.id)]

        children.update(
            {Page.parent_id: None, Page.updated_at: utc_now()},
            synchronize_session=False,
        )

        removed_versions = (
            PageVersion.query
            .filter_by(page_id=page.id)
            .delete(synchronize_session=False)
        )

        db.session.delete(page)

        log_action(
            action="page.delete",
            entity_type="page",
            entity_id=page_id,
            payload={
                "promoted_children": promoted,
                "deleted_versions": removed_versions,
            },
        )

    current_app.logger.info(
        "Deleted page %s (%d children promoted, %d versions removed)",
        page_id, len(promoted), removed_versions,
    )
