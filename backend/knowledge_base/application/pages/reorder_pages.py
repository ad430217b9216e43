from typing import Any
from flask import current_app
from sqlalchemy import select
from knowledge_base.extensions import db
from knowledge_base.models.page import Page
from knowledge_base.domain.invariants.hierarchy import parse_reorder_items
from knowledge_base.utils.audit import log_action
from knowledge_base.utils.transaction import transactional
from .hierarchy import assert_moves_allowed


def reorder_pages(*, payload: Any) -> int:
    """
    Apply a batch of ``{id, parent_id, position}`` moves all-or-nothing.

    Rejected as a whole when malformed, when it names an unknown page or
    parent, or when it would introduce a cycle.
    """
    items = parse_reorder_items(payload)

    with transactional():
        assert_moves_allowed({item.id: item.parent_id for item in items})

        pages = {
            page.id: page
            for page in db.session.execute(
                select(Page)
                .where(Page.id.in_([item.id for item in items]))
                .with_for_update()
            ).scalars()
        }

        for item in items:
            page = pages[item.id]
            page.parent_id = item.parent_id
            page.position = item.position

        log_action(
            action="page.reorder",
            entity_type="page",
            entity_id="*",
            payload={"count": len(items)},
        )

    current_app.logger.debug("Reordered %d pages", len(items))
    return len(items)
