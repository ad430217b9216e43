from typing import Any, Dict
from flask import current_app
from knowledge_base.extensions import db
from knowledge_base.exceptions import ValidationError
from knowledge_base.models.page import Page
from knowledge_base.domain.invariants.page import assert_page_fields, normalize_parent_id
from knowledge_base.utils.audit import log_action
from knowledge_base.utils.order import next_position
from knowledge_base.utils.transaction import transactional


def create_page(*, data: Dict[str, Any]) -> Page:
    """
    Create a page, as a root or as the last child of ``parent_id``.

    Edge cases handled:
    - Missing title/icon fall back to configured defaults
    - Unknown parent id is rejected
    """
    config = current_app.config

    fields = {
        "title": data.get("title"),
        "content": data.get("content"),
        "icon": data.get("icon"),
        "parent_id": normalize_parent_id(data.get("parent_id")),
    }
    if fields["title"] is None:
        fields["title"] = config["DEFAULT_PAGE_TITLE"]
    if fields["content"] is None:
        fields["content"] = ""
    if fields["icon"] is None:
        fields["icon"] = config["DEFAULT_PAGE_ICON"]

    assert_page_fields(fields)

    with transactional():
        parent_id = fields["parent_id"]
        if parent_id is not None and db.session.get(Page, parent_id) is None:
            raise ValidationError(f"Parent page {parent_id} not found")

        page = Page()
        page.title = fields["title"]
        page.content = fields["content"]
        page.icon = fields["icon"]
        page.parent_id = parent_id
        page.position = next_position(Page, parent_id)

        db.session.add(page)
        db.session.flush()  # ensures page.id exists

        log_action(
            action="page.create",
            entity_type="page",
            entity_id=page.id,
            payload={"title": page.title, "parent_id": parent_id},
        )

    current_app.logger.info("Created page %s under %s", page.id, parent_id or "root")
    return page
