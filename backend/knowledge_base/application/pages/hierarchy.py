from typing import Dict, Optional
from knowledge_base.extensions import db
from knowledge_base.exceptions import ValidationError
from knowledge_base.models.page import Page
from knowledge_base.domain.invariants.hierarchy import assert_acyclic


def assert_moves_allowed(moves: Dict[str, Optional[str]]) -> None:
    """
    Validate a set of proposed ``{page_id: new_parent_id}`` moves against the
    stored forest. Must run inside the caller's transaction.
    """
    parents = dict(db.session.query(Page.id, Page.parent_id).all())

    unknown = sorted(page_id for page_id in moves if page_id not in parents)
    if unknown:
        raise ValidationError(f"Unknown page ids: {', '.join(unknown)}")

    missing_parents = sorted({
        parent_id
        for parent_id in moves.values()
        if parent_id is not None and parent_id not in parents
    })
    if missing_parents:
        raise ValidationError(f"Unknown parent ids: {', '.join(missing_parents)}")

    parents.update(moves)
    assert_acyclic(parents, moves.keys())
