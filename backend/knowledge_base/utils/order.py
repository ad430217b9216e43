from knowledge_base.extensions import db


def sibling_filter(model, parent_id):
    column = model.parent_id
    return column.is_(None) if parent_id is None else column == parent_id


def next_position(model, parent_id, position_field="position"):
    """
    Next free sibling position under ``parent_id`` (0 for the first child).
    """
    column = getattr(model, position_field)
    current_max = (
        db.session.query(db.func.max(column))
        .filter(sibling_filter(model, parent_id))
        .scalar()
    )
    return 0 if current_max is None else current_max + 1
