from datetime import datetime, timezone
from knowledge_base.extensions import db
from knowledge_base.utils.identifiers import generate_id


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=utc_now, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utc_now, onupdate=utc_now, nullable=False, index=True)


class BaseModel(db.Model, TimestampMixin):
    __abstract__ = True

    id = db.Column(db.String(36), primary_key=True, default=generate_id, index=True)

    def __init__(self, **kwargs):
        """
        Dummy __init__ to satisfy static type checkers (Pylance, MyPy).
        SQLAlchemy ORM will populate fields dynamically.
        """
        super().__init__(**kwargs)
