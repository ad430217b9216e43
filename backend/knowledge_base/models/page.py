from knowledge_base.extensions import db
from .base import BaseModel


class Page(BaseModel):
    __tablename__ = "pages"

    title = db.Column(db.String(500), nullable=False, default="Untitled")
    content = db.Column(db.Text, nullable=False, default="")
    parent_id = db.Column(
        db.String(36),
        db.ForeignKey("pages.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    position = db.Column(db.Integer, nullable=False, default=0)
    icon = db.Column(db.String(32), nullable=False, default="📄")

    __table_args__ = (
        db.Index("idx_pages_parent_position", "parent_id", "position"),
    )

    def __repr__(self):
        return f"<Page {self.id} {self.title!r}>"
