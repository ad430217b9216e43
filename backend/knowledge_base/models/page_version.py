from knowledge_base.extensions import db
from .base import utc_now


class PageVersion(db.Model):
    """Append-only snapshot of a page's title/content taken before an overwrite."""

    __tablename__ = "page_versions"

    # Integer autoincrement: ids grow monotonically, newest has the highest id
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    page_id = db.Column(
        db.String(36),
        db.ForeignKey("pages.id", ondelete="CASCADE"),
        nullable=False,
    )

    title = db.Column(db.String(500), nullable=False)
    content = db.Column(db.Text, nullable=False, default="")

    created_at = db.Column(db.DateTime, default=utc_now, nullable=False)

    __table_args__ = (
        db.Index("idx_page_version_page", "page_id", "id"),
    )
