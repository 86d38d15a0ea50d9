"""Label model for issue tagging"""

from sqlalchemy import Column, String, ForeignKey, Index

from .base import Base


class Label(Base):
    """Label model for issue tagging"""

    __tablename__ = "labels"

    # Composite primary key
    issue_id = Column(String(64), ForeignKey("issues.id", ondelete="CASCADE"), primary_key=True)
    label = Column(String(100), primary_key=True)

    __table_args__ = (
        Index("idx_labels_label", "label"),
    )

    def __repr__(self):
        return f"<Label(issue='{self.issue_id}', label='{self.label}')>"
