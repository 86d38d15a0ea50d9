"""Comment model"""

from sqlalchemy import Column, Integer, String, Text, ForeignKey, Index

from .base import Base


class Comment(Base):
    """Append-only discussion entry on an issue"""

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    issue_id = Column(String(64), ForeignKey("issues.id", ondelete="CASCADE"), nullable=False)
    author = Column(String(100), nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(String(40), nullable=False)

    __table_args__ = (
        Index("idx_comments_issue", "issue_id"),
        Index("idx_comments_created_at", "created_at"),
    )

    def __repr__(self):
        return f"<Comment(id={self.id}, issue='{self.issue_id}', author='{self.author}')>"
