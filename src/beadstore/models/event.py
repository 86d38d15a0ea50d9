"""Event model for audit trail"""

from sqlalchemy import Column, Integer, String, Text, ForeignKey, Index

from .base import Base


class Event(Base):
    """Event model for complete audit trail"""

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)

    issue_id = Column(String(64), ForeignKey("issues.id", ondelete="CASCADE"), nullable=False)

    # Free-form tag: "created", "closed", "status_changed", ...
    event_type = Column(String(50), nullable=False)
    actor = Column(String(100), nullable=False)  # who made the change

    # Change tracking
    old_value = Column(Text, nullable=True)
    new_value = Column(Text, nullable=True)
    comment = Column(Text, nullable=True)

    created_at = Column(String(40), nullable=False)

    __table_args__ = (
        Index("idx_events_issue", "issue_id"),
        Index("idx_events_created_at", "created_at"),
    )

    def __repr__(self):
        return f"<Event(id={self.id}, issue='{self.issue_id}', type='{self.event_type}', actor='{self.actor}')>"
