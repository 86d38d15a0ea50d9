"""Issue model"""

from sqlalchemy import Column, Integer, String, Text, Index

from .base import Base, Status, IssueType, value_enum


class Issue(Base):
    """Issue row; soft-deleted when ``deleted_at`` is set"""

    __tablename__ = "issues"

    # Identity
    id = Column(String(64), primary_key=True)  # e.g., "bd-0mfz3k1q2a7k2"
    content_hash = Column(String(64), nullable=True)

    # Content
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False, default="")
    design = Column(Text, nullable=False, default="")
    acceptance_criteria = Column(Text, nullable=False, default="")
    notes = Column(Text, nullable=False, default="")

    # Classification
    status = Column(value_enum(Status), nullable=False, default=Status.OPEN)
    priority = Column(Integer, nullable=False, default=2)  # 0 (critical) to 3 (low)
    issue_type = Column(value_enum(IssueType), nullable=False, default=IssueType.TASK)

    assignee = Column(String(100), nullable=True)

    # Timestamps (ISO-8601 strings)
    created_at = Column(String(40), nullable=False)
    updated_at = Column(String(40), nullable=False)
    closed_at = Column(String(40), nullable=True)
    close_reason = Column(Text, default="")

    estimated_minutes = Column(Integer, nullable=True)
    external_ref = Column(String(200), nullable=True)
    source_repo = Column(String(200), default=".")

    # Compaction bookkeeping, kept for layout compatibility
    compaction_level = Column(Integer, default=0)
    compacted_at = Column(String(40), nullable=True)
    compacted_at_commit = Column(String(64), nullable=True)
    original_size = Column(Integer, nullable=True)

    # Soft delete
    deleted_at = Column(String(40), nullable=True)
    deleted_by = Column(String(100), default="")
    delete_reason = Column(Text, default="")
    original_type = Column(String(20), default="")

    __table_args__ = (
        Index("idx_issues_status", "status"),
        Index("idx_issues_priority", "priority"),
        Index("idx_issues_assignee", "assignee"),
        Index("idx_issues_created_at", "created_at"),
        Index("idx_issues_external_ref", "external_ref"),
        Index("idx_issues_source_repo", "source_repo"),
    )

    def __repr__(self):
        return f"<Issue(id='{self.id}', title='{self.title[:50]}', status='{self.status.value}')>"

    def to_dict(self):
        """Convert to dictionary for JSON serialization"""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "design": self.design,
            "acceptance_criteria": self.acceptance_criteria,
            "notes": self.notes,
            "status": self.status.value,
            "priority": int(self.priority),
            "issue_type": self.issue_type.value,
            "assignee": self.assignee,
            "estimated_minutes": self.estimated_minutes,
            "external_ref": self.external_ref,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "closed_at": self.closed_at,
            "close_reason": self.close_reason,
            "deleted_at": self.deleted_at,
        }
