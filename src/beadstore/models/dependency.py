"""Dependency model"""

from sqlalchemy import Column, String, ForeignKey, Index

from .base import Base, DependencyType, value_enum


class Dependency(Base):
    """Directed edge: ``issue_id`` depends on ``depends_on_id``"""

    __tablename__ = "dependencies"

    # Composite primary key; type is deliberately not part of it
    issue_id = Column(String(64), ForeignKey("issues.id", ondelete="CASCADE"), primary_key=True)
    depends_on_id = Column(String(64), ForeignKey("issues.id", ondelete="CASCADE"), primary_key=True)

    type = Column(value_enum(DependencyType), nullable=False, default=DependencyType.BLOCKS)

    created_at = Column(String(40), nullable=False)
    created_by = Column(String(100), nullable=False, default="system")

    __table_args__ = (
        Index("idx_dependencies_issue", "issue_id"),
        Index("idx_dependencies_depends_on", "depends_on_id"),
        Index("idx_dependencies_depends_on_type", "depends_on_id", "type"),
    )

    def __repr__(self):
        return f"<Dependency(issue='{self.issue_id}', depends_on='{self.depends_on_id}', type='{self.type.value}')>"
