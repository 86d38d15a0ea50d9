"""Auxiliary tables of the beads layout.

The core never writes these; they exist so the database stays compatible
with other beads tooling (JSONL export, hierarchy counters, caches). Every
table that references an issue cascades on hard delete.
"""

from sqlalchemy import Column, Integer, String, Text, ForeignKey, Index

from .base import Base


class ConfigEntry(Base):
    __tablename__ = "config"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)


class MetadataEntry(Base):
    __tablename__ = "metadata"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)


class DirtyIssue(Base):
    """Issues awaiting JSONL export"""

    __tablename__ = "dirty_issues"

    issue_id = Column(String(64), ForeignKey("issues.id", ondelete="CASCADE"), primary_key=True)
    marked_at = Column(String(40), nullable=False)
    content_hash = Column(String(64), nullable=True)

    __table_args__ = (
        Index("idx_dirty_issues_marked_at", "marked_at"),
    )


class ExportHash(Base):
    __tablename__ = "export_hashes"

    issue_id = Column(String(64), ForeignKey("issues.id", ondelete="CASCADE"), primary_key=True)
    content_hash = Column(String(64), nullable=False)
    exported_at = Column(String(40), nullable=False)


class ChildCounter(Base):
    __tablename__ = "child_counters"

    parent_id = Column(String(64), ForeignKey("issues.id", ondelete="CASCADE"), primary_key=True)
    last_child = Column(Integer, nullable=False, default=0)


class BlockedIssueCache(Base):
    __tablename__ = "blocked_issues_cache"

    issue_id = Column(String(64), ForeignKey("issues.id", ondelete="CASCADE"), primary_key=True)
