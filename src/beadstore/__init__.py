"""beadstore - embedded issue store with dependency-aware readiness"""

from .config import StoreConfig
from .errors import BeadsError, ConstraintViolation, DuplicateDependencyError, StoreNotFoundError
from .models import Comment, Dependency, DependencyType, Event, EventType, Issue, IssueType, Priority, Status
from .schemas import (
    BlockedIssue,
    CreateIssueOptions,
    IssueStats,
    IssueWithRelations,
    QueryOptions,
    UpdateIssueOptions,
)
from .store import BeadsStore, create_store

__version__ = "0.1.0"

__all__ = [
    "BeadsStore",
    "create_store",
    "StoreConfig",
    "BeadsError",
    "ConstraintViolation",
    "DuplicateDependencyError",
    "StoreNotFoundError",
    "Issue",
    "Dependency",
    "Comment",
    "Event",
    "Status",
    "IssueType",
    "DependencyType",
    "EventType",
    "Priority",
    "CreateIssueOptions",
    "UpdateIssueOptions",
    "QueryOptions",
    "IssueStats",
    "IssueWithRelations",
    "BlockedIssue",
]
