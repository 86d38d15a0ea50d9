"""beadstore models package"""

from .base import (
    ACTIVE_STATUSES,
    Base,
    DependencyType,
    EventType,
    IssueType,
    Priority,
    Status,
    now_iso,
)
from .issue import Issue
from .dependency import Dependency
from .label import Label
from .comment import Comment
from .event import Event
from .auxiliary import (
    BlockedIssueCache,
    ChildCounter,
    ConfigEntry,
    DirtyIssue,
    ExportHash,
    MetadataEntry,
)

__all__ = [
    "ACTIVE_STATUSES",
    "Base",
    "Status",
    "IssueType",
    "DependencyType",
    "EventType",
    "Priority",
    "now_iso",
    "Issue",
    "Dependency",
    "Label",
    "Comment",
    "Event",
    "BlockedIssueCache",
    "ChildCounter",
    "ConfigEntry",
    "DirtyIssue",
    "ExportHash",
    "MetadataEntry",
]
