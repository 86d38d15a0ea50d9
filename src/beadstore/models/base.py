"""Base SQLAlchemy models and enumerations"""

from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import declarative_base
from datetime import datetime, timezone
import enum

Base = declarative_base()


class Status(enum.Enum):
    """Issue status enumeration"""
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    CLOSED = "closed"


class IssueType(enum.Enum):
    """Issue type enumeration"""
    TASK = "task"
    BUG = "bug"
    FEATURE = "feature"
    EPIC = "epic"
    CHORE = "chore"


class DependencyType(enum.Enum):
    """Dependency type enumeration"""
    BLOCKS = "blocks"
    RELATED = "related"
    PARENT_CHILD = "parent-child"
    DISCOVERED_FROM = "discovered-from"


class EventType(enum.Enum):
    """Fixed event names; field diffs use ``{field}_changed`` instead"""
    CREATED = "created"
    CLOSED = "closed"
    REOPENED = "reopened"
    COMMENTED = "commented"
    DEPENDENCY_ADDED = "dependency_added"
    DEPENDENCY_REMOVED = "dependency_removed"
    LABEL_ADDED = "label_added"
    LABEL_REMOVED = "label_removed"


class Priority(enum.IntEnum):
    """Priority levels, lower is more urgent"""
    CRITICAL = 0
    HIGH = 1
    NORMAL = 2
    LOW = 3


# Statuses that make an issue count as a blocker
ACTIVE_STATUSES = (Status.OPEN, Status.IN_PROGRESS, Status.BLOCKED)


def value_enum(enum_cls, length: int = 20) -> SAEnum:
    """Enum column type storing member values ("in_progress") rather than names"""
    return SAEnum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        create_constraint=False,
        validate_strings=True,
        length=length,
    )


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string"""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")
