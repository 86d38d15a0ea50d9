"""Storage services over the SQLite database"""

from .database import Database, open_database
from .issue_service import IssueService
from .dependency_service import DependencyService
from .readiness import ReadinessService
from .query_service import QueryService
from .label_service import LabelService
from .comment_service import CommentService

__all__ = [
    "Database",
    "open_database",
    "IssueService",
    "DependencyService",
    "ReadinessService",
    "QueryService",
    "LabelService",
    "CommentService",
]
