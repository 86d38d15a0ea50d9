"""BeadsStore: the public entry point over one beads database"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .config import StoreConfig
from .models import Comment, Dependency, DependencyType, Event, Issue
from .schemas import (
    BlockedIssue,
    CreateIssueOptions,
    IssueStats,
    IssueWithRelations,
    QueryOptions,
    UpdateIssueOptions,
)
from .storage import (
    CommentService,
    DependencyService,
    IssueService,
    LabelService,
    QueryService,
    ReadinessService,
    open_database,
)

logger = logging.getLogger(__name__)


class BeadsStore:
    """Issues, dependencies, labels, comments and their audit trail.

    Every method runs as a single transaction against the database.
    """

    def __init__(self, config: Optional[StoreConfig] = None):
        self.config = config or StoreConfig()
        self.db = open_database(self.config)

        actor = self.config.actor
        self.issues = IssueService(self.db, id_prefix=self.config.resolved_prefix(), actor=actor)
        self.dependencies = DependencyService(self.db, actor=actor)
        self.readiness = ReadinessService(self.db)
        self.queries = QueryService(self.db)
        self.labels = LabelService(self.db, actor=actor)
        self.comments = CommentService(self.db)

        logger.debug("Opened store at %s", self.config.db_path)

    def close(self):
        """Release the database connections"""
        self.db.dispose()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # Issues

    def create_issue(
        self,
        options: Union[CreateIssueOptions, Dict[str, Any], None] = None,
        actor: Optional[str] = None,
        **fields,
    ) -> Issue:
        return self.issues.create_issue(options, actor=actor, **fields)

    def get_issue(self, issue_id: str) -> Optional[Issue]:
        return self.issues.get_issue(issue_id)

    def get_issue_with_relations(self, issue_id: str) -> Optional[IssueWithRelations]:
        return self.issues.get_issue_with_relations(issue_id)

    def update_issue(
        self,
        issue_id: str,
        updates: Union[UpdateIssueOptions, Dict[str, Any]],
        actor: Optional[str] = None,
    ) -> Optional[Issue]:
        return self.issues.update_issue(issue_id, updates, actor=actor)

    def close_issue(self, issue_id: str, reason: Optional[str] = None, actor: Optional[str] = None) -> Optional[Issue]:
        return self.issues.close_issue(issue_id, reason=reason, actor=actor)

    def reopen_issue(self, issue_id: str, actor: Optional[str] = None) -> Optional[Issue]:
        return self.issues.reopen_issue(issue_id, actor=actor)

    def delete_issue(self, issue_id: str, reason: Optional[str] = None, actor: Optional[str] = None) -> bool:
        return self.issues.delete_issue(issue_id, reason=reason, actor=actor)

    def get_events(self, issue_id: str, limit: Optional[int] = None) -> List[Event]:
        return self.issues.get_events(issue_id, limit=limit)

    # Queries

    def list_issues(self, options: Union[QueryOptions, Dict[str, Any], None] = None, **filters) -> List[Issue]:
        return self.queries.list_issues(options, **filters)

    def count_issues(self, options: Union[QueryOptions, Dict[str, Any], None] = None, **filters) -> int:
        return self.queries.count_issues(options, **filters)

    def get_ready_issues(self, limit: Optional[int] = None) -> List[Issue]:
        return self.readiness.get_ready_issues(limit=limit)

    def get_blocked_issues(self) -> List[BlockedIssue]:
        return self.readiness.get_blocked_issues()

    def is_ready(self, issue_id: str) -> bool:
        return self.readiness.is_ready(issue_id)

    def get_stats(self) -> IssueStats:
        return self.queries.get_stats()

    # Dependencies

    def add_dependency(
        self,
        issue_id: str,
        depends_on_id: str,
        dependency_type: Union[DependencyType, str] = DependencyType.BLOCKS,
        actor: Optional[str] = None,
    ) -> Optional[Dependency]:
        return self.dependencies.add_dependency(issue_id, depends_on_id, dependency_type, actor=actor)

    def remove_dependency(self, issue_id: str, depends_on_id: str, actor: Optional[str] = None) -> bool:
        return self.dependencies.remove_dependency(issue_id, depends_on_id, actor=actor)

    def get_dependencies(self, issue_id: str) -> List[Dependency]:
        return self.dependencies.get_dependencies(issue_id)

    def get_dependents(self, issue_id: str) -> List[Dependency]:
        return self.dependencies.get_dependents(issue_id)

    # Labels

    def add_label(self, issue_id: str, label: str, actor: Optional[str] = None) -> bool:
        return self.labels.add_label(issue_id, label, actor=actor)

    def remove_label(self, issue_id: str, label: str, actor: Optional[str] = None) -> bool:
        return self.labels.remove_label(issue_id, label, actor=actor)

    def get_labels(self, issue_id: str) -> List[str]:
        return self.labels.get_labels(issue_id)

    # Comments

    def add_comment(self, issue_id: str, text: str, author: Optional[str] = None) -> Optional[Comment]:
        return self.comments.add_comment(issue_id, text, author or self.config.actor)

    def get_comments(self, issue_id: str) -> List[Comment]:
        return self.comments.get_comments(issue_id)


def create_store(config: Union[StoreConfig, str, Path, None] = None, **settings) -> BeadsStore:
    """Open a store from a config object, or from a database path plus settings"""
    if config is None:
        config = StoreConfig(**settings)
    elif not isinstance(config, StoreConfig):
        config = StoreConfig(db_path=Path(config), **settings)
    return BeadsStore(config)
