"""Dependency service: directed, typed edges between issues"""

import logging
from typing import List, Optional, Union

from ..errors import DuplicateDependencyError
from ..models import Dependency, DependencyType, EventType, now_iso
from .common import get_live_issue, record_event
from .database import Database

logger = logging.getLogger(__name__)


def edge_label(dependency_type: DependencyType, depends_on_id: str) -> str:
    """Event payload for an edge, e.g. ``blocks:bd-0mfz3k1q2a7k2``"""
    return f"{dependency_type.value}:{depends_on_id}"


class DependencyService:
    """Service class for dependency operations.

    Edges are keyed by ``(issue_id, depends_on_id)`` only. No cycle check is
    made here; readiness only ever looks one hop along an edge.
    """

    def __init__(self, db: Database, actor: str = "system"):
        self.db = db
        self.actor = actor

    def add_dependency(
        self,
        issue_id: str,
        depends_on_id: str,
        dependency_type: Union[DependencyType, str] = DependencyType.BLOCKS,
        actor: Optional[str] = None,
    ) -> Optional[Dependency]:
        """Add an edge ``issue_id -> depends_on_id``.

        Returns ``None`` when either issue is missing or deleted. Raises
        ``DuplicateDependencyError`` when the pair is already linked,
        whatever the existing edge's type.
        """
        dependency_type = DependencyType(dependency_type)
        actor = actor or self.actor

        with self.db.session() as session:
            issue = get_live_issue(session, issue_id)
            depends_on_issue = issue if depends_on_id == issue_id else get_live_issue(session, depends_on_id)
            if not issue or not depends_on_issue:
                return None

            existing = session.get(Dependency, (issue_id, depends_on_id))
            if existing:
                raise DuplicateDependencyError(issue_id, depends_on_id, existing.type.value)

            now = now_iso()
            dependency = Dependency(
                issue_id=issue_id,
                depends_on_id=depends_on_id,
                type=dependency_type,
                created_at=now,
                created_by=actor,
            )
            session.add(dependency)

            record_event(
                session,
                issue_id,
                EventType.DEPENDENCY_ADDED,
                actor,
                new_value=edge_label(dependency_type, depends_on_id),
                created_at=now,
            )

            session.flush()
            session.refresh(dependency)
            session.expunge(dependency)
            logger.debug("Added %s dependency %s -> %s", dependency_type.value, issue_id, depends_on_id)
            return dependency

    def remove_dependency(
        self,
        issue_id: str,
        depends_on_id: str,
        actor: Optional[str] = None,
    ) -> bool:
        """Remove an edge if present; always reports success"""
        actor = actor or self.actor

        with self.db.session() as session:
            dependency = session.get(Dependency, (issue_id, depends_on_id))
            if dependency is None:
                return True

            record_event(
                session,
                issue_id,
                EventType.DEPENDENCY_REMOVED,
                actor,
                old_value=edge_label(dependency.type, depends_on_id),
            )
            session.delete(dependency)
            logger.debug("Removed dependency %s -> %s", issue_id, depends_on_id)
            return True

    def get_dependencies(self, issue_id: str) -> List[Dependency]:
        """Get all dependencies for an issue (what this issue depends on)"""
        with self.db.session() as session:
            dependencies = (
                session.query(Dependency)
                .filter(Dependency.issue_id == issue_id)
                .order_by(Dependency.created_at, Dependency.depends_on_id)
                .all()
            )

            for dep in dependencies:
                session.expunge(dep)

            return dependencies

    def get_dependents(self, issue_id: str) -> List[Dependency]:
        """Get all dependents of an issue (what depends on this issue)"""
        with self.db.session() as session:
            dependents = (
                session.query(Dependency)
                .filter(Dependency.depends_on_id == issue_id)
                .order_by(Dependency.created_at, Dependency.issue_id)
                .all()
            )

            for dep in dependents:
                session.expunge(dep)

            return dependents
