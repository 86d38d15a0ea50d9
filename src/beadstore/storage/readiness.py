"""Readiness: which issues can be worked on and which are blocked.

An issue is blocked when it is the source of a ``blocks`` edge whose target
is a live issue in an active status (open, in_progress, blocked). Only that
single hop is examined: a blocker's own blockers do not propagate, which
also makes dependency cycles harmless. Nothing is cached; every call reads
the current store state.
"""

import logging
from typing import List, Optional, Set

from sqlalchemy import func
from sqlalchemy.orm import Session, aliased

from ..models import ACTIVE_STATUSES, Dependency, DependencyType, Issue, Status
from ..schemas import BlockedIssue
from .common import check_limit
from .database import Database

logger = logging.getLogger(__name__)


def active_blocker_source_ids(session: Session) -> Set[str]:
    """Ids of issues with at least one ``blocks`` edge to a live active issue"""
    # A soft-deleted target never blocks, even while its status is still active
    blocker = aliased(Issue)
    rows = (
        session.query(Dependency.issue_id)
        .join(blocker, Dependency.depends_on_id == blocker.id)
        .filter(
            Dependency.type == DependencyType.BLOCKS,
            blocker.status.in_(ACTIVE_STATUSES),
            blocker.deleted_at.is_(None),
        )
        .all()
    )
    return {row.issue_id for row in rows}


class ReadinessService:
    """Ready and blocked views over issues and their ``blocks`` edges"""

    def __init__(self, db: Database):
        self.db = db

    def get_ready_issues(self, limit: Optional[int] = None) -> List[Issue]:
        """Open issues with no active direct blocker, most urgent first"""
        check_limit(limit)
        with self.db.session() as session:
            open_issues = (
                session.query(Issue)
                .filter(Issue.status == Status.OPEN, Issue.deleted_at.is_(None))
                .order_by(Issue.priority, Issue.created_at, Issue.id)
                .all()
            )
            blocked_ids = active_blocker_source_ids(session)

            ready = [issue for issue in open_issues if issue.id not in blocked_ids]
            if limit is not None:
                ready = ready[:limit]

            logger.debug(
                "Ready issues: %d of %d open (%d with active blockers)",
                len(ready), len(open_issues), len(blocked_ids),
            )

            session.expunge_all()
            return ready

    def get_blocked_issues(self) -> List[BlockedIssue]:
        """Active issues waiting on active issues, with the number of such edges"""
        blocker = aliased(Issue)
        with self.db.session() as session:
            blocked_by_count = func.count(Dependency.depends_on_id).label("blocked_by_count")
            rows = (
                session.query(Issue, blocked_by_count)
                .join(Dependency, Dependency.issue_id == Issue.id)
                .join(blocker, Dependency.depends_on_id == blocker.id)
                .filter(
                    Dependency.type == DependencyType.BLOCKS,
                    Issue.status.in_(ACTIVE_STATUSES),
                    Issue.deleted_at.is_(None),
                    blocker.status.in_(ACTIVE_STATUSES),
                    blocker.deleted_at.is_(None),
                )
                .group_by(Issue.id)
                .order_by(Issue.priority, Issue.created_at, Issue.id)
                .all()
            )

            blocked = [BlockedIssue(issue=issue, blocked_by_count=count) for issue, count in rows]
            session.expunge_all()
            return blocked

    def is_ready(self, issue_id: str) -> bool:
        """True when the issue is live, open and has no active direct blocker"""
        blocker = aliased(Issue)
        with self.db.session() as session:
            issue = (
                session.query(Issue)
                .filter(Issue.id == issue_id, Issue.deleted_at.is_(None))
                .first()
            )
            if not issue or issue.status != Status.OPEN:
                return False

            active_blocker = (
                session.query(Dependency)
                .join(blocker, Dependency.depends_on_id == blocker.id)
                .filter(
                    Dependency.issue_id == issue_id,
                    Dependency.type == DependencyType.BLOCKS,
                    blocker.status.in_(ACTIVE_STATUSES),
                    blocker.deleted_at.is_(None),
                )
                .first()
            )
            return active_blocker is None
