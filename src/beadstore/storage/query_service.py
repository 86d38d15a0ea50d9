"""Query service: filtered, ordered and paginated issue listing plus stats"""

from typing import List, Union

from sqlalchemy import func, select
from sqlalchemy.orm import Query, Session

from ..models import Issue, IssueType, Label, Status
from ..schemas import IssueStats, QueryOptions, as_list
from .database import Database
from .readiness import active_blocker_source_ids

ORDER_COLUMNS = {
    "created_at": Issue.created_at,
    "updated_at": Issue.updated_at,
    "priority": Issue.priority,
    "title": Issue.title,
}


def _coerce_options(options: Union[QueryOptions, dict, None], filters: dict) -> QueryOptions:
    if options is None:
        return QueryOptions(**filters)
    if isinstance(options, dict):
        return QueryOptions(**{**options, **filters})
    if filters:
        return options.model_copy(update=QueryOptions(**filters).model_dump(exclude_unset=True))
    return options


def filtered_query(session: Session, options: QueryOptions) -> Query:
    """Live issues matching the filters in ``options``, unordered"""
    query = session.query(Issue).filter(Issue.deleted_at.is_(None))

    statuses = [Status(s) for s in as_list(options.status)]
    if statuses:
        query = query.filter(Issue.status.in_(statuses))

    priorities = as_list(options.priority)
    if priorities:
        query = query.filter(Issue.priority.in_(priorities))

    issue_types = [IssueType(t) for t in as_list(options.issue_type)]
    if issue_types:
        query = query.filter(Issue.issue_type.in_(issue_types))

    if options.assignee:
        query = query.filter(Issue.assignee == options.assignee)

    labels = sorted(set(options.labels or []))
    if labels:
        labelled = (
            select(Label.issue_id)
            .where(Label.label.in_(labels))
            .group_by(Label.issue_id)
            .having(func.count(Label.label) == len(labels))
        )
        query = query.filter(Issue.id.in_(labelled))

    return query


class QueryService:
    """Service class for read-only issue queries"""

    def __init__(self, db: Database):
        self.db = db

    def list_issues(self, options: Union[QueryOptions, dict, None] = None, **filters) -> List[Issue]:
        """List issues with filtering, ordering and pagination.

        Defaults to newest first. Ties on the sort column fall back to the
        issue id in the same direction so pages are stable.
        """
        options = _coerce_options(options, filters)

        with self.db.session() as session:
            query = filtered_query(session, options)

            column = ORDER_COLUMNS[options.order_by]
            if options.order_dir == "asc":
                query = query.order_by(column.asc(), Issue.id.asc())
            else:
                query = query.order_by(column.desc(), Issue.id.desc())

            if options.limit is not None:
                query = query.limit(options.limit)
            if options.offset:
                # SQLite dialect renders LIMIT -1 when only an offset is given
                query = query.offset(options.offset)

            issues = query.all()

            for issue in issues:
                session.expunge(issue)

            return issues

    def count_issues(self, options: Union[QueryOptions, dict, None] = None, **filters) -> int:
        """Number of issues matching the filters, ignoring limit and offset"""
        options = _coerce_options(options, filters)
        with self.db.session() as session:
            return filtered_query(session, options).count()

    def get_stats(self) -> IssueStats:
        """Issue counts by status over live issues, plus the ready count.

        All counts come from one transaction so ``ready <= open`` holds.
        """
        with self.db.session() as session:
            rows = (
                session.query(Issue.status, func.count(Issue.id))
                .filter(Issue.deleted_at.is_(None))
                .group_by(Issue.status)
                .all()
            )
            open_ids = [
                row.id
                for row in session.query(Issue.id).filter(
                    Issue.status == Status.OPEN, Issue.deleted_at.is_(None)
                )
            ]
            blocked_ids = active_blocker_source_ids(session)

        by_status = {status: count for status, count in rows}
        ready = [issue_id for issue_id in open_ids if issue_id not in blocked_ids]

        return IssueStats(
            total=sum(by_status.values()),
            open=by_status.get(Status.OPEN, 0),
            in_progress=by_status.get(Status.IN_PROGRESS, 0),
            blocked=by_status.get(Status.BLOCKED, 0),
            closed=by_status.get(Status.CLOSED, 0),
            ready=len(ready),
        )
