"""Issue service: every write to an issue and the events it produces"""

import json
import logging
from typing import Any, Dict, List, Optional, Union

from ..config import DEFAULT_PREFIX
from ..models import Comment, Dependency, Event, EventType, Issue, Label, Status, now_iso
from ..schemas import (
    UPDATABLE_FIELDS,
    CreateIssueOptions,
    IssueWithRelations,
    UpdateIssueOptions,
)
from .common import check_limit, event_value, get_live_issue, record_event
from .database import Database
from .id_generator import generate_issue_id

logger = logging.getLogger(__name__)


class IssueService:
    """Service class for issue operations.

    Each method is one transaction: the row change and its events are
    committed together. Missing or soft-deleted issues yield ``None``
    (``False`` for delete).
    """

    def __init__(self, db: Database, id_prefix: str = DEFAULT_PREFIX, actor: str = "system"):
        self.db = db
        self.id_prefix = id_prefix
        self.actor = actor

    def create_issue(
        self,
        options: Union[CreateIssueOptions, Dict[str, Any], None] = None,
        actor: Optional[str] = None,
        **fields,
    ) -> Issue:
        """Create a new issue and record a ``created`` event"""
        if options is None:
            options = CreateIssueOptions(**fields)
        elif isinstance(options, dict):
            options = CreateIssueOptions(**{**options, **fields})
        actor = actor or self.actor

        with self.db.session() as session:
            issue_id = generate_issue_id(session, self.id_prefix)
            now = now_iso()

            issue = Issue(
                id=issue_id,
                title=options.title,
                description=options.description,
                design=options.design,
                acceptance_criteria=options.acceptance_criteria,
                notes=options.notes,
                status=options.status,
                priority=options.priority,
                issue_type=options.issue_type,
                assignee=options.assignee,
                estimated_minutes=options.estimated_minutes,
                external_ref=options.external_ref,
                created_at=now,
                updated_at=now,
                closed_at=now if options.status == Status.CLOSED else None,
            )
            session.add(issue)
            session.flush()

            for label in dict.fromkeys(options.labels):
                session.add(Label(issue_id=issue_id, label=label))

            record_event(
                session,
                issue_id,
                EventType.CREATED,
                actor,
                new_value=json.dumps(issue.to_dict()),
                created_at=now,
            )
            session.flush()

            # Return what was stored, not what was built
            session.refresh(issue)
            session.expunge(issue)
            logger.debug("Created issue %s (%s)", issue.id, issue.title)
            return issue

    def get_issue(self, issue_id: str) -> Optional[Issue]:
        """Get live issue by ID"""
        with self.db.session() as session:
            issue = get_live_issue(session, issue_id)
            if issue:
                session.expunge(issue)
            return issue

    def get_issue_with_relations(self, issue_id: str) -> Optional[IssueWithRelations]:
        """Get issue plus labels, dependencies and comments"""
        with self.db.session() as session:
            issue = get_live_issue(session, issue_id)
            if not issue:
                return None

            labels = [
                row.label
                for row in session.query(Label).filter(Label.issue_id == issue_id).order_by(Label.label)
            ]
            dependencies = (
                session.query(Dependency)
                .filter(Dependency.issue_id == issue_id)
                .order_by(Dependency.created_at, Dependency.depends_on_id)
                .all()
            )
            comments = (
                session.query(Comment)
                .filter(Comment.issue_id == issue_id)
                .order_by(Comment.created_at, Comment.id)
                .all()
            )

            session.expunge_all()
            return IssueWithRelations(
                issue=issue,
                labels=labels,
                dependencies=dependencies,
                comments=comments,
            )

    def update_issue(
        self,
        issue_id: str,
        updates: Union[UpdateIssueOptions, Dict[str, Any]],
        actor: Optional[str] = None,
    ) -> Optional[Issue]:
        """Apply field changes, one ``{field}_changed`` event per changed field.

        Fields equal to the stored value are ignored; when nothing differs the
        row (including ``updated_at``) is left untouched and no event is written.
        """
        if not isinstance(updates, UpdateIssueOptions):
            updates = UpdateIssueOptions.model_validate(updates)
        requested = updates.changes()
        # An empty assignee is stored as unassigned
        if requested.get("assignee") == "":
            requested["assignee"] = None
        actor = actor or self.actor

        with self.db.session() as session:
            issue = get_live_issue(session, issue_id)
            if not issue:
                return None

            changes = []
            for field in UPDATABLE_FIELDS:
                if field not in requested:
                    continue
                old_value = getattr(issue, field)
                new_value = requested[field]
                if old_value != new_value:
                    changes.append((field, old_value, new_value))

            if changes:
                now = now_iso()
                old_status = issue.status

                for field, old_value, new_value in changes:
                    setattr(issue, field, new_value)
                    record_event(
                        session,
                        issue.id,
                        f"{field}_changed",
                        actor,
                        old_value=event_value(old_value),
                        new_value=event_value(new_value),
                        created_at=now,
                    )

                # closed_at tracks the closed status
                if issue.status != old_status:
                    if issue.status == Status.CLOSED:
                        issue.closed_at = now
                    elif old_status == Status.CLOSED:
                        issue.closed_at = None

                issue.updated_at = now
                session.flush()
                session.refresh(issue)
                logger.debug(
                    "Updated issue %s: %s", issue.id, ", ".join(field for field, _, _ in changes)
                )

            session.expunge(issue)
            return issue

    def close_issue(
        self,
        issue_id: str,
        reason: Optional[str] = None,
        actor: Optional[str] = None,
    ) -> Optional[Issue]:
        """Close an issue; emits ``closed`` on every call, even if already closed"""
        actor = actor or self.actor

        with self.db.session() as session:
            issue = get_live_issue(session, issue_id)
            if not issue:
                return None

            now = now_iso()
            old_status = issue.status
            issue.status = Status.CLOSED
            issue.closed_at = now
            issue.close_reason = reason or ""
            issue.updated_at = now

            record_event(
                session,
                issue.id,
                EventType.CLOSED,
                actor,
                old_value=old_status.value,
                new_value=Status.CLOSED.value,
                comment=reason,
                created_at=now,
            )

            session.flush()
            session.refresh(issue)
            session.expunge(issue)
            return issue

    def reopen_issue(self, issue_id: str, actor: Optional[str] = None) -> Optional[Issue]:
        """Reopen a closed issue; ``None`` unless it is currently closed"""
        actor = actor or self.actor

        with self.db.session() as session:
            issue = get_live_issue(session, issue_id)
            if not issue or issue.status != Status.CLOSED:
                return None

            now = now_iso()
            issue.status = Status.OPEN
            issue.closed_at = None
            issue.close_reason = ""
            issue.updated_at = now

            record_event(
                session,
                issue.id,
                EventType.REOPENED,
                actor,
                old_value=Status.CLOSED.value,
                new_value=Status.OPEN.value,
                created_at=now,
            )

            session.flush()
            session.refresh(issue)
            session.expunge(issue)
            return issue

    def delete_issue(
        self,
        issue_id: str,
        reason: Optional[str] = None,
        actor: Optional[str] = None,
    ) -> bool:
        """Soft-delete an issue.

        The row stays in place with ``deleted_at`` set and disappears from
        every standard read. No event is recorded for deletion.
        """
        actor = actor or self.actor

        with self.db.session() as session:
            issue = get_live_issue(session, issue_id)
            if not issue:
                return False

            now = now_iso()
            issue.deleted_at = now
            issue.deleted_by = actor
            issue.delete_reason = reason or ""
            issue.original_type = issue.issue_type.value
            issue.updated_at = now

            logger.debug("Soft-deleted issue %s", issue_id)
            return True

    def get_events(self, issue_id: str, limit: Optional[int] = None) -> List[Event]:
        """Audit trail of an issue, oldest first"""
        check_limit(limit)
        with self.db.session() as session:
            query = (
                session.query(Event)
                .filter(Event.issue_id == issue_id)
                .order_by(Event.created_at, Event.id)
            )
            if limit is not None:
                query = query.limit(limit)
            events = query.all()

            for event in events:
                session.expunge(event)

            return events
