"""Helpers shared by the storage services"""

import enum
from typing import Optional, Union

from sqlalchemy.orm import Session

from ..models import Event, EventType, Issue, now_iso


def get_live_issue(session: Session, issue_id: str) -> Optional[Issue]:
    """Issue row unless missing or soft-deleted"""
    return (
        session.query(Issue)
        .filter(Issue.id == issue_id, Issue.deleted_at.is_(None))
        .first()
    )


def check_limit(limit: Optional[int]):
    """Reject result limits below one; ``None`` means unlimited"""
    if limit is not None and limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")


def event_value(value) -> str:
    """Render a field value for an event's old/new column"""
    if value is None:
        return ""
    if isinstance(value, enum.Enum):
        return str(value.value)
    return str(value)


def record_event(
    session: Session,
    issue_id: str,
    event_type: Union[EventType, str],
    actor: str,
    old_value: Optional[str] = None,
    new_value: Optional[str] = None,
    comment: Optional[str] = None,
    created_at: Optional[str] = None,
) -> Event:
    """Stage an audit event in the caller's transaction"""
    event = Event(
        issue_id=issue_id,
        event_type=event_type.value if isinstance(event_type, EventType) else event_type,
        actor=actor,
        old_value=old_value,
        new_value=new_value,
        comment=comment,
        created_at=created_at or now_iso(),
    )
    session.add(event)
    return event
