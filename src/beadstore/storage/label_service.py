"""Label service"""

import logging
from typing import List, Optional

from ..models import EventType, Label
from .common import get_live_issue, record_event
from .database import Database

logger = logging.getLogger(__name__)


class LabelService:
    """Service class for label operations"""

    def __init__(self, db: Database, actor: str = "system"):
        self.db = db
        self.actor = actor

    def add_label(self, issue_id: str, label: str, actor: Optional[str] = None) -> bool:
        """Attach a label; adding one that is already there changes nothing"""
        actor = actor or self.actor

        with self.db.session() as session:
            if not get_live_issue(session, issue_id):
                return False

            if session.get(Label, (issue_id, label)) is not None:
                return True

            session.add(Label(issue_id=issue_id, label=label))
            record_event(session, issue_id, EventType.LABEL_ADDED, actor, new_value=label)
            logger.debug("Labelled %s with '%s'", issue_id, label)
            return True

    def remove_label(self, issue_id: str, label: str, actor: Optional[str] = None) -> bool:
        """Detach a label; the event is only written when a label was removed"""
        actor = actor or self.actor

        with self.db.session() as session:
            if not get_live_issue(session, issue_id):
                return False

            row = session.get(Label, (issue_id, label))
            if row is not None:
                session.delete(row)
                record_event(session, issue_id, EventType.LABEL_REMOVED, actor, old_value=label)
            return True

    def get_labels(self, issue_id: str) -> List[str]:
        with self.db.session() as session:
            rows = (
                session.query(Label.label)
                .filter(Label.issue_id == issue_id)
                .order_by(Label.label)
                .all()
            )
            return [row.label for row in rows]
