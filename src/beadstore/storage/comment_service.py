"""Comment service"""

from typing import List, Optional

from ..models import Comment, EventType, now_iso
from .common import get_live_issue, record_event
from .database import Database


class CommentService:
    """Service class for comment operations"""

    def __init__(self, db: Database):
        self.db = db

    def add_comment(self, issue_id: str, text: str, author: str) -> Optional[Comment]:
        """Append a comment and its ``commented`` event; ``None`` for missing issues"""
        with self.db.session() as session:
            if not get_live_issue(session, issue_id):
                return None

            now = now_iso()
            comment = Comment(issue_id=issue_id, author=author, text=text, created_at=now)
            session.add(comment)
            record_event(session, issue_id, EventType.COMMENTED, author, comment=text, created_at=now)

            session.flush()
            session.refresh(comment)
            session.expunge(comment)
            return comment

    def get_comments(self, issue_id: str) -> List[Comment]:
        """Comments on an issue, oldest first"""
        with self.db.session() as session:
            comments = (
                session.query(Comment)
                .filter(Comment.issue_id == issue_id)
                .order_by(Comment.created_at, Comment.id)
                .all()
            )

            for comment in comments:
                session.expunge(comment)

            return comments
