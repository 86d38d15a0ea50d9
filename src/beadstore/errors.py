"""Exceptions raised by beadstore.

Missing issues are never an exception: operations return ``None`` or
``False`` instead. Storage failures surface as the original SQLAlchemy
exception after the transaction is rolled back.
"""


class BeadsError(Exception):
    """Base class for beadstore errors"""


class ConstraintViolation(BeadsError, ValueError):
    """A write would break a uniqueness rule of the store"""


class DuplicateDependencyError(ConstraintViolation):
    """An edge between the same two issues already exists"""

    def __init__(self, issue_id: str, depends_on_id: str, existing_type: str):
        self.issue_id = issue_id
        self.depends_on_id = depends_on_id
        self.existing_type = existing_type
        super().__init__(
            f"Dependency {issue_id} -> {depends_on_id} already exists (type '{existing_type}')"
        )


class StoreNotFoundError(BeadsError, FileNotFoundError):
    """Database file is missing and creation was not requested"""
