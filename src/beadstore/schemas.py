"""Pydantic schemas for store operation inputs and derived results"""

from dataclasses import dataclass, field
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .models import Comment, Dependency, Issue, IssueType, Priority, Status

# Fields update_issue() diffs against the stored row, in event order
UPDATABLE_FIELDS = (
    "title",
    "description",
    "design",
    "acceptance_criteria",
    "notes",
    "status",
    "priority",
    "issue_type",
    "assignee",
)

OrderField = Literal["created_at", "updated_at", "priority", "title"]
OrderDirection = Literal["asc", "desc"]


class CreateIssueOptions(BaseModel):
    """Schema for creating an issue"""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=500, description="Issue title")
    description: str = Field("", description="Problem statement (what/why)")
    design: str = Field("", description="Solution design (how)")
    acceptance_criteria: str = Field("", description="Definition of done")
    notes: str = Field("", description="Working notes")
    status: Status = Field(Status.OPEN, description="Initial status")
    priority: Priority = Field(Priority.NORMAL, description="Priority: 0 (critical) to 3 (low)")
    issue_type: IssueType = Field(IssueType.TASK, description="Issue type")
    assignee: Optional[str] = Field(None, max_length=100)
    labels: List[str] = Field(default_factory=list, description="Labels attached on creation")
    estimated_minutes: Optional[int] = Field(None, ge=0)
    external_ref: Optional[str] = Field(None, max_length=200)


class UpdateIssueOptions(BaseModel):
    """Schema for updating an issue.

    Only fields that were explicitly set take part in the diff, so
    ``assignee=None`` clears the assignee while omitting it leaves it alone.
    """

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    design: Optional[str] = None
    acceptance_criteria: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[Status] = None
    priority: Optional[Priority] = None
    issue_type: Optional[IssueType] = None
    assignee: Optional[str] = Field(None, max_length=100)

    def changes(self) -> dict:
        """Explicitly supplied fields; ``None`` is dropped except for assignee"""
        supplied = self.model_dump(exclude_unset=True)
        return {
            field: value
            for field, value in supplied.items()
            if value is not None or field == "assignee"
        }


class QueryOptions(BaseModel):
    """Filters, ordering and pagination for listing issues"""

    model_config = ConfigDict(extra="forbid")

    status: Optional[Union[Status, List[Status]]] = None
    priority: Optional[Union[int, List[int]]] = None
    issue_type: Optional[Union[IssueType, List[IssueType]]] = None
    assignee: Optional[str] = None
    labels: Optional[List[str]] = Field(None, description="Issues must carry every listed label")
    limit: Optional[int] = Field(None, ge=1)
    offset: Optional[int] = Field(None, ge=0)
    order_by: OrderField = "created_at"
    order_dir: OrderDirection = "desc"


class IssueStats(BaseModel):
    """Counts over live issues"""

    total: int = 0
    open: int = 0
    in_progress: int = 0
    blocked: int = 0
    closed: int = 0
    ready: int = 0


def as_list(value) -> list:
    """Normalize a single filter value or a list of them to a list"""
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


@dataclass
class IssueWithRelations:
    """An issue together with its labels, outgoing edges and comments"""

    issue: Issue
    labels: List[str] = field(default_factory=list)
    dependencies: List[Dependency] = field(default_factory=list)
    comments: List[Comment] = field(default_factory=list)


@dataclass
class BlockedIssue:
    """An active issue and the number of active issues it waits on"""

    issue: Issue
    blocked_by_count: int
