"""Tests for issue mutations and their audit events"""

import json

import pytest
from pydantic import ValidationError

from beadstore import CreateIssueOptions, UpdateIssueOptions
from beadstore.models import Issue, IssueType, Priority, Status


def event_types(store, issue_id):
    return [event.event_type for event in store.get_events(issue_id)]


def test_create_issue_defaults(store):
    """Test creating an issue with only a title"""
    issue = store.create_issue(title="T")

    fetched = store.get_issue(issue.id)
    assert fetched is not None
    assert fetched.status == Status.OPEN
    assert fetched.priority == 2
    assert fetched.issue_type == IssueType.TASK
    assert fetched.description == ""
    assert fetched.design == ""
    assert fetched.acceptance_criteria == ""
    assert fetched.notes == ""
    assert fetched.assignee is None
    assert fetched.closed_at is None
    assert fetched.deleted_at is None
    assert fetched.created_at == fetched.updated_at
    assert fetched.id.startswith("test-")


def test_create_issue_with_all_fields(store):
    """Test issue creation with all fields"""
    issue = store.create_issue(
        title="Complex issue",
        description="Detailed description",
        design="Design notes",
        acceptance_criteria="AC notes",
        notes="Working notes",
        priority=1,
        issue_type=IssueType.FEATURE,
        assignee="developer",
        estimated_minutes=120,
        labels=["backend", "api", "backend"],
    )

    assert issue.title == "Complex issue"
    assert issue.design == "Design notes"
    assert issue.acceptance_criteria == "AC notes"
    assert issue.priority == 1
    assert issue.issue_type == IssueType.FEATURE
    assert issue.assignee == "developer"
    assert issue.estimated_minutes == 120
    assert store.get_labels(issue.id) == ["api", "backend"]


def test_create_issue_accepts_options_model_and_strings(store):
    options = CreateIssueOptions(title="Bug", issue_type="bug", priority=0)
    issue = store.create_issue(options)

    assert issue.issue_type == IssueType.BUG
    assert issue.priority == 0


def test_create_issue_emits_single_created_event(store):
    issue = store.create_issue(title="Audited", labels=["x"], actor="alice")

    events = store.get_events(issue.id)
    assert len(events) == 1
    assert events[0].event_type == "created"
    assert events[0].actor == "alice"
    assert json.loads(events[0].new_value)["title"] == "Audited"


def test_create_issue_rejects_invalid_input(store):
    with pytest.raises(ValidationError):
        store.create_issue(title="")
    with pytest.raises(ValidationError):
        store.create_issue(title="Bad priority", priority=7)
    with pytest.raises(ValidationError):
        store.create_issue(title="Bad type", issue_type="story")


def test_create_closed_issue_sets_closed_at(store):
    issue = store.create_issue(title="Already done", status="closed")

    assert issue.status == Status.CLOSED
    assert issue.closed_at is not None


def test_ids_are_unique_and_sortable(store):
    ids = [store.create_issue(title=f"Issue {i}").id for i in range(20)]

    assert len(set(ids)) == 20
    assert ids == sorted(ids)


def test_get_nonexistent_issue(store):
    """Test getting nonexistent issue returns None"""
    assert store.get_issue("nonexistent-id") is None


def test_update_issue_records_event_per_changed_field(store):
    issue = store.create_issue(title="Original title", description="Original description")

    updated = store.update_issue(
        issue.id,
        {"title": "Updated title", "priority": 3, "assignee": "dev", "description": "Original description"},
        actor="bob",
    )

    assert updated.title == "Updated title"
    assert updated.priority == 3
    assert updated.assignee == "dev"
    assert updated.description == "Original description"

    changes = {e.event_type: e for e in store.get_events(issue.id) if e.event_type.endswith("_changed")}
    assert set(changes) == {"title_changed", "priority_changed", "assignee_changed"}
    assert changes["title_changed"].old_value == "Original title"
    assert changes["title_changed"].new_value == "Updated title"
    assert changes["priority_changed"].old_value == "2"
    assert changes["priority_changed"].new_value == "3"
    assert changes["assignee_changed"].old_value == ""
    assert changes["assignee_changed"].actor == "bob"


def test_update_with_identical_values_is_noop(store):
    issue = store.create_issue(title="Same", priority=1)

    result = store.update_issue(issue.id, {"title": "Same", "priority": 1, "status": "open"})

    assert result is not None
    assert result.updated_at == issue.updated_at
    assert event_types(store, issue.id) == ["created"]


def test_update_empty_payload_is_noop(store):
    issue = store.create_issue(title="Untouched")

    result = store.update_issue(issue.id, UpdateIssueOptions())

    assert result.updated_at == issue.updated_at
    assert event_types(store, issue.id) == ["created"]


def test_update_enum_fields_store_values(store):
    issue = store.create_issue(title="Typed")

    store.update_issue(issue.id, {"status": Status.IN_PROGRESS, "issue_type": "epic"})

    events = {e.event_type: e for e in store.get_events(issue.id)}
    assert events["status_changed"].old_value == "open"
    assert events["status_changed"].new_value == "in_progress"
    assert events["issue_type_changed"].new_value == "epic"


def test_update_can_clear_assignee(store):
    issue = store.create_issue(title="Owned", assignee="carol")

    updated = store.update_issue(issue.id, {"assignee": None})

    assert updated.assignee is None
    event = store.get_events(issue.id)[-1]
    assert event.event_type == "assignee_changed"
    assert event.old_value == "carol"
    assert event.new_value == ""


def test_empty_assignee_on_unassigned_issue_is_no_change(store):
    issue = store.create_issue(title="Unowned")

    result = store.update_issue(issue.id, {"assignee": ""})

    assert result.assignee is None
    assert result.updated_at == issue.updated_at
    assert [e.event_type for e in store.get_events(issue.id)] == ["created"]


def test_empty_assignee_clears_assignee(store):
    issue = store.create_issue(title="Owned", assignee="dana")

    updated = store.update_issue(issue.id, {"assignee": ""})

    assert updated.assignee is None
    event = store.get_events(issue.id)[-1]
    assert event.event_type == "assignee_changed"
    assert event.old_value == "dana"
    assert event.new_value == ""


def test_priority_accepts_enum_and_int(store):
    issue = store.create_issue(title="Urgent", priority=Priority.CRITICAL)
    assert issue.priority == 0

    updated = store.update_issue(issue.id, {"priority": 3})

    assert updated.priority == Priority.LOW
    with pytest.raises(ValidationError):
        store.update_issue(issue.id, {"priority": 4})


def test_get_events_limit(store):
    issue = store.create_issue(title="Busy")
    store.update_issue(issue.id, {"notes": "one"})

    assert len(store.get_events(issue.id, limit=1)) == 1
    assert len(store.get_events(issue.id)) == 2
    with pytest.raises(ValueError):
        store.get_events(issue.id, limit=0)
    with pytest.raises(ValueError):
        store.get_events(issue.id, limit=-1)


def test_update_rejects_unknown_fields(store):
    issue = store.create_issue(title="Strict")

    with pytest.raises(ValidationError):
        store.update_issue(issue.id, {"created_at": "yesterday"})


def test_update_status_keeps_closed_at_consistent(store):
    issue = store.create_issue(title="Via update")

    closed = store.update_issue(issue.id, {"status": "closed"})
    assert closed.closed_at is not None

    reopened = store.update_issue(issue.id, {"status": "in_progress"})
    assert reopened.closed_at is None


def test_update_nonexistent_issue(store):
    """Test updating nonexistent issue returns None"""
    assert store.update_issue("nonexistent-id", {"title": "New title"}) is None


def test_close_and_reopen_cycle(store):
    issue = store.create_issue(title="Cycle")

    closed = store.close_issue(issue.id, reason="Done")
    assert closed.status == Status.CLOSED
    assert closed.closed_at is not None
    assert closed.close_reason == "Done"

    reopened = store.reopen_issue(issue.id)
    assert reopened.status == Status.OPEN
    assert reopened.closed_at is None

    closed_again = store.close_issue(issue.id)
    assert closed_again.closed_at is not None
    assert closed_again.close_reason == ""

    assert event_types(store, issue.id) == ["created", "closed", "reopened", "closed"]


def test_close_event_details(store):
    issue = store.create_issue(title="Closing")
    store.update_issue(issue.id, {"status": "in_progress"})

    store.close_issue(issue.id, reason="Shipped", actor="dave")

    event = store.get_events(issue.id)[-1]
    assert event.event_type == "closed"
    assert event.old_value == "in_progress"
    assert event.new_value == "closed"
    assert event.comment == "Shipped"
    assert event.actor == "dave"


def test_close_already_closed_issue_emits_again(store):
    issue = store.create_issue(title="Twice")

    store.close_issue(issue.id)
    second = store.close_issue(issue.id, reason="again")

    assert second.status == Status.CLOSED
    closed_events = [e for e in store.get_events(issue.id) if e.event_type == "closed"]
    assert len(closed_events) == 2
    assert closed_events[1].old_value == "closed"


def test_reopen_open_issue_returns_none(store):
    """Test reopening an already open issue returns None"""
    issue = store.create_issue(title="Open")

    assert store.reopen_issue(issue.id) is None
    assert event_types(store, issue.id) == ["created"]


def test_reopen_in_progress_issue_returns_none(store):
    issue = store.create_issue(title="Busy")
    store.update_issue(issue.id, {"status": "in_progress"})

    assert store.reopen_issue(issue.id) is None


def test_close_nonexistent_issue(store):
    assert store.close_issue("missing") is None
    assert store.reopen_issue("missing") is None


def test_delete_issue_is_soft(store, raw_session):
    issue = store.create_issue(title="Doomed", issue_type="bug")

    assert store.delete_issue(issue.id, reason="duplicate") is True

    assert store.get_issue(issue.id) is None
    assert issue.id not in [i.id for i in store.list_issues()]

    row = raw_session.get(Issue, issue.id)
    assert row is not None
    assert row.deleted_at is not None
    assert row.delete_reason == "duplicate"
    assert row.deleted_by == "tester"
    assert row.original_type == "bug"


def test_delete_emits_no_event(store):
    issue = store.create_issue(title="Quiet")

    store.delete_issue(issue.id)

    assert event_types(store, issue.id) == ["created"]


def test_delete_twice_returns_false(store):
    issue = store.create_issue(title="Once")

    assert store.delete_issue(issue.id) is True
    assert store.delete_issue(issue.id) is False
    assert store.delete_issue("missing") is False


def test_deleted_issue_rejects_mutations(store):
    issue = store.create_issue(title="Gone")
    store.delete_issue(issue.id)

    assert store.update_issue(issue.id, {"title": "Back"}) is None
    assert store.close_issue(issue.id) is None
    assert store.get_issue_with_relations(issue.id) is None


def test_get_issue_with_relations(store):
    issue = store.create_issue(title="Parent", labels=["ui"])
    other = store.create_issue(title="Blocker")
    store.add_dependency(issue.id, other.id)
    store.add_comment(issue.id, "first", author="erin")

    full = store.get_issue_with_relations(issue.id)

    assert full.issue.id == issue.id
    assert full.labels == ["ui"]
    assert [d.depends_on_id for d in full.dependencies] == [other.id]
    assert [c.text for c in full.comments] == ["first"]
