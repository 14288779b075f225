import pytest

from app.models.group import GroupRole
from app.models.user import UserRole
from app.services.permissions import (
    can_edit_calendar,
    can_view_calendar,
    decide_edit,
    decide_view,
    resolve_group_role,
)


def test_resolve_group_role_prefers_explicit_membership_role():
    assert resolve_group_role(GroupRole.viewer, GroupRole.editor) == GroupRole.viewer
    assert resolve_group_role(None, GroupRole.editor) == GroupRole.editor
    assert resolve_group_role(None, GroupRole.viewer) == GroupRole.viewer


@pytest.mark.parametrize(
    "resolved",
    [(), (GroupRole.viewer,), (GroupRole.editor,), (GroupRole.viewer, GroupRole.editor)],
)
def test_role_decisions_for_fixed_roles(resolved):
    assert decide_edit(UserRole.student, resolved) is False
    assert decide_edit(UserRole.hod, resolved) is True
    assert decide_edit(None, resolved) is False


def test_faculty_edit_is_any_editor_membership():
    assert decide_edit(UserRole.faculty, ()) is False
    assert decide_edit(UserRole.faculty, (GroupRole.viewer,)) is False
    assert decide_edit(UserRole.faculty, (GroupRole.viewer, GroupRole.editor)) is True


def test_view_decisions():
    assert decide_view(UserRole.hod, False) is True
    assert decide_view(UserRole.student, True) is True
    assert decide_view(UserRole.faculty, False) is False
    assert decide_view(None, True) is False


def test_hod_can_view_and_edit_without_groups(db_session, factory):
    hod = factory.user(UserRole.hod)
    other_hod = factory.user(UserRole.hod)
    calendar = factory.calendar(other_hod)

    assert can_view_calendar(db_session, hod.id, calendar.id) is True
    assert can_edit_calendar(db_session, hod.id, calendar.id) is True


def test_student_never_edits_even_in_editor_group(db_session, factory):
    hod = factory.user(UserRole.hod)
    student = factory.user(UserRole.student)
    group = factory.group(GroupRole.editor)
    factory.member(group, student, role=GroupRole.editor)
    calendar = factory.calendar(hod, groups=[group])

    assert can_view_calendar(db_session, student.id, calendar.id) is True
    assert can_edit_calendar(db_session, student.id, calendar.id) is False


def test_faculty_edit_resolution_across_groups(db_session, factory):
    hod = factory.user(UserRole.hod)
    faculty = factory.user(UserRole.faculty)
    viewers = factory.group(GroupRole.viewer)
    editors_by_default = factory.group(GroupRole.editor)
    unassigned_editors = factory.group(GroupRole.editor)
    factory.member(viewers, faculty)
    factory.member(unassigned_editors, faculty)
    calendar = factory.calendar(hod, groups=[viewers])

    assert can_view_calendar(db_session, faculty.id, calendar.id) is True
    # Editor rights in a group not assigned to the calendar do not count.
    assert can_edit_calendar(db_session, faculty.id, calendar.id) is False

    factory.member(editors_by_default, faculty, role=GroupRole.viewer)
    other = factory.calendar(hod, groups=[editors_by_default])
    assert can_edit_calendar(db_session, faculty.id, other.id) is False

    shared = factory.calendar(hod, groups=[viewers, unassigned_editors])
    assert can_edit_calendar(db_session, faculty.id, shared.id) is True


def test_non_member_cannot_view(db_session, factory):
    hod = factory.user(UserRole.hod)
    faculty = factory.user(UserRole.faculty)
    calendar = factory.calendar(hod, groups=[factory.group()])

    assert can_view_calendar(db_session, faculty.id, calendar.id) is False
    assert can_edit_calendar(db_session, faculty.id, calendar.id) is False


def test_unknown_user_is_never_authorized(db_session, factory):
    hod = factory.user(UserRole.hod)
    calendar = factory.calendar(hod)

    assert can_view_calendar(db_session, "ghost", calendar.id) is False
    assert can_edit_calendar(db_session, "ghost", calendar.id) is False
