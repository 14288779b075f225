"""Calendar view/edit permission evaluation.

The decision rules are pure functions of an explicit `UserRole`; the
database-facing helpers only gather the inputs. An unknown user is never
authorised; store failures surface as `PersistenceError`.
"""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.session import persistence_guard
from app.models.calendar import CalendarGroup
from app.models.group import Group, GroupMembership, GroupRole
from app.models.user import User, UserRole


def resolve_group_role(membership_role: GroupRole | None, default_role: GroupRole) -> GroupRole:
    return membership_role if membership_role is not None else default_role


def decide_view(role: UserRole | None, shares_group: bool) -> bool:
    if role is None:
        return False
    if role == UserRole.hod:
        return True
    return shares_group


def decide_edit(role: UserRole | None, resolved_roles: Iterable[GroupRole]) -> bool:
    if role is None or role == UserRole.student:
        return False
    if role == UserRole.hod:
        return True
    return any(item == GroupRole.editor for item in resolved_roles)


def _user_role(db: Session, user_id: str) -> UserRole | None:
    return db.execute(select(User.role).where(User.id == user_id)).scalar_one_or_none()


def _memberships_on_calendar(db: Session, user_id: str, calendar_id: str) -> list[tuple[GroupRole | None, GroupRole]]:
    rows = db.execute(
        select(GroupMembership.role, Group.default_role)
        .join(Group, Group.id == GroupMembership.group_id)
        .join(CalendarGroup, CalendarGroup.group_id == GroupMembership.group_id)
        .where(GroupMembership.user_id == user_id, CalendarGroup.calendar_id == calendar_id)
    ).all()
    return [(membership_role, default_role) for membership_role, default_role in rows]


def can_view_calendar(db: Session, user_id: str, calendar_id: str, *, role: UserRole | None = None) -> bool:
    with persistence_guard(db, operation="Check calendar view permission"):
        role = role if role is not None else _user_role(db, user_id)
        if role is None:
            return False
        if role == UserRole.hod:
            return True
        return decide_view(role, bool(_memberships_on_calendar(db, user_id, calendar_id)))


def can_edit_calendar(db: Session, user_id: str, calendar_id: str, *, role: UserRole | None = None) -> bool:
    with persistence_guard(db, operation="Check calendar edit permission"):
        role = role if role is not None else _user_role(db, user_id)
        if role is None or role in {UserRole.student, UserRole.hod}:
            return decide_edit(role, ())
        resolved = [
            resolve_group_role(membership_role, default_role)
            for membership_role, default_role in _memberships_on_calendar(db, user_id, calendar_id)
        ]
    return decide_edit(role, resolved)


def user_group_ids(db: Session, user_id: str) -> list[str]:
    with persistence_guard(db, operation="Load group memberships"):
        return list(
            db.execute(
                select(GroupMembership.group_id)
                .where(GroupMembership.user_id == user_id)
                .order_by(GroupMembership.group_id)
            ).scalars()
        )
