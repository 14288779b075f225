from fastapi import APIRouter, Depends, status
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, require_roles
from app.core.exceptions import ConflictError, ResourceNotFoundError
from app.db.session import commit_or_raise
from app.models.calendar import CalendarGroup
from app.models.group import Group, GroupMembership
from app.models.timetable import TimetableGroup
from app.models.user import User, UserRole
from app.schemas.common import SuccessOut
from app.schemas.group import GroupCreate, GroupMemberAdd, GroupMemberOut, GroupMemberUpdate, GroupOut
from app.services.permissions import resolve_group_role
from app.services.view_invalidation import CALENDARS_VIEW, DASHBOARD_VIEW, mark_view_stale

router = APIRouter()


def _get_group(db: Session, group_id: str) -> Group:
    group = db.get(Group, group_id)
    if group is None:
        raise ResourceNotFoundError("Group", group_id)
    return group


def _member_out(group: Group, membership: GroupMembership, user: User | None) -> GroupMemberOut:
    return GroupMemberOut(
        id=membership.id,
        group_id=membership.group_id,
        user_id=membership.user_id,
        user_name=user.name if user is not None else None,
        role=membership.role,
        effective_role=resolve_group_role(membership.role, group.default_role),
    )


@router.get("/", response_model=list[GroupOut])
def list_groups(
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> list[GroupOut]:
    return list(db.execute(select(Group).order_by(Group.title)).scalars())


@router.get("/mine", response_model=list[GroupOut])
def list_my_groups(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[GroupOut]:
    return list(
        db.execute(
            select(Group)
            .join(GroupMembership, GroupMembership.group_id == Group.id)
            .where(GroupMembership.user_id == current_user.id)
            .order_by(Group.title)
        ).scalars()
    )


@router.post("/", response_model=GroupOut, status_code=status.HTTP_201_CREATED)
def create_group(
    payload: GroupCreate,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> GroupOut:
    if db.execute(select(Group.id).where(Group.title == payload.title)).first() is not None:
        raise ConflictError("Group title already exists")
    group = Group(**payload.model_dump())
    db.add(group)
    commit_or_raise(db, operation="Create group", conflict_message="Group title already exists")
    db.refresh(group)
    return group


@router.delete("/{group_id}", response_model=SuccessOut)
def delete_group(
    group_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> SuccessOut:
    group = _get_group(db, group_id)
    db.execute(delete(GroupMembership).where(GroupMembership.group_id == group_id))
    db.execute(delete(CalendarGroup).where(CalendarGroup.group_id == group_id))
    db.execute(delete(TimetableGroup).where(TimetableGroup.group_id == group_id))
    db.delete(group)
    commit_or_raise(db, operation="Delete group")
    mark_view_stale(CALENDARS_VIEW, DASHBOARD_VIEW)
    return SuccessOut()


@router.get("/{group_id}/members", response_model=list[GroupMemberOut])
def list_members(
    group_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> list[GroupMemberOut]:
    group = _get_group(db, group_id)
    rows = db.execute(
        select(GroupMembership, User)
        .outerjoin(User, User.id == GroupMembership.user_id)
        .where(GroupMembership.group_id == group_id)
        .order_by(User.name, GroupMembership.id)
    ).all()
    return [_member_out(group, membership, user) for membership, user in rows]


@router.post("/{group_id}/members", response_model=GroupMemberOut, status_code=status.HTTP_201_CREATED)
def add_member(
    group_id: str,
    payload: GroupMemberAdd,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> GroupMemberOut:
    group = _get_group(db, group_id)
    user = db.get(User, payload.user_id)
    if user is None:
        raise ResourceNotFoundError("User", payload.user_id)
    existing = db.execute(
        select(GroupMembership.id).where(GroupMembership.group_id == group_id, GroupMembership.user_id == user.id)
    ).first()
    if existing is not None:
        raise ConflictError("User is already a member of this group")

    membership = GroupMembership(group_id=group_id, user_id=user.id, role=payload.role)
    db.add(membership)
    commit_or_raise(db, operation="Add group member", conflict_message="User is already a member of this group")
    db.refresh(membership)
    mark_view_stale(CALENDARS_VIEW, DASHBOARD_VIEW)
    return _member_out(group, membership, user)


@router.put("/{group_id}/members/{user_id}", response_model=GroupMemberOut)
def update_member(
    group_id: str,
    user_id: str,
    payload: GroupMemberUpdate,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> GroupMemberOut:
    group = _get_group(db, group_id)
    membership = db.execute(
        select(GroupMembership).where(GroupMembership.group_id == group_id, GroupMembership.user_id == user_id)
    ).scalar_one_or_none()
    if membership is None:
        raise ResourceNotFoundError("GroupMembership", f"{group_id}:{user_id}")
    membership.role = payload.role
    commit_or_raise(db, operation="Update group member")
    db.refresh(membership)
    mark_view_stale(CALENDARS_VIEW)
    return _member_out(group, membership, db.get(User, user_id))


@router.delete("/{group_id}/members/{user_id}", response_model=SuccessOut)
def remove_member(
    group_id: str,
    user_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> SuccessOut:
    membership = db.execute(
        select(GroupMembership).where(GroupMembership.group_id == group_id, GroupMembership.user_id == user_id)
    ).scalar_one_or_none()
    if membership is None:
        raise ResourceNotFoundError("GroupMembership", f"{group_id}:{user_id}")
    db.delete(membership)
    commit_or_raise(db, operation="Remove group member")
    mark_view_stale(CALENDARS_VIEW, DASHBOARD_VIEW)
    return SuccessOut()
