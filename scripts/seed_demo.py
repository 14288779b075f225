"""Seed demo accounts, a shared calendar and a weekly timetable for role checks.

Run:
  PYTHONPATH=backend python scripts/seed_demo.py
"""

from __future__ import annotations

import os
from datetime import date, timedelta
from typing import Iterable

from sqlalchemy import select

from app.core.security import get_password_hash
from app.db.bootstrap import ensure_runtime_schema_compatibility
from app.db.session import SessionLocal
from app.models.calendar import Calendar, CalendarEvent, CalendarGroup
from app.models.event_type import EventType
from app.models.group import Group, GroupMembership, GroupRole
from app.models.timetable import Batch, DayOfWeek, SlotType, Timetable, TimetableGroup, TimetableSlot
from app.models.user import User, UserRole

DEFAULT_PASSWORD = os.getenv("DEMO_PASSWORD", "DemoPass123!")


def _env_email(key: str, default: str) -> str:
    value = os.getenv(key, "").strip()
    return value or default


DEMO_ACCOUNTS = {
    "hod": {
        "name": "Demo HOD",
        "email": _env_email("DEMO_HOD_EMAIL", "hod.demo@campus.example"),
        "role": UserRole.hod,
    },
    "faculty_1": {
        "name": "Demo Faculty One",
        "email": _env_email("DEMO_FACULTY1_EMAIL", "faculty1.demo@campus.example"),
        "role": UserRole.faculty,
    },
    "faculty_2": {
        "name": "Demo Faculty Two",
        "email": _env_email("DEMO_FACULTY2_EMAIL", "faculty2.demo@campus.example"),
        "role": UserRole.faculty,
    },
    "student_a": {
        "name": "Demo Student A",
        "email": _env_email("DEMO_STUDENTA_EMAIL", "studenta.demo@campus.example"),
        "role": UserRole.student,
    },
}


def _upsert_user(*, name: str, email: str, role: UserRole) -> User:
    with SessionLocal() as session:
        existing = session.execute(select(User).where(User.email == email)).scalar_one_or_none()
        if existing is None:
            existing = User(
                name=name,
                email=email,
                hashed_password=get_password_hash(DEFAULT_PASSWORD),
                role=role,
                is_active=True,
            )
            session.add(existing)
        else:
            existing.name = name
            existing.role = role
            existing.is_active = True
        session.commit()
        session.refresh(existing)
        return existing


def _get_or_create(session, model, **values):
    instance = session.execute(select(model).filter_by(**values)).scalar_one_or_none()
    if instance is None:
        instance = model(**values)
        session.add(instance)
        session.flush()
    return instance


def _seed_groups(session, users: dict[str, User]) -> tuple[Group, Group]:
    staff = _get_or_create(session, Group, title="Demo Staff")
    staff.default_role = GroupRole.editor
    cohort = _get_or_create(session, Group, title="Demo Cohort")
    cohort.default_role = GroupRole.viewer

    _get_or_create(session, GroupMembership, group_id=staff.id, user_id=users["faculty_1"].id)
    # Explicit Viewer overrides the staff group's Editor default.
    membership = _get_or_create(session, GroupMembership, group_id=staff.id, user_id=users["faculty_2"].id)
    membership.role = GroupRole.viewer
    for key in ("faculty_1", "faculty_2", "student_a"):
        _get_or_create(session, GroupMembership, group_id=cohort.id, user_id=users[key].id)
    return staff, cohort


def _seed_calendar(session, owner: User, groups: Iterable[Group]) -> None:
    calendar = _get_or_create(session, Calendar, name="Demo Academic Calendar", created_by_id=owner.id)
    for group in groups:
        _get_or_create(session, CalendarGroup, calendar_id=calendar.id, group_id=group.id)

    exam = _get_or_create(session, EventType, name="Exam")
    holiday = _get_or_create(session, EventType, name="Holiday")
    existing = session.execute(select(CalendarEvent.id).where(CalendarEvent.calendar_id == calendar.id)).first()
    if existing is not None:
        return
    today = date.today()
    session.add_all(
        [
            CalendarEvent(
                calendar_id=calendar.id,
                title="Mid-semester exams",
                start_date=today + timedelta(days=7),
                end_date=today + timedelta(days=11),
                event_type_id=exam.id,
            ),
            CalendarEvent(
                calendar_id=calendar.id,
                title="Founders Day",
                start_date=today + timedelta(days=3),
                event_type_id=holiday.id,
            ),
        ]
    )


def _seed_timetable(session, users: dict[str, User], cohort: Group) -> None:
    timetable = _get_or_create(session, Timetable, name="Demo Semester", created_by_id=users["hod"].id)
    _get_or_create(session, TimetableGroup, timetable_id=timetable.id, group_id=cohort.id)

    lecture = _get_or_create(session, SlotType, name="Lecture")
    lab = _get_or_create(session, SlotType, name="Lab")
    batch_one = _get_or_create(session, Batch, name="B1")
    existing = session.execute(select(TimetableSlot.id).where(TimetableSlot.timetable_id == timetable.id)).first()
    if existing is not None:
        return
    session.add_all(
        [
            TimetableSlot(
                timetable_id=timetable.id,
                day=DayOfWeek.monday,
                start_time="08:50",
                end_time="09:40",
                subject_name="Data Structures",
                subject_short_name="DS",
                slot_type_id=lecture.id,
                room_number="A101",
                faculty_id=users["faculty_1"].id,
            ),
            TimetableSlot(
                timetable_id=timetable.id,
                day=DayOfWeek.tuesday,
                start_time="09:40",
                end_time="11:20",
                subject_name="Data Structures Lab",
                subject_short_name="DS Lab",
                slot_type_id=lab.id,
                room_number="L2",
                faculty_id=users["faculty_2"].id,
                batch_id=batch_one.id,
            ),
        ]
    )


def _print_accounts(items: Iterable[tuple[str, User]]) -> None:
    print("\nDemo accounts ready:")
    for label, user in items:
        print(f"  - {label}: {user.email} | role={user.role.value}")
    print(f"\nPassword for all demo accounts: {DEFAULT_PASSWORD}")
    print("\nExpected behaviour after login:")
    print("  - faculty_1 can edit the demo calendar through Demo Staff")
    print("  - faculty_2 can only view it (explicit Viewer membership)")
    print("  - student_a sees the lecture and the B1 lab in their weekly schedule")


def main() -> None:
    ensure_runtime_schema_compatibility()
    users = {key: _upsert_user(**item) for key, item in DEMO_ACCOUNTS.items()}

    with SessionLocal() as session:
        staff, cohort = _seed_groups(session, users)
        _seed_calendar(session, users["hod"], (staff, cohort))
        _seed_timetable(session, users, cohort)
        session.commit()

    _print_accounts(users.items())


if __name__ == "__main__":
    main()
