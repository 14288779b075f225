import os

# Must be set before the app modules build their engine from settings.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")

from datetime import date
import itertools

import pytest
from fastapi.testclient import TestClient #gives you a fake http client that can call your FastAPI routes without running a real server.
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.db.base import Base
from app.main import app
from app.models.calendar import Calendar, CalendarEvent, CalendarGroup
from app.models.event_type import EventType
from app.models.group import Group, GroupMembership, GroupRole
from app.models.timetable import Batch, DayOfWeek, SlotType, Timetable, TimetableGroup, TimetableSlot
from app.models.user import User, UserRole


@pytest.fixture()
def engine():
    engine = create_engine( #create isolated DB
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture() #test client
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


class Factory:
    """Inserts rows straight into the test database for service-level tests."""

    def __init__(self, db):
        self.db = db
        self._counter = itertools.count(1)

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def user(self, role: UserRole, name: str | None = None) -> User:
        n = next(self._counter)
        return self._save(
            User(
                name=name or f"{role.value} {n}",
                email=f"user{n}@example.com",
                hashed_password="not-used",
                role=role,
            )
        )

    def group(self, default_role: GroupRole = GroupRole.viewer, title: str | None = None) -> Group:
        return self._save(Group(title=title or f"Group {next(self._counter)}", default_role=default_role))

    def member(self, group: Group, user: User, role: GroupRole | None = None) -> GroupMembership:
        return self._save(GroupMembership(group_id=group.id, user_id=user.id, role=role))

    def calendar(self, owner: User, groups=()) -> Calendar:
        calendar = self._save(Calendar(name=f"Calendar {next(self._counter)}", created_by_id=owner.id))
        for group in groups:
            self._save(CalendarGroup(calendar_id=calendar.id, group_id=group.id))
        return calendar

    def event_type(self, name: str | None = None) -> EventType:
        return self._save(EventType(name=name or f"Type {next(self._counter)}"))

    def event(
        self,
        calendar: Calendar,
        start: date,
        end: date | None = None,
        event_type: EventType | None = None,
        title: str = "Exam Week",
    ) -> CalendarEvent:
        event_type = event_type or self.event_type()
        return self._save(
            CalendarEvent(
                calendar_id=calendar.id,
                title=title,
                description="Bring ID cards",
                start_date=start,
                end_date=end,
                event_type_id=event_type.id,
            )
        )

    def slot_type(self, name: str) -> SlotType:
        return self._save(SlotType(name=name))

    def batch(self, name: str) -> Batch:
        return self._save(Batch(name=name))

    def timetable(self, owner: User, groups=()) -> Timetable:
        timetable = self._save(Timetable(name=f"Timetable {next(self._counter)}", created_by_id=owner.id))
        for group in groups:
            self._save(TimetableGroup(timetable_id=timetable.id, group_id=group.id))
        return timetable

    def slot(
        self,
        timetable: Timetable,
        slot_type: SlotType,
        *,
        day: DayOfWeek = DayOfWeek.monday,
        start: str = "09:00",
        end: str = "10:00",
        faculty: User | None = None,
        batch: Batch | None = None,
        subject: str | None = "Algorithms",
        room: str | None = "A101",
    ) -> TimetableSlot:
        return self._save(
            TimetableSlot(
                timetable_id=timetable.id,
                day=day,
                start_time=start,
                end_time=end,
                subject_name=subject,
                slot_type_id=slot_type.id,
                room_number=room,
                faculty_id=faculty.id if faculty else None,
                batch_id=batch.id if batch else None,
            )
        )


@pytest.fixture()
def factory(db_session):
    return Factory(db_session)
