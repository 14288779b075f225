from datetime import date

from app.core.context import ActorContext
from app.models.group import GroupRole
from app.models.lecture_summary import LectureSummary
from app.models.preference import StudentPreference
from app.models.timetable import DAYS_ORDER, DayOfWeek
from app.models.user import UserRole
from app.services.schedule import build_user_schedule, day_of_week, schedule_window

TODAY = date(2026, 3, 15)


def ids(slots):
    return [slot.id for slot in slots]


def test_schedule_window_is_symmetric():
    assert schedule_window(TODAY, 30) == (date(2026, 2, 13), date(2026, 4, 14))


def test_day_of_week_maps_calendar_dates():
    assert day_of_week(date(2026, 3, 9)) == DayOfWeek.monday
    assert day_of_week(TODAY) == DayOfWeek.sunday
    assert day_of_week(date(2028, 2, 29)) == DayOfWeek.tuesday


def test_every_day_present_for_user_without_groups(db_session, factory):
    student = factory.user(UserRole.student, name="Asha")

    schedule = build_user_schedule(db_session, ActorContext.from_user(student), today=TODAY)

    assert list(schedule.weekly_schedule) == DAYS_ORDER
    assert all(slots == [] for slots in schedule.weekly_schedule.values())
    assert schedule.day_events == {}
    assert schedule.slot_summaries == {}
    assert schedule.user_name == "Asha"
    assert schedule.user_role == "Student"
    assert schedule.today_date == TODAY


def test_faculty_sees_only_own_slots_sorted_by_start(db_session, factory):
    hod = factory.user(UserRole.hod)
    faculty = factory.user(UserRole.faculty, name="Dr. Rao")
    colleague = factory.user(UserRole.faculty)
    group = factory.group()
    factory.member(group, faculty)
    lecture = factory.slot_type("Lecture")
    timetable = factory.timetable(hod, groups=[group])
    late = factory.slot(timetable, lecture, start="11:00", end="12:00", faculty=faculty)
    early = factory.slot(timetable, lecture, start="08:30", end="09:30", faculty=faculty)
    factory.slot(timetable, lecture, start="10:00", end="11:00", faculty=colleague)
    friday = factory.slot(timetable, lecture, day=DayOfWeek.friday, faculty=faculty)

    schedule = build_user_schedule(db_session, ActorContext.from_user(faculty), today=TODAY)

    assert ids(schedule.weekly_schedule[DayOfWeek.monday]) == [early.id, late.id]
    assert ids(schedule.weekly_schedule[DayOfWeek.friday]) == [friday.id]
    first = schedule.weekly_schedule[DayOfWeek.monday][0]
    assert first.faculty_name == "Dr. Rao"
    assert first.slot_type_name == "Lecture"
    assert first.is_break is False


def test_hod_slots_are_filtered_by_faculty_too(db_session, factory):
    hod = factory.user(UserRole.hod)
    faculty = factory.user(UserRole.faculty)
    group = factory.group()
    factory.member(group, hod)
    lecture = factory.slot_type("Lecture")
    timetable = factory.timetable(hod, groups=[group])
    factory.slot(timetable, lecture, faculty=faculty)

    schedule = build_user_schedule(db_session, ActorContext.from_user(hod), today=TODAY)

    assert all(slots == [] for slots in schedule.weekly_schedule.values())


def test_student_slot_type_and_batch_preferences(db_session, factory):
    hod = factory.user(UserRole.hod)
    student = factory.user(UserRole.student)
    group = factory.group()
    factory.member(group, student)
    lecture = factory.slot_type("Lecture")
    lab = factory.slot_type("Lab")
    batch_a = factory.batch("A")
    batch_b = factory.batch("B")
    timetable = factory.timetable(hod, groups=[group])
    open_lecture = factory.slot(timetable, lecture, start="09:00")
    lecture_a = factory.slot(timetable, lecture, start="10:00", batch=batch_a)
    lecture_b = factory.slot(timetable, lecture, start="11:00", batch=batch_b)
    lab_a = factory.slot(timetable, lab, start="12:00", batch=batch_a)
    actor = ActorContext.from_user(student)

    everything = build_user_schedule(db_session, actor, today=TODAY)
    assert ids(everything.weekly_schedule[DayOfWeek.monday]) == [open_lecture.id, lecture_a.id, lecture_b.id, lab_a.id]

    db_session.add(
        StudentPreference(
            user_id=student.id,
            enabled_slot_type_ids=[lecture.id],
            selected_batch_ids=[batch_a.id],
        )
    )
    db_session.commit()

    filtered = build_user_schedule(db_session, actor, today=TODAY)
    assert ids(filtered.weekly_schedule[DayOfWeek.monday]) == [open_lecture.id, lecture_a.id]


def test_slots_shared_through_two_timetables_appear_once(db_session, factory):
    hod = factory.user(UserRole.hod)
    student = factory.user(UserRole.student)
    first_group = factory.group()
    second_group = factory.group()
    factory.member(first_group, student)
    factory.member(second_group, student)
    lecture = factory.slot_type("Lecture")
    timetable = factory.timetable(hod, groups=[first_group, second_group])
    slot = factory.slot(timetable, lecture)

    schedule = build_user_schedule(db_session, ActorContext.from_user(student), today=TODAY)

    assert ids(schedule.weekly_schedule[DayOfWeek.monday]) == [slot.id]


def test_break_slot_has_no_subject_or_room(db_session, factory):
    hod = factory.user(UserRole.hod)
    student = factory.user(UserRole.student)
    group = factory.group()
    factory.member(group, student)
    timetable = factory.timetable(hod, groups=[group])
    factory.slot(timetable, factory.slot_type("Break"), subject=None, room=None)

    schedule = build_user_schedule(db_session, ActorContext.from_user(student), today=TODAY)

    assert schedule.weekly_schedule[DayOfWeek.monday][0].is_break is True


def test_summary_dates_limited_to_window(db_session, factory):
    hod = factory.user(UserRole.hod)
    faculty = factory.user(UserRole.faculty)
    group = factory.group()
    factory.member(group, faculty)
    timetable = factory.timetable(hod, groups=[group])
    slot = factory.slot(timetable, factory.slot_type("Lecture"), faculty=faculty)
    for day in (date(2026, 2, 12), date(2026, 2, 13), date(2026, 3, 9), date(2026, 4, 14), date(2026, 4, 15)):
        db_session.add(LectureSummary(slot_id=slot.id, date=day, content="Covered", author_id=faculty.id))
    db_session.commit()

    schedule = build_user_schedule(db_session, ActorContext.from_user(faculty), today=TODAY)

    assert schedule.slot_summaries == {slot.id: ["2026-02-13", "2026-03-09", "2026-04-14"]}


def test_events_bucketed_per_date_and_clipped_to_window(db_session, factory):
    hod = factory.user(UserRole.hod)
    student = factory.user(UserRole.student)
    group = factory.group(GroupRole.viewer)
    factory.member(group, student)
    visible = factory.calendar(hod, groups=[group])
    hidden = factory.calendar(hod)
    exams = factory.event_type("Exam")
    week = factory.event(visible, date(2026, 3, 16), date(2026, 3, 18), event_type=exams, title="Midterms")
    straddling = factory.event(visible, date(2026, 2, 10), date(2026, 2, 14), event_type=exams, title="Fest")
    factory.event(visible, date(2026, 5, 1), title="Far away")
    factory.event(hidden, date(2026, 3, 16), title="Staff only")

    schedule = build_user_schedule(db_session, ActorContext.from_user(student), today=TODAY)

    assert sorted(schedule.day_events) == ["2026-02-13", "2026-02-14", "2026-03-16", "2026-03-17", "2026-03-18"]
    assert [event.id for event in schedule.day_events["2026-03-17"]] == [week.id]
    assert schedule.day_events["2026-03-17"][0].event_type_name == "Exam"
    assert [event.id for event in schedule.day_events["2026-02-13"]] == [straddling.id]


def test_event_visible_through_two_groups_is_listed_once(db_session, factory):
    hod = factory.user(UserRole.hod)
    faculty = factory.user(UserRole.faculty)
    first_group = factory.group()
    second_group = factory.group()
    factory.member(first_group, faculty)
    factory.member(second_group, faculty)
    calendar = factory.calendar(hod, groups=[first_group, second_group])
    event = factory.event(calendar, TODAY)

    schedule = build_user_schedule(db_session, ActorContext.from_user(faculty), today=TODAY)

    assert [item.id for item in schedule.day_events[TODAY.isoformat()]] == [event.id]


def test_hod_without_groups_sees_all_events(db_session, factory):
    hod = factory.user(UserRole.hod)
    other_hod = factory.user(UserRole.hod)
    calendar = factory.calendar(other_hod)
    event = factory.event(calendar, TODAY)

    schedule = build_user_schedule(db_session, ActorContext.from_user(hod), today=TODAY)

    assert [item.id for item in schedule.day_events[TODAY.isoformat()]] == [event.id]


def test_non_hod_without_groups_sees_no_events(db_session, factory):
    hod = factory.user(UserRole.hod)
    faculty = factory.user(UserRole.faculty)
    calendar = factory.calendar(hod, groups=[factory.group()])
    factory.event(calendar, TODAY)

    schedule = build_user_schedule(db_session, ActorContext.from_user(faculty), today=TODAY)

    assert schedule.day_events == {}
