from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from face_attendance.attendance.memory_attendance_repository import InMemoryAttendanceRepository
from face_attendance.attendance.service import AttendanceService, attendance_rate
from face_attendance.common.datetime_utils import CalendarPolicy
from face_attendance.container import build_container
from face_attendance.core.enums import MarkStatus
from face_attendance.database.memory_backend import MemoryBackend
from face_attendance.database.state import Database
from face_attendance.students.memory_student_repository import InMemoryStudentRepository


def test_mark_twice_same_day_keeps_one_event(container, fixed_now):
    svc = container.attendance_service

    first = svc.mark("stu-1", "Ada", now=fixed_now)
    second = svc.mark("stu-1", "Ada", now=fixed_now + timedelta(hours=5))

    assert first.status == MarkStatus.MARKED
    assert second.status == MarkStatus.ALREADY_MARKED
    assert second.event == first.event
    assert len(svc.all_events()) == 1
    assert svc.is_present("stu-1", fixed_now.date())


def test_mark_again_next_day_creates_new_event(container, fixed_now):
    svc = container.attendance_service

    svc.mark("stu-1", "Ada", now=fixed_now)
    result = svc.mark("stu-1", "Ada", now=fixed_now + timedelta(days=1))

    assert result.status == MarkStatus.MARKED
    assert len(svc.all_events()) == 2
    assert not svc.is_present("stu-1", fixed_now.date() - timedelta(days=1))


def test_calendar_day_follows_configured_timezone(clock):
    calendar = CalendarPolicy(timezone(timedelta(hours=7)))
    db = Database(MemoryBackend())
    svc = AttendanceService(
        InMemoryAttendanceRepository(db, calendar),
        InMemoryStudentRepository(db),
        db,
        calendar=calendar,
        clock=clock,
    )

    # 16:00 UTC is 23:00 local on Mar 2; 17:30 UTC is already Mar 3 locally.
    before_midnight = svc.mark("stu-1", "Ada", now=datetime(2026, 3, 2, 16, 0, tzinfo=timezone.utc))
    after_midnight = svc.mark("stu-1", "Ada", now=datetime(2026, 3, 2, 17, 30, tzinfo=timezone.utc))
    same_local_day = svc.mark("stu-1", "Ada", now=datetime(2026, 3, 2, 23, 30, tzinfo=timezone.utc))

    assert before_midnight.status == MarkStatus.MARKED
    assert after_midnight.status == MarkStatus.MARKED
    assert same_local_day.status == MarkStatus.ALREADY_MARKED
    assert svc.is_present("stu-1", date(2026, 3, 2))
    assert svc.is_present("stu-1", date(2026, 3, 3))
    assert [e.timestamp.hour for e in svc.events_for_day(date(2026, 3, 3))] == [17]


def test_events_for_day_most_recent_first(container, fixed_now):
    svc = container.attendance_service
    svc.mark("a", "A", now=fixed_now)
    svc.mark("b", "B", now=fixed_now + timedelta(minutes=10))
    svc.mark("c", "C", now=fixed_now - timedelta(days=1))

    rows = svc.events_for_day(fixed_now.date())

    assert [e.student_name for e in rows] == ["B", "A"]
    assert [e.student_name for e in svc.all_events()] == ["A", "B", "C"]


def test_summary_and_recent_dates(container, fixed_now):
    svc = container.attendance_service
    for i in range(7):
        svc.mark("a", "A", now=fixed_now - timedelta(days=i))
    svc.mark("b", "B", now=fixed_now)

    summary = svc.summary_by_day()
    recent = svc.recent_dates()

    assert summary[fixed_now.date()] == 2
    assert sum(summary.values()) == 8
    assert len(recent) == 5
    assert recent[0] == (fixed_now.date(), 2)
    assert [d for d, _ in recent] == sorted((d for d, _ in recent), reverse=True)


def test_day_report_counts_and_percent(container, fixed_now):
    students = container.student_service
    svc = container.attendance_service
    ada = students.enroll(full_name="Ada", student_code="S001", signature=[0.1])
    students.enroll(full_name="Bob", student_code="S002", signature=[0.5])
    students.enroll(full_name="Cy", student_code="S003", signature=[0.9])
    svc.mark(ada.student_id, ada.full_name, now=fixed_now)

    report = svc.day_report(fixed_now.date())

    assert report.total_students == 3
    assert report.present_count == 1
    assert report.present_percent == 33
    assert report.events[0].student_name == "Ada"


def test_attendance_rate_rounding():
    assert attendance_rate(0, 0) == 0
    assert attendance_rate(1, 2) == 50
    assert attendance_rate(2, 3) == 67
    assert attendance_rate(1, 8) == 13


def test_history_survives_rename_and_delete(container, fixed_now):
    students = container.student_service
    svc = container.attendance_service
    ada = students.enroll(full_name="Ada", student_code="S001", signature=[0.1])
    svc.mark(ada.student_id, ada.full_name, now=fixed_now)

    students.update_student(ada.student_id, full_name="Ada L", student_code="S009")
    assert svc.export_rows(fixed_now.date()) == [{"student_code": "S009", "student_name": "Ada", "time": "08:30:00"}]

    students.delete_student(ada.student_id)
    assert svc.export_rows(fixed_now.date()) == [{"student_code": "", "student_name": "Ada", "time": "08:30:00"}]
    assert svc.day_report(fixed_now.date()).present_count == 1


def test_dashboard_for_today(container, clock):
    students = container.student_service
    svc = container.attendance_service
    ada = students.enroll(full_name="Ada", student_code="S001", signature=[0.1])
    students.enroll(full_name="Bob", student_code="S002", signature=[0.5])
    svc.mark(ada.student_id, ada.full_name)

    data = svc.dashboard()

    assert data["date"] == "2026-03-02"
    assert data["total_students"] == 2
    assert data["present_today"] == 1
    assert data["attendance_rate"] == 50
    assert data["recent"] == [{"student_name": "Ada", "time": "08:30:00"}]


def test_local_policy_follows_dst_for_each_instant(new_york_local_time, backend, clock):
    c = build_container(backend=backend, timezone="local", clock=clock)
    svc = c.attendance_service

    # 04:30 UTC on Mar 8 is 23:30 EST on Mar 7; 03:30 UTC on Mar 9 is 23:30 EDT on Mar 8.
    winter = datetime(2026, 3, 8, 4, 30, tzinfo=timezone.utc)
    summer = datetime(2026, 3, 9, 3, 30, tzinfo=timezone.utc)

    assert c.calendar.day_of(winter) == date(2026, 3, 7)
    assert c.calendar.day_of(summer) == date(2026, 3, 8)
    assert c.calendar.day_of(datetime(2026, 1, 15, 4, 30, tzinfo=timezone.utc)) == date(2026, 1, 14)
    assert c.calendar.format_time(winter) == "23:30:00"
    assert c.calendar.format_time(summer) == "23:30:00"

    assert svc.mark("stu-1", "Ada", now=winter).status == MarkStatus.MARKED
    assert svc.mark("stu-1", "Ada", now=summer).status == MarkStatus.MARKED
    assert svc.mark("stu-1", "Ada", now=summer + timedelta(minutes=20)).status == MarkStatus.ALREADY_MARKED
    assert svc.summary_by_day() == {date(2026, 3, 7): 1, date(2026, 3, 8): 1}
    assert [e.timestamp for e in svc.events_for_day(date(2026, 3, 8))] == [summer]
    assert c.calendar.zone_name == "local"


def test_dashboard_recent_is_todays_activity(container, clock):
    svc = container.attendance_service
    for i in range(7):
        svc.mark(f"stu-{i}", f"Student {i}")
        clock.advance(minutes=1)

    recent = svc.today_activity()
    data = svc.dashboard()

    assert len(recent) == 5
    assert recent[0].student_name == "Student 6"
    assert [r["student_name"] for r in data["recent"]] == [e.student_name for e in recent]
    assert data["present_today"] == 7
