from datetime import UTC, date, datetime, time

from wellness_forum.models import Reminder
from wellness_forum.schemas.cycle import ReminderDraft
from wellness_forum.schemas.reminder import MedicationReminderCreate
from wellness_forum.services.reminders import (
    create_medication_reminder,
    list_reminders,
    medication_message,
    next_occurrence,
    replace_cycle_reminders,
)

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


def _draft(kind: str, day: date) -> ReminderDraft:
    return ReminderDraft(title=kind.title(), message="soon", reminder_type=kind, reminder_date=day)


def test_next_occurrence_later_today() -> None:
    assert next_occurrence(time(18, 30), NOW) == datetime(2024, 3, 1, 18, 30, tzinfo=UTC)


def test_next_occurrence_rolls_to_tomorrow() -> None:
    assert next_occurrence(time(8, 0), NOW) == datetime(2024, 3, 2, 8, 0, tzinfo=UTC)


def test_medication_message() -> None:
    assert medication_message("10mg") == "Take 10mg"
    assert medication_message(" 2 tablets ", " with food ") == "Take 2 tablets - with food"
    assert medication_message("5ml", "  ") == "Take 5ml"


def test_create_medication_reminder(db_session) -> None:
    form = MedicationReminderCreate(
        title="Iron", dosage="65mg", frequency="daily", time_of_day="07:45"
    )

    reminder = create_medication_reminder(db_session, "user-alice", form, now=NOW)

    assert reminder.reminder_type == "medication"
    assert reminder.message == "Take 65mg"
    assert reminder.frequency == "daily"
    assert reminder.is_active and not reminder.is_sent


def test_cycle_reminders_replace_pending_ones(db_session) -> None:
    sent = Reminder(
        user_id="user-alice",
        title="Old period",
        reminder_type="period",
        reminder_date=datetime(2024, 1, 1, tzinfo=UTC),
        is_sent=True,
    )
    db_session.add(sent)
    replace_cycle_reminders(db_session, "user-alice", [_draft("period", date(2024, 2, 1))])
    db_session.commit()

    replace_cycle_reminders(
        db_session,
        "user-alice",
        [_draft("period", date(2024, 3, 1)), _draft("ovulation", date(2024, 2, 14))],
    )
    db_session.commit()

    remaining = list_reminders(db_session, "user-alice")
    assert [(r.reminder_type, r.reminder_date.date()) for r in remaining] == [
        ("period", date(2024, 1, 1)),
        ("ovulation", date(2024, 2, 14)),
        ("period", date(2024, 3, 1)),
    ]
    assert [r.title for r in list_reminders(db_session, "user-alice", "ovulation")] == ["Ovulation"]


def test_medication_reminders_survive_cycle_refresh(db_session) -> None:
    form = MedicationReminderCreate(title="Iron", dosage="65mg", time_of_day="07:45")
    create_medication_reminder(db_session, "user-alice", form, now=NOW)

    replace_cycle_reminders(db_session, "user-alice", [_draft("period", date(2024, 3, 20))])
    db_session.commit()

    kinds = sorted(r.reminder_type for r in list_reminders(db_session, "user-alice"))
    assert kinds == ["medication", "period"]
