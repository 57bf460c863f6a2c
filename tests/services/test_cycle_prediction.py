from datetime import date

import pytest

from wellness_forum.services.cycle import period_reminders, predict_cycle


def test_prediction_for_28_day_cycle() -> None:
    prediction = predict_cycle(date(2024, 1, 1), 28)

    assert prediction.next_period_start == date(2024, 1, 29)
    assert prediction.ovulation_date == date(2024, 1, 15)
    assert prediction.fertile_window_start == date(2024, 1, 13)
    assert prediction.fertile_window_end == date(2024, 1, 17)


def test_odd_cycle_length_rounds_ovulation_down() -> None:
    prediction = predict_cycle(date(2024, 1, 1), 31)
    assert prediction.ovulation_date == date(2024, 1, 16)


def test_prediction_rolls_forward_to_reference_day() -> None:
    prediction = predict_cycle(date(2024, 1, 1), 28, as_of=date(2024, 3, 1))

    assert prediction.cycle_start == date(2024, 2, 26)
    assert prediction.next_period_start == date(2024, 3, 25)
    assert prediction.cycle_start <= date(2024, 3, 1) <= prediction.next_period_start


def test_current_cycle_is_not_rolled() -> None:
    prediction = predict_cycle(date(2024, 1, 1), 28, as_of=date(2024, 1, 20))
    assert prediction.cycle_start == date(2024, 1, 1)


@pytest.mark.parametrize("length", [0, 14, 61])
def test_out_of_range_cycle_length(length: int) -> None:
    with pytest.raises(ValueError):
        predict_cycle(date(2024, 1, 1), length)


def test_reminders_lead_their_events() -> None:
    prediction = predict_cycle(date(2024, 1, 1), 28)
    period, ovulation = period_reminders(prediction, "user-alice")

    assert period.reminder_type == "period"
    assert period.reminder_date == date(2024, 1, 27)
    assert period.title == "Period Expected Soon"
    assert ovulation.reminder_type == "ovulation"
    assert ovulation.reminder_date == date(2024, 1, 14)
    assert {period.user_id, ovulation.user_id} == {"user-alice"}
    assert period.frequency == "monthly"
