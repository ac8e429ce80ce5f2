from datetime import date

from core import planner
from core.models import AppState


def test_toggle_twice_restores_completion_set():
    today = date(2024, 5, 1)
    state = planner.add_schedule(AppState(), "Stretch", "", "none")
    item_id = state.schedules[0].id

    before = list(state.schedules[0].completed_dates)

    state = planner.toggle_schedule(state, item_id, today=today)
    assert state.schedules[0].completed_dates == ["2024-05-01"]

    state = planner.toggle_schedule(state, item_id, today=today)
    assert state.schedules[0].completed_dates == before


def test_run_scenario_counts_completion_for_the_day():
    """
    Regression test:
    - add "Run" at 07:00 daily
    - toggle on 2024-05-01 -> counted as completed
    - toggle again -> reverts
    - list length never changes
    """
    today = date(2024, 5, 1)

    state = planner.add_schedule(AppState(), "Run", "07:00", "daily")
    item_id = state.schedules[0].id

    state = planner.toggle_schedule(state, item_id, today=today)
    assert planner.completed_today(state, today) == 1
    assert planner.schedule_progress(state, today) == 100
    assert len(state.schedules) == 1

    state = planner.toggle_schedule(state, item_id, today=today)
    assert planner.completed_today(state, today) == 0
    assert planner.schedule_progress(state, today) == 0
    assert len(state.schedules) == 1


def test_recurrence_is_only_a_label():
    state = planner.add_schedule(AppState(), "Run", "07:00", "daily")
    item_id = state.schedules[0].id

    state = planner.toggle_schedule(state, item_id, today=date(2024, 5, 1))

    # completed yesterday does not count for today, and nothing is generated
    assert planner.completed_today(state, date(2024, 5, 2)) == 0
    assert state.schedules[0].completed_dates == ["2024-05-01"]
    assert len(state.schedules) == 1


def test_toggle_unknown_id_is_noop():
    state = planner.add_schedule(AppState(), "Run", "07:00", "daily")

    assert planner.toggle_schedule(state, "missing", today=date(2024, 5, 1)) == state


def test_operations_do_not_modify_input():
    original = planner.add_schedule(AppState(), "Run", "07:00", "daily")
    item_id = original.schedules[0].id

    planner.toggle_schedule(original, item_id, today=date(2024, 5, 1))
    planner.add_schedule(original, "Swim")

    assert original.schedules[0].completed_dates == []
    assert len(original.schedules) == 1


def test_remove_preserves_order_and_ids_are_unique():
    state = AppState()
    for title in ["A", "B", "C"]:
        state = planner.add_schedule(state, title)

    ids = [s.id for s in state.schedules]
    assert len(set(ids)) == 3

    state = planner.remove_schedule(state, ids[1])

    assert [s.title for s in state.schedules] == ["A", "C"]


def test_progress_with_no_schedules_is_zero():
    assert planner.schedule_progress(AppState(), date(2024, 5, 1)) == 0
