from datetime import date, datetime

import pytest

from core.exceptions import NotFoundError, ValidationError
from core.models import TaskImage


def test_create_task_trims_title_and_applies_defaults(services):
    ts = services["task_service"]

    task = ts.create_task("  Buy groceries  ")

    stored = ts.get_task(task.id)
    assert stored.title == "Buy groceries"
    assert stored.estimated_days == 1
    assert stored.completed is False
    assert stored.due_date is None
    assert stored.created_at.tzinfo is not None


def test_create_task_runs_image_lookup_and_clears_loading_flag(services):
    ts = services["task_service"]

    task = ts.create_task("Team meeting")

    stored = ts.get_task(task.id)
    assert services["image_client"].queries == ["Team meeting"]
    assert stored.image_url == "https://images.example/medium.jpg"
    assert stored.image_alt == "A photo"
    assert stored.image_loading is False
    assert stored.last_image_search == "Team meeting"


def test_image_alt_falls_back_to_title(services):
    services["image_client"].image = TaskImage(url="https://images.example/x.jpg", alt="")

    task = services["task_service"].create_task("Dentist")

    assert services["task_service"].get_task(task.id).image_alt == "Image for Dentist"


def test_missing_image_leaves_url_empty(services):
    services["image_client"].image = None

    task = services["task_service"].create_task("Something obscure")

    stored = services["task_service"].get_task(task.id)
    assert stored.image_url is None
    assert stored.image_loading is False


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2026-11-02", date(2026, 11, 2)),
        ("2026-11-02T15:30:00Z", date(2026, 11, 2)),
        (date(2026, 1, 5), date(2026, 1, 5)),
        (datetime(2026, 1, 5, 23, 0), date(2026, 1, 5)),
        (None, None),
    ],
)
def test_create_task_parses_due_date(services, value, expected):
    ts = services["task_service"]
    task = ts.create_task("Pay rent", due_date=value)
    assert ts.get_task(task.id).due_date == expected


@pytest.mark.parametrize(
    "kwargs, code",
    [
        ({"title": "   "}, "TASK_TITLE_EMPTY"),
        ({"title": "Plan", "estimated_days": 0}, "TASK_ESTIMATE_RANGE"),
        ({"title": "Plan", "estimated_days": 366}, "TASK_ESTIMATE_RANGE"),
        ({"title": "Plan", "estimated_days": 2.5}, "TASK_ESTIMATE_RANGE"),
        ({"title": "Plan", "due_date": "next tuesday"}, "TASK_DUE_DATE_INVALID"),
    ],
)
def test_create_task_rejects_invalid_input(services, kwargs, code):
    ts = services["task_service"]
    with pytest.raises(ValidationError) as excinfo:
        ts.create_task(**kwargs)
    assert excinfo.value.code == code
    assert ts.list_tasks() == []


def test_create_task_with_unknown_dependency_writes_nothing(services):
    ts = services["task_service"]
    with pytest.raises(NotFoundError):
        ts.create_task("Orphan", dependencies=[404])
    assert ts.list_tasks() == []


def test_create_task_records_initial_dependencies(services):
    ts = services["task_service"]
    a = ts.create_task("Pick paint")
    b = ts.create_task("Buy brushes")

    c = ts.create_task("Paint fence", dependencies=[a.id, b.id, a.id])

    stored = ts.get_task(c.id)
    assert stored.depends_on_ids == [a.id, b.id]
    assert ts.get_task(a.id).dependent_ids == [c.id]


def test_create_task_emits_tasks_changed(services):
    seen = []
    services["events"].tasks_changed.connect(seen.append)

    task = services["task_service"].create_task("Call mom")

    assert seen == [task.id]


def test_list_tasks_newest_first(services):
    ts = services["task_service"]
    first = ts.create_task("First")
    second = ts.create_task("Second")

    assert [t.id for t in ts.list_tasks()] == [second.id, first.id]


def test_update_task_partial_fields(services):
    ts = services["task_service"]
    task = ts.create_task("Write report", due_date="2026-12-01", estimated_days=3)

    ts.update_task(task.id, completed=True)

    stored = ts.get_task(task.id)
    assert stored.completed is True
    assert stored.title == "Write report"
    assert stored.due_date == date(2026, 12, 1)
    assert stored.estimated_days == 3


def test_update_task_clears_due_date_with_none(services):
    ts = services["task_service"]
    task = ts.create_task("Write report", due_date="2026-12-01")

    ts.update_task(task.id, due_date=None)

    assert ts.get_task(task.id).due_date is None


def test_update_title_triggers_new_image_lookup(services):
    ts = services["task_service"]
    task = ts.create_task("Laundry")

    ts.update_task(task.id, title="Workout")
    ts.update_task(task.id, title="Workout")

    assert services["image_client"].queries == ["Laundry", "Workout"]
    assert ts.get_task(task.id).last_image_search == "Workout"


def test_update_estimate_recalculates_schedule(services):
    ts = services["task_service"]
    a = ts.create_task("Short", estimated_days=1)
    b = ts.create_task("Long", estimated_days=3)
    assert ts.get_task(b.id).is_on_critical_path
    assert not ts.get_task(a.id).is_on_critical_path

    ts.update_task(a.id, estimated_days=10)

    assert ts.get_task(a.id).is_on_critical_path
    assert not ts.get_task(b.id).is_on_critical_path


def test_update_task_validates_estimate(services):
    ts = services["task_service"]
    task = ts.create_task("Estimate me")
    with pytest.raises(ValidationError) as excinfo:
        ts.update_task(task.id, estimated_days=400)
    assert excinfo.value.code == "TASK_ESTIMATE_RANGE"
    assert ts.get_task(task.id).estimated_days == 1


def test_set_completed_round_trip(services):
    ts = services["task_service"]
    task = ts.create_task("Toggle me")

    ts.set_completed(task.id, True)
    assert ts.get_task(task.id).completed is True
    ts.set_completed(task.id, False)
    assert ts.get_task(task.id).completed is False


def test_delete_task_removes_its_edges(services):
    ts = services["task_service"]
    a = ts.create_task("Base")
    b = ts.create_task("Middle", dependencies=[a.id])
    c = ts.create_task("Top", dependencies=[b.id])

    ts.delete_task(b.id)

    assert ts.get_task(c.id).depends_on_ids == []
    assert ts.get_task(a.id).dependent_ids == []
    with pytest.raises(NotFoundError):
        ts.get_task(b.id)


def test_unknown_task_operations_raise_not_found(services):
    ts = services["task_service"]
    for call in (
        lambda: ts.get_task(999),
        lambda: ts.update_task(999, title="x"),
        lambda: ts.delete_task(999),
    ):
        with pytest.raises(NotFoundError) as excinfo:
            call()
        assert excinfo.value.code == "TASK_NOT_FOUND"


def _after_next_get(monkeypatch, task_repo, side_effect):
    """Run ``side_effect`` right after the next task read, as a background writer would."""
    original_get = task_repo.get

    def get(task_id):
        task = original_get(task_id)
        monkeypatch.setattr(task_repo, "get", original_get)
        side_effect()
        return task

    monkeypatch.setattr(task_repo, "get", get)


def test_update_task_keeps_schedule_written_concurrently(services, monkeypatch):
    ts = services["task_service"]
    session = services["session"]
    a = ts.create_task("Pour concrete", estimated_days=1)
    b = ts.create_task("Lay tiles", estimated_days=2, dependencies=[a.id])
    assert ts.get_task(b.id).earliest_start_date > ts.get_task(a.id).earliest_start_date

    def unlink_and_recalculate():
        services["dependency_repo"].delete(b.id, a.id)
        session.commit()
        services["critical_path_service"].recalculate_and_update()

    _after_next_get(monkeypatch, services["task_repo"], unlink_and_recalculate)
    ts.update_task(b.id, completed=True)

    stored_a = ts.get_task(a.id)
    stored_b = ts.get_task(b.id)
    assert stored_b.completed is True
    assert stored_b.earliest_start_date == stored_a.earliest_start_date
    assert stored_b.is_on_critical_path and not stored_a.is_on_critical_path


def test_update_task_keeps_image_stored_concurrently(services, monkeypatch):
    ts = services["task_service"]
    session = services["session"]
    task_repo = services["task_repo"]
    task = ts.create_task("Water plants")

    def store_new_image():
        task_repo.update_image(
            task.id,
            TaskImage(url="https://images.example/plants.jpg", alt="Plants"),
            search_text="Water plants",
        )
        session.commit()

    _after_next_get(monkeypatch, task_repo, store_new_image)
    ts.update_task(task.id, due_date="2026-11-02")

    stored = ts.get_task(task.id)
    assert stored.due_date == date(2026, 11, 2)
    assert stored.image_url == "https://images.example/plants.jpg"
    assert stored.image_alt == "Plants"
    assert stored.image_loading is False
