def test_ready_tasks_require_completed_prerequisites(services):
    ts = services["task_service"]
    a = ts.create_task("Gather receipts")
    b = ts.create_task("File taxes", dependencies=[a.id])
    c = ts.create_task("Water plants")

    assert {t.id for t in ts.list_ready_tasks()} == {a.id, c.id}

    ts.set_completed(a.id, True)

    assert {t.id for t in ts.list_ready_tasks()} == {b.id, c.id}


def test_completed_tasks_are_never_ready(services):
    ts = services["task_service"]
    a = ts.create_task("Done already")
    ts.set_completed(a.id, True)

    assert ts.list_ready_tasks() == []
    assert ts.count_ready_tasks() == 0


def test_ready_tasks_put_critical_first_then_longer_estimates(services):
    ts = services["task_service"]
    root = ts.create_task("Kickoff", estimated_days=1)
    long_chain = ts.create_task("Long follow-up", estimated_days=9, dependencies=[root.id])
    short_free = ts.create_task("Short errand", estimated_days=2)
    medium_free = ts.create_task("Medium errand", estimated_days=4)
    ts.set_completed(root.id, True)

    ready = ts.list_ready_tasks()

    assert [t.id for t in ready] == [long_chain.id, medium_free.id, short_free.id]


def test_ready_tasks_limit_and_count(services):
    ts = services["task_service"]
    for n in range(7):
        ts.create_task(f"Chore {n}", estimated_days=n + 1)

    ready = ts.list_ready_tasks()

    assert len(ready) == 5
    assert ts.count_ready_tasks() == 7
    assert len(ts.list_ready_tasks(limit=2)) == 2
