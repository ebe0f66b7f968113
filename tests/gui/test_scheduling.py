from iEdit.gui.scheduling import Debouncer, ManualScheduler


def test_manual_scheduler_runs_due_callbacks_in_order():
    scheduler = ManualScheduler()
    calls = []
    scheduler.call_later(20, lambda: calls.append("late"))
    scheduler.call_later(10, lambda: calls.append("early"))

    assert scheduler.advance(15) == 1
    assert calls == ["early"]
    assert scheduler.advance(5) == 1
    assert calls == ["early", "late"]
    assert scheduler.now == 20


def test_cancelled_handles_do_not_fire():
    scheduler = ManualScheduler()
    calls = []
    handle = scheduler.call_later(10, lambda: calls.append(1))

    handle.cancel()

    assert scheduler.advance(50) == 0
    assert calls == []
    assert scheduler.pending == 0


def test_callbacks_scheduled_while_advancing_run_in_window():
    scheduler = ManualScheduler()
    calls = []
    scheduler.call_later(10, lambda: scheduler.call_later(10, lambda: calls.append("chained")))

    scheduler.advance(25)

    assert calls == ["chained"]


def test_flush_runs_everything():
    scheduler = ManualScheduler()
    calls = []
    scheduler.call_later(1000, lambda: calls.append(1))

    assert scheduler.flush() == 1
    assert scheduler.now == 1000


def test_debouncer_collapses_bursts_and_keeps_last_arguments():
    scheduler = ManualScheduler()
    calls = []
    debouncer = Debouncer(scheduler, 300, calls.append)

    debouncer.trigger(1)
    scheduler.advance(200)
    debouncer.trigger(2)
    scheduler.advance(200)
    assert calls == []
    assert debouncer.pending is True

    scheduler.advance(100)
    assert calls == [2]
    assert debouncer.pending is False


def test_debouncer_cancel():
    scheduler = ManualScheduler()
    calls = []
    debouncer = Debouncer(scheduler, 150, lambda: calls.append(True))

    debouncer.trigger()
    debouncer.cancel()
    scheduler.advance(500)

    assert calls == []
