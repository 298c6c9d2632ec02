from backend.rest_timer import RestTimer


def test_start_schedules_one_event(fake_clock):
    timer = RestTimer(lambda: True, clock=fake_clock)
    timer.start()
    timer.start()
    assert timer.running
    assert len(fake_clock.events) == 1
    assert fake_clock.events[0].interval == 1.0


def test_cancel_stops_ticking(fake_clock):
    calls = []
    timer = RestTimer(lambda: calls.append(1) or True, clock=fake_clock)
    timer.start()
    fake_clock.tick(2)
    timer.cancel()
    fake_clock.tick(2)
    assert len(calls) == 2
    assert not timer.running
    timer.cancel()


def test_callback_returning_false_ends_timer(fake_clock):
    remaining = [3]

    def countdown():
        remaining[0] -= 1
        return remaining[0] > 0

    timer = RestTimer(countdown, clock=fake_clock)
    timer.start()
    fake_clock.tick(5)
    assert remaining[0] == 0
    assert not timer.running
    assert fake_clock.events == []
