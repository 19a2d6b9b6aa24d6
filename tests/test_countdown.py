import pytest

from ambience.time import CountdownTimer, DEFAULT_DURATION_SECONDS, MAX_DURATION_SECONDS
from ambience.core.signal import (
    SIGNAL_TIMER_TICK, SIGNAL_TIMER_COMPLETED, SIGNAL_TIMER_STARTED,
    SIGNAL_TIMER_PAUSED, SIGNAL_TIMER_RESUMED, SIGNAL_TIMER_RESET,
)


class Counter:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1


def test_idle_defaults(timer):
    assert timer.duration_seconds == DEFAULT_DURATION_SECONDS == 3000
    assert timer.remaining_seconds == 3000
    assert timer.running is False
    assert timer.start_timestamp is None
    assert timer.is_paused is False
    assert timer.is_expired is False


def test_start_arms_timer(timer, clock):
    timer.start(600)

    assert timer.running is True
    assert timer.duration_seconds == 600
    assert timer.remaining_seconds == 600
    assert timer.start_timestamp == clock.now


def test_countdown_pause_and_resume(timer, clock):
    timer.start(10)
    clock.advance(3000)
    assert timer.tick() == 7

    timer.pause()
    clock.advance(60_000)
    assert timer.tick() == 7
    assert timer.remaining_seconds == 7
    assert timer.is_paused is True

    timer.resume()
    clock.advance(5000)
    assert timer.tick() == 2
    assert timer.running is True


def test_explicit_now_values(timer):
    t0 = 50_000.0
    timer.start(10, now=t0)
    assert timer.tick(now=t0 + 3000) == 7

    timer.pause()
    timer.resume(now=t0 + 20_000)
    assert timer.start_timestamp == t0 + 17_000
    assert timer.tick(now=t0 + 25_000) == 2


def test_whole_seconds_are_floored(timer, clock):
    timer.start(10)
    clock.advance(999)
    assert timer.tick() == 10
    clock.advance(1)
    assert timer.tick() == 9


def test_completion_fires_once(timer, clock):
    done = Counter()
    timer.register_on_complete(done)
    timer.start(1)
    t = clock.now

    timer.tick(t + 1100)
    timer.tick(t + 2000)

    assert done.calls == 1
    assert timer.running is False
    assert timer.remaining_seconds == 0
    assert timer.is_expired is True


def test_resume_after_expiry_does_not_refire(timer, clock):
    done = Counter()
    timer.register_on_complete(done)
    timer.start(1)
    timer.tick(clock.advance(1000))

    timer.resume()
    timer.tick(clock.advance(5000))

    assert timer.running is False
    assert done.calls == 1


def test_reset_clears_expiry_and_start_rearms(timer, clock):
    done = Counter()
    timer.register_on_complete(done)
    timer.start(1)
    timer.tick(clock.advance(1500))
    assert done.calls == 1

    timer.reset(20)
    assert timer.running is False
    assert timer.remaining_seconds == 20
    assert timer.duration_seconds == 20
    assert timer.start_timestamp is None

    timer.start(20)
    timer.tick(clock.advance(19_000))
    assert done.calls == 1
    timer.tick(clock.advance(1000))
    assert done.calls == 2


def test_reset_defaults_to_configured_duration(clock):
    timer = CountdownTimer(900, clock=clock)
    timer.start(30)
    timer.reset()

    assert timer.duration_seconds == 900
    assert timer.remaining_seconds == 900


def test_stop_drops_start_reference_pause_keeps_it(timer, clock):
    timer.start(10)
    started = timer.start_timestamp
    timer.pause()
    assert timer.start_timestamp == started

    timer.stop()
    assert timer.running is False
    assert timer.start_timestamp is None
    assert timer.tick(clock.advance(20_000)) == 10
    assert timer.is_paused is False


def test_resume_after_stop_continues_from_remaining(timer, clock):
    timer.start(10)
    timer.tick(clock.advance(4000))
    timer.stop()

    timer.resume()
    assert timer.tick(clock.advance(1000)) == 5


def test_resume_while_running_is_a_noop(timer, clock):
    timer.start(10)
    started = timer.start_timestamp
    clock.advance(2500)

    timer.resume()

    assert timer.start_timestamp == started


@pytest.mark.parametrize("duration", [0, -5, -0.5, float("-inf"), float("nan")])
def test_non_positive_duration_is_already_expired(timer, duration):
    done = Counter()
    timer.register_on_complete(done)

    timer.start(duration)
    assert timer.duration_seconds == 0
    assert timer.remaining_seconds == 0

    timer.tick()
    assert done.calls == 1
    assert timer.running is False


def test_negative_reset_is_normalized(timer):
    timer.reset(-30)
    assert timer.duration_seconds == 0
    assert timer.remaining_seconds == 0


def test_later_registration_replaces_earlier(timer, clock):
    first, second = Counter(), Counter()
    timer.register_on_complete(first)
    timer.register_on_complete(second)

    timer.start(1)
    timer.tick(clock.advance(1000))

    assert first.calls == 0
    assert second.calls == 1


def test_cleared_callback_is_not_called(timer, clock):
    done = Counter()
    timer.register_on_complete(done)
    timer.register_on_complete(None)

    timer.start(1)
    timer.tick(clock.advance(1000))

    assert done.calls == 0
    assert timer.is_expired is True


def test_callback_error_propagates_after_state_commit(timer, clock, recorder_factory):
    recorder = recorder_factory(SIGNAL_TIMER_COMPLETED)

    def explode():
        raise RuntimeError("boom")

    timer.register_on_complete(explode)
    timer.start(1)

    with pytest.raises(RuntimeError):
        timer.tick(clock.advance(1000))

    assert timer.running is False
    assert timer.remaining_seconds == 0
    assert recorder.of(SIGNAL_TIMER_COMPLETED) == [()]
    # already expired: no second attempt
    timer.tick(clock.advance(1000))


def test_clock_going_backwards_does_not_add_time(timer, clock):
    timer.start(10)
    assert timer.tick(clock.advance(-5000)) == 10


def test_tick_signal_only_on_change(timer, clock, recorder_factory):
    recorder = recorder_factory(SIGNAL_TIMER_TICK, SIGNAL_TIMER_COMPLETED)
    timer.start(3)

    for _ in range(30):
        timer.tick(clock.advance(100))

    assert recorder.of(SIGNAL_TIMER_TICK) == [(2,), (1,), (0,)]
    assert recorder.of(SIGNAL_TIMER_COMPLETED) == [()]


def test_control_signals(timer, clock, recorder_factory):
    recorder = recorder_factory(
        SIGNAL_TIMER_STARTED, SIGNAL_TIMER_PAUSED,
        SIGNAL_TIMER_RESUMED, SIGNAL_TIMER_RESET,
    )
    timer.start(60)
    timer.tick(clock.advance(15_000))
    timer.pause()
    timer.pause()
    timer.resume()
    timer.reset(30)

    assert recorder.of(SIGNAL_TIMER_STARTED) == [(60,)]
    assert recorder.of(SIGNAL_TIMER_PAUSED) == [(45,)]
    assert recorder.of(SIGNAL_TIMER_RESUMED) == [(45,)]
    assert recorder.of(SIGNAL_TIMER_RESET) == [(30,)]


def test_snapshot_and_format(timer, clock):
    assert timer.format_remaining() == "50:00"

    timer.start(75)
    timer.tick(clock.advance(14_000))
    snap = timer.snapshot()

    assert timer.format_remaining() == "01:01"
    assert snap.remaining_seconds == 61
    assert snap.elapsed_seconds == 14
    assert snap.progress == pytest.approx(14 / 75)
    assert snap.running is True


def test_infinite_duration_is_capped(timer, clock):
    timer.start(float("inf"))
    assert timer.duration_seconds == MAX_DURATION_SECONDS
    assert timer.tick(clock.advance(1000)) == MAX_DURATION_SECONDS - 1

    timer.reset(float("nan"))
    assert timer.duration_seconds == 0
    assert timer.remaining_seconds == 0
