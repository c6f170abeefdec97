from swellcast.clock import SimClock


def test_advance_only_while_playing():
    clock = SimClock()
    clock.advance(2.0)
    assert clock.hours == 0.0

    assert clock.toggle_play()
    clock.advance(2.0)
    assert clock.hours == 2.0

    clock.pause()
    clock.advance(2.0)
    assert clock.hours == 2.0


def test_forced_advance_ignores_play_state():
    clock = SimClock()
    clock.advance(1.5, force=True)
    assert clock.hours == 1.5

    clock.advance(-1.0, force=True)
    clock.advance(float('nan'), force=True)
    assert clock.hours == 1.5


def test_set_hours_rejects_non_finite():
    clock = SimClock()
    assert clock.set_hours(12.0)
    assert not clock.set_hours(float('nan'))
    assert not clock.set_hours(float('-inf'))
    assert not clock.set_hours(None)
    assert clock.hours == 12.0


def test_multiplier_floor():
    clock = SimClock()
    assert clock.set_multiplier(0.0)
    assert clock.multiplier == 0.1
    assert clock.set_multiplier(4.0)
    assert clock.multiplier == 4.0
    assert not clock.set_multiplier(float('inf'))
    assert clock.multiplier == 4.0


def test_reset():
    clock = SimClock(hours=12.0, playing=True)
    clock.reset()
    assert clock.hours == 0.0
    assert not clock.playing
