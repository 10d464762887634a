import math

import pytest

from gestures.one_euro_filter import OneEuroFilter


def test_one_euro_filter_initialization():
    f = OneEuroFilter()
    assert f.x_prev is None
    assert f.dx_prev is None
    assert f.t_prev is None


def test_first_sample_passes_through():
    f = OneEuroFilter()
    assert f(t=0.0, x=(10.0, 20.0)) == (10.0, 20.0)
    assert f.x_prev == (10.0, 20.0)
    assert f.dx_prev == (0.0, 0.0)
    assert f.t_prev == 0.0


def test_one_euro_filter_smoothing():
    # beta=0 means simple low-pass filter with fixed cutoff
    f = OneEuroFilter()
    f(t=0.0, x=(0.0, 0.0))

    # Step response: Input jumps from 0 to 1 at t=0.01
    output = f(t=0.01, x=(1.0, 0.0), min_cutoff=1.0, beta=0.0)

    # It should not instantly jump to 1.0
    assert 0 < output[0] < 1.0
    assert output[1] == 0.0


def test_alpha_formula():
    f = OneEuroFilter()
    f(t=0.0, x=(0.0, 0.0))
    dt = 0.02
    output = f(t=dt, x=(3.0, -4.0), min_cutoff=2.0, beta=0.0, d_cutoff=1.0)

    tau = 1.0 / (2 * math.pi * 2.0)
    alpha = 1.0 / (1.0 + tau / dt)
    assert output[0] == pytest.approx(3.0 * alpha)
    assert output[1] == pytest.approx(-4.0 * alpha)


def test_adaptive_cutoff_uses_smoothed_speed():
    f = OneEuroFilter()
    f(t=0.0, x=(0.0, 0.0))
    dt = 0.01
    output = f(t=dt, x=(3.0, 4.0), min_cutoff=1.0, beta=0.5, d_cutoff=1.0)

    def alpha(cutoff):
        return 1.0 / (1.0 + (1.0 / (2 * math.pi * cutoff)) / dt)

    speed = alpha(1.0) * 5.0 / dt
    expected = alpha(1.0 + 0.5 * speed)
    assert output[0] == pytest.approx(3.0 * expected)
    assert output[1] == pytest.approx(4.0 * expected)
    assert f.dx_prev[0] == pytest.approx(alpha(1.0) * 3.0 / dt)


def test_one_euro_filter_responsiveness():
    # High beta means more responsive to speed
    f_slow = OneEuroFilter()
    f_fast = OneEuroFilter()
    f_slow(0.0, (0.0, 0.0))
    f_fast(0.0, (0.0, 0.0))

    # Simulate a fast move
    t = 0.01
    x = (10.0, 0.0)  # Huge jump

    out_slow = f_slow(t, x, min_cutoff=0.1, beta=0.0)
    out_fast = f_fast(t, x, min_cutoff=0.1, beta=1.0)

    # The adaptive one (fast) should be closer to input than the slow one
    assert abs(x[0] - out_fast[0]) < abs(x[0] - out_slow[0])


def test_constant_input_converges():
    f = OneEuroFilter()
    f(0.0, (0.0, 0.0))
    target = (500.0, 300.0)
    out = None
    for i in range(1, 400):
        out = f(i / 30.0, target)
    assert out[0] == pytest.approx(target[0], abs=1e-3)
    assert out[1] == pytest.approx(target[1], abs=1e-3)


def test_repeated_timestamp_uses_minimum_step():
    f = OneEuroFilter()
    f(1.0, (0.0, 0.0))
    out = f(1.0, (1.0, 0.0), min_cutoff=1.0, beta=0.0)

    tau = 1.0 / (2 * math.pi)
    assert out[0] == pytest.approx(1.0 / (1.0 + tau / 1e-3))
    assert f.t_prev == 1.0


def test_reset_restarts_filter():
    f = OneEuroFilter()
    f(0.0, (0.0, 0.0))
    f(0.1, (5.0, 5.0))
    f.reset()
    assert f(0.2, (7.0, 8.0)) == (7.0, 8.0)


def test_non_positive_cutoff_holds_previous_value():
    f = OneEuroFilter()
    f(0.0, (2.0, 2.0))
    assert f(0.1, (9.0, 9.0), min_cutoff=0.0, beta=0.0) == (2.0, 2.0)
