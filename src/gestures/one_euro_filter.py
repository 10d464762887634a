import math
from typing import Optional

from .landmarks import Point

# Lower bound for the time step between two samples (seconds)
MIN_DT = 1e-3


class OneEuroFilter:
    def __init__(self):
        """
        Adaptive low-pass filter over a 2D point (One Euro filter).

        Only the signal state is kept between calls. Cutoff parameters are
        passed to every call so callers can change them per frame:

            min_cutoff: Minimum cutoff frequency in Hz. Lower = more smoothing (less jitter) at low speed.
            beta: Speed coefficient. Higher = less lag (more responsiveness) at high speed.
            d_cutoff: Cutoff frequency for derivative smoothing (Hz).
        """
        self.x_prev: Optional[Point] = None
        self.dx_prev: Optional[Point] = None
        self.t_prev: Optional[float] = None

    def reset(self) -> None:
        self.x_prev = None
        self.dx_prev = None
        self.t_prev = None

    def _smoothing_factor(self, t_e, cutoff):
        if cutoff <= 0.0:
            return 0.0
        tau = 1.0 / (2 * math.pi * cutoff)
        return 1.0 / (1.0 + tau / t_e)

    def _exponential_smoothing(self, a, x, x_prev):
        return (
            a * x[0] + (1 - a) * x_prev[0],
            a * x[1] + (1 - a) * x_prev[1],
        )

    def __call__(self, t: float, x: Point, min_cutoff: float = 1.2, beta: float = 0.007,
                 d_cutoff: float = 1.0) -> Point:
        """
        Filter the signal.

        Args:
            t: Current timestamp in seconds
            x: Current point

        Returns:
            Filtered point. The first sample is returned unchanged.
        """
        x = (float(x[0]), float(x[1]))

        if self.x_prev is None or self.dx_prev is None or self.t_prev is None:
            self.x_prev = x
            self.dx_prev = (0.0, 0.0)
            self.t_prev = float(t)
            return x

        t_e = max(MIN_DT, t - self.t_prev)

        # Filter the derivative (velocity) of the raw signal change
        dx = ((x[0] - self.x_prev[0]) / t_e, (x[1] - self.x_prev[1]) / t_e)
        a_d = self._smoothing_factor(t_e, d_cutoff)
        dx_hat = self._exponential_smoothing(a_d, dx, self.dx_prev)

        # Adaptive cutoff: min_cutoff + beta * speed
        cutoff = min_cutoff + beta * math.hypot(dx_hat[0], dx_hat[1])

        a = self._smoothing_factor(t_e, cutoff)
        x_hat = self._exponential_smoothing(a, x, self.x_prev)

        self.x_prev = x_hat
        self.dx_prev = dx_hat
        self.t_prev = float(t)

        return x_hat
