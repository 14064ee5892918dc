"""
Smoothing interpolation with a natural cubic spline.

The spline passes exactly through a reduced, evenly spaced subset of the
data ("knots"), so it follows the slow trend of a series while ignoring
point-to-point jumps between knots.

Knot policy (deterministic):
    first and last points are always knots (no extrapolation)
    spacing = (N-1) // (k-1)
    offset  = (N-1 - (k-1)*spacing) // 2       centres the pattern
    interior knot i (1..k-2) at index offset + i*spacing
"""

import numpy as np
from scipy.interpolate import CubicSpline
from typing import Sequence, Union

from tram.config import CONFIG
from tram.errors import InvalidParameterError


def select_knots(n_points: int, num_knots: int) -> np.ndarray:
    """
    Indices of the knots used for a series of n_points values.

    Parameters
    ----------
    n_points : int
        Length of the series.
    num_knots : int
        Number of knots, 4 <= num_knots <= n_points.

    Returns
    -------
    np.ndarray of int, strictly increasing, length num_knots.
    """
    min_knots = CONFIG['smoother']['min_knots']
    if num_knots > n_points:
        raise InvalidParameterError("num_knots must not be greater than length of xs")
    if num_knots < min_knots:
        raise InvalidParameterError(f"must have at least {min_knots} knots")

    spacing = (n_points - 1) // (num_knots - 1)
    offset = (n_points - 1 - (num_knots - 1) * spacing) // 2

    idx = np.empty(num_knots, dtype=np.int64)
    idx[0] = 0
    idx[-1] = n_points - 1
    idx[1:-1] = offset + spacing * np.arange(1, num_knots - 1)
    return idx


class Smoother:
    """
    Natural cubic spline through num_knots evenly spaced points of (xs, ys).

    Parameters
    ----------
    xs : sequence of float
        Strictly increasing positions.
    ys : sequence of float
        Values, same length as xs.
    num_knots : int
        Number of knots, >= 4 and <= len(xs).
    """

    def __init__(self, xs: Sequence[float], ys: Sequence[float], num_knots: int):
        xs = np.asarray(xs, dtype=np.float64).flatten()
        ys = np.asarray(ys, dtype=np.float64).flatten()

        if len(xs) != len(ys):
            raise InvalidParameterError("xs and ys must have the same length")

        idx = select_knots(len(xs), num_knots)
        self._knots_x = xs[idx]
        self._knots_y = ys[idx]

        try:
            self._spline = CubicSpline(
                self._knots_x, self._knots_y,
                bc_type='natural', extrapolate=False,
            )
        except ValueError as e:
            # non-increasing or non-finite xs
            raise InvalidParameterError(str(e)) from e

    @property
    def knots_x(self) -> np.ndarray:
        return self._knots_x.copy()

    @property
    def knots_y(self) -> np.ndarray:
        return self._knots_y.copy()

    @property
    def domain(self):
        return float(self._knots_x[0]), float(self._knots_x[-1])

    def value(self, x: Union[float, Sequence[float], np.ndarray]):
        """
        Spline value at x. NaN outside the knot range.

        Scalar in, float out; array in, array out.
        """
        out = self._spline(np.asarray(x, dtype=np.float64))
        if np.ndim(out) == 0:
            return float(out)
        return out

    __call__ = value
