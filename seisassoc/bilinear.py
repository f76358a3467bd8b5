"""Bilinear interpolation of a function sampled on a rectangular grid."""

from __future__ import annotations

import math
from bisect import bisect_right
from collections.abc import Sequence


def _bilinear(x: float, y: float,
              x1: float, x2: float, y1: float, y2: float,
              f11: float, f21: float, f12: float, f22: float) -> float:
    """Interpolate f at (x, y) inside the cell [x1, x2] x [y1, y2]."""
    x_m_x1 = x - x1
    x2_m_x = x2 - x
    y_m_y1 = y - y1
    y2_m_y = y2 - y
    fxy = (f11 * (x2_m_x * y2_m_y)
           + f21 * (x_m_x1 * y2_m_y)
           + f12 * (x2_m_x * y_m_y1)
           + f22 * (x_m_x1 * y_m_y1))
    return fxy / ((x2 - x1) * (y2 - y1))


def _is_sorted(values: Sequence[float]) -> bool:
    return all(a <= b for a, b in zip(values, values[1:]))


def _format_range(low: float, high: float) -> str:
    return f"[{low:f},{high:f}]"


class BilinearInterpolation:
    """Bilinear interpolator over a uniform or non-uniform grid.

    The function values are a row-major matrix of shape [ny x nx], i.e.
    ``f[iy * nx + ix]`` is the value at ``(x[ix], y[iy])``.
    """

    def __init__(self) -> None:
        self.clear()

    def clear(self) -> None:
        """Release the grid and reset the interpolator."""
        self._x: list[float] = []
        self._y: list[float] = []
        self._f: list[float] = []
        self._x_limits = (0.0, 0.0)
        self._y_limits = (0.0, 0.0)
        self._dx = 0.0
        self._dy = 0.0
        self._nx = 0
        self._ny = 0
        self._uniform = False
        self._initialized = False

    def initialize(self, x: Sequence[float], y: Sequence[float],
                   f: Sequence[float]) -> None:
        """Set up a non-uniform grid with nodes x, y and values f."""
        self.clear()
        nx, ny = len(x), len(y)
        if nx < 2:
            raise ValueError("nx must be at least 2")
        if ny < 2:
            raise ValueError("ny must be at least 2")
        if len(f) != nx * ny:
            raise ValueError("nx*ny != nxy")
        if not _is_sorted(x):
            raise ValueError("x must be sorted in increasing order")
        if not _is_sorted(y):
            raise ValueError("y must be sorted in increasing order")
        self._x = [float(v) for v in x]
        self._y = [float(v) for v in y]
        self._f = [float(v) for v in f]
        self._nx, self._ny = nx, ny
        self._x_limits = (self._x[0], self._x[-1])
        self._y_limits = (self._y[0], self._y[-1])
        self._uniform = False
        self._initialized = True

    def initialize_uniform(self, x_limits: tuple[float, float],
                           y_limits: tuple[float, float],
                           nx: int, ny: int, f: Sequence[float]) -> None:
        """Set up a uniform grid spanning the given limits with nx by ny nodes."""
        self.clear()
        if nx < 2:
            raise ValueError("nx must be at least 2")
        if ny < 2:
            raise ValueError("ny must be at least 2")
        x0, x1 = (float(v) for v in x_limits)
        y0, y1 = (float(v) for v in y_limits)
        if x0 >= x1:
            raise ValueError("x_limits[0] must be < x_limits[1]")
        if y0 >= y1:
            raise ValueError("y_limits[0] must be < y_limits[1]")
        if len(f) != nx * ny:
            raise ValueError("nx*ny != nxy")
        self._f = [float(v) for v in f]
        self._nx, self._ny = nx, ny
        self._x_limits = (x0, x1)
        self._y_limits = (y0, y1)
        self._dx = (x1 - x0) / (nx - 1)
        self._dy = (y1 - y0) / (ny - 1)
        self._uniform = True
        self._initialized = True

    def is_initialized(self) -> bool:
        """True when a grid has been set."""
        return self._initialized

    def _cell_nonuniform(self, nodes: list[float], q: float) -> int:
        index = bisect_right(nodes, q) - 1
        return min(max(index, 0), len(nodes) - 2)

    @staticmethod
    def _cell_uniform(origin: float, delta: float, n: int, q: float) -> int:
        index = math.floor((q - origin) / delta)
        return min(max(index, 0), n - 2)

    def interpolate(self, xq: Sequence[float],
                    yq: Sequence[float]) -> list[float]:
        """Interpolate the function at the points (xq[i], yq[i])."""
        if not self._initialized:
            raise RuntimeError("Class not initialized")
        if len(xq) != len(yq):
            raise ValueError("xq and yq must have the same length")
        if not xq:
            return []
        xmin, xmax = min(xq), max(xq)
        if xmin < self._x_limits[0] or xmax > self._x_limits[1]:
            raise ValueError(
                f"[xmin,xmax] = {_format_range(xmin, xmax)} must be in range "
                f"{_format_range(*self._x_limits)}")
        ymin, ymax = min(yq), max(yq)
        if ymin < self._y_limits[0] or ymax > self._y_limits[1]:
            raise ValueError(
                f"[ymin,ymax] = {_format_range(ymin, ymax)} must be in range "
                f"{_format_range(*self._y_limits)}")

        nx = self._nx
        f = self._f
        x0, y0 = self._x_limits[0], self._y_limits[0]
        result = []
        for xi, yi in zip(xq, yq):
            if self._uniform:
                ix = self._cell_uniform(x0, self._dx, nx, xi)
                iy = self._cell_uniform(y0, self._dy, self._ny, yi)
                x1, x2 = x0 + self._dx * ix, x0 + self._dx * (ix + 1)
                y1, y2 = y0 + self._dy * iy, y0 + self._dy * (iy + 1)
            else:
                ix = self._cell_nonuniform(self._x, xi)
                iy = self._cell_nonuniform(self._y, yi)
                x1, x2 = self._x[ix], self._x[ix + 1]
                y1, y2 = self._y[iy], self._y[iy + 1]
            index = iy * nx + ix
            result.append(_bilinear(float(xi), float(yi), x1, x2, y1, y2,
                                    f[index], f[index + 1],
                                    f[index + nx], f[index + nx + 1]))
        return result