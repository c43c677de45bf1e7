"""Stable-fluids simulation of dye carried by an incompressible 2D flow.

Fields are square ``numpy`` arrays of shape ``(n, n)`` indexed ``[y, x]``,
so the flat index of cell ``(x, y)`` is ``y * n + x``. The outermost ring of
cells is a boundary layer whose values are derived from the layer inside it.
"""

from __future__ import annotations

import numpy as np

_DTYPE = np.float32
_CORNER_WEIGHT = _DTYPE(0.33)


def clamped_index(x: int, y: int, n: int) -> int:
    """Return the flat index of ``(x, y)`` after clamping both to ``[0, n-1]``."""
    x = min(max(x, 0), n - 1)
    y = min(max(y, 0), n - 1)
    return y * n + x


def _grid(field: np.ndarray, n: int) -> np.ndarray:
    """Return a writable ``(n, n)`` view of ``field``."""
    if field.shape == (n, n):
        return field
    if field.size != n * n:
        raise ValueError(f"field of {field.size} cells does not fit a {n}x{n} grid")
    grid = field.reshape(n, n)
    if not np.shares_memory(grid, field):
        raise ValueError("field must be contiguous so it can be updated in place")
    return grid


def set_boundary(b: int, field: np.ndarray, n: int) -> None:
    """Fill the boundary layer of ``field`` in place from the adjacent layer.

    ``b == 1`` mirrors the left and right edges with a sign change (horizontal
    velocity), ``b == 2`` does so for the top and bottom edges (vertical
    velocity), any other value copies the neighbours unchanged. Each corner
    becomes a weighted mean of itself and its two edge neighbours.
    """
    grid = _grid(field, n)
    inner = slice(1, n - 1)
    row_sign = -1 if b == 2 else 1
    col_sign = -1 if b == 1 else 1

    grid[0, inner] = row_sign * grid[1, inner]
    grid[n - 1, inner] = row_sign * grid[n - 2, inner]
    grid[inner, 0] = col_sign * grid[inner, 1]
    grid[inner, n - 1] = col_sign * grid[inner, n - 2]

    last = n - 1
    grid[0, 0] = _CORNER_WEIGHT * (grid[0, 1] + grid[1, 0] + grid[0, 0])
    grid[last, 0] = _CORNER_WEIGHT * (grid[last, 1] + grid[last - 1, 0] + grid[last, 0])
    grid[0, last] = _CORNER_WEIGHT * (grid[0, last - 1] + grid[1, last] + grid[0, last])
    grid[last, last] = _CORNER_WEIGHT * (
        grid[last, last - 1] + grid[last - 1, last] + grid[last, last]
    )


def linear_solve(
    b: int, x: np.ndarray, x0: np.ndarray, a: float, c_reciprocal: float, n: int
) -> None:
    """Run one relaxation sweep of the diffusion equation, then fix boundaries.

    Every interior cell of ``x`` is replaced, from the values before the
    sweep, by ``(x0 + a * (four neighbours + 2 * itself)) * c_reciprocal``.
    """
    grid = _grid(x, n)
    source = _grid(x0, n)
    old = grid.copy()
    a = _DTYPE(a)
    c_reciprocal = _DTYPE(c_reciprocal)
    centre = old[1:-1, 1:-1]
    neighbours = old[1:-1, 2:] + old[1:-1, :-2] + old[2:, 1:-1] + old[:-2, 1:-1]
    grid[1:-1, 1:-1] = (
        source[1:-1, 1:-1] + a * (neighbours + centre + centre)
    ) * c_reciprocal
    set_boundary(b, grid, n)


def advect(
    b: int,
    d: np.ndarray,
    d0: np.ndarray,
    u: np.ndarray,
    v: np.ndarray,
    dt0: float,
    n: int,
) -> None:
    """Move the quantity ``d0`` along the velocity ``(u, v)`` into ``d``.

    Each interior cell traces back ``dt0`` times its velocity and takes the
    bilinear interpolation of ``d0`` there; the boundary of ``d`` is then set
    with ``set_boundary(b, ...)``.
    """
    grid = _grid(d, n)
    src = _grid(d0, n).copy()
    ug = _grid(u, n)
    vg = _grid(v, n)
    dt0 = _DTYPE(dt0)

    rows, cols = np.mgrid[1 : n - 1, 1 : n - 1]
    px = np.clip(cols.astype(_DTYPE) - dt0 * ug[1:-1, 1:-1], _DTYPE(0.5), _DTYPE(n + 0.5))
    py = np.clip(rows.astype(_DTYPE) - dt0 * vg[1:-1, 1:-1], _DTYPE(0.5), _DTYPE(n + 0.5))
    i0 = px.astype(np.int64)
    j0 = py.astype(np.int64)
    s1 = px - i0.astype(_DTYPE)
    s0 = _DTYPE(1) - s1
    t1 = py - j0.astype(_DTYPE)
    t0 = _DTYPE(1) - t1

    i0c = np.clip(i0, 0, n - 1)
    i1c = np.clip(i0 + 1, 0, n - 1)
    j0c = np.clip(j0, 0, n - 1)
    j1c = np.clip(j0 + 1, 0, n - 1)

    grid[1:-1, 1:-1] = s0 * (t0 * src[j0c, i0c] + t1 * src[j1c, i0c]) + s1 * (
        t0 * src[j0c, i1c] + t1 * src[j1c, i1c]
    )
    set_boundary(b, grid, n)


def _project(
    vx: np.ndarray, vy: np.ndarray, p: np.ndarray, div: np.ndarray, iterations: int, n: int
) -> None:
    """Remove the divergent part of the velocity ``(vx, vy)`` in place."""
    div[1:-1, 1:-1] = (
        _DTYPE(-0.5)
        * (vx[1:-1, 2:] - vx[1:-1, :-2] + vy[2:, 1:-1] - vy[:-2, 1:-1])
        / _DTYPE(n)
    )
    p[1:-1, 1:-1] = 0
    set_boundary(0, p, n)
    set_boundary(0, div, n)

    for _ in range(iterations):
        linear_solve(0, p, div, 1.0, 1.0 / 6.0, n)

    half_n = _DTYPE(0.5) * _DTYPE(n)
    vx[1:-1, 1:-1] -= half_n * (p[1:-1, 2:] - p[1:-1, :-2])
    vy[1:-1, 1:-1] -= half_n * (p[2:, 1:-1] - p[:-2, 1:-1])
    set_boundary(1, vx, n)
    set_boundary(2, vy, n)


class FluidContainer:
    """A square box of fluid carrying a density field, rendered as red pixels."""

    def __init__(
        self, size: int, dt: float, diffusion: float, viscosity: float
    ) -> None:
        if size < 2:
            raise ValueError("fluid container size must be at least 2")
        self.size = size
        self.dt = dt
        self.diffusion = diffusion
        self.viscosity = viscosity
        self.velocity_iterations = 4
        self.density_iterations = 4

        inner = (size - 2) * (size - 2)
        self.a_velocity = dt * viscosity * inner
        self.c_reciprocal_velocity = 1.0 / (1.0 + 6.0 * self.a_velocity)
        self.a_density = dt * diffusion * inner
        self.c_reciprocal_density = 1.0 / (1.0 + 6.0 * self.a_density)
        self.dt0 = dt * size

        shape = (size, size)
        self.vx_prev = np.zeros(shape, dtype=_DTYPE)
        self.vy_prev = np.zeros(shape, dtype=_DTYPE)
        self.vx = np.zeros(shape, dtype=_DTYPE)
        self.vy = np.zeros(shape, dtype=_DTYPE)
        self.previous_density = np.zeros(shape, dtype=_DTYPE)
        self.density = np.zeros(shape, dtype=_DTYPE)
        self._image = np.zeros((size, size, 4), dtype=np.uint8)

    def reset(self) -> None:
        """Empty the container of all velocity and density."""
        for field in (
            self.vx_prev,
            self.vy_prev,
            self.vx,
            self.vy,
            self.previous_density,
            self.density,
        ):
            field.fill(0)

    def decrease_density(self, fraction: float = 0.99) -> None:
        """Scale every density value by ``fraction``."""
        self.density *= _DTYPE(fraction)

    def _flat_cell(self, x: int, y: int) -> tuple[int, int]:
        row, col = divmod(clamped_index(x, y, self.size), self.size)
        return row, col

    def add_density(self, x: int, y: int, amount: float, radius: int = 0) -> None:
        """Add ``amount`` at ``(x, y)``, or at every cell of a disc of ``radius``.

        Coordinates outside the grid are clamped to its edge, so a disc that
        overlaps the edge adds to the edge cells more than once.
        """
        if radius <= 0:
            self.density[self._flat_cell(x, y)] += _DTYPE(amount)
            return
        for i in range(-radius, radius + 1):
            for j in range(-radius, radius + 1):
                if i * i + j * j <= radius * radius:
                    self.density[self._flat_cell(x + i, y + j)] += _DTYPE(amount)

    def add_velocity(self, x: int, y: int, px: float, py: float) -> None:
        """Add the velocity ``(px, py)`` at cell ``(x, y)``."""
        cell = self._flat_cell(x, y)
        self.vx[cell] += _DTYPE(px)
        self.vy[cell] += _DTYPE(py)

    def update(self) -> None:
        """Advance the simulation one time step and refresh the image."""
        n = self.size

        for _ in range(self.velocity_iterations):
            linear_solve(
                1, self.vx_prev, self.vx, self.a_velocity, self.c_reciprocal_velocity, n
            )
            linear_solve(
                2, self.vy_prev, self.vy, self.a_velocity, self.c_reciprocal_velocity, n
            )

        _project(self.vx_prev, self.vy_prev, self.vx, self.vy, self.velocity_iterations, n)
        advect(1, self.vx, self.vx_prev, self.vx_prev, self.vy_prev, self.dt0, n)
        advect(2, self.vy, self.vy_prev, self.vx_prev, self.vy_prev, self.dt0, n)
        _project(self.vx, self.vy, self.vx_prev, self.vy_prev, self.velocity_iterations, n)

        for _ in range(self.density_iterations):
            linear_solve(
                0,
                self.previous_density,
                self.density,
                self.a_density,
                self.c_reciprocal_density,
                n,
            )

        advect(0, self.density, self.previous_density, self.vx, self.vy, self.dt0, n)
        self._render()

    def _render(self) -> None:
        red = np.clip(np.nan_to_num(self.density), 0, 255).astype(np.uint8)
        self._image[..., 0] = red
        self._image[..., 1] = 0
        self._image[..., 2] = 0
        self._image[..., 3] = 255

    def image(self) -> np.ndarray:
        """Return the RGBA pixels from the last update, shape ``(size, size, 4)``."""
        return self._image.copy()