"""Conway's Game of Life on a wrapping grid, rendered with a motion tint.

Cells are stored in arrays of shape ``(width, height)`` indexed ``[x, y]``.
The rendered image has shape ``(height, width, 4)`` and is indexed
``[y, x]``. Besides its state, every cell carries a 2D "velocity" that
follows the live neighbours and colours the live cells red and blue.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

import numpy as np

from gridsims.doublebuf import DoubleBuffer

_F32 = np.float32
# Neighbour offsets wrap the way unsigned 64-bit coordinates do.
_SIZE_MOD = 1 << 64
_INITIAL_LIVE_PROBABILITY = 0.75

# (dx, dy, velocity contribution of a live neighbour at that offset)
_NEIGHBOURS = (
    (-1, 1, (-0.7, 0.7)),
    (0, 1, (0.0, 1.0)),
    (1, 1, (0.7, 0.7)),
    (-1, 0, (-1.0, 0.0)),
    (1, 0, (1.0, 0.0)),
    (-1, -1, (-0.7, -0.7)),
    (0, -1, (0.0, -1.0)),
    (1, -1, (0.7, -0.7)),
)


class CellState(enum.IntEnum):
    """State of a single cell."""

    DEAD = 0
    LIVE = 1


@dataclass
class _Grid:
    width: int
    height: int
    cells: np.ndarray = field(init=False)
    vels: np.ndarray = field(init=False)
    img: np.ndarray = field(init=False)

    def __post_init__(self) -> None:
        self.cells = np.zeros((self.width, self.height), dtype=np.uint32)
        self.vels = np.zeros((self.width, self.height, 2), dtype=_F32)
        self.img = np.zeros((self.height, self.width, 4), dtype=np.uint8)


def _wrapped(n: int, offset: int) -> np.ndarray:
    """Indices ``i + offset`` for every ``i`` in ``range(n)``, wrapped modulo ``n``."""
    return np.array(
        [((i + offset) % _SIZE_MOD) % n for i in range(n)], dtype=np.intp
    )


class GameOfLifeSim:
    """A double-buffered Game of Life simulation with deferred cell edits."""

    def __init__(self, width: int, height: int, seed: int | None = None) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("grid dimensions must be positive")
        self.width = width
        self.height = height
        self._game: DoubleBuffer[_Grid] = DoubleBuffer(lambda: _Grid(width, height))
        self._clicks: list[tuple[int, int, CellState]] = []

        rng = np.random.default_rng(seed)
        live = rng.random((width, height)) < _INITIAL_LIVE_PROBABILITY
        self._game.read().cells[:] = np.where(
            live, int(CellState.LIVE), int(CellState.DEAD)
        )

        self._x_index = {d: _wrapped(width, d) for d in (-1, 0, 1)}
        self._y_index = {d: _wrapped(height, d) for d in (-1, 0, 1)}

    def add_click(self, x: int, y: int, state: CellState) -> None:
        """Queue setting cell ``(x, y)`` to ``state`` before the next step.

        When one cell is queued several times, the earliest request wins.
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"cell ({x}, {y}) is outside the grid")
        self._clicks.append((x, y, CellState(state)))

    def step(self) -> None:
        """Apply queued edits, advance one generation and render it."""
        current = self._game.read()
        while self._clicks:
            x, y, state = self._clicks.pop()
            current.cells[x, y] = int(state)

        live = current.cells == int(CellState.LIVE)
        count = np.zeros((self.width, self.height), dtype=np.int64)
        vsum = np.zeros((self.width, self.height, 2), dtype=_F32)
        for dx, dy, vec in _NEIGHBOURS:
            neighbour = live[np.ix_(self._x_index[dx], self._y_index[dy])]
            count += neighbour
            vsum += neighbour[..., None].astype(_F32) * np.array(vec, dtype=_F32)

        new_live = np.where(live, (count >= 2) & (count < 4), count == 3)

        target = self._game.write()
        target.cells[:] = np.where(
            new_live, int(CellState.LIVE), int(CellState.DEAD)
        )

        vel = -vsum / _F32(8.0)
        new_vel = (current.vels + vel) / _F32(2.0)
        target.vels[:] = new_vel

        bright = np.abs(new_vel) * _F32(5.0) + _F32(0.2)
        state_f = new_live.astype(_F32)
        red = np.clip(state_f * bright[..., 0] * _F32(255.0), 0, 255)
        blue = np.clip(state_f * bright[..., 1] * _F32(255.0), 0, 255)
        target.img[..., 0] = red.T.astype(np.uint8)
        target.img[..., 1] = 0
        target.img[..., 2] = blue.T.astype(np.uint8)
        target.img[..., 3] = 255

        self._game.swap()

    def cells(self) -> np.ndarray:
        """Return a copy of the current cell states, shape ``(width, height)``."""
        return self._game.read().cells.copy()

    def image(self) -> np.ndarray:
        """Return a copy of the current RGBA image, shape ``(height, width, 4)``."""
        return self._game.read().img.copy()