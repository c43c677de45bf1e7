"""Rendering of the Mandelbrot set over a rectangle of the complex plane."""

from __future__ import annotations

import math

import numpy as np

MAX_ITERS = 500
# Squared magnitude beyond which a sequence is taken as divergent.
DIVERGENCE_LIMIT = 256.0

COLORS = np.array(
    [
        (66, 30, 15, 255),
        (25, 7, 26, 255),
        (9, 1, 47, 255),
        (4, 4, 73, 255),
        (0, 7, 100, 255),
        (12, 44, 138, 255),
        (24, 82, 177, 255),
        (57, 125, 209, 255),
        (134, 181, 229, 255),
        (211, 236, 248, 255),
        (241, 233, 191, 255),
        (248, 201, 95, 255),
        (255, 170, 0, 255),
        (204, 128, 0, 255),
        (153, 87, 0, 255),
        (106, 52, 3, 255),
    ],
    dtype=np.float64,
)


def how_mandel(re: float, im: float) -> float:
    """Return a smoothed escape count for ``re + im*i``; 1.0 if it never escapes."""
    z_re = z_im = 0.0
    log2 = math.log(2.0)
    for i in range(MAX_ITERS):
        z_re, z_im = z_re * z_re - z_im * z_im + re, 2.0 * z_re * z_im + im
        abs_sq = z_re * z_re + z_im * z_im
        if abs_sq >= DIVERGENCE_LIMIT:
            log_zn = math.log(abs_sq) / 2.0
            nu = math.log(log_zn / log2) / log2
            return i + 1.0 - nu
    return 1.0


def _colorize_array(mandelness: np.ndarray) -> np.ndarray:
    dtype = mandelness.dtype
    # Negative escape values (points far outside) are coloured as zero.
    m = np.maximum(mandelness, dtype.type(0))
    whole = m.astype(np.int64)
    fract = (m - whole.astype(dtype))[..., None]
    palette = COLORS.astype(dtype)
    col_a = palette[whole % len(palette)]
    col_b = palette[(whole + 1) % len(palette)]
    col = col_a * (dtype.type(1) - fract) + col_b * fract
    return np.clip(col, 0, 255).astype(np.uint8)


def colorize(mandelness: float) -> tuple[int, int, int, int]:
    """Map a smoothed escape count to an RGBA colour from the palette."""
    rgba = _colorize_array(np.array(mandelness, dtype=np.float64))
    return tuple(int(c) for c in rgba)


def _mandelness_grid(re: np.ndarray, im: np.ndarray, dtype: np.dtype) -> np.ndarray:
    shape = re.shape
    c_re = re.ravel().astype(dtype)
    c_im = im.ravel().astype(dtype)
    result = np.ones(c_re.size, dtype=dtype)
    idx = np.arange(c_re.size)
    z_re = np.zeros_like(c_re)
    z_im = np.zeros_like(c_im)
    two = dtype.type(2)
    log2 = np.log(two)
    limit = dtype.type(DIVERGENCE_LIMIT)

    for i in range(MAX_ITERS):
        if idx.size == 0:
            break
        z_re2 = z_re * z_re - z_im * z_im + c_re
        z_im = two * z_re * z_im + c_im
        z_re = z_re2
        abs_sq = z_re * z_re + z_im * z_im
        done = abs_sq >= limit
        if done.any():
            log_zn = np.log(abs_sq[done]) / two
            nu = np.log(log_zn / log2) / log2
            result[idx[done]] = dtype.type(i) + dtype.type(1) - nu
            keep = ~done
            idx, z_re, z_im = idx[keep], z_re[keep], z_im[keep]
            c_re, c_im = c_re[keep], c_im[keep]
    return result.reshape(shape)


class MandelbrotCalculator:
    """Renders an RGBA image of the Mandelbrot set over adjustable bounds.

    The image has shape ``(height, width, 4)``; row ``r`` and column ``c``
    correspond to the point ``min_x + c/width*(max_x-min_x)`` plus
    ``i*(min_y + r/height*(max_y-min_y))``.
    """

    def __init__(self, width: int, height: int, supports_doubles: bool = True) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("image dimensions must be positive")
        self.width = width
        self.height = height
        self.supports_doubles = supports_doubles
        self.min_x, self.max_x = -2.0, 1.0
        self.min_y, self.max_y = -1.0, 1.0
        self.image = np.zeros((height, width, 4), dtype=np.uint8)

    def set_bounds(self, min_x: float, max_x: float, min_y: float, max_y: float) -> None:
        """Set the viewed region; x is the real axis, y the imaginary one."""
        self.min_x, self.max_x = min_x, max_x
        self.min_y, self.max_y = min_y, max_y

    def calc(self, precision=None) -> np.ndarray:
        """Recompute the image in float32 or float64 and return it."""
        if precision is None:
            precision = np.float64 if self.supports_doubles else np.float32
        dtype = np.dtype(precision)
        if dtype not in (np.dtype(np.float32), np.dtype(np.float64)):
            raise ValueError(f"unsupported precision: {dtype}")
        if dtype == np.float64 and not self.supports_doubles:
            raise ValueError("double precision is not supported")

        t = dtype.type
        xs = np.arange(self.width, dtype=dtype) / t(self.width)
        xs = xs * (t(self.max_x) - t(self.min_x)) + t(self.min_x)
        ys = np.arange(self.height, dtype=dtype) / t(self.height)
        ys = ys * (t(self.max_y) - t(self.min_y)) + t(self.min_y)
        re, im = np.meshgrid(xs, ys)

        with np.errstate(over="ignore", invalid="ignore"):
            mandelness = _mandelness_grid(re, im, dtype)
        self.image = _colorize_array(mandelness)
        return self.image