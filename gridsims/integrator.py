"""Explicit integration steps for systems of ordinary differential equations.

A system of order N is described by a function ``func`` returning the N-th
derivative of ``y`` from the values ``y(N-1), ..., y', y, t``. A step takes
those N+1 values, in that order, and returns their values one step later.
Values may be plain numbers or anything supporting ``+`` and ``*`` with a
scalar, such as numpy arrays.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence


def add_tuples(a: Sequence[Any], b: Sequence[Any]) -> tuple:
    """Add two sequences elementwise."""
    if len(a) != len(b):
        raise ValueError(f"cannot add tuples of differing sizes {len(a)} and {len(b)}")
    return tuple(x + y for x, y in zip(a, b))


def scale_tuple(values: Sequence[Any], factor: Any) -> tuple:
    """Multiply each element of a sequence by ``factor``."""
    return tuple(v * factor for v in values)


def squash_tuple(values: Sequence[Any], begin: int, end: int) -> tuple:
    """Drop ``begin`` elements from the front and ``end`` from the back."""
    if begin < 0 or end < 0:
        raise ValueError("offsets must not be negative")
    if begin + end > len(values):
        raise ValueError(
            f"cannot drop {begin + end} elements from a tuple of {len(values)}"
        )
    return tuple(values[begin : len(values) - end])


def _check_arity(args: Sequence[Any]) -> None:
    if len(args) < 2:
        raise ValueError("at least two values are needed: y and t")


def _derivatives(func: Callable[..., Any], args: tuple) -> tuple:
    # (y(N), y(N-1), ..., y', 1): the rates of change of (y(N-1), ..., y, t).
    return (func(*args), *squash_tuple(args, 0, 2), 1)


def integrate_step_euler(func: Callable[..., Any], step: Any, *args: Any) -> tuple:
    """Advance ``(y(N-1), ..., y, t)`` by ``step`` with Euler's method."""
    _check_arity(args)
    init = tuple(args)
    return add_tuples(init, scale_tuple(_derivatives(func, init), step))


def integrate_step_rk4(func: Callable[..., Any], step: Any, *args: Any) -> tuple:
    """Advance ``(y(N-1), ..., y, t)`` by ``step`` with classic Runge-Kutta."""
    _check_arity(args)
    init = tuple(args)
    half = step / 2

    k0 = _derivatives(func, init)
    k1 = _derivatives(func, add_tuples(init, scale_tuple(k0, half)))
    k2 = _derivatives(func, add_tuples(init, scale_tuple(k1, half)))
    k3 = _derivatives(func, add_tuples(init, scale_tuple(k2, step)))

    total = add_tuples(k0, scale_tuple(k1, 2))
    total = add_tuples(total, scale_tuple(k2, 2))
    total = add_tuples(total, k3)
    return add_tuples(scale_tuple(total, step / 6), init)