"""N-body simulation of gravitating, Lennard-Jones or charged particles.

Body state is kept as two ``float32`` arrays of shape ``(n, 3)``: one for
velocities and one for positions. Every step moves all bodies at once.
Each body's new state comes from an explicit integrator. The integrator
sees the other bodies fixed at their positions from the start of the step.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

import numpy as np

from gridsims.integrator import integrate_step_euler, integrate_step_rk4

_F32 = np.float32
STEP_SIZE = _F32(0.5)
# Added to the self-interaction denominator so a body ignores itself.
_SELF_SHIELD = _F32(1e24)


class ForceType(enum.Enum):
    """The kind of interaction between bodies."""

    GRAVITY = "gravity"
    LENNARD_JONES = "lennard_jones"
    COULOMB = "coulomb"


class IntegratorType(enum.Enum):
    """The integration method used to advance bodies."""

    EULER = "euler"
    RK4 = "rk4"


@dataclass(frozen=True)
class CylinderDistribution:
    """Bodies spread uniformly through a cylinder around the y axis.

    ``radius``, ``angle`` (radians) and ``height`` are ``(min, max)`` ranges;
    ``speed`` is the tangential speed of bodies on the outermost radius.
    """

    radius: tuple[float, float] = (0.0, 25.0)
    angle: tuple[float, float] = (0.0, 2.0 * math.pi)
    height: tuple[float, float] = (-50.0, 50.0)
    speed: float = 10.0**0.4


@dataclass(frozen=True)
class SphereDistribution:
    """Bodies at rest, spread uniformly through a spherical shell."""

    radius: tuple[float, float] = (0.0, 25.0)


@dataclass(frozen=True)
class Particle:
    """A charged particle at rest at ``pos``."""

    charge: float
    pos: tuple[float, float, float]


AccelerationFunc = Callable[[np.ndarray, np.ndarray, object], np.ndarray]


def _as_bodies(values: object, name: str) -> np.ndarray:
    array = np.array(values, dtype=_F32)
    if array.ndim != 2 or array.shape[1] != 3:
        raise ValueError(f"{name} must have shape (n, 3), got {array.shape}")
    return array


def _pairwise(pos: np.ndarray, x: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Offsets ``pos[i] - x[id]`` indexed ``[id, i]`` and their lengths."""
    diff = pos[None, :, :] - x[:, None, :]
    r = np.sqrt(np.sum(diff * diff, axis=-1))
    return diff, r


class NBodySim:
    """A set of bodies advanced in fixed time steps under a chosen force."""

    def __init__(
        self,
        velocities: object,
        positions: object,
        charges: Iterable[float] | None = None,
    ) -> None:
        self._velocities = _as_bodies(velocities, "velocities")
        self._positions = _as_bodies(positions, "positions")
        if self._velocities.shape != self._positions.shape:
            raise ValueError("velocities and positions must describe the same bodies")
        self._charges: np.ndarray | None = None
        if charges is not None:
            charge_array = np.array(list(charges), dtype=_F32)
            if charge_array.shape != (self.n_bodies,):
                raise ValueError(
                    f"expected {self.n_bodies} charges, got {charge_array.size}"
                )
            self._charges = charge_array

        self.time = _F32(0)
        self.force = ForceType.GRAVITY
        self.integrator = IntegratorType.EULER
        self.grav_g = 1e-5
        self.grav_damping = 1e-5
        self.lj_eps = 1.0
        self.lj_sigma = 1e-3

    @property
    def n_bodies(self) -> int:
        """Number of bodies in the simulation."""
        return self._positions.shape[0]

    @property
    def charges(self) -> np.ndarray | None:
        """A copy of the particle charges, or ``None`` if there are none."""
        return None if self._charges is None else self._charges.copy()

    @classmethod
    def from_cylinder(
        cls,
        n_bodies: int,
        params: CylinderDistribution = CylinderDistribution(),
        seed: int | None = None,
    ) -> "NBodySim":
        """Create bodies in a cylinder, circling the y axis."""
        if n_bodies < 0:
            raise ValueError("number of bodies must not be negative")
        rmin, rmax = params.radius
        if rmax == 0:
            raise ValueError("maximum radius must be non-zero")
        rng = np.random.default_rng(seed)
        r = np.sqrt(rng.uniform(rmin * rmin, rmax * rmax, n_bodies))
        phi = rng.uniform(params.angle[0], params.angle[1], n_bodies)
        y = rng.uniform(params.height[0], params.height[1], n_bodies)

        cos_phi, sin_phi = np.cos(phi), np.sin(phi)
        velocities = np.stack([-r * sin_phi, np.zeros(n_bodies), r * cos_phi], axis=1)
        velocities *= params.speed / rmax
        positions = np.stack([r * cos_phi, y, r * sin_phi], axis=1)
        return cls(velocities.reshape(n_bodies, 3), positions.reshape(n_bodies, 3))

    @classmethod
    def from_sphere(
        cls,
        n_bodies: int,
        params: SphereDistribution = SphereDistribution(),
        seed: int | None = None,
    ) -> "NBodySim":
        """Create bodies at rest spread uniformly through a spherical shell."""
        if n_bodies < 0:
            raise ValueError("number of bodies must not be negative")
        rmin, rmax = params.radius
        rng = np.random.default_rng(seed)
        r = np.cbrt(rng.uniform(rmin**3, rmax**3, n_bodies))
        cos_t = rng.uniform(-1.0, 1.0, n_bodies)
        sin_t = np.sqrt(1.0 - cos_t * cos_t)
        phi = rng.uniform(0.0, 2.0 * 3.141592, n_bodies)

        positions = np.stack(
            [r * sin_t * np.cos(phi), r * sin_t * np.sin(phi), r * cos_t], axis=1
        )
        return cls(np.zeros((n_bodies, 3)), positions.reshape(n_bodies, 3))

    @classmethod
    def from_particles(cls, particles: Sequence[Particle]) -> "NBodySim":
        """Create charged particles at rest, ready for a Coulomb simulation."""
        positions = np.array([p.pos for p in particles], dtype=_F32).reshape(-1, 3)
        return cls(
            np.zeros_like(positions),
            positions,
            [p.charge for p in particles],
        )

    def _acceleration(self, pos: np.ndarray) -> AccelerationFunc:
        shield = np.eye(self.n_bodies, dtype=_F32) * _SELF_SHIELD

        if self.force is ForceType.GRAVITY:
            g = _F32(self.grav_g)
            damping = _F32(self.grav_damping)

            def gravity(_v: np.ndarray, x: np.ndarray, _t: object) -> np.ndarray:
                diff, r = _pairwise(pos, x)
                denom = r * r * r + shield + damping
                return g * np.sum(diff / denom[..., None], axis=1)

            return gravity

        if self.force is ForceType.LENNARD_JONES:
            a = _F32(24) * _F32(self.lj_eps) * _F32(self.lj_sigma)

            def lennard_jones(_v: np.ndarray, x: np.ndarray, _t: object) -> np.ndarray:
                diff, r = _pairwise(pos, x)
                r = r + shield
                attract = np.power(r, _F32(-8))[..., None] * diff
                repel = _F32(2) * np.power(r, _F32(-14))[..., None] * diff
                return a * np.sum(attract - repel, axis=1)

            return lennard_jones

        if self.force is ForceType.COULOMB:
            if self._charges is None:
                raise RuntimeError("Coulomb charge buffer wasn't initialized!")
            charges = self._charges

            def coulomb(_v: np.ndarray, x: np.ndarray, _t: object) -> np.ndarray:
                diff, r = _pairwise(pos, x)
                denom = r * r * r + shield
                acc = np.sum(charges[None, :, None] * diff / denom[..., None], axis=1)
                return charges[:, None] * acc

            return coulomb

        raise ValueError(f"unknown force type: {self.force!r}")

    def step(self) -> None:
        """Advance every body by one time step of 0.5."""
        if self.integrator is IntegratorType.EULER:
            stepper = integrate_step_euler
        elif self.integrator is IntegratorType.RK4:
            stepper = integrate_step_rk4
        else:
            raise ValueError(f"unknown integrator: {self.integrator!r}")

        func = self._acceleration(self._positions)
        with np.errstate(divide="ignore", over="ignore", invalid="ignore", under="ignore"):
            new_vel, new_pos, _ = stepper(
                func, STEP_SIZE, self._velocities, self._positions, self.time
            )
        self._velocities = np.asarray(new_vel, dtype=_F32)
        self._positions = np.asarray(new_pos, dtype=_F32)
        self.time = _F32(self.time + STEP_SIZE)

    def positions(self) -> np.ndarray:
        """Return a copy of the body positions, shape ``(n, 3)``."""
        return self._positions.copy()

    def velocities(self) -> np.ndarray:
        """Return a copy of the body velocities, shape ``(n, 3)``."""
        return self._velocities.copy()