# gridsims

A small collection of numerical simulations written with NumPy. Each one
works on plain arrays and can give you an RGBA image of its current state,
so you can plot or save the results however you like.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## What is inside

### `gridsims.mandelbrot`

`MandelbrotCalculator(width, height, supports_doubles=True)` renders the
Mandelbrot set over a rectangle of the complex plane. The default view is
x in [-2, 1] and y in [-1, 1]. `set_bounds(min_x, max_x, min_y, max_y)`
changes it. `calc(precision=None)` computes in `float64` or `float32` and
returns a `(height, width, 4)` `uint8` RGBA array, which it also keeps as
`calc.image`. If you leave out the precision, it uses `float64` when
`supports_doubles` is true and `float32` otherwise. Asking for `float64`
when doubles are not supported raises `ValueError`.

Each pixel gets a smoothed escape count from `how_mandel(re, im)`. That
function gives up after 500 iterations and returns `1.0` for points that
never escape. `colorize(mandelness)` turns the count into an RGBA tuple by
blending two neighbouring entries of a 16-colour palette.

```python
import numpy as np
from gridsims.mandelbrot import MandelbrotCalculator

calc = MandelbrotCalculator(800, 600, supports_doubles=True)
calc.set_bounds(-2.0, 1.0, -1.0, 1.0)
image = calc.calc(np.float64)   # (600, 800, 4) uint8 RGBA
```

### `gridsims.fluid`

`FluidContainer(size, dt, diffusion, viscosity)` is a square stable-fluids
solver. Each step does diffusion, a projection that removes divergence, and
semi-Lagrangian advection. The container has these methods:

- `add_density(x, y, amount, radius=0)` adds density at one cell, or over a
  disc when `radius` is positive.
- `add_velocity(x, y, px, py)` adds velocity at a cell.
- `update()` advances one time step.
- `decrease_density(fraction=0.99)` fades the dye.
- `reset()` empties the container.

`image()` returns the density as red pixels, shape `(size, size, 4)`. Values
are clipped to 0–255. The fields themselves (`density`, `vx`, `vy`, …) are
`float32` arrays indexed `[y, x]`. Coordinates outside the grid are clamped
to its edge.

```python
from gridsims.fluid import FluidContainer

fluid = FluidContainer(64, dt=0.2, diffusion=0.0, viscosity=1e-7)
fluid.add_density(32, 32, 400.0, 2)
fluid.add_velocity(32, 32, 5.0, 0.0)
fluid.update()
fluid.decrease_density(0.99)
pixels = fluid.image()
```

The kernels are public too, so you can use them on your own `(n, n)`
fields:

- `clamped_index(x, y, n)`
- `set_boundary(b, field, n)`
- `linear_solve(b, x, x0, a, c_reciprocal, n)`
- `advect(b, d, d0, u, v, dt0, n)`

### `gridsims.life`

`GameOfLifeSim(width, height, seed=None)` runs Conway's Game of Life on a
wrapping grid. At the start about three quarters of the cells are live.
Each cell also keeps a "velocity" that comes from its live neighbours, and
that velocity tints live cells red and blue in the image.

`add_click(x, y, state)` queues a cell edit. It raises `IndexError` outside
the grid. Queued edits are applied at the start of the next `step()`, and
when one cell is queued more than once the earliest edit wins. `cells()`
returns the states, shape `(width, height)`, with values from `CellState`.
`image()` returns the RGBA picture, shape `(height, width, 4)`.

```python
from gridsims.life import CellState, GameOfLifeSim

sim = GameOfLifeSim(128, 96, seed=1)
sim.add_click(10, 10, CellState.LIVE)
sim.step()
grid = sim.cells()
pixels = sim.image()
```

### `gridsims.nbody`

`NBodySim(velocities, positions, charges=None)` moves bodies in steps of
0.5 time units.

- **Forces.** Set `sim.force` to a `ForceType`: `GRAVITY`, `LENNARD_JONES`
  or `COULOMB`. The parameters are the attributes `grav_g`,
  `grav_damping`, `lj_eps` and `lj_sigma`. The Coulomb force needs
  charges, and stepping without them raises `RuntimeError`.
- **Integrators.** Set `sim.integrator` to an `IntegratorType`: `EULER` or
  `RK4`.
- **Starting states.**
  - `NBodySim.from_cylinder(n_bodies, CylinderDistribution(...), seed)`
    gives orbiting bodies in a cylinder.
  - `NBodySim.from_sphere(n_bodies, SphereDistribution(...), seed)` gives
    bodies at rest in a spherical shell.
  - `NBodySim.from_particles([Particle(charge, pos), ...])` gives charged
    particles at rest.
- **Reading the state.** `positions()` and `velocities()` return
  `(n, 3)` copies. `n_bodies`, `charges` and `time` describe the rest of
  the state.

```python
from gridsims.nbody import CylinderDistribution, ForceType, IntegratorType, NBodySim

sim = NBodySim.from_cylinder(1024, CylinderDistribution(), seed=0)
sim.force = ForceType.GRAVITY
sim.integrator = IntegratorType.RK4
sim.step()
print(sim.positions()[:3])
```

### Building blocks

`gridsims.integrator` provides `integrate_step_euler(func, step, *args)`
and `integrate_step_rk4(func, step, *args)`. Both advance an N-th order
ODE given as `(y(N-1), ..., y', y, t)`, where `func` returns `y(N)`. The
module also has the tuple helpers `add_tuples`, `scale_tuple` and
`squash_tuple`.

`gridsims.doublebuf.DoubleBuffer(factory)` holds a read/write pair of
values, and `swap()` exchanges the two roles.

## What this package does not do

There is no window, interactive viewer or command-line program. The
simulations only compute arrays and images. Mouse, keyboard and display
handling are left to whatever program uses them. No particle-file reader
is included either: to start a Coulomb simulation, build the `Particle`
list yourself.