import numpy as np
import pytest

from gridsims.fluid import (
    FluidContainer,
    advect,
    clamped_index,
    linear_solve,
    set_boundary,
)


def _random_grid(n, seed=0):
    rng = np.random.default_rng(seed)
    return rng.uniform(-1, 1, size=(n, n)).astype(np.float32)


def test_clamped_index_inside_grid():
    assert clamped_index(2, 3, 5) == 3 * 5 + 2


def test_clamped_index_clamps_both_sides():
    assert clamped_index(10, 0, 5) == 4
    assert clamped_index(-3, -1, 5) == 0
    assert clamped_index(0, 99, 5) == 4 * 5


def test_set_boundary_copies_neighbours_for_scalar():
    n = 6
    grid = _random_grid(n)
    set_boundary(0, grid, n)
    np.testing.assert_array_equal(grid[0, 1:-1], grid[1, 1:-1])
    np.testing.assert_array_equal(grid[-1, 1:-1], grid[-2, 1:-1])
    np.testing.assert_array_equal(grid[1:-1, 0], grid[1:-1, 1])
    np.testing.assert_array_equal(grid[1:-1, -1], grid[1:-1, -2])


def test_set_boundary_negates_side_columns_for_horizontal_velocity():
    n = 6
    grid = _random_grid(n, 1)
    set_boundary(1, grid, n)
    np.testing.assert_array_equal(grid[1:-1, 0], -grid[1:-1, 1])
    np.testing.assert_array_equal(grid[1:-1, -1], -grid[1:-1, -2])
    np.testing.assert_array_equal(grid[0, 1:-1], grid[1, 1:-1])


def test_set_boundary_negates_top_bottom_rows_for_vertical_velocity():
    n = 6
    grid = _random_grid(n, 2)
    set_boundary(2, grid, n)
    np.testing.assert_array_equal(grid[0, 1:-1], -grid[1, 1:-1])
    np.testing.assert_array_equal(grid[-1, 1:-1], -grid[-2, 1:-1])
    np.testing.assert_array_equal(grid[1:-1, 0], grid[1:-1, 1])


def test_set_boundary_corners_of_uniform_field():
    n = 5
    grid = np.ones((n, n), dtype=np.float32)
    set_boundary(0, grid, n)
    for corner in ((0, 0), (0, n - 1), (n - 1, 0), (n - 1, n - 1)):
        assert grid[corner] == pytest.approx(0.99, rel=1e-6)
    np.testing.assert_array_equal(grid[1:-1, 1:-1], 1.0)


def test_set_boundary_works_on_flat_field():
    n = 4
    flat = np.arange(n * n, dtype=np.float32)
    set_boundary(0, flat, n)
    assert flat[clamped_index(1, 0, n)] == flat[clamped_index(1, 1, n)]


def test_set_boundary_rejects_wrong_size():
    with pytest.raises(ValueError):
        set_boundary(0, np.zeros(10, dtype=np.float32), 4)


def test_linear_solve_without_coupling_copies_source():
    n = 6
    x = _random_grid(n, 3)
    x0 = _random_grid(n, 4)
    linear_solve(0, x, x0, 0.0, 1.0, n)
    np.testing.assert_allclose(x[1:-1, 1:-1], x0[1:-1, 1:-1])


def test_linear_solve_keeps_uniform_field():
    n = 7
    a = 0.5
    x = np.ones((n, n), dtype=np.float32)
    x0 = np.ones((n, n), dtype=np.float32)
    linear_solve(0, x, x0, a, 1.0 / (1.0 + 6.0 * a), n)
    np.testing.assert_allclose(x[1:-1, 1:-1], 1.0, rtol=1e-6)


def test_advect_with_zero_velocity_copies_interior():
    n = 6
    d = np.zeros((n, n), dtype=np.float32)
    d0 = _random_grid(n, 5)
    zero = np.zeros((n, n), dtype=np.float32)
    advect(0, d, d0, zero, zero, 1.0, n)
    np.testing.assert_allclose(d[1:-1, 1:-1], d0[1:-1, 1:-1])
    np.testing.assert_array_equal(d[0, 1:-1], d[1, 1:-1])


def test_advect_uniform_field_stays_uniform():
    n = 8
    d = np.zeros((n, n), dtype=np.float32)
    d0 = np.full((n, n), 2.0, dtype=np.float32)
    u = _random_grid(n, 6)
    v = _random_grid(n, 7)
    advect(0, d, d0, u, v, 3.0, n)
    np.testing.assert_allclose(d[1:-1, 1:-1], 2.0, rtol=1e-6)


def test_container_rejects_tiny_size():
    with pytest.raises(ValueError):
        FluidContainer(1, 0.2, 0.0, 0.0)


def test_add_density_at_point():
    fluid = FluidContainer(10, 0.2, 0.0, 0.0)
    fluid.add_density(3, 7, 5.0)
    assert fluid.density[7, 3] == 5.0
    assert fluid.density.sum() == pytest.approx(5.0)


def test_add_density_disc_covers_expected_cells():
    fluid = FluidContainer(10, 0.2, 0.0, 0.0)
    fluid.add_density(5, 5, 1.0, 1)
    assert fluid.density.sum() == pytest.approx(5.0)
    for row, col in ((5, 5), (4, 5), (6, 5), (5, 4), (5, 6)):
        assert fluid.density[row, col] == 1.0
    assert fluid.density[4, 4] == 0.0


def test_add_density_disc_at_corner_accumulates_on_edge():
    fluid = FluidContainer(10, 0.2, 0.0, 0.0)
    fluid.add_density(0, 0, 1.0, 1)
    assert fluid.density.sum() == pytest.approx(5.0)
    assert fluid.density[0, 0] == pytest.approx(3.0)


def test_add_velocity_and_reset():
    fluid = FluidContainer(8, 0.2, 0.0, 0.0)
    fluid.add_velocity(2, 3, 1.5, -0.5)
    assert fluid.vx[3, 2] == 1.5
    assert fluid.vy[3, 2] == -0.5
    fluid.add_density(2, 3, 4.0)
    fluid.reset()
    assert not fluid.vx.any()
    assert not fluid.vy.any()
    assert not fluid.density.any()


def test_decrease_density_scales_field():
    fluid = FluidContainer(8, 0.2, 0.0, 0.0)
    fluid.add_density(4, 4, 100.0)
    fluid.decrease_density(0.5)
    assert fluid.density[4, 4] == pytest.approx(50.0)
    fluid.decrease_density()
    assert fluid.density[4, 4] == pytest.approx(49.5)


def test_update_of_still_fluid_keeps_density_in_place():
    fluid = FluidContainer(12, 0.2, 0.0, 0.0)
    fluid.add_density(5, 6, 100.0)
    fluid.update()
    assert fluid.density[6, 5] == pytest.approx(100.0)
    assert not fluid.vx.any()
    image = fluid.image()
    assert image[6, 5, 0] == 100
    assert image[0, 0, 0] == 0


def test_update_empty_fluid_gives_opaque_black_image():
    fluid = FluidContainer(6, 0.2, 0.0, 0.0000001)
    fluid.update()
    image = fluid.image()
    assert image.shape == (6, 6, 4)
    assert image.dtype == np.uint8
    assert not image[..., :3].any()
    assert (image[..., 3] == 255).all()


def test_image_red_channel_saturates():
    fluid = FluidContainer(10, 0.2, 0.0, 0.0)
    fluid.add_density(4, 4, 1000.0)
    fluid.update()
    assert fluid.image()[4, 4, 0] == 255


def test_update_with_motion_stays_finite_and_bounded():
    fluid = FluidContainer(16, 0.2, 0.0001, 0.0000001)
    fluid.add_density(8, 8, 400.0, 2)
    fluid.add_velocity(8, 8, 3.0, -2.0)
    for _ in range(5):
        fluid.decrease_density()
        fluid.update()
    assert np.isfinite(fluid.density).all()
    assert np.isfinite(fluid.vx).all()
    image = fluid.image()
    assert image[..., 0].max() > 0
    assert (image[..., 3] == 255).all()


def test_image_is_a_copy():
    fluid = FluidContainer(5, 0.2, 0.0, 0.0)
    fluid.update()
    image = fluid.image()
    image[...] = 7
    assert fluid.image()[0, 0, 3] == 255