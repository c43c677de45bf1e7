"""Grid and particle simulations: Mandelbrot, stable fluids, Game of Life and N-body."""

__version__ = "0.1.0"
__all__ = ["doublebuf", "integrator", "mandelbrot", "fluid", "life", "nbody"]