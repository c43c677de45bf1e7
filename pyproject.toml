[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gridsims"
version = "0.1.0"
description = "Small numerical simulations on grids and particles: Mandelbrot rendering, stable fluids, Game of Life and N-body dynamics"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "simulation",
    "mandelbrot",
    "fluid",
    "game-of-life",
    "n-body",
    "runge-kutta",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Physics",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["gridsims"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
