[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "numlabs"
version = "0.1.0"
description = "Small numerical tools: least-squares polynomial fits, LU solving of linear systems, ODE stepping, sensor correction, sorting demos and threaded array filling."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "least squares",
    "linear algebra",
    "lu decomposition",
    "qr decomposition",
    "runge-kutta",
    "ode",
    "numerical methods",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
numlabs-correct = "numlabs.correction:main"
numlabs-lsq = "numlabs.lsq:main"
numlabs-lu = "numlabs.lusolve:main"
numlabs-sort = "numlabs.sorting:main_doubles"
numlabs-sort-polar = "numlabs.sorting:main_polar"
numlabs-fill = "numlabs.fill:main"
numlabs-ode = "numlabs.odes:main"

[tool.hatch.build.targets.wheel]
packages = ["numlabs"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
