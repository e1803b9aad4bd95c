# numlabs

A set of small numerical tools in pure Python, using only the standard
library:

- `numlabs.lsq`: polynomial least-squares fitting through the normal
  equations `AᵀA z = Aᵀb`, solved with a Householder QR decomposition
  (`read_points`, `design_matrix`, `qr_solve`, `fit_normal`,
  `format_polynomial`, `format_verbose`, and the `LeastSquaresFit` result).
- `numlabs.lusolve`: solving `Ax = b` with a partially pivoted LU
  factorisation, reading the augmented matrix `[A b]` from a text file
  (`read_dimensions`, `read_system`, `lu_decompose`, `lu_solve`,
  `LUDecomposition`).
- `numlabs.odes`: single-step integrators `euler`, `rk2`, `rk3` and `rk4`,
  two sample systems (`tank`, a pair of cascaded tanks, and
  `spring_mass`, a damped spring and mass), `simulate` to drive them, and
  `SimParams` for the step size and damping.
- `numlabs.correction`: a quadratic sensor-correction filter evaluated
  with Horner's rule in single precision (`correction_offset`, `correct`,
  `correct_lines`).
- `numlabs.fill`: fills an array with `4*i` across several threads, with
  optional progress reporting and a lock check, then verifies it
  (`fill_segment`, `fill_parallel`, `verify`, `mutex_check`,
  `SharedProgress`).
- `numlabs.sorting`: three-way comparison functions for doubles and for
  `Polar` pairs, with generators of random data (`compare_doubles`,
  `compare_polar`, `random_doubles`, `random_polars`).
- `numlabs.dynarray`: `DynamicArray`, an append-only array whose capacity
  grows in steps of 100.
- `numlabs.timers`: `CpuTimer`, a named CPU-time stopwatch that
  accumulates over start/stop sessions and works as a context manager.
- `numlabs.errors`: `ExitCode`, the exit statuses of the tools, and
  `LabError`, the exception that carries one.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Command-line tools

### Least-squares fit

```
numlabs-lsq -order 2 -points points.txt [-verbose]
```

`points.txt` holds one `x y` pair per line; blank lines are skipped.
Option names may be abbreviated (`-o`, `-p`, `-v`). The fitted polynomial
is printed as `f(x) = c0 + c1x + c2x^2 ...`; with `-verbose` the matrices
`A`, `b`, `AT`, `ATA`, `ATB` and the coefficients are printed as well.
A missing order or file exits with status 20, an unreadable file with 10.

### LU solve

```
numlabs-lu -i matrix.txt [-v] [-d]
```

Long forms are `-in`/`-input`, `-verb`/`-verbose` and `-data`. The file
may start with `#` comment lines; the first data line gives the number of
rows and columns of `[A b]` (columns must be rows + 1), and the following
lines hold the rows. `-d` prints `A` and `b`; `-v` prints the signum, the
permutation and the packed LU matrix. Malformed files exit with the
matching `ExitCode` (too many or too few rows or columns, and so on); a
singular matrix exits with status 9.

### ODE simulation

```
numlabs-ode -rk4 -tank -step .15 -ftime 25 -x1 0 -x2 0
```

Choose a solver (`-eu`, `-rk2`, `-rk3`, `-rk4`), a problem (`-tank` or
`-spring`), a step size (`-step`, `-stepsize`, `-size` or `-z`), a final
time (`-ftime`, `-finaltime`, `-final` or `-f`) and both initial conditions
(`-x1`, `-x2`). `-damp` (or `-d`) sets the spring damping, default 0.0;
`-verbose` prints the parameters first. Each output row holds the time and
the two state values.

### Sensor correction

```
numlabs-correct < readings.txt
```

Reads whitespace-separated `ideal real` integer pairs from standard input
and writes `ideal corrected` pairs.

### Threaded fill

```
numlabs-fill -t 4 -s -f
```

`-t`/`--threads` sets the number of threads (1 to 8, default 1), `-s` shows
progress, `-f` uses the smaller data set, `-m` runs the lock check
alongside, `-v` is verbose and `-h` prints help. The elapsed CPU time and
wall time are written to standard error. Without `-f` the array holds
about 373 million 32-bit items, so it needs around 1.5 GB of memory.

### Sorting demos

```
numlabs-sort 10
numlabs-sort-polar 10
```

Sort and print the given number (at least 2) of random values in
[-50, 50], or of random magnitude/angle pairs ordered by magnitude and
then angle. The random generator is seeded with a fixed value, so runs
repeat.

## Library use

```python
import io
from numlabs.lsq import read_points, fit_normal, format_polynomial

points = read_points(io.StringIO("0 1\n1 3\n2 5\n"))
fit = fit_normal(points, 1)
print(fit.coefficients)
print(format_polynomial(fit.coefficients))
```

```python
from numlabs.odes import SimParams, rk4, spring_mass, simulate

sim = SimParams(h=0.01, damp=0.2)
for t, state in simulate(sim, 1.0, [1.0, 0.0], spring_mass, rk4):
    print(t, state)
```

Errors that the command-line tools turn into exit codes are raised as
`numlabs.errors.LabError`, whose `code` is an `ExitCode`.

## What it does not do

The ODE integrators take fixed steps only; there is no adaptive step
control or error estimate. The tools print plain text and draw no plots.