"""Fixed-step ODE integrators and the tank and spring systems they simulate."""

from __future__ import annotations

import math
import re
import sys
from dataclasses import dataclass, field
from typing import Callable, Iterator, Sequence

from numlabs.errors import ExitCode

NX = 2
"""Number of state variables of the simulated systems."""

TANK1, TANK2 = 0, 1
POSITION, VELOCITY = 0, 1

TANK_INFLOW = 0.5
TANK1_OUTFLOW = 0.13
TANK2_OUTFLOW = 0.20
TANK_AREA = 2.0

SPRING_K = 128.0
MASS = 2.0


@dataclass
class SimParams:
    """Constants of a simulation run."""

    neq: int = NX
    h: float = math.inf
    damp: float = 0.0


Derivative = Callable[[SimParams, float, Sequence[float]], Sequence[float]]
Stepper = Callable[[SimParams, float, Sequence[float], Derivative], list[float]]


def _check(sim: SimParams, x0: Sequence[float]) -> None:
    if len(x0) != sim.neq:
        raise ValueError(f"expected {sim.neq} state values, got {len(x0)}")


def _shift(x: Sequence[float], scale: float, k: Sequence[float]) -> list[float]:
    """Return ``x + scale * k``."""
    return [xi + scale * ki for xi, ki in zip(x, k)]


def euler(sim: SimParams, t0: float, x0: Sequence[float], f: Derivative) -> list[float]:
    """One explicit Euler step: ``x + h f(t, x)``."""
    _check(sim, x0)
    k1 = f(sim, t0, x0)
    return _shift(x0, sim.h, k1)


def rk2(sim: SimParams, t0: float, x0: Sequence[float], f: Derivative) -> list[float]:
    """One step of the second-order (trapezoid) Runge-Kutta method."""
    _check(sim, x0)
    h = sim.h
    k1 = f(sim, t0, x0)
    k2 = f(sim, t0 + h, _shift(x0, h, k1))
    return [x + h * (a + b) / 2.0 for x, a, b in zip(x0, k1, k2)]


def rk3(sim: SimParams, t0: float, x0: Sequence[float], f: Derivative) -> list[float]:
    """One step of the third-order Runge-Kutta method with nodes at 2/3 h."""
    _check(sim, x0)
    h = sim.h
    two_thirds = 2.0 / 3.0
    k1 = f(sim, t0, x0)
    k2 = f(sim, t0 + two_thirds * h, _shift(x0, two_thirds * h, k1))
    k3 = f(sim, t0 + two_thirds * h, _shift(x0, two_thirds * h, k2))
    return [
        x + h * (a / 4.0 + 3.0 * b / 8.0 + 3.0 * c / 8.0)
        for x, a, b, c in zip(x0, k1, k2, k3)
    ]


def rk4(sim: SimParams, t0: float, x0: Sequence[float], f: Derivative) -> list[float]:
    """One step of the classical fourth-order Runge-Kutta method."""
    _check(sim, x0)
    h = sim.h
    k1 = f(sim, t0, x0)
    k2 = f(sim, t0 + h / 2.0, _shift(x0, h / 2.0, k1))
    k3 = f(sim, t0 + h / 2.0, _shift(x0, h / 2.0, k2))
    k4 = f(sim, t0 + h, _shift(x0, h, k3))
    return [
        x + h * (a / 6.0 + b / 3.0 + c / 3.0 + d / 6.0)
        for x, a, b, c, d in zip(x0, k1, k2, k3, k4)
    ]


def _sqrt(value: float) -> float:
    return math.sqrt(value) if value >= 0 else math.nan


def tank(sim: SimParams, t: float, x: Sequence[float]) -> list[float]:
    """Level rates of two cascaded tanks; ``x`` holds the two levels."""
    outflow1 = TANK1_OUTFLOW * _sqrt(x[TANK1])
    outflow2 = TANK2_OUTFLOW * _sqrt(x[TANK2])
    return [
        (TANK_INFLOW - outflow1) / TANK_AREA,
        (outflow1 - outflow2) / TANK_AREA,
    ]


def spring_mass(sim: SimParams, t: float, x: Sequence[float]) -> list[float]:
    """Rates of a damped spring and mass; ``x`` holds position and velocity."""
    position, velocity = x[POSITION], x[VELOCITY]
    acceleration = -(SPRING_K * position + sim.damp * velocity) / MASS
    return [velocity, acceleration]


def simulate(
    sim: SimParams,
    t_final: float,
    x0: Sequence[float],
    f: Derivative,
    stepper: Stepper,
) -> Iterator[tuple[float, tuple[float, ...]]]:
    """Yield ``(t, state)`` from t = 0 onwards, stepping while t stays within ``t_final``.

    The initial state is always yielded.
    """
    if not (math.isfinite(sim.h) and sim.h > 0):
        raise ValueError("step size must be a positive finite number")
    _check(sim, x0)
    t = 0.0
    x = list(x0)
    while True:
        yield t, tuple(x)
        x = stepper(sim, t, x, f)
        t += sim.h
        if not t <= t_final:
            return


def format_row(t: float, x: Sequence[float]) -> str:
    """Render one output row of time and state."""
    return "".join(f" {value:14.8e}" for value in (t, *x))


_NUMBER = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


def _atof(text: str) -> float:
    match = _NUMBER.match(text)
    return float(match.group(1)) if match else 0.0


_SOLVERS: dict[str, tuple[str, Stepper]] = {
    "eu": ("EU", euler),
    "rk2": ("RK2", rk2),
    "rk3": ("RK3", rk3),
    "rk4": ("RK4", rk4),
}
_PROBLEMS: dict[str, Derivative] = {"tank": tank, "spring": spring_mass}

_LONG_OPTIONS: dict[str, tuple[str, bool]] = {
    "verbose": ("verbose", False),
    "verb": ("verbose", False),
    "eu": ("eu", False),
    "rk2": ("rk2", False),
    "rk3": ("rk3", False),
    "rk4": ("rk4", False),
    "tank": ("tank", False),
    "spring": ("spring", False),
    "damp": ("damp", True),
    "dampening": ("damp", True),
    "x1": ("x1", True),
    "x2": ("x2", True),
    "stepSize": ("step", True),
    "stepsize": ("step", True),
    "step": ("step", True),
    "size": ("step", True),
    "finalTime": ("final", True),
    "finaltime": ("final", True),
    "ftime": ("final", True),
    "final": ("final", True),
}
_SHORT_OPTIONS: dict[str, tuple[str, bool]] = {
    "v": ("verbose", False),
    "z": ("step", True),
    "f": ("final", True),
    "d": ("damp", True),
}


class _UsageError(Exception):
    pass


@dataclass
class _Options:
    verbose: bool = False
    solver: str | None = None
    problem: str | None = None
    sim: SimParams = field(default_factory=SimParams)
    t_final: float = math.inf
    x0: list[float] = field(default_factory=lambda: [math.inf] * NX)
    positional: list[str] = field(default_factory=list)


def _match_long(name: str) -> tuple[str, bool] | None:
    if name in _LONG_OPTIONS:
        return _LONG_OPTIONS[name]
    found = {target for option, target in _LONG_OPTIONS.items() if name and option.startswith(name)}
    if len(found) > 1:
        raise _UsageError(f"option '-{name}' is ambiguous")
    return found.pop() if found else None


def _parse_args(argv: list[str]) -> _Options:
    """Parse options as getopt_long_only does; bad options are reported and skipped."""
    options = _Options()
    args = iter(argv)

    def warn(message: str) -> None:
        print(f"hw14: {message}", file=sys.stderr)

    def apply(key: str, takes_value: bool, inline: str | None, label: str) -> None:
        if not takes_value:
            if key == "verbose":
                options.verbose = True
            elif key in _SOLVERS:
                options.solver = key
            else:
                options.problem = key
            return
        value = inline if inline is not None else next(args, None)
        if value is None:
            warn(f"option '{label}' requires an argument")
            return
        number = _atof(value)
        if key == "step":
            options.sim.h = number
        elif key == "final":
            options.t_final = number
        elif key == "damp":
            options.sim.damp = number
        elif key == "x1":
            options.x0[0] = number
        else:
            options.x0[1] = number

    for arg in args:
        if arg == "--":
            options.positional.extend(args)
            break
        if not arg.startswith("-") or arg == "-":
            options.positional.append(arg)
            continue
        double = arg.startswith("--")
        body = arg[2:] if double else arg[1:]
        name, eq, inline = body.partition("=")
        try:
            match = _match_long(name)
        except _UsageError as err:
            warn(str(err))
            continue
        if match is not None:
            key, takes_value = match
            if eq and not takes_value:
                warn(f"option '{arg}' doesn't allow an argument")
                continue
            apply(key, takes_value, inline if eq else None, arg)
            continue
        if double or body[:1] not in _SHORT_OPTIONS:
            warn(f"unrecognized option '{arg}'")
            continue
        for position, char in enumerate(body):
            if char not in _SHORT_OPTIONS:
                warn(f"invalid option -- '{char}'")
                continue
            key, takes_value = _SHORT_OPTIONS[char]
            if takes_value:
                apply(key, takes_value, body[position + 1 :] or None, f"-{char}")
                break
            apply(key, takes_value, None, f"-{char}")
    return options


def _usage() -> str:
    return "\n".join(
        [
            "This simulates various system",
            f"Usage: hw14 solver problem -step num -fTime num  initCond [{NX}] [-damp num]",
            "Where: solver    = -eu, -rk2, -rk3, or -rk4",
            "       problem   = -tank or -spring",
            "       -step     = simulation step size",
            "       -ftime    = final time",
            "       -damp     = spring dampening value, default is 0.0",
            f"       -x1, -x2,  =initCond = initial conditions 'vector' ({NX})",
            " e.g.   hw14 -rk4 -tank -step.15 -ftime 25 -x1 0 -x2 0",
            "        Use RK4 to simulate the water tank for 25 seconds at .15 sec/step",
            "",
        ]
    )


def main(argv: list[str] | None = None) -> int:
    """Simulate the chosen system with the chosen solver and print each step."""
    options = _parse_args(sys.argv[1:] if argv is None else list(argv))
    sim = options.sim

    if options.verbose:
        label = _SOLVERS[options.solver][0] if options.solver else "Undefined"
        print(f"Input parameters ODE {label}, simulate by {sim.h:f} to {options.t_final:f}")
        print(f"damp {sim.damp:f} init value = {options.x0[0]:f} {options.x0[1]:f}\n")
        print("   Time            x1               x2")

    if (
        options.positional
        or options.solver is None
        or options.problem is None
        or options.t_final == math.inf
        or sim.h == math.inf
        or any(value == math.inf for value in options.x0)
    ):
        print(_usage())
        return int(ExitCode.SYNTAX_ERROR)

    stepper = _SOLVERS[options.solver][1]
    problem = _PROBLEMS[options.problem]
    try:
        for t, x in simulate(sim, options.t_final, options.x0, problem, stepper):
            print(format_row(t, x))
    except ValueError as err:
        print(f"Error: {err}", file=sys.stderr)
        return int(ExitCode.SYNTAX_ERROR)
    return int(ExitCode.SUCCESS)