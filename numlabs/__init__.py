"""Numerical tools: least squares, LU solving, ODE steppers, sensor correction and utilities."""

__version__ = "0.1.0"