"""
TOFMA Numeric Core -- Validation and Diagnostics
================================================

Shared result type and input checks for every validating function in the
numeric core.

Error policy
------------
Validating functions never raise on bad input.  They check their
arguments in a fixed order, stop at the first violation, emit one
``InputWarning`` through :mod:`warnings` and return a failed ``Result``.
The caller inspects ``Result.ok`` before using ``Result.value``.

The unvalidated fast path (``fiber_modes.profile``) does not use this
module at all.

Message format::

    <function>: <reason> (<field>=<observed value>)
"""

from __future__ import annotations

import enum
import math
import numbers
import warnings
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np


class ErrorKind(enum.Enum):
    """Validation failure taxonomy."""

    MISSING_INPUT = 'missing input'
    MALFORMED_INPUT = 'malformed input'
    TOO_FEW_NODES = 'too few nodes'
    LENGTH_MISMATCH = 'length mismatch'
    WRONG_COUNT = 'wrong element count'
    NOT_A_NUMBER = 'not a number'
    OUT_OF_RANGE = 'out of range'


class InputWarning(UserWarning):
    """Diagnostic issued when a validating function rejects its input."""


@dataclass(frozen=True)
class Result:
    """Outcome of a validating computation.

    Exactly one of ``value`` / ``error`` is meaningful: a successful result
    has ``error is None``.
    """

    value: Any = None
    error: Optional[ErrorKind] = None
    message: str = ''

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """Return ``value``, or raise ``ValueError`` for a failed result."""
        if self.error is not None:
            raise ValueError(self.message)
        return self.value


def success(value: Any) -> Result:
    return Result(value=value)


def failure(function: str, kind: ErrorKind, reason: str,
            field: str, observed: Any, stacklevel: int = 3) -> Result:
    """Emit the diagnostic for a rejected input and build the failed result.

    The default ``stacklevel`` attributes the warning to the caller of a
    public function that calls ``failure`` directly.  Each helper frame in
    between adds one.
    """
    message = f"{function}: {reason} ({field}={observed!r})"
    warnings.warn(message, InputWarning, stacklevel=stacklevel)
    return Result(error=kind, message=message)


# ----------------------------------------------------------------------
# Predicates
# ----------------------------------------------------------------------

def is_number(value: Any) -> bool:
    """True for a finite real scalar (bools excluded)."""
    if isinstance(value, (bool, np.bool_)):
        return False
    if not isinstance(value, numbers.Real):
        return False
    try:
        return math.isfinite(float(value))
    except (OverflowError, TypeError, ValueError):
        return False


def is_sequence(value: Any) -> bool:
    """True for list/tuple-like containers and 1-D arrays, not strings."""
    if isinstance(value, np.ndarray):
        return value.ndim == 1
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def get_field(container: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a mapping key or an attribute."""
    if isinstance(container, Mapping):
        return container.get(name, default)
    return getattr(container, name, default)


def check_coefficients(function: str, coefficients: Any) -> Optional[Result]:
    """Validate a Sellmeier coefficient set (``a``/``b``, three numbers each).

    Returns ``None`` when the coefficients are usable, otherwise the failed
    ``Result`` to hand back to the caller.
    """
    if coefficients is None:
        return failure(function, ErrorKind.MISSING_INPUT,
                       "Sellmeier coefficients not given",
                       'coefficients', coefficients, stacklevel=4)
    for name in ('a', 'b'):
        seq = get_field(coefficients, name)
        if seq is None:
            return failure(function, ErrorKind.MISSING_INPUT,
                           f"coefficient table '{name}' not given",
                           f'coefficients.{name}', seq, stacklevel=4)
        if not is_sequence(seq):
            return failure(function, ErrorKind.MALFORMED_INPUT,
                           f"coefficient table '{name}' is not a sequence",
                           f'coefficients.{name}', type(seq).__name__,
                           stacklevel=4)
        if len(seq) != 3:
            return failure(function, ErrorKind.WRONG_COUNT,
                           f"coefficient table '{name}' must hold 3 values",
                           f'len(coefficients.{name})', len(seq),
                           stacklevel=4)
        for i, item in enumerate(seq):
            if not is_number(item):
                return failure(function, ErrorKind.NOT_A_NUMBER,
                               "coefficient is not a number",
                               f'coefficients.{name}[{i}]', item,
                               stacklevel=4)
    return None


def check_wavelength(function: str, wavelength: Any) -> Optional[Result]:
    if not is_number(wavelength):
        return failure(function, ErrorKind.NOT_A_NUMBER,
                       "bad data type for wavelength",
                       'wavelength', wavelength, stacklevel=4)
    if wavelength < 0:
        return failure(function, ErrorKind.OUT_OF_RANGE,
                       "wavelength must be non-negative",
                       'wavelength', wavelength, stacklevel=4)
    return None
