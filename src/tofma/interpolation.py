"""
TOFMA Numeric Core -- Lagrange Interpolation
============================================

Polynomial interpolation through sparse calibration tables.  Used by
``material_properties`` to estimate Sellmeier coefficients at an
arbitrary dopant concentration from a handful of measured glasses.

The interpolating polynomial passes exactly through every node.  There is
no smoothing and no extrapolation guard: outside the node range the
polynomial is still evaluated, with accuracy degrading as it moves away
from the data.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from tofma.diagnostics import (
    ErrorKind,
    Result,
    failure,
    get_field,
    is_number,
    is_sequence,
    success,
)


@dataclass(frozen=True)
class InterpolationNodes:
    """Parallel abscissa / ordinate tables.

    Abscissas must be distinct; repeated ``x`` values divide by zero and
    are not checked.
    """

    x: Sequence[float]
    y: Sequence[float]


def lagrange_interpolate(x: float, nodes: Any) -> Result:
    """Evaluate the Lagrange polynomial through ``nodes`` at ``x``.

        P(x) = sum_j  y_j  prod_{i != j}  (x - x_i) / (x_j - x_i)

    Parameters
    ----------
    x : float
        Evaluation point.
    nodes : InterpolationNodes, mapping or object
        Anything exposing ``x`` and ``y`` sequences (attributes or
        ``'x'``/``'y'`` keys) of equal length >= 2.

    Returns
    -------
    Result
        ``value`` is the interpolated float.  On invalid input ``error``
        holds the ``ErrorKind`` and an ``InputWarning`` is emitted.
    """
    fn = 'lagrange_interpolate'

    if nodes is None:
        return failure(fn, ErrorKind.MISSING_INPUT,
                       "bad data type for 'nodes'", 'nodes', nodes)

    xs = get_field(nodes, 'x')
    ys = get_field(nodes, 'y')
    if not is_sequence(xs) or not is_sequence(ys):
        return failure(fn, ErrorKind.MALFORMED_INPUT,
                       "'nodes.x' or 'nodes.y' is not a sequence",
                       '(type(nodes.x), type(nodes.y))',
                       (type(xs).__name__, type(ys).__name__))
    if len(xs) < 2 or len(ys) < 2:
        return failure(fn, ErrorKind.TOO_FEW_NODES,
                       "a minimum of two nodes must be specified",
                       '(len(nodes.x), len(nodes.y))', (len(xs), len(ys)))
    if len(xs) != len(ys):
        return failure(fn, ErrorKind.LENGTH_MISMATCH,
                       "value tables are not the same dimension",
                       '(len(nodes.x), len(nodes.y))', (len(xs), len(ys)))
    if not is_number(x):
        return failure(fn, ErrorKind.NOT_A_NUMBER,
                       "bad data type for 'x'", 'x', x)
    for i, (xi, yi) in enumerate(zip(xs, ys)):
        if not is_number(xi):
            return failure(fn, ErrorKind.NOT_A_NUMBER,
                           "node element is not a number",
                           f'nodes.x[{i}]', xi)
        if not is_number(yi):
            return failure(fn, ErrorKind.NOT_A_NUMBER,
                           "node element is not a number",
                           f'nodes.y[{i}]', yi)

    result = 0.0
    for j, (xj, yj) in enumerate(zip(xs, ys)):
        basis = 1.0
        for i, xi in enumerate(xs):
            if i == j:
                continue
            basis *= (x - xi) / (xj - xi)
        result += yj * basis

    return success(float(result))
