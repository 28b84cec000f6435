"""
TOFMA Numeric Core -- Material Properties Library
=================================================

Canonical source of doped-silica dispersion for the fiber modeler.  The
profile and cut-off calculations in ``fiber_modes`` take their squared
indices from the Sellmeier equation evaluated here.

Wavelength convention
---------------------
**All public functions accept wavelengths in micrometres.**  Sellmeier
``b`` coefficients are *linear* resonance wavelengths in micrometres; the
equation squares them internally on a private copy.

Dopant convention
-----------------
Concentrations are in mole percent: germanium (GeO2) raises the core
index, fluorine lowers the cladding index.

Sections
--------
=====  ============================================================
S      Contents
=====  ============================================================
1      Coefficient types and calibration tables
2      Coefficient interpolation (germanium, fluorine)
3      Sellmeier equation, n, dn/dlambda, group index
4      Verdet constant
5      Summary table
=====  ============================================================

Error handling
--------------
Every public function here validates its input and returns a
``diagnostics.Result``.  At a material resonance (lambda == b_i) the
Sellmeier terms diverge and the result is ``inf`` or ``nan``; this is
physics, not an input error, and is passed through unguarded.

Key references
--------------
- Malitson (1965)      JOSA 55, 1205         -- fused silica Sellmeier
- Fleming (1984)       Appl. Opt. 23, 4486   -- GeO2-SiO2 dispersion
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Iterable

import numpy as np
from numpy.typing import NDArray

from tofma.diagnostics import (
    ErrorKind,
    Result,
    check_coefficients,
    check_wavelength,
    failure,
    get_field,
    is_number,
    success,
)
from tofma.interpolation import InterpolationNodes, lagrange_interpolate

# -- Physical constants --------------------------------------------------
VERDET_SCALE: float = 293.3396048946175   # e / (2 m_e c)  [rad / (T m)]

GERMANIUM_RANGE: tuple[float, float] = (0.0, 15.0)   # [mol %]
FLUORINE_RANGE: tuple[float, float] = (0.0, 2.0)     # [mol %]


# ======================================================================
# S1  COEFFICIENT TYPES AND CALIBRATION TABLES
# ======================================================================

@dataclass(frozen=True)
class SellmeierCoefficients:
    """Three-term Sellmeier coefficients.

    ``a`` are the oscillator strengths, ``b`` the linear resonance
    wavelengths [um].
    """

    a: Sequence[float]
    b: Sequence[float]


# -- GeO2-doped silica ---------------------------------------------------
# Pure silica at 0 mol %, then four measured core glasses.
_GERMANIUM_TABLE: dict = {
    'x': [0, 3.1, 5.8, 7.9, 13.5],
    'a1': [0.6961663, 0.7028554, 0.7088876, 0.7136824, 0.711040],
    'a2': [0.4079426, 0.4146307, 0.4206803, 0.4254807, 0.451885],
    'a3': [0.8974994, 0.8974540, 0.8956551, 0.8964226, 0.704048],
    'b1': [0.0684043, 0.0727723, 0.0609053, 0.0617167, 0.064270],
    'b2': [0.1162414, 0.1143085, 0.1254514, 0.1270814, 0.129408],
    'b3': [9.8961610, 9.8961610, 9.8961620, 9.8961610, 9.425478],
}

# -- F-doped silica ------------------------------------------------------
_FLUORINE_TABLE: dict = {
    'x': [0, 1, 2],
    'a1': [0.6961663, 0.69325, 0.67744],
    'a2': [0.4079426, 0.39720, 0.40101],
    'a3': [0.8974994, 0.86008, 0.87193],
    'b1': [0.0684043, 0.06724, 0.06135],
    'b2': [0.1162414, 0.11714, 0.12030],
    'b3': [9.8961610, 9.77610, 9.85630],
}

_COEFFICIENT_CURVES = ('a1', 'a2', 'a3', 'b1', 'b2', 'b3')


# ======================================================================
# S2  COEFFICIENT INTERPOLATION
# ======================================================================

def _interpolate_table(fn: str, table: dict, valid_range: tuple[float, float],
                       concentration: Any) -> Result:
    """Interpolate all six coefficient curves of ``table``."""
    if not is_number(concentration):
        return failure(fn, ErrorKind.NOT_A_NUMBER,
                       "bad data type for concentration",
                       'concentration', concentration, stacklevel=4)
    lo, hi = valid_range
    if concentration < lo or concentration > hi:
        return failure(fn, ErrorKind.OUT_OF_RANGE,
                       f"concentration outside [{lo:g}, {hi:g}] mol %",
                       'concentration', concentration, stacklevel=4)

    values = {}
    for name in _COEFFICIENT_CURVES:
        nodes = InterpolationNodes(x=table['x'], y=table[name])
        res = lagrange_interpolate(concentration, nodes)
        if not res.ok:
            return res
        values[name] = res.value

    return success(SellmeierCoefficients(
        a=(values['a1'], values['a2'], values['a3']),
        b=(values['b1'], values['b2'], values['b3']),
    ))


def sellmeier_germanium(concentration: float) -> Result:
    """Sellmeier coefficients of GeO2-doped silica.

    Each coefficient is interpolated independently through five
    calibration glasses (0, 3.1, 5.8, 7.9, 13.5 mol %).  At 0 mol % the
    result is the Malitson fused-silica set.

    Parameters
    ----------
    concentration : float
        GeO2 concentration [mol %], 0-15 inclusive.

    Returns
    -------
    Result
        ``value`` is a ``SellmeierCoefficients``.
    """
    return _interpolate_table('sellmeier_germanium', _GERMANIUM_TABLE,
                              GERMANIUM_RANGE, concentration)


def sellmeier_fluorine(concentration: float) -> Result:
    """Sellmeier coefficients of F-doped silica (0-2 mol %, inclusive)."""
    return _interpolate_table('sellmeier_fluorine', _FLUORINE_TABLE,
                              FLUORINE_RANGE, concentration)


# ======================================================================
# S3  SELLMEIER EQUATION
# ======================================================================

def _as_arrays(coefficients: Any) -> tuple[NDArray, NDArray]:
    """Copy coefficients into float arrays, ``b`` squared.

    The caller's ``b`` sequence is never touched.
    """
    a = np.array(get_field(coefficients, 'a'), dtype=float)
    B = np.array(get_field(coefficients, 'b'), dtype=float)**2
    return a, B


def _n_squared(lam: float, a: NDArray, B: NDArray) -> float:
    lam = float(lam)
    lam2 = lam**2
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(1.0 + np.sum(a * lam2 / (lam2 - B)))


def _dn_dlambda(lam: float, a: NDArray, B: NDArray) -> float:
    # d(n^2)/dlam = -2 lam sum a B / (lam^2 - B)^2 ;  dn/dlam = that / 2n
    lam = float(lam)
    lam2 = lam**2
    with np.errstate(divide='ignore', invalid='ignore'):
        top = np.sum(a * B * lam / (lam2 - B)**2)
        bottom = np.sqrt(1.0 + np.sum(a * lam2 / (lam2 - B)))
        return float(-top / bottom)


def sellmeier(wavelength: float, coefficients: Any) -> Result:
    """Squared refractive index from the three-term Sellmeier equation.

        n^2 = 1 + sum_i  a_i lam^2 / (lam^2 - b_i^2)

    Parameters
    ----------
    wavelength : float
        Wavelength [um], >= 0.
    coefficients : SellmeierCoefficients or mapping
        ``a`` and ``b`` with exactly three numbers each.

    Returns
    -------
    Result
        ``value`` is n^2 (not n).  Exactly 1 at zero wavelength.

    Notes
    -----
    At lam == b_i the corresponding term diverges.  The returned value is
    then ``inf`` / ``nan``, marking operation at a material resonance.
    """
    fn = 'sellmeier'
    bad = check_wavelength(fn, wavelength) or check_coefficients(fn, coefficients)
    if bad is not None:
        return bad
    a, B = _as_arrays(coefficients)
    return success(_n_squared(wavelength, a, B))


def refractive_index(wavelength: float, coefficients: Any) -> Result:
    """Refractive index n = sqrt(sellmeier)."""
    fn = 'refractive_index'
    bad = check_wavelength(fn, wavelength) or check_coefficients(fn, coefficients)
    if bad is not None:
        return bad
    a, B = _as_arrays(coefficients)
    with np.errstate(invalid='ignore'):
        return success(float(np.sqrt(_n_squared(wavelength, a, B))))


def dn_dlambda(wavelength: float, coefficients: Any) -> Result:
    """Chromatic dispersion dn/dlambda [um^-1] (analytic derivative).

    Negative in the normal-dispersion region between the UV and IR
    resonances, i.e. across the whole telecom band for silica.
    """
    fn = 'dn_dlambda'
    bad = check_wavelength(fn, wavelength) or check_coefficients(fn, coefficients)
    if bad is not None:
        return bad
    a, B = _as_arrays(coefficients)
    return success(_dn_dlambda(wavelength, a, B))


def group_index(wavelength: float, coefficients: Any) -> Result:
    """Group index n_g = n - lam (dn/dlam)."""
    fn = 'group_index'
    bad = check_wavelength(fn, wavelength) or check_coefficients(fn, coefficients)
    if bad is not None:
        return bad
    a, B = _as_arrays(coefficients)
    with np.errstate(invalid='ignore'):
        n = float(np.sqrt(_n_squared(wavelength, a, B)))
    return success(n - wavelength * _dn_dlambda(wavelength, a, B))


# ======================================================================
# S4  VERDET CONSTANT
# ======================================================================

def verdet_constant(wavelength: float, coefficients: Any) -> Result:
    """Verdet constant from the Becquerel formula [rad / (T m)].

        V = (e / 2 m c) lam |dn/dlam|

    with dn/dlam taken analytically from the Sellmeier equation:

        top    = sum_i a_i B_i lam / (lam^2 - B_i)^2
        bottom = sqrt(1 + sum_i a_i lam^2 / (lam^2 - B_i))
        V      = K lam |top / bottom|,   K = 293.3396048946175

    where B_i = b_i^2.

    Parameters
    ----------
    wavelength : float
        Wavelength [um], >= 0.
    coefficients : SellmeierCoefficients or mapping
        ``a`` and ``b`` with exactly three numbers each.

    Returns
    -------
    Result
        ``value`` is the Verdet constant.
    """
    fn = 'verdet_constant'
    bad = check_wavelength(fn, wavelength) or check_coefficients(fn, coefficients)
    if bad is not None:
        return bad
    a, B = _as_arrays(coefficients)
    return success(VERDET_SCALE * wavelength
                   * abs(_dn_dlambda(wavelength, a, B)))


# ======================================================================
# S5  SUMMARY TABLE
# ======================================================================

_DOPANTS = {
    'germanium': sellmeier_germanium,
    'fluorine': sellmeier_fluorine,
}


def dispersion_summary_table(concentration: float = 0.0,
                             dopant: str = 'germanium',
                             wavelengths: Iterable[float] = (0.85, 1.31, 1.55)
                             ) -> None:
    """Print n, dn/dlam and the Verdet constant of a doped glass.

    Raises ``ValueError`` for an unknown dopant or a concentration the
    coefficient interpolation rejects.
    """
    if dopant not in _DOPANTS:
        raise ValueError(f"Unknown dopant: {dopant}. "
                         f"Choose from {sorted(_DOPANTS)}.")
    coeffs = _DOPANTS[dopant](concentration).unwrap()

    print(f"\n--- {dopant} {concentration:g} mol % ---")
    print(f"{'lam [um]':>9s}  {'n':>8s}  {'dn/dlam':>10s}  {'Verdet':>8s}")
    print("-" * 42)
    for lam in wavelengths:
        n = refractive_index(lam, coeffs).unwrap()
        dn = dn_dlambda(lam, coeffs).unwrap()
        v = verdet_constant(lam, coeffs).unwrap()
        print(f"{lam:>9.3f}  {n:>8.5f}  {dn:>10.5f}  {v:>8.4f}")
