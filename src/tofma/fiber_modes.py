"""
TOFMA Numeric Core -- Fiber Profile Library
===========================================

Radial refractive-index profiles and single-mode cut-off for the five
canonical fiber geometries of the modeler.

Length convention
-----------------
**Radii and wavelengths are in micrometres.**  ``ProfileData`` carries
*squared* refractive indices (n^2, as returned by
``material_properties.sellmeier``); ``profile`` converts back to n.

Sections
--------
=====  ============================================================
S      Contents
=====  ============================================================
1      Profile shapes and ProfileData
2      Radial profile: fast unvalidated path (scalar + vectorised)
3      Numerical aperture, cut-off wavelength
4      V-parameter and single-mode condition
=====  ============================================================

Two-tier contract
-----------------
``profile`` / ``profile_array`` are called per point inside plotting
loops and perform **no** validation: malformed data gives NaN or a
Python error, and a radius outside every segment (x < 0) gives NaN.
Everything else in this module validates its input and returns a
``diagnostics.Result``, emitting an ``InputWarning`` on rejection.

Key references
--------------
- Snyder & Love (1983)  Optical Waveguide Theory, ch. 14-15
- Marcuse (1978)        BSTJ 56, 703   -- graded-profile cut-off
"""

from __future__ import annotations

import enum
import math
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any, Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray

from tofma.diagnostics import (
    ErrorKind,
    Result,
    check_wavelength,
    failure,
    get_field,
    is_number,
    success,
)

# -- Normalised-frequency cut-off ----------------------------------------
V_CUTOFF_STEP: float = 2.405   # first zero of J0 (LP11 cut-off, step index)


# ======================================================================
# S1  PROFILE SHAPES
# ======================================================================

class ProfileShape(enum.IntEnum):
    TRIANGULAR = 1
    GRADIENT = 2
    STEP = 3
    DEPRESSED_CLADDING = 4
    DEPRESSED_RING = 5


@dataclass(frozen=True)
class ProfileData:
    """Radial index profile description.

    Attributes
    ----------
    shape : int
        ``ProfileShape`` value 1-5.
    n1, n2 : float
        Squared core / cladding index.
    a : float
        Core radius [um], > 0.
    n3 : float, optional
        Squared index of the depressed layer (shapes 4, 5).
    b, c : float
        Depressed cladding width (shape 4), ring offset and ring width
        (shape 5) [um].
    q : float, optional
        Power-law exponent (shape 2), > 1.
    """

    shape: int
    n1: float
    n2: float
    a: float
    n3: Optional[float] = None
    b: float = 0.0
    c: float = 0.0
    q: Optional[float] = None

    @classmethod
    def from_mapping(cls, data: Mapping) -> 'ProfileData':
        """Build from a dict, ignoring unknown keys."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


# ======================================================================
# S2  RADIAL PROFILE  (unvalidated)
# ======================================================================

def profile(data: ProfileData, x: float) -> float:
    """Refractive index n(x) at radial distance ``x`` [um].

    ===  ==========================  ====================================
    #    Shape                       n^2(x)
    ===  ==========================  ====================================
    1    triangular                  n1 + (n2-n1) x/a on [0,a)
    2    gradient (power law)        n1 + (n2-n1) (x/a)^q on [0,a)
    3    step                        n1 on [0,a)
    4    step, depressed cladding    n1 on [0,a), n3 on [a,a+b)
    5    step, depressed ring        n1 on [0,a), n2 on [a,a+b),
                                     n3 on [a+b,a+b+c)
    ===  ==========================  ====================================

    Beyond the last segment every shape returns the cladding value n2.
    Each segment includes its lower edge, so at exactly x = a the next
    segment applies, not the ramp end point.

    Not validated.  Radii matching no segment give NaN.
    """
    shape = data.shape
    n1, n2, a = data.n1, data.n2, data.a
    value = math.nan

    if shape == 1:
        if 0 <= x < a:
            value = n1 + (n2 - n1) * x / a
        elif x >= a:
            value = n2
    elif shape == 2:
        if 0 <= x < a:
            value = n1 + (n2 - n1) * (x / a)**data.q
        elif x >= a:
            value = n2
    elif shape == 3:
        if 0 <= x < a:
            value = n1
        elif x >= a:
            value = n2
    elif shape == 4:
        if 0 <= x < a:
            value = n1
        elif a <= x < a + data.b:
            value = data.n3
        elif x >= a + data.b:
            value = n2
    elif shape == 5:
        if 0 <= x < a:
            value = n1
        elif a <= x < a + data.b:
            value = n2
        elif a + data.b <= x < a + data.b + data.c:
            value = data.n3
        elif x >= a + data.b + data.c:
            value = n2

    return math.sqrt(value) if value >= 0 else math.nan


def profile_array(data: ProfileData, x: ArrayLike) -> NDArray:
    """Vectorised ``profile`` over an array of radii [um].

    Same segments and boundaries; intended for sampling a whole plot
    axis in one call.  Not validated.
    """
    x = np.atleast_1d(np.asarray(x, dtype=float))
    shape = data.shape
    n1, n2, a = data.n1, data.n2, data.a
    core = (x >= 0) & (x < a)

    if shape == 1:
        conds = [core, x >= a]
        with np.errstate(divide='ignore', invalid='ignore'):
            choices = [n1 + (n2 - n1) * x / a, n2]
    elif shape == 2:
        conds = [core, x >= a]
        with np.errstate(divide='ignore', invalid='ignore'):
            choices = [n1 + (n2 - n1) * np.abs(x / a)**data.q, n2]
    elif shape == 3:
        conds = [core, x >= a]
        choices = [n1, n2]
    elif shape == 4:
        edge = a + data.b
        conds = [core, (x >= a) & (x < edge), x >= edge]
        choices = [n1, data.n3, n2]
    elif shape == 5:
        ring = a + data.b
        edge = ring + data.c
        conds = [core, (x >= a) & (x < ring), (x >= ring) & (x < edge),
                 x >= edge]
        choices = [n1, n2, data.n3, n2]
    else:
        return np.full_like(x, np.nan)

    n_sq = np.select(conds, choices, default=np.nan)
    with np.errstate(invalid='ignore'):
        return np.sqrt(n_sq)


# ======================================================================
# S3  NUMERICAL APERTURE AND CUT-OFF WAVELENGTH
# ======================================================================

def _check_number(fn: str, data: Any, name: str) -> Optional[Result]:
    value = get_field(data, name)
    if value is None:
        return failure(fn, ErrorKind.MISSING_INPUT,
                       f"{name} not given", f'data.{name}', value,
                       stacklevel=5)
    if not is_number(value):
        return failure(fn, ErrorKind.NOT_A_NUMBER,
                       f"bad data type for {name}", f'data.{name}', value,
                       stacklevel=5)
    return None


def _check_profile(fn: str, data: Any) -> Optional[Result]:
    """Validate the fields the cut-off calculation reads."""
    if data is None:
        return failure(fn, ErrorKind.MISSING_INPUT,
                       "profile data not given", 'data', data,
                       stacklevel=4)

    bad = _check_number(fn, data, 'shape')
    if bad is not None:
        return bad
    shape = get_field(data, 'shape')
    if (shape != int(shape)
            or not ProfileShape.TRIANGULAR <= shape <= ProfileShape.DEPRESSED_RING):
        return failure(fn, ErrorKind.OUT_OF_RANGE,
                       "shape must be an integer in 1-5",
                       'data.shape', shape, stacklevel=4)

    for name in ('n1', 'n2', 'a'):
        bad = _check_number(fn, data, name)
        if bad is not None:
            return bad
    if get_field(data, 'a') <= 0:
        return failure(fn, ErrorKind.OUT_OF_RANGE,
                       "core radius must be positive",
                       'data.a', get_field(data, 'a'), stacklevel=4)

    if int(shape) == ProfileShape.GRADIENT:
        bad = _check_number(fn, data, 'q')
        if bad is not None:
            return bad
        q = get_field(data, 'q')
        if q <= 1:
            return failure(fn, ErrorKind.OUT_OF_RANGE,
                           "power-law exponent must exceed 1",
                           'data.q', q, stacklevel=4)
    return None


def _na(n1: float, n2: float) -> float:
    n1, n2 = np.float64(float(n1)), np.float64(float(n2))
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.sqrt(n1) * np.sqrt((n1 - n2) / n1))


def _cutoff(data: Any) -> float:
    shape = int(get_field(data, 'shape'))
    v_c = V_CUTOFF_STEP
    if shape == ProfileShape.TRIANGULAR:
        v_c *= math.sqrt(3.0)
    elif shape == ProfileShape.GRADIENT:
        q = get_field(data, 'q')
        v_c *= math.sqrt((q + 2.0) / q)
    na = _na(get_field(data, 'n1'), get_field(data, 'n2'))
    return na * (2.0 * math.pi * get_field(data, 'a') / v_c)


def numerical_aperture(n1: float, n2: float) -> Result:
    """Numerical aperture from squared core / cladding indices.

        NA = sqrt(n1) sqrt((n1 - n2) / n1)  =  sqrt(n1 - n2)

    written in the factored form used by the cut-off formula.  If
    n2 > n1 the fiber does not guide and the value is NaN.
    """
    fn = 'numerical_aperture'
    for name, value in (('n1', n1), ('n2', n2)):
        if not is_number(value):
            return failure(fn, ErrorKind.NOT_A_NUMBER,
                           f"bad data type for {name}", name, value)
    return success(_na(n1, n2))


def cutoff_wavelength(data: Any) -> Result:
    """Single-mode cut-off wavelength lam_c [um].

        lam_c = NA * 2 pi a / V_c

    V_c = 2.405 for the step-like profiles (shapes 3-5), scaled by
    sqrt(3) for the triangular profile and by sqrt((q+2)/q) for the
    power-law profile.

    Parameters
    ----------
    data : ProfileData or mapping
        Needs ``shape``, ``n1``, ``n2``, ``a`` (> 0) and, for shape 2,
        ``q`` (> 1).  Other fields are ignored.

    Returns
    -------
    Result
        ``value`` is lam_c [um].
    """
    fn = 'cutoff_wavelength'
    bad = _check_profile(fn, data)
    if bad is not None:
        return bad
    return success(_cutoff(data))


# ======================================================================
# S4  V-PARAMETER AND SINGLE-MODE CONDITION
# ======================================================================

def v_parameter(wavelength: float, data: Any) -> Result:
    """Normalised frequency V = 2 pi a NA / lam.

    Parameters
    ----------
    wavelength : float
        Wavelength [um], > 0.
    data : ProfileData or mapping
        Same requirements as ``cutoff_wavelength``.
    """
    fn = 'v_parameter'
    bad = check_wavelength(fn, wavelength)
    if bad is not None:
        return bad
    if wavelength == 0:
        return failure(fn, ErrorKind.OUT_OF_RANGE,
                       "wavelength must be positive",
                       'wavelength', wavelength)
    bad = _check_profile(fn, data)
    if bad is not None:
        return bad
    na = _na(get_field(data, 'n1'), get_field(data, 'n2'))
    return success(2.0 * math.pi * get_field(data, 'a') * na / wavelength)


def is_single_mode(wavelength: float, data: Any) -> Result:
    """True when ``wavelength`` lies above the cut-off wavelength."""
    fn = 'is_single_mode'
    bad = check_wavelength(fn, wavelength)
    if bad is not None:
        return bad
    bad = _check_profile(fn, data)
    if bad is not None:
        return bad
    return success(bool(wavelength > _cutoff(data)))
