"""
TOFMA -- Optical Fiber Modeler, Numeric Core
============================================

Refractive-index engine behind the browser-based fiber modeler: Sellmeier
dispersion of doped silica, radial index profiles, cut-off wavelength and
Verdet constant.  Pure, synchronous functions; no plotting, no I/O.

Modules
-------
diagnostics         : Result / ErrorKind types, input validation, InputWarning
interpolation       : Lagrange polynomial interpolation
material_properties : Sellmeier coefficients (Ge, F), n^2, n, dn/dlambda,
                      group index, Verdet constant
fiber_modes         : Profile shapes, radial profile, NA, cut-off wavelength,
                      V-parameter
"""

from tofma.diagnostics import ErrorKind, InputWarning, Result
from tofma.fiber_modes import (
    ProfileData,
    ProfileShape,
    cutoff_wavelength,
    profile,
    profile_array,
)
from tofma.interpolation import InterpolationNodes, lagrange_interpolate
from tofma.material_properties import (
    SellmeierCoefficients,
    sellmeier,
    sellmeier_fluorine,
    sellmeier_germanium,
    verdet_constant,
)

__version__ = "1.0.0"

__all__ = [
    'ErrorKind',
    'InputWarning',
    'InterpolationNodes',
    'ProfileData',
    'ProfileShape',
    'Result',
    'SellmeierCoefficients',
    'cutoff_wavelength',
    'lagrange_interpolate',
    'profile',
    'profile_array',
    'sellmeier',
    'sellmeier_fluorine',
    'sellmeier_germanium',
    'verdet_constant',
]
