"""
TOFMA Numeric Core -- Material Properties Test Suite
====================================================

Sellmeier coefficient tables, the Sellmeier equation and the Verdet
constant.  Silica reference values are Malitson (1965); tolerances are
generous (1e-3 in n) where the check is against published data.

Run with:
    pytest tests/test_material_properties.py -v
"""

import math
from fractions import Fraction

import numpy as np
import pytest

from tofma.diagnostics import ErrorKind, InputWarning
from tofma.material_properties import (
    FLUORINE_RANGE,
    GERMANIUM_RANGE,
    VERDET_SCALE,
    SellmeierCoefficients,
    dispersion_summary_table,
    dn_dlambda,
    group_index,
    refractive_index,
    sellmeier,
    sellmeier_fluorine,
    sellmeier_germanium,
    verdet_constant,
)


SILICA = SellmeierCoefficients(a=(0.6961663, 0.4079426, 0.8974994),
                               b=(0.0684043, 0.1162414, 9.8961610))


def _coeffs():
    """Fresh, caller-owned coefficient lists."""
    return {'a': [0.6961663, 0.4079426, 0.8974994],
            'b': [0.0684043, 0.1162414, 9.8961610]}


# ============================================================
# 1. Coefficient interpolation
# ============================================================

class TestGermanium:
    """GeO2-doped silica coefficient tables."""

    def test_zero_concentration_is_first_table_row(self):
        """0 mol % reproduces the fused-silica row exactly."""
        c = sellmeier_germanium(0).value
        assert tuple(c.a) == (0.6961663, 0.4079426, 0.8974994)
        assert tuple(c.b) == (0.0684043, 0.1162414, 9.8961610)

    @pytest.mark.parametrize('conc, a, b', [
        (3.1, (0.7028554, 0.4146307, 0.8974540),
              (0.0727723, 0.1143085, 9.8961610)),
        (7.9, (0.7136824, 0.4254807, 0.8964226),
              (0.0617167, 0.1270814, 9.8961610)),
        (13.5, (0.711040, 0.451885, 0.704048),
               (0.064270, 0.129408, 9.425478)),
    ])
    def test_calibration_points(self, conc, a, b):
        c = sellmeier_germanium(conc).value
        np.testing.assert_allclose(c.a, a, rtol=1e-9)
        np.testing.assert_allclose(c.b, b, rtol=1e-9)

    def test_range_edges_accepted(self):
        assert sellmeier_germanium(0.0).ok
        assert sellmeier_germanium(15).ok

    def test_range_constants(self):
        assert GERMANIUM_RANGE == (0.0, 15.0)
        assert FLUORINE_RANGE == (0.0, 2.0)
        assert all(isinstance(v, float)
                   for v in GERMANIUM_RANGE + FLUORINE_RANGE)

    def test_fraction_concentration_accepted(self):
        res = sellmeier_germanium(Fraction(1, 2))
        assert res.ok
        np.testing.assert_allclose(res.value.a,
                                   sellmeier_germanium(0.5).value.a,
                                   rtol=1e-12)

    @pytest.mark.parametrize('conc', [-1, 16, 15.0001])
    def test_out_of_range(self, conc):
        with pytest.warns(InputWarning, match='sellmeier_germanium'):
            res = sellmeier_germanium(conc)
        assert res.error is ErrorKind.OUT_OF_RANGE
        assert res.value is None

    @pytest.mark.parametrize('conc', ['5', None, math.nan, math.inf, 10**400])
    def test_not_a_number(self, conc):
        with pytest.warns(InputWarning):
            res = sellmeier_germanium(conc)
        assert res.error is ErrorKind.NOT_A_NUMBER

    def test_warning_points_at_caller(self):
        with pytest.warns(InputWarning) as rec:
            sellmeier_germanium(20)
        assert rec[0].filename == __file__


class TestFluorine:
    """F-doped silica coefficient tables."""

    @pytest.mark.parametrize('conc, a, b', [
        (0, (0.6961663, 0.4079426, 0.8974994),
            (0.0684043, 0.1162414, 9.8961610)),
        (1, (0.69325, 0.39720, 0.86008), (0.06724, 0.11714, 9.77610)),
        (2, (0.67744, 0.40101, 0.87193), (0.06135, 0.12030, 9.85630)),
    ])
    def test_calibration_points(self, conc, a, b):
        c = sellmeier_fluorine(conc).value
        np.testing.assert_allclose(c.a, a, rtol=1e-12)
        np.testing.assert_allclose(c.b, b, rtol=1e-12)

    @pytest.mark.parametrize('conc', [-0.1, 2.1])
    def test_out_of_range(self, conc):
        with pytest.warns(InputWarning, match='sellmeier_fluorine'):
            res = sellmeier_fluorine(conc)
        assert res.error is ErrorKind.OUT_OF_RANGE

    def test_fluorine_lowers_index(self):
        """F doping depresses n at 1.55 um; GeO2 raises it."""
        n_si = refractive_index(1.55, SILICA).value
        n_f = refractive_index(1.55, sellmeier_fluorine(1).value).value
        n_ge = refractive_index(1.55, sellmeier_germanium(7.9).value).value
        assert n_f < n_si < n_ge


# ============================================================
# 2. Sellmeier equation
# ============================================================

class TestSellmeier:
    """n^2 from the three-term Sellmeier equation."""

    def test_zero_wavelength_gives_one(self):
        assert sellmeier(0, SILICA).value == 1.0
        assert sellmeier(0.0, sellmeier_germanium(5).value).value == 1.0

    def test_silica_index_1550nm(self):
        """Fused silica n(1.55 um) = 1.4440 -- Malitson 1965."""
        n_sq = sellmeier(1.55, SILICA).value
        assert abs(math.sqrt(n_sq) - 1.4440) < 1e-3
        assert refractive_index(1.55, SILICA).value == \
            pytest.approx(math.sqrt(n_sq))

    def test_silica_index_633nm(self):
        """Fused silica n(0.6328 um) = 1.4570 -- Malitson 1965."""
        assert abs(refractive_index(0.6328, SILICA).value - 1.4570) < 1e-3

    def test_resonance_is_not_guarded(self):
        """lam == b_i diverges; the singularity propagates as inf/nan."""
        coeffs = {'a': [0.7, 0.4, 0.9], 'b': [1.0, 0.1, 10.0]}
        res = sellmeier(1.0, coeffs)
        assert res.ok
        assert not np.isfinite(res.value)

    def test_caller_coefficients_not_mutated(self):
        """Repeated calls on the same object see unsquared b every time."""
        coeffs = _coeffs()
        b_before = list(coeffs['b'])
        first = sellmeier(1.31, coeffs).value
        v_first = verdet_constant(1.31, coeffs).value
        second = sellmeier(1.31, coeffs).value
        v_second = verdet_constant(1.31, coeffs).value
        assert coeffs['b'] == b_before
        assert first == second
        assert v_first == v_second

    def test_accepts_numpy_coefficients(self):
        coeffs = {'a': np.array(SILICA.a), 'b': np.array(SILICA.b)}
        assert sellmeier(1.55, coeffs).value == \
            pytest.approx(sellmeier(1.55, SILICA).value, rel=1e-15)

    def test_fraction_wavelength_accepted(self):
        assert sellmeier(Fraction(31, 20), SILICA).value == \
            pytest.approx(sellmeier(1.55, SILICA).value, rel=1e-15)

    @pytest.mark.parametrize('wavelength, coeffs, kind', [
        (-0.5, _coeffs(), ErrorKind.OUT_OF_RANGE),
        ('1.55', _coeffs(), ErrorKind.NOT_A_NUMBER),
        (1.55, None, ErrorKind.MISSING_INPUT),
        (1.55, {'a': [1, 2, 3]}, ErrorKind.MISSING_INPUT),
        (1.55, {'a': [1, 2, 3], 'b': 5.0}, ErrorKind.MALFORMED_INPUT),
        (1.55, {'a': [1, 2], 'b': [1, 2, 3]}, ErrorKind.WRONG_COUNT),
        (1.55, {'a': [1, 2, 3], 'b': [1, 2, 3, 4]}, ErrorKind.WRONG_COUNT),
        (1.55, {'a': [1, 'x', 3], 'b': [1, 2, 3]}, ErrorKind.NOT_A_NUMBER),
        (10**400, _coeffs(), ErrorKind.NOT_A_NUMBER),
    ])
    def test_rejected_input(self, wavelength, coeffs, kind):
        with pytest.warns(InputWarning, match='sellmeier'):
            res = sellmeier(wavelength, coeffs)
        assert res.error is kind

    @pytest.mark.parametrize('wavelength, coeffs', [
        (-1.0, _coeffs()),
        (1.55, {'a': [1, 2, 3], 'b': [1, 2]}),
        (1.55, None),
    ])
    def test_warning_points_at_caller(self, wavelength, coeffs):
        with pytest.warns(InputWarning) as rec:
            sellmeier(wavelength, coeffs)
        assert rec[0].filename == __file__


# ============================================================
# 3. Dispersion and Verdet constant
# ============================================================

class TestDispersion:
    """dn/dlambda, group index, Verdet constant."""

    def test_normal_dispersion_at_1550nm(self):
        assert dn_dlambda(1.55, SILICA).value < 0

    def test_dn_dlambda_matches_finite_difference(self):
        h = 1e-5
        n_plus = refractive_index(1.2 + h, SILICA).value
        n_minus = refractive_index(1.2 - h, SILICA).value
        numeric = (n_plus - n_minus) / (2 * h)
        assert dn_dlambda(1.2, SILICA).value == pytest.approx(numeric, rel=1e-5)

    def test_silica_group_index_1550nm(self):
        """Fused silica n_g(1.55 um) = 1.4626."""
        assert abs(group_index(1.55, SILICA).value - 1.4626) < 2e-3

    def test_verdet_is_becquerel_formula(self):
        """V = K lam |dn/dlam|."""
        for lam in (0.633, 1.064, 1.55):
            expected = VERDET_SCALE * lam * abs(dn_dlambda(lam, SILICA).value)
            assert verdet_constant(lam, SILICA).value == \
                pytest.approx(expected, rel=1e-12)

    def test_verdet_decreases_with_wavelength(self):
        v_vis = verdet_constant(0.633, SILICA).value
        v_ir = verdet_constant(1.55, SILICA).value
        assert v_vis > v_ir > 0

    def test_verdet_resonance_is_not_guarded(self):
        """lam == b_i: the Verdet constant diverges like n^2 does."""
        coeffs = {'a': [0.7, 0.4, 0.9], 'b': [1.0, 0.1, 10.0]}
        res = verdet_constant(1.0, coeffs)
        assert res.ok
        assert not np.isfinite(res.value)

    def test_verdet_zero_wavelength(self):
        assert verdet_constant(0, SILICA).value == 0.0

    def test_verdet_scale_literal(self):
        assert VERDET_SCALE == 293.3396048946175

    def test_verdet_rejects_bad_coefficients(self):
        with pytest.warns(InputWarning, match='verdet_constant') as rec:
            res = verdet_constant(1.55, {'a': [1, 2, 3], 'b': [1, 2]})
        assert res.error is ErrorKind.WRONG_COUNT
        assert rec[0].filename == __file__


# ============================================================
# 4. Summary table
# ============================================================

class TestSummaryTable:

    def test_prints_one_row_per_wavelength(self, capsys):
        dispersion_summary_table(5.0, 'germanium', (1.31, 1.55))
        out = capsys.readouterr().out
        assert 'germanium 5 mol %' in out
        assert '1.310' in out and '1.550' in out

    def test_unknown_dopant(self):
        with pytest.raises(ValueError, match='Unknown dopant'):
            dispersion_summary_table(1.0, 'boron')

    def test_out_of_range_concentration(self):
        with pytest.warns(InputWarning):
            with pytest.raises(ValueError, match='concentration'):
                dispersion_summary_table(3.0, 'fluorine')
