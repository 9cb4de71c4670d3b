"""Tests for the SAFT-VRQ Mie functional."""
import numpy as np
from scipy.constants import Boltzmann
from saftpack import dual
from saftpack import SaftVRQMieFunctional, SaftVRQMieOptions, FeynmanHibbsOrder, FMTVersion, MoleculeShape
from saftpack.saftvrqmie import FeynmanHibbsProperties, AttractiveFunctional, PureAttFunctional, \
    NonAddHardSphereFunctional, mie_prefactor
from saftpack.hardsphere import FMTContribution, PureFMTFunctional
from pytest import approx
import pytest
from tools import vrqmie_params, central_difference


class GeneralSaftVRQMieFunctional(SaftVRQMieFunctional):

    def _assemble(self):
        return [FMTContribution(self.properties, self.fmt_version),
                AttractiveFunctional(self.parameters, self.properties)]


def test_classical_limit():
    """Without quantum corrections the effective potential is the Mie potential"""
    p = vrqmie_params('NE')
    props = FeynmanHibbsProperties(p, FeynmanHibbsOrder.FH0)
    sigma, eps, lr, la = p.sigma[0], p.epsilon_k[0], p.lr[0], p.la[0]
    T = 30.0
    assert(props.sigma_eff(0, 0, T) == approx(sigma, rel=1e-12))
    assert(props.r_min(0, 0, T) == approx(sigma * (lr / la)**(1 / (lr - la)), rel=1e-12))
    assert(props.epsilon_eff(0, 0, T) == approx(eps, rel=1e-12))
    assert(mie_prefactor(12.0, 6.0) == approx(4.0))


@pytest.mark.parametrize('order', [FeynmanHibbsOrder.FH1, FeynmanHibbsOrder.FH2])
def test_quantum_corrections(order):
    """Quantum corrections make the potential softer, wider and shallower"""
    p = vrqmie_params('H2')
    classical = FeynmanHibbsProperties(p, FeynmanHibbsOrder.FH0)
    quantum = FeynmanHibbsProperties(p, order)
    T = 30.0
    assert(quantum.sigma_eff(0, 0, T) > classical.sigma_eff(0, 0, T))
    assert(quantum.epsilon_eff(0, 0, T) < classical.epsilon_eff(0, 0, T))
    d = quantum.hs_diameter(T)[0]
    assert(0.8 * p.sigma[0] < d < quantum.sigma_eff(0, 0, T))
    # The corrections vanish at high temperature
    assert(quantum.sigma_eff(0, 0, 1e9) == approx(p.sigma[0], rel=1e-5))


def test_potential_derivatives():
    props = FeynmanHibbsProperties(vrqmie_params('H2'), FeynmanHibbsOrder.FH2)
    T, r = 25.0, 3.4
    du = central_difference(lambda x: props.potential(0, 0, x, T), r, h=1e-6)
    d2u = central_difference(lambda x: props.potential(0, 0, x, T, deriv=1), r, h=1e-6)
    assert(props.potential(0, 0, r, T, deriv=1) == approx(du, rel=1e-7))
    assert(props.potential(0, 0, r, T, deriv=2) == approx(d2u, rel=1e-7))


def test_diameter_temperature_derivative():
    """Temperature derivatives pass through the root finding and the Barker-Henderson integral"""
    props = FeynmanHibbsProperties(vrqmie_params('H2'), FeynmanHibbsOrder.FH1)
    T = 30.0
    for f in (lambda t: props.sigma_eff(0, 0, t), lambda t: props.epsilon_eff(0, 0, t),
              lambda t: props.hs_diameter_ij(0, 0, t)):
        _, deriv = dual.first_derivative(f, T)
        assert(deriv == approx(central_difference(f, T, h=1e-4), rel=1e-6))


@pytest.mark.parametrize('version', [FMTVersion.WhiteBear, FMTVersion.AntiSymWhiteBear])
def test_single_component_paths(version):
    params = vrqmie_params('H2')
    fast = SaftVRQMieFunctional(params, fmt_version=version)
    general = GeneralSaftVRQMieFunctional(params, fmt_version=version)
    assert([type(c) for c in fast.contributions()] == [PureFMTFunctional, PureAttFunctional])
    rho_max = fast.compute_max_density([1.0])
    for T in (20.0, 35.0):
        for frac in (1e-3, 0.3, 0.7):
            rho = [frac * rho_max]
            assert(fast.reduced_helmholtz_energy_density(rho, T)
                   == approx(general.reduced_helmholtz_energy_density(rho, T), rel=1e-8))
            assert(fast.reduced_pressure(rho, T) == approx(general.reduced_pressure(rho, T), rel=1e-8))
            assert(fast.reduced_residual_chemical_potential(rho, T)
                   == approx(general.reduced_residual_chemical_potential(rho, T), rel=1e-8))


def test_non_additive_term():
    params = vrqmie_params('H2,NE')
    with_term = SaftVRQMieFunctional(params)
    without = SaftVRQMieFunctional(params, options=SaftVRQMieOptions(include_non_additive_term=False))
    types = [type(c) for c in with_term.contributions()]
    assert(types == [FMTContribution, NonAddHardSphereFunctional, AttractiveFunctional])
    assert([type(c) for c in without.contributions()] == [FMTContribution, AttractiveFunctional])

    T = 30.0
    for rho in ([1e-2, 0.0], [0.0, 1e-2]):
        assert(with_term.reduced_helmholtz_energy_density(rho, T)
               == approx(without.reduced_helmholtz_energy_density(rho, T), rel=1e-12))
    rho = [1e-2, 1e-2]
    assert(with_term.reduced_helmholtz_energy_density(rho, T)
           != approx(without.reduced_helmholtz_energy_density(rho, T), rel=1e-8))


def test_mixture_chemical_potential():
    func = SaftVRQMieFunctional(vrqmie_params('H2,NE'))
    rho, T = [1e-2, 5e-3], 30.0
    mu = func.reduced_residual_chemical_potential(rho, T)
    for i in range(2):
        f = lambda r: func.reduced_helmholtz_energy_density([r if j == i else rho[j] for j in range(2)], T)
        assert(mu[i] == approx(central_difference(f, rho[i], h=1e-8), rel=1e-6))
    sub = func.subset([1])
    assert(sub.reduced_helmholtz_energy_density([rho[1]], T)
           == approx(func.reduced_helmholtz_energy_density([0.0, rho[1]], T), rel=1e-8))


def test_temperature_derivatives():
    func = SaftVRQMieFunctional(vrqmie_params('H2'))
    rho, T = [2e-2], 30.0
    a = lambda t: Boltzmann * t * func.reduced_helmholtz_energy_density(rho, t)
    assert(func.residual_entropy_density(rho, T) == approx(- central_difference(a, T, h=1e-4), rel=1e-5))


def test_pair_potential():
    func = SaftVRQMieFunctional(vrqmie_params('H2,NE'))
    r = np.linspace(2.5, 10.0, 30)
    u0 = func.pair_potential(0, r, 30.0)
    u1 = func.pair_potential(1, r, 30.0)
    assert(u0.shape == (2, 30))
    assert(u0[1] == approx(u1[0]))
    # The effective potential depends on temperature
    assert(func.pair_potential(0, r, 10.0)[0] != approx(u0[0]))
    assert(func.epsilon_k_ff() == approx(func.parameters.epsilon_k))
    assert(func.molecule_shape() == MoleculeShape.NonSpherical([1.0, 1.0]))
