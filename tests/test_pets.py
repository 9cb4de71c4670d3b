"""Tests for the PeTS and hard sphere functionals."""
import numpy as np
from scipy.constants import Boltzmann
from saftpack import PetsFunctional, FMTFunctional, HardSphereParameters, FMTVersion
from saftpack.pets import AttractiveFunctional, PureAttFunctional
from saftpack.hardsphere import FMTContribution, PureFMTFunctional, PureFMTAssocFunctional
from pytest import approx
import pytest
from tools import pets_params, central_difference


class GeneralPetsFunctional(PetsFunctional):

    def _assemble(self):
        return [FMTContribution(self.parameters, self.fmt_version), AttractiveFunctional(self.parameters)]


@pytest.mark.parametrize('version', [FMTVersion.WhiteBear, FMTVersion.AntiSymWhiteBear])
def test_single_component_paths(version):
    params = pets_params()
    fast = PetsFunctional(params, fmt_version=version)
    general = GeneralPetsFunctional(params, fmt_version=version)
    assert([type(c) for c in fast.contributions()] == [PureFMTFunctional, PureAttFunctional])
    rho_max = fast.compute_max_density([1.0])
    for T in (80.0, 120.0, 200.0):
        for frac in (1e-3, 0.3, 0.7):
            rho = [frac * rho_max]
            assert(fast.reduced_helmholtz_energy_density(rho, T)
                   == approx(general.reduced_helmholtz_energy_density(rho, T), rel=1e-8))
            assert(fast.reduced_pressure(rho, T) == approx(general.reduced_pressure(rho, T), rel=1e-8))
            assert(fast.reduced_residual_chemical_potential(rho, T)
                   == approx(general.reduced_residual_chemical_potential(rho, T), rel=1e-8))


def test_mixture():
    func = PetsFunctional(pets_params(2))
    assert([type(c) for c in func.contributions()] == [FMTContribution, AttractiveFunctional])
    rho, T = [4e-3, 6e-3], 130.0
    mu = func.reduced_residual_chemical_potential(rho, T)
    for i in range(2):
        f = lambda r: func.reduced_helmholtz_energy_density([r if j == i else rho[j] for j in range(2)], T)
        assert(mu[i] == approx(central_difference(f, rho[i], h=1e-8), rel=1e-6))
    sub = func.subset([1])
    assert(sub.reduced_helmholtz_energy_density([rho[1]], T)
           == approx(func.reduced_helmholtz_energy_density([0.0, rho[1]], T), rel=1e-10))


def test_pair_potential():
    """Truncated and shifted at 2.5 sigma"""
    func = PetsFunctional(pets_params(2))
    sigma = func.parameters.sigma_ij
    r = np.array([sigma[0, 1], 2.49 * sigma[0, 1], 2.5 * sigma[0, 1], 4.0 * sigma[0, 1]])
    u = func.pair_potential(0, r, 100.0)
    assert(u[1] == approx(func.pair_potential(1, r, 100.0)[0]))
    eps = func.parameters.epsilon_k_ij[0, 1]
    u_cut = 4 * eps * (2.5**-12 - 2.5**-6)
    assert(u[1, 0] == approx(- u_cut))
    assert(u[1, 1] == approx(0.0, abs=1e-3 * eps))
    assert(u[1, 2] == 0.0)
    assert(u[1, 3] == 0.0)


def test_temperature_derivatives():
    func = PetsFunctional(pets_params())
    rho, T = [1.5e-2], 110.0
    a = lambda t: t * func.reduced_helmholtz_energy_density(rho, t)
    s = func.residual_entropy_density(rho, T)
    assert(s == approx(- Boltzmann * central_difference(a, T, h=1e-4), rel=1e-6))


@pytest.mark.parametrize('eta', [0.05, 0.2, 0.4])
def test_hard_sphere_bulk(eta):
    """White Bear gives Carnahan-Starling, the Rosenfeld form of Kierlik-Rosinberg gives Percus-Yevick"""
    sigma = 3.0
    rho = eta / (np.pi / 6 * sigma**3)
    a_cs = (4 * eta - 3 * eta**2) / (1 - eta)**2
    a_py = - np.log(1 - eta) + 3 * eta / (1 - eta) + 3 * eta**2 / (2 * (1 - eta)**2)
    for version, a in ((FMTVersion.WhiteBear, a_cs), (FMTVersion.AntiSymWhiteBear, a_cs),
                       (FMTVersion.KierlikRosinberg, a_py)):
        func = FMTFunctional(HardSphereParameters([sigma]), fmt_version=version)
        assert(func.reduced_helmholtz_energy_density([rho], 300.0) / rho == approx(a, rel=1e-10))


def test_hard_sphere_mixture():
    func = FMTFunctional(HardSphereParameters([2.0, 3.0]))
    assert(func.pair_potential(0, np.array([2.4, 2.6]), 100.0)[1] == approx([np.inf, 0.0]))
    assert(func.epsilon_k_ff() == approx([0.0, 0.0]))
    assert(func.reduced_helmholtz_energy_density([5e-3, 0.0], 300.0)
           == approx(FMTFunctional(HardSphereParameters([2.0])).reduced_helmholtz_energy_density([5e-3], 300.0),
                     rel=1e-10))


def test_single_component_fmt_versions():
    with pytest.raises(ValueError):
        PureFMTAssocFunctional(pets_params(), FMTVersion.KierlikRosinberg)
    func = PetsFunctional(pets_params(), fmt_version=FMTVersion.KierlikRosinberg)
    assert(isinstance(func.contributions()[0], FMTContribution))
    assert(repr(func.contributions()[0]) == 'FMTContribution(KierlikRosinberg)')
