"""
Tests for density profiles: For a constant profile, every convolution reduces to the integral of the weight, so the
profile properties must reproduce the bulk properties at every gridpoint.
"""
import numpy as np
from scipy.constants import Boltzmann
from saftpack import PcSaftFunctional, PetsFunctional, SaftVRQMieFunctional, GcPcSaftFunctional, FMTFunctional, \
    HardSphereParameters, Grid, Geometry, PlanarGrid, SphericalGrid, Profile
from saftpack.dual import Dual
from saftpack.exceptions import UnsupportedDualOperation
from pytest import approx
import pytest
from tools import pcsaft_params, record_params, pets_params, vrqmie_params, gc_mixture_params, central_difference, \
    tanh_profiles, WATER

grids = [PlanarGrid(64, 20.0), SphericalGrid(64, 20.0)]

systems = [{"func": lambda: PcSaftFunctional(pcsaft_params('C1')), "rho": [8e-3], "T": 150.0},
           {"func": lambda: PcSaftFunctional(pcsaft_params('C3')), "rho": [5e-3], "T": 250.0},
           {"func": lambda: PcSaftFunctional(record_params(WATER)), "rho": [2.5e-2], "T": 350.0},
           {"func": lambda: PcSaftFunctional(pcsaft_params('C1,C3')), "rho": [3e-3, 2e-3], "T": 230.0},
           {"func": lambda: PetsFunctional(pets_params()), "rho": [1.5e-2], "T": 110.0},
           {"func": lambda: GcPcSaftFunctional(gc_mixture_params()), "rho": [2e-3, 3e-3], "T": 250.0},
           {"func": lambda: SaftVRQMieFunctional(vrqmie_params('H2')), "rho": [2e-2], "T": 30.0}]


@pytest.mark.parametrize('grid', grids)
@pytest.mark.parametrize('inpt', systems)
def test_constant_profile(inpt, grid):
    func = inpt["func"]()
    rho, T = inpt["rho"], inpt["T"]
    profiles = Profile.constant(grid, rho)
    mu = func.reduced_residual_chemical_potential(rho, T)
    dF = func.functional_derivative(profiles, T)
    assert(len(dF) == len(rho))
    for i in range(len(rho)):
        assert(np.asarray(dF[i]) == approx(mu[i] * np.ones(grid.N), rel=1e-8))

    phi = func.reduced_helmholtz_energy_density(profiles, T)
    assert(isinstance(phi, Profile))
    assert(np.asarray(phi) == approx(func.reduced_helmholtz_energy_density(rho, T) * np.ones(grid.N), rel=1e-8))


@pytest.mark.parametrize('grid', grids)
def test_residual_helmholtz_energy(grid):
    func = PcSaftFunctional(pcsaft_params('C1,C3'))
    rho, T = [3e-3, 2e-3], 230.0
    profiles = Profile.constant(grid, rho)
    volume = Profile(np.ones(grid.N), grid).integrate()
    a = Boltzmann * T * func.reduced_helmholtz_energy_density(rho, T)
    assert(func.residual_helmholtz_energy(profiles, T) == approx(a * volume, rel=1e-8))


def test_contributions_on_profile():
    func = PcSaftFunctional(pcsaft_params('C3'))
    grid = grids[0]
    rho, T = [5e-3], 250.0
    bulk = func.helmholtz_energy_contributions(rho, T)
    profile = func.helmholtz_energy_contributions(Profile.constant(grid, rho), T)
    assert([name for name, _ in profile] == [name for name, _ in bulk])
    for (_, phi_p), (_, phi_b) in zip(profile, bulk):
        assert(np.asarray(phi_p) == approx(phi_b * np.ones(grid.N), rel=1e-8))


def test_profile_temperature_derivative():
    """Temperature derivatives are only available in bulk"""
    func = PcSaftFunctional(pcsaft_params('C1'))
    profiles = Profile.constant(grids[0], [5e-3])
    with pytest.raises(UnsupportedDualOperation):
        func.reduced_helmholtz_energy_density(profiles, Dual(150.0, 1.0))


def test_bulk_functional_derivative():
    func = PcSaftFunctional(pcsaft_params('C1'))
    with pytest.raises(TypeError):
        func.functional_derivative([5e-3], 150.0)


interfaces = [{"func": lambda: FMTFunctional(HardSphereParameters([3.0])), "inner": [0.02], "outer": [0.002], "T": 300.0},
              {"func": lambda: PcSaftFunctional(record_params(WATER)), "inner": [0.03], "outer": [0.001], "T": 350.0},
              {"func": lambda: PetsFunctional(pets_params()), "inner": [0.02], "outer": [0.002], "T": 110.0},
              {"func": lambda: PcSaftFunctional(pcsaft_params('C1,C3')), "inner": [3e-3, 8e-3], "outer": [2e-3, 5e-4],
               "T": 230.0},
              {"func": lambda: SaftVRQMieFunctional(vrqmie_params('H2,NE')), "inner": [1.5e-2, 1e-2],
               "outer": [1e-3, 1e-3], "T": 30.0}]


@pytest.mark.parametrize('geometry', [Geometry.PLANAR, Geometry.SPHERICAL])
@pytest.mark.parametrize('inpt', interfaces)
def test_inhomogeneous_profile(inpt, geometry):
    """
    The functional derivative on an interface must match the change in the integrated Helmholtz energy when the
    density in a single cell is perturbed, divided by the volume of that cell.
    """
    func = inpt["func"]()
    T = inpt["T"]
    grid = Grid(256, geometry, 40.0)
    profiles = tanh_profiles(grid, inpt["inner"], inpt["outer"])
    dF = func.functional_derivative(profiles, T)
    cell_volume = grid.integration_weights() * grid.dz
    h = 1e-6
    for i in range(len(profiles)):
        for j in (116, 128, 140):
            def F(rho_ij):
                perturbed = [np.array(p, dtype=float) for p in profiles]
                perturbed[i][j] = rho_ij
                return func.reduced_helmholtz_energy_density([Profile(p, grid) for p in perturbed], T).integrate()
            numeric = central_difference(F, float(profiles[i][j]), h=h) / cell_volume[j]
            assert(float(dF[i][j]) == approx(numeric, rel=2e-3))
