"""Tests for the heterosegmented group contribution PC-SAFT functional."""
import numpy as np
from saftpack import GcPcSaftFunctional, PcSaftFunctional, PcSaftParameters, MoleculeShape, \
    as_pair_potential, as_fluid_parameters
from saftpack.gc_pcsaft import HeterosegmentedChainFunctional, GcAttractiveFunctional
from saftpack.hardsphere import FMTContribution
from saftpack.exceptions import UnsupportedCapabilityError
from pytest import approx
import pytest
from tools import gc_dimer_params, gc_mixture_params, central_difference


def dimer_reference():
    return PcSaftFunctional(PcSaftParameters([2.0], [3.7039], [150.03], molarweight=[32.086]))


@pytest.mark.parametrize('inpt', [{"rho": 1e-4, "T": 200.0},
                                  {"rho": 5e-3, "T": 250.0},
                                  {"rho": 1.2e-2, "T": 300.0}])
def test_dimer_is_chain(inpt):
    """Two bonded, identical segments behave as a homosegmented chain with m = 2"""
    gc = GcPcSaftFunctional(gc_dimer_params())
    ref = dimer_reference()
    rho, T = [inpt["rho"]], inpt["T"]
    assert(gc.reduced_helmholtz_energy_density(rho, T) == approx(ref.reduced_helmholtz_energy_density(rho, T), rel=1e-10))
    assert(gc.reduced_residual_chemical_potential(rho, T)
           == approx(ref.reduced_residual_chemical_potential(rho, T), rel=1e-10))
    assert(gc.reduced_pressure(rho, T) == approx(ref.reduced_pressure(rho, T), rel=1e-10))


def test_contributions():
    gc = GcPcSaftFunctional(gc_mixture_params())
    types = [type(c) for c in gc.contributions()]
    assert(types == [FMTContribution, HeterosegmentedChainFunctional, GcAttractiveFunctional])
    # A single segment has no bonds
    sub = gc.subset([1])
    assert([type(c) for c in sub.contributions()] == [FMTContribution, GcAttractiveFunctional])


def test_molecule_shape():
    gc = GcPcSaftFunctional(gc_mixture_params())
    shape = gc.molecule_shape()
    assert(shape.kind == 'Heterosegmented')
    assert(shape == MoleculeShape.Heterosegmented([0, 0, 0, 1]))
    assert(shape != MoleculeShape.Spherical(2))


def test_no_pair_potential():
    gc = GcPcSaftFunctional(gc_dimer_params())
    with pytest.raises(UnsupportedCapabilityError):
        as_pair_potential(gc)
    with pytest.raises(UnsupportedCapabilityError):
        as_fluid_parameters(gc)


def test_mixture_chemical_potential():
    gc = GcPcSaftFunctional(gc_mixture_params())
    rho, T = [2e-3, 3e-3], 250.0
    mu = gc.reduced_residual_chemical_potential(rho, T)
    for i in range(2):
        f = lambda r: gc.reduced_helmholtz_energy_density([r if j == i else rho[j] for j in range(2)], T)
        assert(mu[i] == approx(central_difference(f, rho[i], h=1e-8), rel=1e-6))
    sub = gc.subset([1])
    assert(sub.reduced_helmholtz_energy_density([rho[1]], T)
           == approx(gc.reduced_helmholtz_energy_density([0.0, rho[1]], T), rel=1e-10))


def test_max_density():
    """The packing fraction counts every segment"""
    assert(GcPcSaftFunctional(gc_dimer_params()).compute_max_density([1.0])
           == approx(dimer_reference().compute_max_density([1.0])))
    p = gc_mixture_params()
    gc = GcPcSaftFunctional(p)
    x = np.array([0.3, 0.7])
    vol = np.sum(np.pi / 6 * p.m * p.sigma**3 * x[p.component_index])
    assert(gc.compute_max_density(x) == approx(0.5 / vol))
    assert(gc.compute_max_density(10 * x) == approx(gc.compute_max_density(x)))
