"""Tests for building functionals by name."""
from saftpack import build_functional, available_functionals, FMTFunctional, PcSaftFunctional, PetsFunctional, \
    SaftVRQMieFunctional, GcPcSaftFunctional, HardSphereParameters, FMTVersion
from saftpack.registry import register_functional
from pytest import approx
import pytest
from tools import pcsaft_params, pets_params, vrqmie_params, gc_dimer_params


@pytest.mark.parametrize('inpt', [{"name": "fmt", "cls": FMTFunctional, "params": lambda: HardSphereParameters([3.0])},
                                  {"name": "pcsaft", "cls": PcSaftFunctional, "params": lambda: pcsaft_params('C1')},
                                  {"name": "pets", "cls": PetsFunctional, "params": pets_params},
                                  {"name": "saftvrqmie", "cls": SaftVRQMieFunctional,
                                   "params": lambda: vrqmie_params('H2')},
                                  {"name": "gc_pcsaft", "cls": GcPcSaftFunctional, "params": gc_dimer_params}])
def test_build(inpt):
    func = build_functional(inpt["name"], inpt["params"]())
    assert(type(func) is inpt["cls"])
    assert(func.fmt_version == FMTVersion.WhiteBear)


def test_build_kwargs():
    func = build_functional('pcsaft', pcsaft_params('C1,C3'), fmt_version=FMTVersion.KierlikRosinberg)
    assert(func.fmt_version == FMTVersion.KierlikRosinberg)
    ref = PcSaftFunctional(pcsaft_params('C1,C3'), fmt_version=FMTVersion.KierlikRosinberg)
    rho, T = [2e-3, 1e-3], 200.0
    assert(func.reduced_helmholtz_energy_density(rho, T) == approx(ref.reduced_helmholtz_energy_density(rho, T)))


def test_unknown_name():
    with pytest.raises(KeyError):
        build_functional('saft-vr-mie', pcsaft_params('C1'))


def test_duplicate_name():
    with pytest.raises(KeyError):
        @register_functional('pcsaft')
        class Duplicate(PcSaftFunctional):
            pass
    assert(build_functional('pcsaft', pcsaft_params('C1')).__class__ is PcSaftFunctional)


def test_available():
    names = available_functionals()
    assert(names == sorted(names))
    assert(set(names) >= {'fmt', 'gc_pcsaft', 'pcsaft', 'pets', 'saftvrqmie'})
