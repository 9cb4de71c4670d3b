import numpy as np
from saftpack import PcSaftParameters, PetsParameters, SaftVRQMieParameters, GcPcSaftFunctionalParameters, \
    AssociationRecord, JobackRecord, Profile

FLTEPS = 1e-10
def is_equal(a, b):
    return abs(a - b) < FLTEPS

def is_equal_arr(a, b):
    return all(abs(np.asarray(a) - np.asarray(b)) < FLTEPS)

def central_difference(f, x, h=1e-5):
    return (f(x + h) - f(x - h)) / (2 * h)

def tanh_profiles(grid, inner, outer, width=1.5):
    """Profiles going smoothly from the inner to the outer densities, with the interface at the middle of the domain"""
    shape = (1 - np.tanh((grid.z - grid.domain_start - grid.L / 2) / width)) / 2
    return [Profile(o + (i - o) * shape, grid) for i, o in zip(inner, outer)]

# Pure component parameters (m, sigma, epsilon_k, molarweight)
PCSAFT = {'C1': (1.0, 3.7039, 150.03, 16.043),
          'C3': (2.002, 3.6184, 208.11, 44.096),
          'NC6': (3.0576, 3.7983, 236.77, 86.177),
          'N2': (1.2053, 3.313, 90.96, 28.014)}
WATER = {'m': 1.0656, 'sigma': 3.0007, 'epsilon_k': 366.51, 'molarweight': 18.015,
         'association': AssociationRecord(0.034868, 2500.7, na=1, nb=1)}
METHANOL = {'m': 1.5255, 'sigma': 3.23, 'epsilon_k': 188.9, 'molarweight': 32.042,
            'association': AssociationRecord(0.035176, 2899.5, na=1, nb=1)}
DME = {'m': 2.2634, 'sigma': 3.2723, 'epsilon_k': 210.29, 'molarweight': 46.069, 'mu': 1.3} # dimethyl ether
CO2 = {'m': 1.5131, 'sigma': 3.1869, 'epsilon_k': 163.33, 'molarweight': 44.01, 'q': 4.4}
METHANE_JOBACK = JobackRecord(19.25, 0.05213, 1.197e-5, -1.132e-8, 0.0)

# Feynman-Hibbs corrected Mie parameters (sigma, epsilon_k, lr, la, molarweight)
VRQMIE = {'H2': (3.0243, 26.706, 9.0, 6.0, 2.0157),
          'NE': (2.7778, 37.501, 13.0, 6.0, 20.179)}

singlecomps = ['C1', 'C3', 'NC6']
binaries = ['C1,C3', 'C1,N2', 'C3,NC6']


def pcsaft_params(comps, **kwargs):
    comps = comps.split(',')
    m, sigma, eps, mw = (list(v) for v in zip(*[PCSAFT[c] for c in comps]))
    return PcSaftParameters(m, sigma, eps, molarweight=mw, **kwargs)


def record_params(*records, **kwargs):
    """Parameters from dicts such as WATER and DME"""
    keys = ('m', 'sigma', 'epsilon_k', 'molarweight')
    args = [[r[k] for r in records] for k in keys]
    mu = [r.get('mu', 0.0) for r in records]
    q = [r.get('q', 0.0) for r in records]
    association = [r.get('association') for r in records]
    if all(a is None for a in association):
        association = None
    return PcSaftParameters(*args, mu=mu, q=q, association=association, **kwargs)


def pets_params(ncomps=1):
    sigma = [3.4050, 3.6][:ncomps]
    eps = [119.8, 140.0][:ncomps]
    return PetsParameters(sigma, eps, molarweight=[39.948, 50.0][:ncomps])


def vrqmie_params(comps, **kwargs):
    comps = comps.split(',')
    sigma, eps, lr, la, mw = (list(v) for v in zip(*[VRQMIE[c] for c in comps]))
    return SaftVRQMieParameters([1.0] * len(comps), sigma, eps, lr, la, mw, **kwargs)


def gc_dimer_params():
    """Two identical, bonded segments: The same molecule as a PC-SAFT chain with m = 2."""
    return GcPcSaftFunctionalParameters([1.0, 1.0], [3.7039, 3.7039], [150.03, 150.03], [0, 0], [(0, 1)],
                                        molarweight=[32.086])


def gc_mixture_params():
    """Propane-like (CH3-CH2-CH3) and methane-like molecules"""
    return GcPcSaftFunctionalParameters([0.6, 0.5, 0.6, 1.0], [3.6, 3.8, 3.6, 3.7039], [190.0, 240.0, 190.0, 150.03],
                                        [0, 0, 0, 1], [(0, 1), (1, 2)], molarweight=[44.096, 16.043])
