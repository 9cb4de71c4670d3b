"""
Hard sphere contributions from Fundamental Measure Theory (FMT), and the pure hard sphere functional.

The White Bear and anti-symmetrised White Bear versions use the scalar weighted densities (n0, n1, n2, n3) and the
vector weighted densities (nv1, nv2), while the Kierlik-Rosinberg version only uses scalar weighted densities.
The contributions take the species diameters from `parameters.hs_diameter(T)` and the segment numbers from
`parameters.m`, so they are shared by all SAFT models.
"""
from enum import IntEnum
import numpy as np
from saftpack import dual
from saftpack.Functional import FunctionalContribution, HelmholtzEnergyFunctional, PairPotential, FluidParameters
from saftpack.WeightFunction import get_FMT_weights, get_KR_weights, Delta, DeltaVec, Heaviside
from saftpack.association import association_helmholtz_energy_density, inhomogeneity_factor
from saftpack.options import FMTOptions
from saftpack.registry import register_functional


class FMTVersion(IntEnum):
    WhiteBear = 1
    KierlikRosinberg = 2
    AntiSymWhiteBear = 3


def whitebear_f3(n3):
    """Internal
    The function (n3 + (1 - n3)^2 ln(1 - n3)) / (36 pi n3^2 (1 - n3)^2) of the White Bear functional, with a series
    expansion for small n3.
    """
    series = (1 / 24 + 2 * n3 / 27 + 5 * n3**2 / 48) / np.pi
    exact = (n3 + (1 - n3)**2 * dual.log(1 - n3)) / (36 * np.pi * n3**2 * (1 - n3)**2)
    return dual.where(dual.re(n3) < 1e-5, series, exact)


def fmt_helmholtz_energy_density(version, n0, n1, n2, n3, nv1=0.0, nv2=0.0):
    """Helmholtz contribution
    Reduced hard sphere Helmholtz energy density [1 / Å^3]

    Args:
        version (FMTVersion) : FMT version
        n0, n1, n2, n3 : Scalar weighted densities
        nv1, nv2 : Vector weighted densities (ignored by Kierlik-Rosinberg)
    """
    one_m_n3 = 1 - n3
    phi1 = - n0 * dual.log(one_m_n3)
    if version == FMTVersion.KierlikRosinberg:
        phi2 = n1 * n2 / one_m_n3
        phi3 = n2**3 / (24 * np.pi * one_m_n3**2)
        return phi1 + phi2 + phi3

    phi2 = (n1 * n2 - nv1 * nv2) / one_m_n3
    if version == FMTVersion.WhiteBear:
        phi3 = (n2**3 - 3 * n2 * nv2 * nv2) * whitebear_f3(n3)
    else:
        phi3 = n2**3 * inhomogeneity_factor(n2, nv2)**3 * whitebear_f3(n3)
    return phi1 + phi2 + phi3


class FMTContribution(FunctionalContribution):
    """
    Hard sphere contribution for any number of species, in any FMT version.
    """

    def __init__(self, parameters, version=FMTVersion.WhiteBear):
        super().__init__(parameters)
        self.version = FMTVersion(version)

    def __repr__(self):
        return f'{self.name}({self.version.name})'

    def get_weights(self, T):
        """Weights
        FMT weights, (w0, w1, w2, w3, wv1, wv2) for the White Bear versions and (w0, w1, w2, w3) for
        Kierlik-Rosinberg, indexed as w[<wt idx>][<species idx>].
        """
        d = self.parameters.hs_diameter(T)
        R = [d[i] / 2 for i in range(len(self.parameters.m))]
        if self.version == FMTVersion.KierlikRosinberg:
            return get_KR_weights(R, self.parameters.m)
        return get_FMT_weights(R, self.parameters.m)

    def helmholtz_energy_density(self, T, n):
        return fmt_helmholtz_energy_density(self.version, *n)


class PureFMTAssocFunctional(FunctionalContribution):
    """
    Hard sphere (and optionally association) contribution for a single component, using only the weighted
    densities n2, n3 and nv2. The remaining FMT weighted densities follow from

        n0 = n2 / (pi d^2), n1 = n2 / (2 pi d), nv1 = nv2 / (2 pi d)

    Only valid for the White Bear versions of FMT.
    """

    def __init__(self, parameters, version=FMTVersion.WhiteBear, association=None):
        """Constructor
        Args:
            parameters (Parameters) : Single component parameters
            version (FMTVersion) : WhiteBear or AntiSymWhiteBear
            association (tuple(int, float), optional) : Iteration cap and tolerance, if the component associates.
        """
        super().__init__(parameters)
        if version == FMTVersion.KierlikRosinberg:
            raise ValueError('The single component FMT contribution is only available for the White Bear versions.')
        self.version = FMTVersion(version)
        self.association = association

    def __repr__(self):
        return f'{self.name}({self.version.name})'

    def get_weights(self, T):
        d = self.parameters.hs_diameter(T)[0]
        m = self.parameters.m[0]
        R = d / 2
        return [[m * Delta(R)], [m * Heaviside(R)], [m * DeltaVec(R)]]

    def helmholtz_energy_density(self, T, n):
        n2, n3, nv2 = n
        d = self.parameters.hs_diameter(T)[0]
        n0 = n2 / (np.pi * d**2)
        n1 = n2 / (2 * np.pi * d)
        nv1 = nv2 / (2 * np.pi * d)
        phi = fmt_helmholtz_energy_density(self.version, n0, n1, n2, n3, nv1, nv2)
        if self.association is None:
            return phi

        max_iter, tol = self.association
        xi = inhomogeneity_factor(n2, nv2)
        rho0 = n0 * xi / self.parameters.m[0]
        return phi + association_helmholtz_energy_density(T, self.parameters.association, [d], [rho0], n2, n3, xi,
                                                          max_iter, tol)


class PureFMTFunctional(PureFMTAssocFunctional):
    """
    Single component hard sphere contribution without association.
    """

    def __init__(self, parameters, version=FMTVersion.WhiteBear):
        super().__init__(parameters, version=version)


@register_functional('fmt')
class FMTFunctional(HelmholtzEnergyFunctional, PairPotential, FluidParameters):

    def __init__(self, parameters, fmt_version=FMTVersion.WhiteBear, options=None):
        """Constructor
        Functional for a mixture of additive hard spheres.

        Args:
            parameters (HardSphereParameters) : Hard sphere diameters
            fmt_version (FMTVersion) : Version of FMT
            options (FMTOptions, optional) : Model options
        """
        super().__init__(parameters, FMTOptions() if options is None else options, FMTVersion(fmt_version))

    def _assemble(self):
        return [FMTContribution(self.parameters, self.fmt_version)]

    def pair_potential(self, i, r, T):
        """Utility
        Hard sphere potential between component i and all components: inf inside contact, zero outside.
        """
        r = np.asarray(r, dtype=float)
        sigma = self.parameters.sigma
        sigma_ij = 0.5 * (sigma[i] + sigma)
        return np.where(r[None, :] < sigma_ij[:, None], np.inf, 0.0)

    def epsilon_k_ff(self):
        return np.zeros(self.ncomps)

    def sigma_ff(self):
        return np.array(self.parameters.sigma)
