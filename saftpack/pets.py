"""
The PeTS (perturbed truncated and shifted Lennard-Jones) Helmholtz energy functional, see Heier et al.,
Mol. Phys. 116, 2083 (2018). The dispersion weighted density is averaged over a sphere of radius psi * d_i,
with psi = 1.21.
"""
import numpy as np
from saftpack.Functional import FunctionalContribution, HelmholtzEnergyFunctional, PairPotential, FluidParameters
from saftpack.WeightFunction import NormTheta
from saftpack.hardsphere import FMTVersion, FMTContribution, PureFMTFunctional
from saftpack.pcsaft import lennard_jones
from saftpack.options import PetsOptions
from saftpack.registry import register_functional

PSI_DISP = 1.21
CUTOFF = 2.5 # Truncation radius of the potential, in units of sigma

A = np.array([0.690603404, 1.189317012, 1.265604153, -24.34554201, 93.67300357, -157.8773415, 96.93736697])
B = np.array([0.664852128, 2.10733079, -9.597951213, -17.37871193, 30.17506222, 209.3942909, -353.2743581])


def pets_dispersion(T, n, d, sigma_ij, epsilon_k_ij):
    """Helmholtz contribution
    Reduced PeTS dispersion Helmholtz energy density [1 / Å^3]

    Args:
        T : Temperature [K]
        n (list) : Weighted density of each component [1 / Å^3]
        d (list) : Hard sphere diameters [Å]
        sigma_ij, epsilon_k_ij (2d array) : Pair parameters
    """
    eta = 0.0
    for i in range(len(n)):
        eta = eta + np.pi / 6 * n[i] * d[i]**3
    I1, I2 = 0.0, 0.0
    for i in range(len(A)):
        eta_i = eta**i
        I1 = I1 + A[i] * eta_i
        I2 = I2 + B[i] * eta_i
    C1 = 1 / (1 + (8 * eta - 2 * eta**2) / (1 - eta)**4)

    es3, e2s3 = 0.0, 0.0
    for i in range(len(n)):
        for j in range(len(n)):
            eps_T = epsilon_k_ij[i, j] / T
            nn = n[i] * n[j] * sigma_ij[i, j]**3
            es3 = es3 + nn * eps_T
            e2s3 = e2s3 + nn * eps_T**2
    return - 2 * np.pi * I1 * es3 - np.pi * C1 * I2 * e2s3


class AttractiveFunctional(FunctionalContribution):
    """
    PeTS dispersion for any number of components.
    """

    def get_weights(self, T):
        p = self.parameters
        d = p.hs_diameter(T)
        w = [[None for _ in range(p.ncomps)] for _ in range(p.ncomps)]
        for i in range(p.ncomps):
            w[i][i] = NormTheta(d[i] * PSI_DISP)
        return w

    def helmholtz_energy_density(self, T, n):
        p = self.parameters
        d = p.hs_diameter(T)
        return pets_dispersion(T, n, [d[i] for i in range(p.ncomps)], p.sigma_ij, p.epsilon_k_ij)


class PureAttFunctional(AttractiveFunctional):
    """
    PeTS dispersion for a single component.
    """

    def helmholtz_energy_density(self, T, n):
        p = self.parameters
        n = n[0]
        d = p.hs_diameter(T)[0]
        eps_T = p.epsilon_k[0] / T
        eta = np.pi / 6 * n * d**3
        I1, I2 = 0.0, 0.0
        for i in range(len(A)):
            eta_i = eta**i
            I1 = I1 + A[i] * eta_i
            I2 = I2 + B[i] * eta_i
        C1 = 1 / (1 + (8 * eta - 2 * eta**2) / (1 - eta)**4)
        return (- 2 * np.pi * I1 - np.pi * C1 * I2 * eps_T) * n * n * eps_T * p.sigma[0]**3


@register_functional('pets')
class PetsFunctional(HelmholtzEnergyFunctional, PairPotential, FluidParameters):

    def __init__(self, parameters, fmt_version=FMTVersion.WhiteBear, options=None):
        """Constructor
        PeTS Helmholtz energy functional.

        Args:
            parameters (PetsParameters) : The parameters
            fmt_version (FMTVersion, optional) : Version of FMT, defaults to WhiteBear
            options (PetsOptions, optional) : Model options
        """
        super().__init__(parameters, PetsOptions() if options is None else options, FMTVersion(fmt_version))

    def _assemble(self):
        p = self.parameters
        if self.fmt_version in (FMTVersion.WhiteBear, FMTVersion.AntiSymWhiteBear) and p.ncomps == 1:
            return [PureFMTFunctional(p, self.fmt_version), PureAttFunctional(p)]
        return [FMTContribution(p, self.fmt_version), AttractiveFunctional(p)]

    def pair_potential(self, i, r, T):
        """Utility
        Lennard-Jones potential, truncated and shifted at 2.5 sigma_ij [K].
        """
        r = np.asarray(r, dtype=float)
        sigma_ij = self.parameters.sigma_ij[i]
        epsilon_k_ij = self.parameters.epsilon_k_ij[i]
        u = lennard_jones(r, sigma_ij, epsilon_k_ij)
        u_cut = lennard_jones(np.array([1.0]), sigma_ij / (CUTOFF * sigma_ij), epsilon_k_ij)
        return np.where(r[None, :] < CUTOFF * sigma_ij[:, None], u - u_cut, 0.0)

    def epsilon_k_ff(self):
        return np.array(self.parameters.epsilon_k)

    def sigma_ff(self):
        return np.array(self.parameters.sigma)
