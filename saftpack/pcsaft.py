"""
The PC-SAFT Helmholtz energy functional, see
    * Sauer and Gross, Ind. Eng. Chem. Res. 56, 4119 (2017) (dispersion and chain)
    * Yu and Wu, J. Chem. Phys. 116, 7094 (2002) (association)

Dispersion and multipole contributions are evaluated from the weighted density rho_bar_i, averaged over a sphere of
radius psi * d_i, with psi = 1.3862 fitted by Sauer and Gross.
"""
import numpy as np
from saftpack import dual
from saftpack.Functional import FunctionalContribution, HelmholtzEnergyFunctional, PairPotential, FluidParameters
from saftpack.WeightFunction import NormTheta, Delta, Heaviside, LocalDensity
from saftpack.hardsphere import FMTVersion, FMTContribution, PureFMTAssocFunctional
from saftpack.association import AssociationFunctional
from saftpack.polar import polar_helmholtz_energy_density
from saftpack.options import PcSaftOptions, DQVariants
from saftpack.registry import register_functional

PSI_DISP = 1.3862

# Universal constants, rows are the coefficients for (m - 1) / m equal to 0, (m - 1) / m and (m - 1)(m - 2) / m^2
A = np.array([[0.91056314451539, 0.63612814494991, 2.68613478913903, -26.5473624914884, 97.7592087835073,
               -159.591540865600, 91.2977740839123],
              [-0.30840169182720, 0.18605311591713, -2.50300472586548, 21.4197936296668, -65.2558853303492,
               83.3186804808856, -33.7469229297323],
              [-0.09061483509767, 0.45278428063920, 0.59627007280101, -1.72418291311787, -4.13021125311661,
               13.7766318697211, -8.67284703679646]])
B = np.array([[0.72409469413165, 2.23827918609380, -4.00258494846342, -21.00357681484648, 26.85564136266150,
               206.55133840661881, -355.60235612207947],
              [-0.57554980753450, 0.69950955214436, 3.89256733895307, -17.21547164777212, 192.67226446524950,
               -161.82646164876479, -165.20769345556070],
              [0.09768831158356, -0.25575749816100, -9.15585615297321, 20.64207597439724, -38.80443005206285,
               93.62677407701460, -29.66690558514725]])


def dispersion_integrals(m_hat, eta):
    """Internal
    The integrals I1 and I2 of the dispersion term, and the compressibility term C1.

    Args:
        m_hat : Mean segment number
        eta : Packing fraction
    Returns:
        tuple : I1, I2, C1
    """
    m1 = (m_hat - 1) / m_hat
    m2 = m1 * (m_hat - 2) / m_hat
    I1, I2 = 0.0, 0.0
    for i in range(A.shape[1]):
        eta_i = eta**i
        I1 = I1 + (A[0, i] + m1 * A[1, i] + m2 * A[2, i]) * eta_i
        I2 = I2 + (B[0, i] + m1 * B[1, i] + m2 * B[2, i]) * eta_i
    C1 = 1 / (1 + m_hat * (8 * eta - 2 * eta**2) / (1 - eta)**4
              + (1 - m_hat) * (20 * eta - 27 * eta**2 + 12 * eta**3 - 2 * eta**4) / ((1 - eta) * (2 - eta))**2)
    return I1, I2, C1


def dispersion_helmholtz_energy_density(T, n, rho, d, sigma_ij, epsilon_k_ij):
    """Helmholtz contribution
    Reduced PC-SAFT dispersion Helmholtz energy density [1 / Å^3]

        phi = - 2 pi I1 sum_ij n_i n_j (eps_ij / T) sigma_ij^3 - pi m_hat C1 I2 sum_ij n_i n_j (eps_ij / T)^2 sigma_ij^3

    Args:
        T : Temperature [K]
        n (list) : Segment density of each species (m_i rho_i) [1 / Å^3]
        rho : Total molecular density [1 / Å^3]
        d (list) : Hard sphere diameter of each species [Å]
        sigma_ij, epsilon_k_ij (2d array) : Pair parameters
    """
    nspecies = len(n)
    eta = 0.0
    n_tot = 0.0
    for i in range(nspecies):
        eta = eta + np.pi / 6 * n[i] * d[i]**3
        n_tot = n_tot + n[i]
    m_hat = dual.where(dual.re(rho) > 0, n_tot / rho, 1.0)
    I1, I2, C1 = dispersion_integrals(m_hat, eta)

    es3, e2s3 = 0.0, 0.0
    for i in range(nspecies):
        for j in range(nspecies):
            eps_T = epsilon_k_ij[i, j] / T
            nn = n[i] * n[j] * sigma_ij[i, j]**3
            es3 = es3 + nn * eps_T
            e2s3 = e2s3 + nn * eps_T**2
    return - 2 * np.pi * I1 * es3 - np.pi * m_hat * C1 * I2 * e2s3


def cavity_function(d, zeta2, zeta3):
    """Internal
    Hard sphere cavity correlation function at contact, for spheres of diameter d in a mixture with the given
    packing fractions.
    """
    z3i = 1 / (1 - zeta3)
    return z3i + d / 2 * 3 * zeta2 * z3i**2 + (d / 2)**2 * 2 * zeta2**2 * z3i**3


def chain_site_term(rho, y, lam):
    """Internal
    rho ln(y lambda / rho), which vanishes with rho.
    """
    return dual.where(dual.re(rho) > 0, rho * dual.log(y * lam / rho), 0.0)


class ChainFunctional(FunctionalContribution):
    """
    Hard chain contribution for any number of species. The weighted densities are, in order
        * the local density rho_i of each species,
        * lambda_i, the density averaged over a spherical shell of radius d_i,
        * rho_hc_i, the density averaged over a sphere of radius d_i,
    and the Helmholtz energy density is

        phi = - sum_i (m_i - 1) rho_i ln(y_ii lambda_i / rho_i)
    """

    def get_weights(self, T):
        d = self.parameters.hs_diameter(T)
        N = len(self.parameters.m)
        w = [[None for _ in range(N)] for _ in range(3 * N)]
        for i in range(N):
            w[i][i] = LocalDensity()
            w[N + i][i] = Delta(d[i]) / (4 * np.pi * d[i]**2)
            w[2 * N + i][i] = Heaviside(d[i]) / (4 * np.pi * d[i]**3 / 3)
        return w

    def helmholtz_energy_density(self, T, n):
        m = self.parameters.m
        d = self.parameters.hs_diameter(T)
        N = len(m)
        zeta2, zeta3 = 0.0, 0.0
        for i in range(N):
            zeta2 = zeta2 + np.pi / 6 * m[i] * d[i]**2 * n[2 * N + i]
            zeta3 = zeta3 + np.pi / 6 * m[i] * d[i]**3 * n[2 * N + i]
        phi = 0.0
        for i in range(N):
            if m[i] == 1:
                continue
            y = cavity_function(d[i], zeta2, zeta3)
            phi = phi - (m[i] - 1) * chain_site_term(n[i], y, n[N + i])
        return phi


class PureChainFunctional(FunctionalContribution):
    """
    Hard chain contribution for a single component, with the weighted densities (rho, lambda, rho_hc).
    """

    def get_weights(self, T):
        d = self.parameters.hs_diameter(T)[0]
        return [[LocalDensity()], [Delta(d) / (4 * np.pi * d**2)], [Heaviside(d) / (4 * np.pi * d**3 / 3)]]

    def helmholtz_energy_density(self, T, n):
        rho, lam, rho_hc = n
        m = self.parameters.m[0]
        d = self.parameters.hs_diameter(T)[0]
        zeta3 = np.pi / 6 * m * d**3 * rho_hc
        y = cavity_function(d, zeta3 / d, zeta3)
        return - (m - 1) * chain_site_term(rho, y, lam)


class AttractiveFunctional(FunctionalContribution):
    """
    Dispersion and multipole contributions for any number of components, using one weighted density
    n_i = m_i rho_bar_i per component.
    """

    def __init__(self, parameters, combination_rule=DQVariants.DQ35):
        super().__init__(parameters)
        self.combination_rule = combination_rule

    def get_weights(self, T):
        """Weights
        m_i times the normalised Heaviside of radius psi * d_i, on the diagonal.
        """
        p = self.parameters
        d = p.hs_diameter(T)
        w = [[None for _ in range(p.ncomps)] for _ in range(p.ncomps)]
        for i in range(p.ncomps):
            w[i][i] = p.m[i] * NormTheta(d[i] * PSI_DISP)
        return w

    def helmholtz_energy_density(self, T, n):
        p = self.parameters
        d = p.hs_diameter(T)
        d = [d[i] for i in range(p.ncomps)]
        rho = [n[i] / p.m[i] for i in range(p.ncomps)]
        rho_tot = sum(rho[1:], rho[0])
        phi = dispersion_helmholtz_energy_density(T, n, rho_tot, d, p.sigma_ij, p.epsilon_k_ij)
        if p.has_dipoles or p.has_quadrupoles:
            eta = sum((np.pi / 6 * n[i] * d[i]**3 for i in range(1, p.ncomps)), np.pi / 6 * n[0] * d[0]**3)
            phi = phi + polar_helmholtz_energy_density(T, rho, eta, p, self.combination_rule)
        return phi


class PureAttFunctional(AttractiveFunctional):
    """
    Dispersion and multipole contributions for a single component, with a constant mean segment number.
    """

    def helmholtz_energy_density(self, T, n):
        p = self.parameters
        n = n[0]
        m = p.m[0]
        d = p.hs_diameter(T)[0]
        eps_T = p.epsilon_k[0] / T
        eta = np.pi / 6 * n * d**3
        I1, I2, C1 = dispersion_integrals(m, eta)
        phi = (- 2 * np.pi * I1 - np.pi * m * C1 * I2 * eps_T) * n * n * eps_T * p.sigma[0]**3
        if p.has_dipoles or p.has_quadrupoles:
            phi = phi + polar_helmholtz_energy_density(T, [n / m], eta, p, self.combination_rule)
        return phi


def lennard_jones(r, sigma, epsilon_k):
    """Utility
    Lennard-Jones potential [K], evaluated for r of shape (N,) and pair parameters of shape (ncomps,), giving shape
    (ncomps, N).
    """
    s6 = (sigma[:, None] / r[None, :])**6
    return 4 * epsilon_k[:, None] * (s6**2 - s6)


@register_functional('pcsaft')
class PcSaftFunctional(HelmholtzEnergyFunctional, PairPotential, FluidParameters):

    def __init__(self, parameters, fmt_version=FMTVersion.WhiteBear, options=None):
        """Constructor
        PC-SAFT Helmholtz energy functional. Single component systems described with the White Bear versions of FMT
        use contributions specialised for one component.

        Args:
            parameters (PcSaftParameters) : The parameters
            fmt_version (FMTVersion, optional) : Version of FMT, defaults to WhiteBear
            options (PcSaftOptions, optional) : Model options, defaults to PcSaftOptions()
        """
        super().__init__(parameters, PcSaftOptions() if options is None else options, FMTVersion(fmt_version))

    def _assemble(self):
        p, o = self.parameters, self.options
        assoc = len(p.association) > 0
        if self.fmt_version in (FMTVersion.WhiteBear, FMTVersion.AntiSymWhiteBear) and p.ncomps == 1:
            assoc_opts = (o.max_cross_association_iterations, o.cross_association_tolerance) if assoc else None
            contributions = [PureFMTAssocFunctional(p, self.fmt_version, association=assoc_opts)]
            if p.m[0] != 1:
                contributions.append(PureChainFunctional(p))
            contributions.append(PureAttFunctional(p, o.combination_rule))
            return contributions

        contributions = [FMTContribution(p, self.fmt_version)]
        if np.any(p.m != 1):
            contributions.append(ChainFunctional(p))
        contributions.append(AttractiveFunctional(p, o.combination_rule))
        if assoc:
            contributions.append(AssociationFunctional(p, o.max_cross_association_iterations,
                                                       o.cross_association_tolerance))
        return contributions

    def pair_potential(self, i, r, T):
        """Utility
        Lennard-Jones potential between component i and all components [K].
        """
        r = np.asarray(r, dtype=float)
        return lennard_jones(r, self.parameters.sigma_ij[i], self.parameters.epsilon_k_ij[i])

    def epsilon_k_ff(self):
        return np.array(self.parameters.epsilon_k)

    def sigma_ff(self):
        return np.array(self.parameters.sigma)
