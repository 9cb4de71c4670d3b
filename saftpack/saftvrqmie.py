"""
The SAFT-VRQ Mie Helmholtz energy functional, see
    * Aasen et al., J. Chem. Phys. 151, 064508 (2019) (SAFT-VRQ Mie)
    * Lafitte et al., J. Chem. Phys. 139, 154504 (2013) (SAFT-VR Mie dispersion)

Quantum effects enter through the Feynman-Hibbs corrected Mie potential

    u(r) = C eps sum_k p_k (sigma / r)^lambda_k,

where the terms (lambda_k, p_k) are (lr, 1), (la, -1) for the classical potential, and the first and second order
corrections add terms with exponents lr + 2, la + 2 and lr + 4, la + 4. The corrections are proportional to
D = hbar^2 / (12 mu k_B T), so that the potential, and everything derived from it, depends on temperature.
"""
import numpy as np
from scipy.constants import hbar, Boltzmann
from scipy.optimize import brentq
from saftpack import dual
from saftpack.Functional import FunctionalContribution, HelmholtzEnergyFunctional, PairPotential, FluidParameters, \
    MoleculeShape
from saftpack.WeightFunction import NormTheta, Delta, DeltaVec, Heaviside
from saftpack.hardsphere import FMTVersion, FMTContribution, PureFMTFunctional
from saftpack.association import contact_value, inhomogeneity_factor
from saftpack.options import SaftVRQMieOptions, FeynmanHibbsOrder
from saftpack.registry import register_functional

PSI_DISP = 1.3862
N_QUADRATURE = 30 # Gauss-Legendre points for the Barker-Henderson diameter
BH_CUTOFF = 34.5 # beta u at the lower integration limit of the Barker-Henderson integral

# Coefficients of the effective packing fraction, rows are c_1 ... c_4, columns multiply 1 / lambda^0 ... 1 / lambda^3
C_ETA = np.array([[0.81096, 1.7888, -37.578, 92.284],
                  [1.0205, -19.341, 151.26, -463.50],
                  [-1.9057, 22.845, -228.14, 973.92],
                  [1.0885, -6.1962, 106.98, -677.64]])

# Coefficients of f_1 ... f_6 (columns) as functions of alpha, rows are n = 0 ... 6
PHI = np.array([[7.5365557, -359.44, 1550.9, -1.19932, -1911.28, 9236.9],
                [-37.60463, 1825.6, -5070.1, 9.063632, 21390.175, -129430.0],
                [71.745953, -3168.0, 6534.6, -17.9482, -51320.7, 357230.0],
                [-46.83552, 1884.2, -3288.7, 11.34027, 37064.54, -315530.0],
                [-2.467982, -0.82376, -2.7171, 20.52142, 1103.742, 1390.2],
                [-0.50272, -3.1935, 2.0883, -56.6377, -3264.61, -4518.2],
                [8.0956883, 3.7090, 0.0, 40.53683, 2556.181, 4241.6]])


def mie_prefactor(lr, la):
    return lr / (lr - la) * (lr / la)**(la / (lr - la))


def f_alpha(alpha):
    """Internal
    The functions f_1 ... f_6 of alpha used by the correction factor chi and the third order term.

    Returns:
        list : f_1 ... f_6
    """
    f = []
    for k in range(6):
        num = PHI[0, k] + PHI[1, k] * alpha + PHI[2, k] * alpha**2 + PHI[3, k] * alpha**3
        den = 1 + PHI[4, k] * alpha + PHI[5, k] * alpha**2 + PHI[6, k] * alpha**3
        f.append(num / den)
    return f


class FeynmanHibbsProperties:
    """
    Temperature dependent properties of the Feynman-Hibbs corrected Mie potential: effective diameter (root of the
    potential), effective well depth and Barker-Henderson hard sphere diameter of each pair of components.

    Roots are located with brentq at the real part of the temperature, and refined with two Newton steps evaluated with
    the (possibly dual) temperature, so that temperature derivatives propagate to all properties.
    """

    def __init__(self, parameters, fh_order=FeynmanHibbsOrder.FH1):
        """Constructor
        Args:
            parameters (SaftVRQMieParameters) : The parameters
            fh_order (FeynmanHibbsOrder) : Order of the quantum correction
        """
        self.parameters = parameters
        self.fh_order = FeynmanHibbsOrder(fh_order)
        self.ncomps = parameters.ncomps
        self.m = parameters.m
        self.sigma = parameters.sigma
        self.x, self.w = np.polynomial.legendre.leggauss(N_QUADRATURE)

    def quantum_parameter(self, i, j, T):
        """Utility
        D / sigma_ij^2, with D = hbar^2 / (12 mu_ij k_B T) [-]
        """
        return hbar**2 / (12 * self.parameters.reduced_mass_ij[i, j] * Boltzmann * T) * 1e20 \
            / self.parameters.sigma_ij[i, j]**2

    def terms(self, i, j, T):
        """Internal
        Exponents and prefactors of the terms of the potential between components i and j.

        Returns:
            list[tuple] : (lambda_k, p_k)
        """
        lr, la = self.parameters.lr_ij[i, j], self.parameters.la_ij[i, j]
        terms = [(lr, 1.0), (la, -1.0)]
        if self.fh_order >= FeynmanHibbsOrder.FH1:
            D = self.quantum_parameter(i, j, T)
            terms += [(lr + 2, lr * (lr - 1) * D), (la + 2, - la * (la - 1) * D)]
            if self.fh_order >= FeynmanHibbsOrder.FH2:
                terms += [(lr + 4, 0.5 * (lr + 2) * (lr + 1) * lr * (lr - 1) * D**2),
                          (la + 4, - 0.5 * (la + 2) * (la + 1) * la * (la - 1) * D**2)]
        return terms

    def potential(self, i, j, r, T, deriv=0):
        """Utility
        The potential [K] (deriv = 0), or its first or second derivative with respect to r, between components i and j.
        r and T may be dual numbers.
        """
        p = self.parameters
        sigma = p.sigma_ij[i, j]
        C = mie_prefactor(p.lr_ij[i, j], p.la_ij[i, j])
        u = 0.0
        with np.errstate(over='ignore'):
            for lam, pk in self.terms(i, j, T):
                term = pk * (sigma / r)**lam
                if deriv == 1:
                    term = - lam * term / r
                elif deriv == 2:
                    term = lam * (lam + 1) * term / r**2
                u = u + term
        return C * p.epsilon_k_ij[i, j] * u

    def _root(self, f, df, a, b, T):
        T_re = dual.re(T)
        r = brentq(lambda x: f(x, T_re), a, b, xtol=1e-14)
        for _ in range(2):
            r = r - f(r, T) / df(r, T)
        return r

    def sigma_eff(self, i, j, T):
        """Utility
        Distance where the potential vanishes [Å]
        """
        s = self.parameters.sigma_ij[i, j]
        return self._root(lambda r, t: self.potential(i, j, r, t), lambda r, t: self.potential(i, j, r, t, deriv=1),
                          0.5 * s, 3 * s, T)

    def r_min(self, i, j, T):
        """Utility
        Position of the potential minimum [Å]
        """
        s = self.parameters.sigma_ij[i, j]
        return self._root(lambda r, t: self.potential(i, j, r, t, deriv=1),
                          lambda r, t: self.potential(i, j, r, t, deriv=2),
                          dual.re(self.sigma_eff(i, j, dual.re(T))), 3 * s, T)

    def epsilon_eff(self, i, j, T):
        """Utility
        Depth of the potential well [K]
        """
        return - self.potential(i, j, self.r_min(i, j, T), T)

    def hs_diameter_ij(self, i, j, T):
        """Utility
        Barker-Henderson diameter of the pair potential between i and j [Å]

            d = r0 + int_r0^sigma_eff (1 - exp(-u / T)) dr,

        where exp(-u(r0) / T) is negligible.
        """
        s_eff = self.sigma_eff(i, j, T)
        T_re = dual.re(T)
        r0 = brentq(lambda r: self.potential(i, j, r, T_re) / T_re - BH_CUTOFF, 0.1 * self.parameters.sigma_ij[i, j],
                    dual.re(s_eff), xtol=1e-12)
        r = r0 + (s_eff - r0) * (self.x + 1) / 2
        with np.errstate(over='ignore', under='ignore'):
            integrand = 1 - dual.exp(- self.potential(i, j, r, T) / T)
        return r0 + (s_eff - r0) / 2 * (integrand * self.w).sum()

    def hs_diameter(self, T):
        """Utility
        Barker-Henderson diameter of each component [Å]
        """
        return dual.stack([self.hs_diameter_ij(i, i, T) for i in range(self.ncomps)])


def dispersion_terms(p, props, i, j, T, zeta_x, d_ij):
    """Internal
    First and second order dispersion terms a1 and a2 of the pair (i, j), divided by the segment density.

    Returns:
        tuple : a1 [K Å^3], a2 [K^2 Å^3]
    """
    eps = p.epsilon_k_ij[i, j]
    C = mie_prefactor(p.lr_ij[i, j], p.la_ij[i, j])
    x0 = p.sigma_ij[i, j] / d_ij
    one_m_z = 1 - zeta_x
    hs1 = (1 - zeta_x / 2) / one_m_z**3
    hs2 = 9 * zeta_x * (1 + zeta_x) / (2 * one_m_z**3)

    def a1s_B(lam):
        inv = 1 / lam
        c = [C_ETA[k, 0] + C_ETA[k, 1] * inv + C_ETA[k, 2] * inv**2 + C_ETA[k, 3] * inv**3 for k in range(4)]
        eta_eff = c[0] * zeta_x + c[1] * zeta_x**2 + c[2] * zeta_x**3 + c[3] * zeta_x**4
        a1s = - 2 * np.pi * eps * d_ij**3 / (lam - 3) * (1 - eta_eff / 2) / (1 - eta_eff)**3
        I = - (x0**(3 - lam) - 1) / (lam - 3)
        J = - (x0**(4 - lam) * (lam - 3) - x0**(3 - lam) * (lam - 4) - 1) / ((lam - 3) * (lam - 4))
        B = 2 * np.pi * eps * d_ij**3 * (hs1 * I - hs2 * J)
        return x0**lam * (a1s + B)

    terms = props.terms(i, j, T)
    a1 = 0.0
    for lam, pk in terms:
        a1 = a1 + pk * a1s_B(lam)
    a2 = 0.0
    for lam_k, pk in terms:
        for lam_l, pl in terms:
            a2 = a2 + pk * pl * a1s_B(lam_k + lam_l)
    return C * a1, 0.5 * eps * C**2 * a2


def mie_dispersion(T, n, p, props):
    """Helmholtz contribution
    Reduced SAFT-VRQ Mie dispersion Helmholtz energy density [1 / Å^3]

        phi = rho sum_ij x_i x_j (a1_ij / T + a2_ij / T^2 + a3_ij / T^3)

    Args:
        T : Temperature [K]
        n (list) : Weighted density of each component [1 / Å^3]
        p (SaftVRQMieParameters) : The parameters
        props (FeynmanHibbsProperties) : Potential properties
    """
    N = len(n)
    rho = sum(n[1:], n[0])
    x = [dual.where(dual.re(rho) > 0, n[i] / rho, 1 / N) for i in range(N)]
    d_ij = [[props.hs_diameter_ij(i, j, T) if j >= i else None for j in range(N)] for i in range(N)]
    s_eff = [[props.sigma_eff(i, j, T) if j >= i else None for j in range(N)] for i in range(N)]
    for i in range(N):
        for j in range(i):
            d_ij[i][j] = d_ij[j][i]
            s_eff[i][j] = s_eff[j][i]

    zeta_x_rho, zeta_bar_rho = 0.0, 0.0
    for i in range(N):
        for j in range(N):
            zeta_x_rho = zeta_x_rho + np.pi / 6 * x[i] * x[j] * d_ij[i][j]**3
            zeta_bar_rho = zeta_bar_rho + np.pi / 6 * x[i] * x[j] * s_eff[i][j]**3
    zeta_x = rho * zeta_x_rho
    zeta_bar = rho * zeta_bar_rho
    K_hs = (1 - zeta_x)**4 / (1 + 4 * zeta_x + 4 * zeta_x**2 - 4 * zeta_x**3 + zeta_x**4)

    a = 0.0
    for i in range(N):
        for j in range(N):
            a1, a2 = dispersion_terms(p, props, i, j, T, zeta_x, d_ij[i][j])
            eps_eff = props.epsilon_eff(i, j, T)
            C = mie_prefactor(p.lr_ij[i, j], p.la_ij[i, j])
            alpha = 0.0
            for lam, pk in props.terms(i, j, T):
                alpha = alpha - pk * (p.sigma_ij[i, j] / s_eff[i][j])**lam / (lam - 3)
            alpha = C * p.epsilon_k_ij[i, j] / eps_eff * alpha
            f = f_alpha(alpha)
            chi = f[0] * zeta_bar + f[1] * zeta_bar**5 + f[2] * zeta_bar**8
            a2 = K_hs * (1 + chi) * a2
            a3 = - eps_eff**3 * f[3] * zeta_bar_rho * dual.exp(f[4] * zeta_bar + f[5] * zeta_bar**2)
            a = a + x[i] * x[j] * (a1 / T + a2 / T**2 + a3 / T**3)
    return rho * rho * a


class AttractiveFunctional(FunctionalContribution):
    """
    SAFT-VRQ Mie dispersion for any number of components. `parameters` are the SaftVRQMieParameters, the potential
    properties are held separately.
    """

    def __init__(self, parameters, properties):
        super().__init__(parameters)
        self.properties = properties

    def get_weights(self, T):
        d = self.properties.hs_diameter(T)
        N = self.parameters.ncomps
        w = [[None for _ in range(N)] for _ in range(N)]
        for i in range(N):
            w[i][i] = NormTheta(d[i] * PSI_DISP)
        return w

    def helmholtz_energy_density(self, T, n):
        return mie_dispersion(T, n, self.parameters, self.properties)


class PureAttFunctional(AttractiveFunctional):
    """
    SAFT-VRQ Mie dispersion for a single component.
    """

    def helmholtz_energy_density(self, T, n):
        p, props = self.parameters, self.properties
        n = n[0]
        d = props.hs_diameter_ij(0, 0, T)
        s_eff = props.sigma_eff(0, 0, T)
        eps_eff = props.epsilon_eff(0, 0, T)
        zeta_x = np.pi / 6 * n * d**3
        zeta_bar_rho = np.pi / 6 * s_eff**3
        zeta_bar = n * zeta_bar_rho
        K_hs = (1 - zeta_x)**4 / (1 + 4 * zeta_x + 4 * zeta_x**2 - 4 * zeta_x**3 + zeta_x**4)
        a1, a2 = dispersion_terms(p, props, 0, 0, T, zeta_x, d)
        C = mie_prefactor(p.lr[0], p.la[0])
        alpha = 0.0
        for lam, pk in props.terms(0, 0, T):
            alpha = alpha - pk * (p.sigma[0] / s_eff)**lam / (lam - 3)
        f = f_alpha(C * p.epsilon_k[0] / eps_eff * alpha)
        chi = f[0] * zeta_bar + f[1] * zeta_bar**5 + f[2] * zeta_bar**8
        a3 = - eps_eff**3 * f[3] * zeta_bar_rho * dual.exp(f[4] * zeta_bar + f[5] * zeta_bar**2)
        return n * n * (a1 / T + K_hs * (1 + chi) * a2 / T**2 + a3 / T**3)


class NonAddHardSphereFunctional(FunctionalContribution):
    """
    First order correction for the non-additivity of the hard sphere diameters, d_ij != (d_i + d_j) / 2, of a
    mixture:

        phi = 2 pi sum_ij rho_i rho_j d_ij_add^2 g_ij(d_ij_add) (d_ij - d_ij_add)

    The weighted densities are the molecular density of each component (delta shell weights normalised to unit
    integral), and the total FMT weighted densities n2, n3 and nv2 for the contact values.
    """

    def __init__(self, parameters, properties):
        super().__init__(parameters)
        self.properties = properties

    def get_weights(self, T):
        d = self.properties.hs_diameter(T)
        N = self.parameters.ncomps
        R = [d[i] / 2 for i in range(N)]
        w = [[None for _ in range(N)] for _ in range(N + 3)]
        for i in range(N):
            w[i][i] = Delta(R[i]) / (4 * np.pi * R[i]**2)
            w[N][i] = Delta(R[i])
            w[N + 1][i] = Heaviside(R[i])
            w[N + 2][i] = DeltaVec(R[i])
        return w

    def helmholtz_energy_density(self, T, n):
        N = self.parameters.ncomps
        n0 = n[:N]
        n2, n3, nv2 = n[N:]
        xi = inhomogeneity_factor(n2, nv2)
        d = [self.properties.hs_diameter_ij(i, i, T) for i in range(N)]
        phi = 0.0
        for i in range(N):
            for j in range(i + 1, N):
                d_add = (d[i] + d[j]) / 2
                g = contact_value(n2, n3, xi, d[i] * d[j] / (d[i] + d[j]))
                delta = self.properties.hs_diameter_ij(i, j, T) - d_add
                phi = phi + 4 * np.pi * n0[i] * n0[j] * d_add**2 * g * delta
        return phi


@register_functional('saftvrqmie')
class SaftVRQMieFunctional(HelmholtzEnergyFunctional, PairPotential, FluidParameters):

    def __init__(self, parameters, fmt_version=FMTVersion.WhiteBear, options=None):
        """Constructor
        SAFT-VRQ Mie Helmholtz energy functional, for spherical molecules without association.

        Args:
            parameters (SaftVRQMieParameters) : The parameters
            fmt_version (FMTVersion, optional) : Version of FMT, defaults to WhiteBear
            options (SaftVRQMieOptions, optional) : Model options
        """
        options = SaftVRQMieOptions() if options is None else options
        self.properties = FeynmanHibbsProperties(parameters, options.fh_order)
        super().__init__(parameters, options, FMTVersion(fmt_version))

    def _assemble(self):
        p, props = self.parameters, self.properties
        if self.fmt_version in (FMTVersion.WhiteBear, FMTVersion.AntiSymWhiteBear) and p.ncomps == 1:
            return [PureFMTFunctional(props, self.fmt_version), PureAttFunctional(p, props)]

        contributions = [FMTContribution(props, self.fmt_version)]
        if self.options.include_non_additive_term:
            contributions.append(NonAddHardSphereFunctional(p, props))
        contributions.append(AttractiveFunctional(p, props))
        return contributions

    def molecule_shape(self):
        return MoleculeShape.NonSpherical(self.parameters.m)

    def pair_potential(self, i, r, T):
        """Utility
        Feynman-Hibbs corrected Mie potential between component i and all components [K], at temperature T.
        """
        r = np.asarray(r, dtype=float)
        return np.array([self.properties.potential(i, j, r, T) for j in range(self.ncomps)])

    def epsilon_k_ff(self):
        return np.array(self.parameters.epsilon_k)

    def sigma_ff(self):
        return np.array(self.parameters.sigma)
