"""
Association contribution (Wertheim TPT1) in the formulation of Yu and Wu, J. Chem. Phys. 116, 7094 (2002).

The density of associating molecules is taken from a component specific weighted density, rho0_i = n0_i xi, with the
inhomogeneity factor xi = 1 - nv2^2 / n2^2, and the contact value of the hard sphere pair correlation function is
evaluated from the total FMT weighted densities.
"""
import numpy as np
from saftpack import dual
from saftpack.Functional import FunctionalContribution
from saftpack.WeightFunction import Delta, DeltaVec, Heaviside
from saftpack.exceptions import AssociationConvergenceError


def inhomogeneity_factor(n2, nv2):
    """Internal
    xi = 1 - (nv2 / n2)^2, which is unity in bulk and where n2 vanishes.
    """
    return dual.where(dual.re(n2) > 0, 1 - (nv2 / n2)**2, 1.0)


def contact_value(n2, n3, xi, mu):
    """Internal
    Contact value of the hard sphere pair correlation function (BMCSL), with the Yu-Wu inhomogeneity factor.

    Args:
        n2, n3 : FMT weighted densities
        xi : Inhomogeneity factor, 1 in bulk
        mu (float) : d_i d_j / (d_i + d_j) [Å]
    """
    one_m_n3 = 1 - n3
    return 1 / one_m_n3 + mu * n2 * xi / (2 * one_m_n3**2) + mu**2 * n2**2 * xi / (18 * one_m_n3**3)


def association_strength(T, assoc, d, n2, n3, xi):
    """Internal
    Association strength Delta_ij = sigma_ij^3 kappa_ij (exp(epsilon_ij / T) - 1) g_ij between all pairs of
    associating species.

    Args:
        T : Temperature [K]
        assoc (AssociationParameters) : The association parameters
        d (list) : Hard sphere diameters of the associating species [Å]
    Returns:
        list[list] : Delta_ij [Å^3]
    """
    nassoc = len(assoc)
    delta = [[None for _ in range(nassoc)] for _ in range(nassoc)]
    for i in range(nassoc):
        for j in range(i, nassoc):
            mu = d[i] * d[j] / (d[i] + d[j])
            delta[i][j] = assoc.sigma_ij[i, j]**3 * assoc.kappa_ab_ij[i, j] \
                          * dual.expm1(assoc.epsilon_k_ab_ij[i, j] / T) * contact_value(n2, n3, xi, mu)
            delta[j][i] = delta[i][j]
    return delta


def site_term(X):
    return dual.log(X) - X / 2 + 0.5


def association_helmholtz_energy_density(T, assoc, d, rho0, n2, n3, xi, max_iter, tol):
    """Helmholtz contribution
    Reduced association Helmholtz energy density

        phi = sum_i rho0_i (na_i (ln X_A,i - X_A,i / 2 + 1 / 2) + nb_i (ln X_B,i - X_B,i / 2 + 1 / 2))

    The site fractions are found in closed form if a single species associates, and by damped successive
    substitution otherwise.

    Args:
        T : Temperature [K]
        assoc (AssociationParameters) : The association parameters
        d (list) : Hard sphere diameters of the associating species [Å]
        rho0 (list) : Density of each associating species [1 / Å^3]
        n2, n3 : FMT weighted densities
        xi : Inhomogeneity factor
        max_iter (int) : Iteration cap for the successive substitution
        tol (float) : Convergence tolerance for the successive substitution
    Returns:
        The reduced Helmholtz energy density [1 / Å^3]
    Raises:
        AssociationConvergenceError : If the site fractions do not converge in max_iter iterations.
    """
    delta = association_strength(T, assoc, d, n2, n3, xi)
    if len(assoc) == 1:
        na, nb = assoc.na[0], assoc.nb[0]
        a = na * rho0[0] * delta[0][0]
        b = nb * rho0[0] * delta[0][0]
        XA = 2 / ((1 + b - a) + dual.sqrt((1 + b - a)**2 + 4 * a))
        XB = 2 / ((1 + a - b) + dual.sqrt((1 + a - b)**2 + 4 * b))
        return rho0[0] * (na * site_term(XA) + nb * site_term(XB))

    XA, XB = site_fractions(assoc, rho0, delta, max_iter, tol)
    phi = 0.0
    for i in range(len(assoc)):
        phi = phi + rho0[i] * (assoc.na[i] * site_term(XA[i]) + assoc.nb[i] * site_term(XB[i]))
    return phi


def site_fractions(assoc, rho0, delta, max_iter, tol, damping=0.5):
    """Internal
    Fractions of non-bonded A and B sites from the mass action equations

        X_A,i = 1 / (1 + sum_j rho0_j nb_j X_B,j Delta_ij)
        X_B,i = 1 / (1 + sum_j rho0_j na_j X_A,j Delta_ij)

    solved by damped successive substitution. The convergence norm includes the derivative parts of dual numbers.

    Returns:
        tuple(list, list) : X_A and X_B of each associating species
    Raises:
        AssociationConvergenceError : If the iteration does not converge in max_iter iterations.
    """
    nassoc = len(assoc)
    XA = [0.2 for _ in range(nassoc)]
    XB = [0.2 for _ in range(nassoc)]
    residual = np.inf
    for _ in range(max_iter):
        XA_new, XB_new = [], []
        for i in range(nassoc):
            sum_b, sum_a = 0.0, 0.0
            for j in range(nassoc):
                sum_b = sum_b + rho0[j] * assoc.nb[j] * XB[j] * delta[i][j]
                sum_a = sum_a + rho0[j] * assoc.na[j] * XA[j] * delta[i][j]
            XA_new.append(damping * XA[i] + (1 - damping) / (1 + sum_b))
            XB_new.append(damping * XB[i] + (1 - damping) / (1 + sum_a))

        residual = max(dual.max_abs(x_new - x) for x_new, x in zip(XA_new + XB_new, XA + XB))
        XA, XB = XA_new, XB_new
        if residual < tol:
            return XA, XB
    raise AssociationConvergenceError(max_iter, residual)


class AssociationFunctional(FunctionalContribution):
    """
    Association between any number of associating species. The weighted densities are, in order:
        * n0_i for each associating species i (delta shell weight normalised to unit integral)
        * the total FMT weighted densities n2, n3 and nv2.
    """

    def __init__(self, parameters, max_iter, tol):
        super().__init__(parameters)
        self.assoc = parameters.association
        self.max_iter = max_iter
        self.tol = tol

    def get_weights(self, T):
        p = self.parameters
        d = p.hs_diameter(T)
        nspecies = len(p.m)
        R = [d[i] / 2 for i in range(nspecies)]
        w = [[None for _ in range(nspecies)] for _ in range(len(self.assoc) + 3)]
        for k, i in enumerate(self.assoc.assoc_index):
            w[k][i] = Delta(R[i]) / (4 * np.pi * R[i]**2)
        for i in range(nspecies):
            w[-3][i] = p.m[i] * Delta(R[i])
            w[-2][i] = p.m[i] * Heaviside(R[i])
            w[-1][i] = p.m[i] * DeltaVec(R[i])
        return w

    def helmholtz_energy_density(self, T, n):
        n0 = n[:-3]
        n2, n3, nv2 = n[-3:]
        xi = inhomogeneity_factor(n2, nv2)
        d = self.parameters.hs_diameter(T)
        d_assoc = [d[i] for i in self.assoc.assoc_index]
        rho0 = [n0_i * xi for n0_i in n0]
        return association_helmholtz_energy_density(T, self.assoc, d_assoc, rho0, n2, n3, xi, self.max_iter, self.tol)
