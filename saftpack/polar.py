"""
Multipole contributions to PC-SAFT:
    * dipole-dipole, Gross and Vrabec, AIChE J. 52, 1194 (2006)
    * quadrupole-quadrupole, Gross, AIChE J. 51, 2556 (2005)
    * dipole-quadrupole, Vrabec and Gross, J. Phys. Chem. B 112, 51 (2008), second order term only.

The dipole-dipole and quadrupole-quadrupole terms are combined from their second and third order perturbation terms
with the Pade approximation phi = phi2 / (1 - phi3 / phi2). All functions take the molecular densities rho and the
packing fraction eta, which are weighted densities when used in a functional, and are generic over the numeric type.
Dipole moments enter as mu2 = mu^2 / (4 pi eps_0 k_B) [K Å^3], quadrupole moments as q2 = Q^2 / (4 pi eps_0 k_B)
[K Å^5], see parameters.py.
"""
import numpy as np
from saftpack import dual
from saftpack.options import DQVariants

# Rows n = 0, 1, ..., columns are the coefficients for (m - 1) / m equal to 0, (m - 1) / m and (m - 1)(m - 2) / m^2
AD = np.array([[0.3043504, 0.9534641, -1.1610080],
               [-0.1358588, -1.8396383, 4.5258607],
               [1.4493329, 2.0131180, 0.9751222],
               [0.3556977, -7.3724958, -12.281038],
               [-2.0653308, 8.2374135, 5.9397575]])
BD = np.array([[0.2187939, -0.5873164, 3.4869576],
               [-1.1896431, 1.2489132, -14.915974],
               [1.1626889, -0.5085280, 15.372022],
               [0.0, 0.0, 0.0],
               [0.0, 0.0, 0.0]])
CD = np.array([[-0.0646774, -0.9520876, -0.6260979],
               [0.1975882, 2.9924258, 1.2924686],
               [-0.8087562, -2.3802636, 1.6542783],
               [0.6902849, -0.2701261, -3.4396744]])

AQ = np.array([[1.2378308, 1.2854109, 1.7942954],
               [2.4355031, -11.465615, 0.7695103],
               [1.6330905, 22.086893, 7.2647923],
               [-1.6118152, 7.4691383, 94.486699],
               [6.9771185, -17.197772, -77.148458]])
BQ = np.array([[0.4542718, -0.8137340, 6.8682675],
               [-4.5016264, 10.064030, -5.1732238],
               [3.5858868, -10.876631, -17.240207],
               [0.0, 0.0, 0.0],
               [0.0, 0.0, 0.0]])
CQ = np.array([[-0.5000437, 2.0002094, 3.1358271],
               [6.5318692, -6.7838658, 7.2475888],
               [-16.014780, 20.383246, 3.0759478],
               [14.425970, -10.895984, 0.0]])

ADQ = np.array([[0.697094963, -0.673459279, 0.670340770],
                [-0.633554144, -1.425899106, -4.338471826],
                [2.945509028, 4.19441392, 7.234168360],
                [-1.467027314, 1.0266216, 0.0]])
BDQ = np.array([[-0.484038322, 0.67651011, -1.167560146],
                [1.970405465, -3.013867512, 2.13488432],
                [-2.118572671, 0.46742656, 0.0],
                [0.0, 0.0, 0.0]])


def segment_coefficients(table, m):
    """Internal
    Coefficients of the power series in eta for an effective segment number m, which is capped at 2.
    """
    m = min(m, 2.0)
    m1 = (m - 1) / m
    m2 = m1 * (m - 2) / m
    return table[:, 0] + m1 * table[:, 1] + m2 * table[:, 2]


def power_series(a, b, eps_T, eta):
    """Internal
    sum_n (a_n + b_n eps_T) eta^n, with b = None for series without temperature dependence.
    """
    out = 0.0
    for n in range(len(a)):
        c = a[n] if b is None else a[n] + b[n] * eps_T
        out = out + c * eta**n
    return out


def pade(phi2, phi3):
    """Internal
    phi2 / (1 - phi3 / phi2), which is zero where phi2 vanishes.
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        return dual.where(dual.re(phi2) != 0, phi2 * phi2 / (phi2 - phi3), 0.0)


def dipole_helmholtz_energy_density(T, rho, eta, parameters):
    """Helmholtz contribution
    Reduced dipole-dipole Helmholtz energy density [1 / Å^3]

    Args:
        T : Temperature [K]
        rho (list) : Molecular density of each component [1 / Å^3]
        eta : Packing fraction
        parameters (PcSaftParameters) : The parameters
    """
    p = parameters
    polar = np.flatnonzero(p.mu > 0)
    mu2_m = [p.mu2[i] / p.m[i] for i in range(p.ncomps)]
    phi2 = 0.0
    for i in polar:
        for j in polar:
            eps_T = np.sqrt(p.epsilon_k[i] * p.epsilon_k[j]) / T
            m_ij = np.sqrt(p.m[i] * p.m[j])
            J2 = power_series(segment_coefficients(AD, m_ij), segment_coefficients(BD, m_ij), eps_T, eta)
            phi2 = phi2 + rho[i] * rho[j] * mu2_m[i] * mu2_m[j] / p.sigma_ij[i, j]**3 * J2
    phi3 = 0.0
    for i in polar:
        for j in polar:
            for k in polar:
                m_ijk = np.cbrt(p.m[i] * p.m[j] * p.m[k])
                J3 = power_series(segment_coefficients(CD, m_ijk), None, None, eta)
                phi3 = phi3 + rho[i] * rho[j] * rho[k] * mu2_m[i] * mu2_m[j] * mu2_m[k] \
                       / (p.sigma_ij[i, j] * p.sigma_ij[i, k] * p.sigma_ij[j, k]) * J3
    phi2 = - np.pi * phi2 / T**2
    phi3 = - 4 / 3 * np.pi**2 * phi3 / T**3
    return pade(phi2, phi3)


def quadrupole_helmholtz_energy_density(T, rho, eta, parameters):
    """Helmholtz contribution
    Reduced quadrupole-quadrupole Helmholtz energy density [1 / Å^3]
    """
    p = parameters
    polar = np.flatnonzero(p.q > 0)
    q2_m = [p.q2[i] / p.m[i] for i in range(p.ncomps)]
    phi2 = 0.0
    for i in polar:
        for j in polar:
            eps_T = np.sqrt(p.epsilon_k[i] * p.epsilon_k[j]) / T
            m_ij = np.sqrt(p.m[i] * p.m[j])
            J2 = power_series(segment_coefficients(AQ, m_ij), segment_coefficients(BQ, m_ij), eps_T, eta)
            phi2 = phi2 + rho[i] * rho[j] * q2_m[i] * q2_m[j] / p.sigma_ij[i, j]**7 * J2
    phi3 = 0.0
    for i in polar:
        for j in polar:
            for k in polar:
                m_ijk = np.cbrt(p.m[i] * p.m[j] * p.m[k])
                J3 = power_series(segment_coefficients(CQ, m_ijk), None, None, eta)
                phi3 = phi3 + rho[i] * rho[j] * rho[k] * q2_m[i] * q2_m[j] * q2_m[k] \
                       / (p.sigma_ij[i, j] * p.sigma_ij[i, k] * p.sigma_ij[j, k])**3 * J3
    phi2 = - 0.75 * np.pi * phi2 / T**2
    phi3 = 9 / 16 * np.pi**2 * phi3 / T**3
    return pade(phi2, phi3)


def dipole_quadrupole_helmholtz_energy_density(T, rho, eta, parameters, combination_rule=DQVariants.DQ35):
    """Helmholtz contribution
    Reduced dipole-quadrupole Helmholtz energy density [1 / Å^3], second order term.

    The combination rule selects the segment diameter weighting of the cross term: DQ35 uses
    sigma_i^3 sigma_j^5 / sigma_ij^5, DQ44 uses sigma_i^4 sigma_j^4 / sigma_ij^5, for dipolar i and quadrupolar j.
    """
    p = parameters
    dipoles = np.flatnonzero(p.mu > 0)
    quadrupoles = np.flatnonzero(p.q > 0)
    phi2 = 0.0
    for i in dipoles:
        for j in quadrupoles:
            eps_T = np.sqrt(p.epsilon_k[i] * p.epsilon_k[j]) / T
            m_ij = np.sqrt(p.m[i] * p.m[j])
            J2 = power_series(segment_coefficients(ADQ, m_ij), segment_coefficients(BDQ, m_ij), eps_T, eta)
            s = 1.0 if combination_rule == DQVariants.DQ35 else p.sigma[i] / p.sigma[j]
            phi2 = phi2 + rho[i] * rho[j] * p.mu2[i] * p.q2[j] * s / (p.m[i] * p.m[j] * p.sigma_ij[i, j]**5) * J2
    return - 2.25 * np.pi * phi2 / T**2


def polar_helmholtz_energy_density(T, rho, eta, parameters, combination_rule=DQVariants.DQ35):
    """Helmholtz contribution
    Sum of the multipole terms present for the parameter set (zero if there are none).
    """
    p = parameters
    phi = 0.0
    if p.has_dipoles:
        phi = phi + dipole_helmholtz_energy_density(T, rho, eta, p)
    if p.has_quadrupoles:
        phi = phi + quadrupole_helmholtz_energy_density(T, rho, eta, p)
    if p.has_dipoles and p.has_quadrupoles:
        phi = phi + dipole_quadrupole_helmholtz_energy_density(T, rho, eta, p, combination_rule)
    return phi
