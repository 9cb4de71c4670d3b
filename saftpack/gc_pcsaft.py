"""
The heterosegmented group contribution PC-SAFT functional, see Sauer, Stavrou and Gross,
Ind. Eng. Chem. Res. 53, 14854 (2014) and Mairhofer, Xiao and Gross, Fluid Phase Equilib. 472, 117 (2018).

The species of this functional are the segments (groups). Every segment of a molecule has the molecular density of
its component, and the chain contribution is a sum over the bonds between segments.
"""
import numpy as np
from saftpack.Functional import FunctionalContribution, HelmholtzEnergyFunctional, MoleculeShape
from saftpack.WeightFunction import NormTheta, Delta, Heaviside, LocalDensity
from saftpack.hardsphere import FMTVersion, FMTContribution
from saftpack.association import AssociationFunctional
from saftpack.pcsaft import PSI_DISP, dispersion_helmholtz_energy_density, cavity_function, chain_site_term
from saftpack.options import GcPcSaftOptions
from saftpack.registry import register_functional


class HeterosegmentedChainFunctional(FunctionalContribution):
    """
    Chain contribution for molecules built from distinct segments. The weighted densities are, in order
        * the local density rho_alpha of each segment,
        * rho_hc_alpha, the density averaged over a sphere of radius d_alpha, for each segment,
        * for each bond (alpha, beta): lambda_alpha_beta, the density of beta averaged over a spherical shell of
          radius d_alpha_beta = (d_alpha + d_beta) / 2, and lambda_beta_alpha, the same for alpha.
    The Helmholtz energy density is

        phi = - 1 / 2 sum_bonds (rho_alpha ln(y_ab lambda_ab / rho_alpha) + rho_beta ln(y_ab lambda_ba / rho_beta))
    """

    def get_weights(self, T):
        p = self.parameters
        d = p.hs_diameter(T)
        N = p.nsegments
        w = [[None for _ in range(N)] for _ in range(2 * N + 2 * len(p.bonds))]
        for a in range(N):
            w[a][a] = LocalDensity()
            w[N + a][a] = Heaviside(d[a]) / (4 * np.pi * d[a]**3 / 3)
        for k, (a, b) in enumerate(p.bonds):
            d_ab = (d[a] + d[b]) / 2
            w[2 * N + 2 * k][b] = Delta(d_ab) / (4 * np.pi * d_ab**2)
            w[2 * N + 2 * k + 1][a] = Delta(d_ab) / (4 * np.pi * d_ab**2)
        return w

    def helmholtz_energy_density(self, T, n):
        p = self.parameters
        d = p.hs_diameter(T)
        N = p.nsegments
        zeta2, zeta3 = 0.0, 0.0
        for a in range(N):
            zeta2 = zeta2 + np.pi / 6 * p.m[a] * d[a]**2 * n[N + a]
            zeta3 = zeta3 + np.pi / 6 * p.m[a] * d[a]**3 * n[N + a]
        phi = 0.0
        for k, (a, b) in enumerate(p.bonds):
            y = cavity_function(2 * d[a] * d[b] / (d[a] + d[b]), zeta2, zeta3)
            phi = phi - 0.5 * (chain_site_term(n[a], y, n[2 * N + 2 * k])
                               + chain_site_term(n[b], y, n[2 * N + 2 * k + 1]))
        return phi


class GcAttractiveFunctional(FunctionalContribution):
    """
    PC-SAFT dispersion between segments, with one weighted density n_alpha = m_alpha rho_bar_alpha per segment.
    The molecular density entering the mean segment number is sum_alpha n_alpha / m_c(alpha), where m_c is the total
    segment number of the component of alpha.
    """

    def get_weights(self, T):
        p = self.parameters
        d = p.hs_diameter(T)
        N = p.nsegments
        w = [[None for _ in range(N)] for _ in range(N)]
        for a in range(N):
            w[a][a] = p.m[a] * NormTheta(d[a] * PSI_DISP)
        return w

    def helmholtz_energy_density(self, T, n):
        p = self.parameters
        d = p.hs_diameter(T)
        m_comp = np.bincount(p.component_index, weights=p.m)
        rho = 0.0
        for a in range(p.nsegments):
            rho = rho + n[a] / m_comp[p.component_index[a]]
        return dispersion_helmholtz_energy_density(T, n, rho, [d[a] for a in range(p.nsegments)], p.sigma_ij,
                                                   p.epsilon_k_ij)


@register_functional('gc_pcsaft')
class GcPcSaftFunctional(HelmholtzEnergyFunctional):

    def __init__(self, parameters, fmt_version=FMTVersion.WhiteBear, options=None):
        """Constructor
        Heterosegmented group contribution PC-SAFT functional. This functional has no pair potential.

        Args:
            parameters (GcPcSaftFunctionalParameters) : Segment based parameters
            fmt_version (FMTVersion, optional) : Version of FMT, defaults to WhiteBear
            options (GcPcSaftOptions, optional) : Model options
        """
        super().__init__(parameters, GcPcSaftOptions() if options is None else options, FMTVersion(fmt_version))

    def _assemble(self):
        p, o = self.parameters, self.options
        contributions = [FMTContribution(p, self.fmt_version)]
        if len(p.bonds) > 0:
            contributions.append(HeterosegmentedChainFunctional(p))
        contributions.append(GcAttractiveFunctional(p))
        if len(p.association) > 0:
            contributions.append(AssociationFunctional(p, o.max_cross_association_iterations,
                                                       o.cross_association_tolerance))
        return contributions

    def molecule_shape(self):
        return MoleculeShape.Heterosegmented(self.parameters.component_index)
